"""Tests for video search link resolution."""

from pathcraft.agent.resources import (
    VIDEO_SEARCH_URL,
    resolve_resource,
    resolve_resource_links,
    video_search_url,
)
from pathcraft.schemas import ArticleResource, CourseResource, GeneratedRoadmapDocument, VideoResource
from tests.factories import make_roadmap_payload


def _video(url: str, source: str = "YouTube") -> VideoResource:
    return VideoResource(type="video", title="Intro", url=url, source=source)


def test_directive_becomes_search_url():
    resolved = resolve_resource(_video("YOUTUBE_SEARCH:python tutorial beginner"))
    assert resolved.url == VIDEO_SEARCH_URL + "python%20tutorial%20beginner"
    assert resolved.source == "YouTube Search"


def test_query_is_percent_encoded():
    url = video_search_url(" C++ & Rust: ownership/borrowing? ")
    assert url == VIDEO_SEARCH_URL + "C%2B%2B%20%26%20Rust%3A%20ownership%2Fborrowing%3F"


def test_other_source_is_kept():
    resolved = resolve_resource(_video("YOUTUBE_SEARCH:react hooks", source="freeCodeCamp"))
    assert resolved.url.startswith(VIDEO_SEARCH_URL)
    assert resolved.source == "freeCodeCamp"


def test_video_without_directive_is_unchanged():
    video = _video("https://www.youtube.com/watch?v=abc")
    assert resolve_resource(video) is video


def test_non_video_resources_are_unchanged():
    article = ArticleResource(
        type="article", title="Docs", url="YOUTUBE_SEARCH:not a video", source="YouTube"
    )
    course = CourseResource(type="course", title="Course", url="https://example.com", source="edX")
    assert resolve_resource(article) == article
    assert resolve_resource(course) == course


def test_input_is_not_mutated():
    video = _video("YOUTUBE_SEARCH:python tutorial beginner")
    resolve_resource(video)
    assert video.url == "YOUTUBE_SEARCH:python tutorial beginner"
    assert video.source == "YouTube"


def test_resolves_whole_document():
    document = GeneratedRoadmapDocument.model_validate(make_roadmap_payload([2, 1]))
    resolved = resolve_resource_links(document)

    for phase in resolved.phases:
        for milestone in phase.milestones:
            video, article = milestone.resources
            assert video.url == VIDEO_SEARCH_URL + "python%20tutorial%20beginner"
            assert video.source == "YouTube Search"
            assert article.url == "https://docs.python.org/3/tutorial/"
            assert article.source == "Python Docs"

    # Original document untouched
    assert document.phases[0].milestones[0].resources[0].url.startswith("YOUTUBE_SEARCH:")


def test_resolution_is_idempotent():
    document = GeneratedRoadmapDocument.model_validate(make_roadmap_payload([2, 1]))
    once = resolve_resource_links(document)
    assert resolve_resource_links(once) == once
