"""Tests for prompt construction."""

import pytest
from pydantic import ValidationError

from pathcraft.agent.prompts import VIDEO_SEARCH_DIRECTIVE, build_roadmap_prompt
from tests.factories import make_form


def test_prompt_is_deterministic():
    form = make_form()
    assert build_roadmap_prompt(form) == build_roadmap_prompt(make_form())


def test_prompt_contains_request_fields():
    form = make_form(
        topic="Distributed Systems",
        skillLevel="advanced",
        duration=12,
        timePerWeek=10,
        learningStyle=["videos", "projects"],
        details="Focus on consensus",
    )
    prompt = build_roadmap_prompt(form)

    assert "Topic: Distributed Systems" in prompt
    assert "Skill Level: advanced" in prompt
    assert "Duration: 12 weeks" in prompt
    assert "Time per Week: 10 hours" in prompt
    assert "Learning Goal: concept-mastery" in prompt
    assert "Learning Style: videos, projects" in prompt
    assert "Additional Details: Focus on consensus" in prompt
    assert '"totalWeeks": 12' in prompt


def test_prompt_without_details():
    assert "Additional Details: None" in build_roadmap_prompt(make_form())


def test_prompt_mandates_format():
    prompt = build_roadmap_prompt(make_form())
    assert f'"{VIDEO_SEARCH_DIRECTIVE}' in prompt
    assert "Return ONLY valid JSON" in prompt
    assert "DO NOT include trailing commas" in prompt
    assert '"phases"' in prompt
    assert '"projects"' in prompt


def test_topic_with_braces_is_kept_verbatim():
    form = make_form(topic="C++ {templates}")
    assert "Topic: C++ {templates}" in build_roadmap_prompt(form)


class TestFormValidation:
    """Invalid forms are rejected before any prompt is built."""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"topic": ""},
            {"topic": "   "},
            {"goal": "fun"},
            {"skillLevel": "expert"},
            {"timePerWeek": 0},
            {"timePerWeek": 41},
            {"duration": 0},
            {"duration": 53},
            {"learningStyle": []},
            {"learningStyle": ["  "]},
        ],
    )
    def test_rejects_invalid_input(self, overrides):
        with pytest.raises(ValidationError):
            make_form(**overrides)

    def test_learning_style_is_a_set(self):
        form = make_form(learningStyle=["videos", " videos", "reading"])
        assert form.learning_style == ["videos", "reading"]

    def test_accepts_snake_case_names(self):
        form = make_form()
        assert form.skill_level.value == "beginner"
        assert form.time_per_week == 5
