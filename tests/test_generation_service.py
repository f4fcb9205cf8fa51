"""Tests for the end-to-end generation pipeline."""

import asyncio
import json

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pathcraft.core.exceptions import MalformedRoadmapError, ProviderError
from pathcraft.models import Roadmap
from pathcraft.services import generation_service, roadmap_service
from tests.factories import FakeModelClient, make_form, make_roadmap_payload


async def _roadmap_count(db: AsyncSession) -> int:
    return (await db.execute(select(func.count()).select_from(Roadmap))).scalar_one()


@pytest.mark.asyncio
async def test_rust_roadmap_end_to_end(test_session: AsyncSession, user_id: int) -> None:
    payload = make_roadmap_payload([2], video_query="rust ownership tutorial beginner")
    # Typical model defects: fences, pretty-printing and a trailing comma
    raw = "```json\n" + json.dumps(payload, indent=2)[:-1] + ",\n}\n```"
    client = FakeModelClient(response=raw)

    roadmap, document = await generation_service.generate_roadmap(
        test_session, user_id=user_id, form=make_form(), client=client
    )

    assert len(client.prompts) == 1
    assert "Topic: Rust" in client.prompts[0]

    assert roadmap.duration == 8
    assert roadmap.topic == "Rust"
    milestones = await roadmap_service.list_roadmap_milestones(test_session, roadmap.id)
    assert [m.order for m in milestones] == [1, 2]

    video = milestones[0].resources[0]
    assert video["url"] == (
        "https://www.youtube.com/results?search_query=rust%20ownership%20tutorial%20beginner"
    )
    assert video["source"] == "YouTube Search"
    assert document.phases[0].milestones[0].resources[0].url == video["url"]


@pytest.mark.asyncio
async def test_provider_error_propagates(test_session: AsyncSession, user_id: int) -> None:
    client = FakeModelClient(error=ProviderError("quota exceeded"))
    with pytest.raises(ProviderError):
        await generation_service.generate_roadmap(
            test_session, user_id=user_id, form=make_form(), client=client
        )
    assert await _roadmap_count(test_session) == 0


@pytest.mark.asyncio
async def test_timeout_is_a_provider_error(test_session: AsyncSession, user_id: int) -> None:
    class SlowClient:
        async def submit(self, prompt: str) -> str:
            await asyncio.sleep(10)
            return "{}"

    with pytest.raises(ProviderError, match="timed out"):
        await generation_service.generate_roadmap(
            test_session, user_id=user_id, form=make_form(), client=SlowClient(), timeout=0.01
        )


@pytest.mark.asyncio
async def test_malformed_output_persists_nothing(test_session: AsyncSession, user_id: int) -> None:
    payload = make_roadmap_payload([2])
    del payload["phases"][0]["milestones"]
    client = FakeModelClient(response=json.dumps(payload))

    with pytest.raises(MalformedRoadmapError):
        await generation_service.generate_roadmap(
            test_session, user_id=user_id, form=make_form(), client=client
        )
    assert await _roadmap_count(test_session) == 0
