"""Tests for the enrichment pipeline driver."""

import json
import logging
import re

import pytest

from conftest import FakeGenerator
from promo.errors import GenerationContractViolation
from promo.models import parse_meeting
from promo.pipeline import run_enrichment
from promo.stages import StageSettings

KEBAB = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


def test_end_to_end_single_presentation(single_meeting_raw, fake_generator, no_downloads):
    raw = dict(single_meeting_raw, meetupUrl="https://www.meetup.com/sluug/events/42/")
    result = run_enrichment(fake_generator, parse_meeting(raw))
    out = result.meeting.to_json_dict()

    talk = out["presentations"][0]
    assert 0 < len(talk["tags"]) <= 3
    assert all(KEBAB.match(tag) for tag in talk["tags"])
    assert len(talk["socialPosts"]) == 3
    assert all(post.endswith("https://www.meetup.com/sluug/events/42/") for post in talk["socialPosts"])

    assert out["videoTitles"]
    assert all("SLUUG" in t and "2024-02-14" in t for t in out["videoTitles"])

    assert len(out["images"]) == 3
    assert all(img["src"].endswith(".png") and img["alt"] for img in out["images"])
    assert [f.image.src for f in result.images] == [img["src"] for img in out["images"]]

    # input fields untouched
    assert talk["title"] == "Intro to Containers"
    assert talk["presenterNames"] == ["Jane Doe"]
    assert out["meetingDate"] == "2024-02-14"


def test_invocation_counts_single_presentation(single_meeting_raw, fake_generator, no_downloads):
    run_enrichment(fake_generator, parse_meeting(single_meeting_raw))

    assert len(fake_generator.calls_of("structured", "tagTool")) == 1
    assert len(fake_generator.calls_of("structured", "postTool")) == 1
    assert len(fake_generator.calls_of("structured", "videoTitleTool")) == 3
    assert len(fake_generator.calls_of("text")) == 3
    assert len(fake_generator.calls_of("image")) == 3


def test_invocation_counts_multiple_presentations(fake_generator, no_downloads):
    raw = {
        "meetingDate": "2024-03-13",
        "meetingType": "STLLUG",
        "presentations": [
            {"title": f"Talk {i}", "presenterNames": ["P"], "abstract": "A."} for i in range(4)
        ],
    }
    result = run_enrichment(fake_generator, parse_meeting(raw))

    assert len(fake_generator.calls_of("structured", "tagTool")) == 4
    assert len(fake_generator.calls_of("structured", "postTool")) == 4
    assert len(fake_generator.calls_of("structured", "videoTitleTool")) == 5
    assert len(fake_generator.calls_of("text")) == 5
    assert len(result.meeting.images) == 5
    assert len(result.meeting.video_titles) == 15


def test_stages_run_in_fixed_order(single_meeting_raw, fake_generator, no_downloads):
    run_enrichment(fake_generator, parse_meeting(single_meeting_raw))

    order = []
    for kind, data in fake_generator.calls:
        label = data.get("tool_name") or kind
        if not order or order[-1] != label:
            order.append(label)
    assert order == ["tagTool", "postTool", "videoTitleTool", "text", "image"]


def test_tags_reach_later_prompts(single_meeting_raw, fake_generator, no_downloads):
    run_enrichment(fake_generator, parse_meeting(single_meeting_raw))

    post_prompt = fake_generator.calls_of("structured", "postTool")[0]["prompt"]
    assert "Tags: linux-containers, podman" in post_prompt


def test_failure_aborts_before_later_stages(single_meeting_raw, no_downloads):
    generator = FakeGenerator(arguments={"postTool": lambda prompt: json.dumps({"posts": ["one", "two"]})})

    with pytest.raises(GenerationContractViolation):
        run_enrichment(generator, parse_meeting(single_meeting_raw))

    assert generator.calls_of("structured", "videoTitleTool") == []
    assert generator.calls_of("image") == []
    assert no_downloads == []


def test_verbose_logger_dumps_states(single_meeting_raw, fake_generator, no_downloads, caplog):
    log = logging.getLogger("test.pipeline.verbose")
    log.setLevel(logging.DEBUG)
    caplog.set_level(logging.DEBUG, logger="test.pipeline.verbose")

    run_enrichment(fake_generator, parse_meeting(single_meeting_raw), StageSettings(), log)

    messages = [r.getMessage() for r in caplog.records if r.name == "test.pipeline.verbose"]
    for label in ("meetingFromFile", "meetingWithTags", "meetingWithSocialPosts",
                  "meetingWithVideoTitles", "designIdeas", "meetingWithImages"):
        assert any(m.startswith(label) for m in messages), label


def test_quiet_logger_skips_state_dumps(single_meeting_raw, fake_generator, no_downloads, caplog):
    log = logging.getLogger("test.pipeline.quiet")
    log.setLevel(logging.INFO)
    caplog.set_level(logging.DEBUG)

    run_enrichment(fake_generator, parse_meeting(single_meeting_raw), StageSettings(), log)

    messages = [r.getMessage() for r in caplog.records if r.name == "test.pipeline.quiet"]
    assert not any(m.startswith("meetingWith") for m in messages)
    assert any("Calling OpenAI API to generate tags" in m for m in messages)
