from datetime import date

import pytest

from promo.models import MeetingType, Presentation
from promo.rendering.presentation import presentation_to_prompt, presentations_to_prompt
from promo.rendering.prompt_loader import render_system_prompt


@pytest.fixture
def talk():
    return Presentation(title="Intro to Containers", presenter_names=["Jane Doe", "John Roe"],
                        abstract="A talk about containers.")


def test_minimal_prompt_has_no_placeholders(talk):
    text = presentation_to_prompt(talk)
    assert text == (
        "The title of the presentation is: Intro to Containers.\n"
        "This presentation abstract is as follows: A talk about containers."
    )
    assert "None" not in text
    assert "Tags" not in text
    assert "given on" not in text


def test_prompt_with_presenters_date_and_tags(talk):
    tagged = talk.model_copy(update={"tags": ["containers", "podman"]})
    text = presentation_to_prompt(tagged, include_presenters=True, meeting_date=date(2024, 2, 14))
    lines = text.splitlines()
    assert lines[0] == "This presentation will be given on: 2024-02-14."
    assert "The presenter(s) are: Jane Doe, John Roe." in lines
    assert lines[-1] == "Tags: containers, podman"


def test_presenters_only_when_requested(talk):
    assert "Jane Doe" not in presentation_to_prompt(talk)


def test_prompt_is_deterministic(talk):
    assert presentation_to_prompt(talk, True, "2024-02-14") == presentation_to_prompt(talk, True, "2024-02-14")


def test_presentations_prompt_concatenates(talk):
    other = Presentation(title="ZFS", presenter_names=["Bo"], abstract="Pools.")
    combined = presentations_to_prompt([talk, other])
    assert combined == presentation_to_prompt(talk) + "\n" + presentation_to_prompt(other)
    assert presentations_to_prompt([]) == ""


def test_system_prompt_uses_organization_persona():
    sluug = render_system_prompt("tags", MeetingType.SLUUG, tool_name="tagTool")
    stllug = render_system_prompt("tags", MeetingType.STLLUG, tool_name="tagTool")

    assert sluug.startswith("You are the head of Marketing and Content Strategy for the St. Louis Linux and Unix Users Group.")
    assert "SLUUG's Twitter Handle: @SLUUG_Org" in sluug
    assert "call the tagTool" in sluug
    assert "St. Louis Linux Users Group" in stllug
    assert sluug != stllug


def test_system_prompt_without_tool_name():
    text = render_system_prompt("image_design", "SLUUG")
    assert "Generate one design idea for this image." in text


def test_unknown_stage_rejected():
    with pytest.raises(ValueError, match="no template"):
        render_system_prompt("limericks", MeetingType.SLUUG)


def test_custom_prompt_file(tmp_path):
    prompt_file = tmp_path / "prompts.yaml"
    prompt_file.write_text("persona: 'Voice of {{ org.short_name }}.'\ntags: 'Tag it with {{ tool_name }}.'\n",
                           encoding="utf-8")
    text = render_system_prompt("tags", MeetingType.STLLUG, str(prompt_file), tool_name="tagTool")
    assert text == "Voice of STLLUG.\nTag it with tagTool."
