"""Pydantic models for meetings, presentations and stage responses."""

from __future__ import annotations

import re
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from promo.errors import SchemaValidationError

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class BaseModelWithConfig(BaseModel):
    """Base model with camelCase JSON names that forbids silent data loss."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class MeetingType(str, Enum):
    SLUUG = "SLUUG"
    STLLUG = "STLLUG"


class Link(BaseModelWithConfig):
    url: str = Field(description="URL to the reference. Example: 'https://linux.die.net/man/1/whereis'")
    display_text: Optional[str] = Field(
        default=None,
        description="The display name of the link. Example: 'whereis man page'",
        validation_alias=AliasChoices("displayText", "linkText", "display_text"),
        serialization_alias="displayText",
    )


class GeneratedImage(BaseModelWithConfig):
    src: str
    alt: str = Field(min_length=1)


class Presentation(BaseModelWithConfig):
    title: str
    presenter_names: List[str]
    abstract: str
    references: Optional[List[Link]] = None
    tags: Optional[List[str]] = Field(default=None, max_length=3)
    social_posts: Optional[List[str]] = Field(
        default=None,
        min_length=3,
        max_length=3,
        validation_alias=AliasChoices("socialPosts", "tweets", "social_posts"),
        serialization_alias="socialPosts",
    )


class Meeting(BaseModelWithConfig):
    """A meeting and everything generated for it so far."""

    meeting_date: date
    meeting_type: MeetingType
    presentations: List[Presentation] = Field(min_length=1)
    meetup_url: Optional[str] = None
    video_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("videoUrl", "youtubeUrl", "video_url"),
        serialization_alias="videoUrl",
    )
    social_posts: Optional[List[str]] = None
    video_titles: Optional[List[str]] = Field(
        default=None,
        validation_alias=AliasChoices("videoTitles", "youtubeTitles", "video_titles"),
        serialization_alias="videoTitles",
    )
    images: Optional[List[GeneratedImage]] = Field(
        default=None,
        validation_alias=AliasChoices("images", "image"),
        serialization_alias="images",
    )

    @field_validator("meeting_date", mode="before")
    @classmethod
    def parse_iso_date(cls, value: Any) -> Any:
        if isinstance(value, date):
            return value
        if not isinstance(value, str) or not _ISO_DATE.match(value):
            raise ValueError("meetingDate must be a YYYY-MM-DD string")
        return date.fromisoformat(value)

    @property
    def date_str(self) -> str:
        return self.meeting_date.isoformat()

    def file_name_prefix(self) -> str:
        return f"{self.date_str}_{self.meeting_type.value.lower()}"

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ---------- Stage responses ----------
# Field descriptions double as instructions in the tool schema sent to the API.

class TagResponse(BaseModelWithConfig):
    tags: List[str] = Field(
        max_length=3,
        description="An array of 3 or less tags or categories this presentation should be filed under.",
    )


class SocialPostResponse(BaseModelWithConfig):
    posts: List[str] = Field(
        min_length=3,
        max_length=3,
        description="An array of 3 short and enthusiastic social media posts that summarize the presentation.",
    )


class VideoTitleResponse(BaseModelWithConfig):
    titles: List[str] = Field(
        min_length=3,
        max_length=3,
        description="An array of 3 very short titles for the recording of the presentation that will be posted to YouTube.",
    )


def format_validation_errors(exc: ValidationError) -> List[str]:
    """Flatten pydantic errors into ``location: message`` strings."""
    out = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "<root>"
        out.append(f"{loc}: {err.get('msg')}")
    return out


def parse_meeting(raw: Any) -> Meeting:
    """Validate raw parsed JSON and return a Meeting.

    This is the only gate for external input; stages trust its output.
    """
    if not isinstance(raw, dict):
        raise SchemaValidationError(
            "Meeting JSON invalid", [f"<root>: expected an object, got {type(raw).__name__}"]
        )
    try:
        return Meeting.model_validate(raw)
    except ValidationError as e:
        raise SchemaValidationError("Meeting JSON invalid", format_validation_errors(e)) from e
