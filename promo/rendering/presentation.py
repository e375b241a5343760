"""Render presentations as plain text for the user turn of a prompt."""

from datetime import date
from typing import Iterable, Optional, Union

from promo.models import Presentation


def presentation_to_prompt(presentation: Presentation, include_presenters: bool = False,
                           meeting_date: Optional[Union[date, str]] = None) -> str:
    """Describe one presentation. Absent optional data is left out entirely."""
    lines = []
    if meeting_date:
        when = meeting_date.isoformat() if isinstance(meeting_date, date) else str(meeting_date)
        lines.append(f"This presentation will be given on: {when}.")
    lines.append(f"The title of the presentation is: {presentation.title}.")
    if include_presenters and presentation.presenter_names:
        lines.append(f"The presenter(s) are: {', '.join(presentation.presenter_names)}.")
    lines.append(f"This presentation abstract is as follows: {presentation.abstract}")
    if presentation.tags:
        lines.append(f"Tags: {', '.join(presentation.tags)}")
    return "\n".join(lines)


def presentations_to_prompt(presentations: Iterable[Presentation], include_presenters: bool = False,
                            meeting_date: Optional[Union[date, str]] = None) -> str:
    return "\n".join(
        presentation_to_prompt(p, include_presenters, meeting_date) for p in presentations
    )
