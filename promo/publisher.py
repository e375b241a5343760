"""Output writer: the enriched meeting JSON plus its generated images."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Union

from promo.errors import IoError
from promo.models import Meeting
from promo.pipeline import EnrichmentResult
from promo.utils import get_logger

logger = get_logger(__name__)


def meeting_to_json(meeting: Meeting) -> str:
    """Pretty-printed JSON in declared field order; identical input gives identical text."""
    return json.dumps(meeting.to_json_dict(), ensure_ascii=False, indent=4) + "\n"


def output_file_name(meeting: Meeting) -> str:
    return f"{meeting.file_name_prefix()}.json"


def _write(path: Path, data: Union[str, bytes]) -> None:
    try:
        if isinstance(data, bytes):
            path.write_bytes(data)
        else:
            path.write_text(data, encoding="utf-8")
    except OSError as e:
        logger.error("Error writing file: %s", path)
        raise IoError(f"cannot write {path}: {e}", path=str(path)) from e


def write_outputs(result: EnrichmentResult, out_dir: Union[str, Path]) -> List[Path]:
    """Write images first, then the meeting JSON. Returns every path written."""
    out = Path(out_dir)
    try:
        out.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IoError(f"cannot create output directory {out}: {e}", path=str(out)) from e

    written: List[Path] = []
    for image_file in result.images:
        path = out / image_file.file_name
        _write(path, image_file.data)
        logger.info("Image saved as %s", path.name)
        written.append(path)

    json_path = out / output_file_name(result.meeting)
    _write(json_path, meeting_to_json(result.meeting))
    logger.info("JSON object written to file: %s", json_path)
    written.append(json_path)
    return written
