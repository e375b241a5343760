import os
import re
import json
import uuid
import argparse
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from promo.config import load_config
from promo.errors import IoError, MissingInputError, SchemaValidationError
from promo.llm import Generator, build_generator
from promo.models import Meeting, MeetingType, parse_meeting
from promo.pipeline import run_enrichment
from promo.publisher import write_outputs
from promo.stages import StageSettings
from promo.utils import get_logger, redact_secrets, run_logger

logger = get_logger(__name__)

# First 10 characters are the meeting date; the name ends with the meeting type.
TEMPLATE_NAME = re.compile(r"^(\d{4}-\d{2}-\d{2}).*?(stllug|sluug)\.json$")


def meeting_fields_from_file_name(path) -> Dict[str, str]:
    """meetingDate/meetingType implied by a conventional file name, or {}."""
    m = TEMPLATE_NAME.match(Path(path).name)
    if not m:
        return {}
    try:
        date.fromisoformat(m.group(1))
    except ValueError:
        return {}
    return {"meetingDate": m.group(1), "meetingType": MeetingType(m.group(2).upper()).value}


def find_templates(templates_dir) -> List[Path]:
    root = Path(templates_dir)
    if not root.is_dir():
        raise MissingInputError(
            f"No file path provided and templates directory {root} does not exist. "
            "You must supply the path to a JSON file as an argument."
        )
    found = sorted(p for p in root.iterdir() if p.is_file() and TEMPLATE_NAME.match(p.name))
    if not found:
        raise MissingInputError(f"No meeting templates (YYYY-MM-DD*sluug.json / *stllug.json) in {root}")
    return found


def load_meeting_file(path) -> Meeting:
    path = Path(path)
    if not path.is_file():
        raise MissingInputError(f"Meeting file not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error("Error reading JSON Meeting file: %s", path)
        raise IoError(f"cannot read {path}: {e}", path=str(path)) from e

    try:
        raw: Any = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error("Error parsing JSON Meeting file: %s", path)
        raise SchemaValidationError(f"{path} is not valid JSON", [f"line {e.lineno}: {e.msg}"]) from e

    if isinstance(raw, dict):
        for key, value in meeting_fields_from_file_name(path).items():
            raw.setdefault(key, value)

    try:
        return parse_meeting(raw)
    except SchemaValidationError:
        logger.error("Error parsing JSON Meeting file: %s", path)
        raise


def run_once(
    input_path: Optional[str] = None,
    *,
    verbose: bool = False,
    config_path: Optional[str] = None,
    output_dir: Optional[str] = None,
    templates_dir: Optional[str] = None,
    generator: Optional[Generator] = None,
) -> List[Path]:
    """Enrich one meeting file (or every template) and write the results.

    Returns the written paths. All input is validated before the credential
    is checked, and the credential is checked before any API call.
    """
    run_id = uuid.uuid4().hex[:8]
    log = run_logger(verbose)
    log.info("=== run start id=%s ===", run_id)

    try:
        cfg = load_config(config_path)
        out_dir = output_dir or cfg["output"]["dir"]
        if input_path:
            paths = [Path(input_path)]
        else:
            paths = find_templates(templates_dir or cfg["input"]["templates_dir"])

        meetings = [(p, load_meeting_file(p)) for p in paths]
        settings = StageSettings.from_config(cfg)
        generator = generator or build_generator(cfg["llm"])

        written: List[Path] = []
        for path, meeting in meetings:
            log.info("enriching %s (%s %s, presentations=%d)", path, meeting.meeting_type.value,
                     meeting.date_str, len(meeting.presentations))
            try:
                result = run_enrichment(generator, meeting, settings, log)
                written.extend(write_outputs(result, out_dir))
            except Exception as e:
                log.error("%s failed: %s", path, redact_secrets(str(e)))
                raise
        log.info("OK: %d meeting(s) written to %s", len(meetings), os.path.abspath(out_dir))
        return written

    except Exception as e:
        log.error("Pipeline execution failed: %s", e)
        raise
    finally:
        log.info("=== run end id=%s ===", run_id)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate tags, social posts, video titles and images for a user-group meeting."
    )
    parser.add_argument("path", nargs="?", help="Meeting JSON file. Omit to process every file in the templates directory.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every intermediate meeting state")
    parser.add_argument("--config", dest="config_path", help="Path to a YAML config overriding the defaults")
    parser.add_argument("--output-dir", dest="output_dir", help="Directory for the JSON and image files")
    parser.add_argument("--templates-dir", dest="templates_dir", help="Directory scanned when no path is given")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for CLI usage."""
    args = build_parser().parse_args(argv)
    run_once(
        args.path,
        verbose=args.verbose,
        config_path=args.config_path,
        output_dir=args.output_dir,
        templates_dir=args.templates_dir,
    )


if __name__ == "__main__":
    main()
