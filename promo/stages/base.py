"""Shared plumbing for the enrichment stages: settings, fan-out and context."""

from __future__ import annotations

import contextlib
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Iterator, List, Optional, TypeVar

from promo.errors import GenerationContractViolation
from promo.imaging import ImageSpec
from promo.models import Meeting
from promo.rendering.presentation import presentation_to_prompt, presentations_to_prompt
from promo.utils import get_logger, redact_secrets

T = TypeVar("T")
R = TypeVar("R")

SINGLE_PRESENTATION_RUNS = 3

logger = get_logger(__name__)


@dataclass
class StageSettings:
    prompt_file: Optional[str] = None
    max_workers: int = 8
    title_format: str = "{title} | {meeting_type} {meeting_date}"
    fallback_links: Dict[str, str] = field(default_factory=dict)
    image_spec: ImageSpec = field(default_factory=ImageSpec)
    filename_chars: int = 60
    download_timeout: float = 60.0
    download_retries: int = 3

    @classmethod
    def from_config(cls, cfg: dict) -> "StageSettings":
        images = cfg.get("images", {})
        download = cfg.get("download", {})
        return cls(
            prompt_file=(cfg.get("prompts") or {}).get("file"),
            max_workers=int(cfg.get("pipeline", {}).get("max_workers", 8)),
            title_format=cfg.get("titles", {}).get("format", cls.title_format),
            fallback_links=dict(cfg.get("links", {}).get("fallback") or {}),
            image_spec=ImageSpec.from_config(images),
            filename_chars=int(images.get("filename_chars", 60)),
            download_timeout=float(download.get("timeout", 60)),
            download_retries=int(download.get("retries", 3)),
        )


def fan_out(fn: Callable[[T], R], items: Iterable[T], max_workers: int = 8) -> List[R]:
    """Run ``fn`` over ``items`` concurrently and return results in input order.

    The first failure is re-raised as soon as it is observed. Calls that have
    not started are cancelled; calls already in flight are left to finish and
    their results are discarded.
    """
    items = list(items)
    if not items:
        return []
    executor = ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(items))))
    futures = [executor.submit(fn, item) for item in items]
    try:
        for fut in as_completed(futures):
            fut.result()
    except BaseException:
        executor.shutdown(wait=False, cancel_futures=True)
        raise
    executor.shutdown(wait=True)
    return [fut.result() for fut in futures]


def plan_prompts(meeting: Meeting) -> List[str]:
    """Prompts for the meeting-wide stages (video titles, image ideas).

    One presentation: the same prompt three times for variety. Several:
    one prompt per presentation plus one covering all of them.
    """
    presentations = meeting.presentations
    if len(presentations) == 1:
        return [presentation_to_prompt(presentations[0])] * SINGLE_PRESENTATION_RUNS
    prompts = [presentation_to_prompt(p) for p in presentations]
    prompts.append(presentations_to_prompt(presentations))
    return prompts


@contextlib.contextmanager
def stage_context(stage: str) -> Iterator[None]:
    """Name the stage on any failure raised inside the block.

    Contract violations are re-raised tagged with the stage. Anything else
    (API, network, image decoding) is logged with the stage and re-raised as is.
    """
    try:
        yield
    except GenerationContractViolation as e:
        if e.stage:
            raise
        raise GenerationContractViolation(str(e), stage=stage) from e
    except Exception as e:
        logger.error("stage %s failed: %s: %s", stage, type(e).__name__, redact_secrets(str(e)))
        raise
