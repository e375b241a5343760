"""Resize and compress generated images before they are written out."""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO

from PIL import Image, ImageOps

from promo.utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ImageSpec:
    width: int = 1280
    height: int = 720
    max_bytes: int = 2 * 1024 * 1024
    base_quality: int = 80
    min_quality: int = 10

    @classmethod
    def from_config(cls, images_cfg: dict) -> "ImageSpec":
        return cls(
            width=int(images_cfg.get("width", cls.width)),
            height=int(images_cfg.get("height", cls.height)),
            max_bytes=int(images_cfg.get("max_bytes", cls.max_bytes)),
            base_quality=int(images_cfg.get("base_quality", cls.base_quality)),
            min_quality=int(images_cfg.get("min_quality", cls.min_quality)),
        )


def quality_for_size(size: int, spec: ImageSpec) -> float:
    """Single reduction step, proportional to how far ``size`` is over the ceiling."""
    return max(float(spec.min_quality), spec.max_bytes * spec.base_quality / size)


def _encode_png(img: Image.Image, quality: float | None = None) -> bytes:
    # PNG is lossless; quality is expressed as the palette size, like libvips/sharp do.
    if quality is not None:
        colors = max(2, min(256, round(256 * quality / 100)))
        img = img.convert("RGBA").quantize(colors=colors, method=Image.Quantize.FASTOCTREE)
    buf = BytesIO()
    img.save(buf, format="PNG", optimize=True)
    return buf.getvalue()


def resize_and_compress(data: bytes, spec: ImageSpec = ImageSpec()) -> bytes:
    """Crop-resize ``data`` to ``spec`` dimensions and encode it as PNG.

    When the result exceeds ``spec.max_bytes`` it is re-encoded once at a
    reduced quality; no further attempts are made.
    """
    with Image.open(BytesIO(data)) as src:
        src.load()
        resized = ImageOps.fit(src, (spec.width, spec.height), method=Image.Resampling.LANCZOS)

    out = _encode_png(resized)
    if len(out) > spec.max_bytes:
        quality = quality_for_size(len(out), spec)
        logger.warning("Image size is too large (%d bytes). Adjusting quality to %.1f", len(out), quality)
        out = _encode_png(resized, quality)
    return out
