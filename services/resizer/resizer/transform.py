"""
Image transform: decode, resample and re-encode with Pillow.

Only JPEG and PNG sources are accepted. A missing target dimension (0 or None)
is derived from the source aspect ratio; when both are given the image is
stretched to exactly that size.
"""
from __future__ import annotations

import enum
import io
import logging

from PIL import Image, UnidentifiedImageError

from resizer.keys import ImageFormat

logger = logging.getLogger(__name__)


class ResampleFilter(str, enum.Enum):
    NEAREST = "nearest"
    BILINEAR = "bilinear"
    BICUBIC = "bicubic"
    LANCZOS = "lanczos"

    @property
    def resampling(self) -> Image.Resampling:
        return _RESAMPLING[self]


DEFAULT_FILTER = ResampleFilter.LANCZOS

_RESAMPLING = {
    ResampleFilter.NEAREST: Image.Resampling.NEAREST,
    ResampleFilter.BILINEAR: Image.Resampling.BILINEAR,
    ResampleFilter.BICUBIC: Image.Resampling.BICUBIC,
    ResampleFilter.LANCZOS: Image.Resampling.LANCZOS,
}


# MPO is a multi-frame JPEG written by some cameras
_PIL_FORMATS = {"JPEG": ImageFormat.JPEG, "MPO": ImageFormat.JPEG, "PNG": ImageFormat.PNG}


class ImageTransformError(Exception):
    """Raised when bytes cannot be decoded, resized or encoded."""


def decode_image(data: bytes) -> tuple[Image.Image, ImageFormat]:
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise ImageTransformError(f"cannot decode image: {exc}") from exc
    fmt = _PIL_FORMATS.get(img.format or "")
    if fmt is None:
        raise ImageTransformError(f"unsupported source format {img.format!r}")
    return img, fmt


def target_size(source: tuple[int, int], width: int | None, height: int | None) -> tuple[int, int]:
    """Fill in a missing dimension from the source aspect ratio (never below 1px)."""
    src_w, src_h = source
    if width and height:
        return width, height
    if width:
        return width, max(1, round(src_h * width / src_w))
    if height:
        return max(1, round(src_w * height / src_h)), height
    raise ImageTransformError("at least one target dimension is required")


def resize_image(
    img: Image.Image,
    width: int | None,
    height: int | None,
    resample: ResampleFilter = DEFAULT_FILTER,
) -> Image.Image:
    size = target_size(img.size, width, height)
    if img.mode == "P":
        # Palette images resample badly; keep transparency via RGBA
        img = img.convert("RGBA")
    return img.resize(size, resample.resampling)


def encode_image(img: Image.Image, fmt: ImageFormat, *, jpeg_quality: int = 90) -> bytes:
    buf = io.BytesIO()
    try:
        if fmt is ImageFormat.JPEG:
            if img.mode != "RGB":
                img = img.convert("RGB")
            img.save(buf, format="JPEG", quality=jpeg_quality)
        else:
            img.save(buf, format="PNG", optimize=True)
    except OSError as exc:
        raise ImageTransformError(f"cannot encode {fmt.value}: {exc}") from exc
    return buf.getvalue()


def resize_bytes(
    data: bytes,
    width: int | None,
    height: int | None,
    resample: ResampleFilter = DEFAULT_FILTER,
    *,
    jpeg_quality: int = 90,
) -> tuple[bytes, ImageFormat]:
    """Decode, resize and re-encode in the detected source format."""
    img, fmt = decode_image(data)
    resized = resize_image(img, width, height, resample)
    logger.debug("Resized %s %s -> %s", fmt.value, img.size, resized.size)
    return encode_image(resized, fmt, jpeg_quality=jpeg_quality), fmt
