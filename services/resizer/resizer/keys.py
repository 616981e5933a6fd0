"""
Resizer: object key scheme.

Maps an image identity (name + format) and the requested dimensions to the
storage keys of the original object and of its resized variants:

    <original>/<name>.<ext>
    <resized>/<name>/w<w>h<h>.<ext>

An omitted dimension is encoded as 0, so width-only, height-only and
both-dimension requests are cached under distinct keys.
"""
from __future__ import annotations

import enum
import re
from dataclasses import dataclass

from resizer.exceptions import InvalidImagePath

# A name made only of dots would turn into a "." or ".." key segment
_IMAGE_SLUG_RE = re.compile(r"^(?P<name>[^/]*[^/.][^/]*)\.(?P<ext>jpeg|jpg|png)$")


class ImageFormat(str, enum.Enum):
    JPEG = "JPEG"
    PNG = "PNG"

    @property
    def content_type(self) -> str:
        return f"image/{self.value.lower()}"


_EXTENSION_FORMATS: dict[str, ImageFormat] = {
    "jpeg": ImageFormat.JPEG,
    "jpg": ImageFormat.JPEG,
    "png": ImageFormat.PNG,
}


@dataclass(frozen=True)
class ImageIdentity:
    """Name and format parsed from the request path. ``ext`` keeps the spelling used."""

    name: str
    ext: str

    @property
    def format(self) -> ImageFormat:
        return _EXTENSION_FORMATS[self.ext]

    @property
    def filename(self) -> str:
        return f"{self.name}.{self.ext}"


def parse_image_slug(slug: str) -> ImageIdentity:
    """Split ``<name>.<ext>`` into an identity; raises InvalidImagePath otherwise."""
    match = _IMAGE_SLUG_RE.fullmatch(slug)
    if match is None:
        raise InvalidImagePath()
    return ImageIdentity(name=match.group("name"), ext=match.group("ext"))


def _join(*parts: str) -> str:
    return "/".join(p.strip("/") for p in parts if p.strip("/"))


def original_key(identity: ImageIdentity, folder_original: str) -> str:
    return _join(folder_original, identity.filename)


def resized_key(
    identity: ImageIdentity,
    width: int | None,
    height: int | None,
    folder_resized: str,
    *,
    variant: str | None = None,
) -> str:
    """Key of a resized variant. ``variant`` is appended to the size tag when set."""
    tag = f"w{width or 0}h{height or 0}"
    if variant:
        tag = f"{tag}-{variant}"
    return _join(folder_resized, identity.name, f"{tag}.{identity.ext}")
