"""Image intake: decode an uploaded payload and enforce the size/type policy."""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from policy_portal.core.config import DEFAULT_MIME_TYPES
from policy_portal.exceptions import ImageRejectedError

if TYPE_CHECKING:
    from policy_portal.core.config import UploadConfig

_DATA_URL_RE = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[\w.+-]+=[\w.+-]+)*;base64,(?P<data>.*)$",
    re.DOTALL,
)

_HEIC_BRANDS = frozenset({b"heic", b"heix", b"hevc", b"hevx", b"heim", b"heis"})
_HEIF_BRANDS = frozenset({b"mif1", b"msf1"})


@dataclass(frozen=True)
class PolicyImage:
    """Decoded image bytes with their resolved MIME type."""

    data: bytes
    mime_type: str

    @property
    def size(self) -> int:
        return len(self.data)

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.to_base64()}"


@dataclass(frozen=True)
class ImagePolicy:
    """Upper bound on decoded size plus a MIME type whitelist."""

    max_bytes: int = 10 * 1024 * 1024
    allowed_mime_types: frozenset[str] = field(default_factory=lambda: frozenset(DEFAULT_MIME_TYPES))

    @classmethod
    def from_config(cls, config: UploadConfig) -> ImagePolicy:
        return cls(
            max_bytes=config.max_bytes,
            allowed_mime_types=frozenset(m.lower() for m in config.allowed_mime_types),
        )


def sniff_mime_type(data: bytes) -> str | None:
    """Identify common image formats from their magic bytes."""
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if data.startswith((b"GIF87a", b"GIF89a")):
        return "image/gif"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    if data[4:8] == b"ftyp":
        brand = data[8:12]
        if brand in _HEIC_BRANDS:
            return "image/heic"
        if brand in _HEIF_BRANDS:
            return "image/heif"
    return None


def _decode_base64(text: str, max_bytes: int) -> bytes:
    compact = "".join(text.split())
    # 4 base64 chars encode 3 bytes; reject before decoding anything huge
    if len(compact) * 3 // 4 > max_bytes + 3:
        raise ImageRejectedError(f"Image exceeds the {max_bytes} byte limit")
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ImageRejectedError("Image payload is not valid base64") from exc


def load_image(
    payload: bytes | str,
    declared_mime: str | None = None,
    policy: ImagePolicy | None = None,
) -> PolicyImage:
    """Turn raw bytes, bare base64 or a ``data:`` URL into a :class:`PolicyImage`.

    The MIME type is sniffed from the bytes; a declared ``image/*`` type
    (argument or data URL header) is used only when sniffing fails.

    Raises:
        ImageRejectedError: empty, undecodable, oversized or disallowed payload.
    """
    policy = policy or ImagePolicy()

    if isinstance(payload, str):
        text = payload.strip()
        match = _DATA_URL_RE.match(text)
        if match:
            declared_mime = declared_mime or match.group("mime")
            text = match.group("data")
        data = _decode_base64(text, policy.max_bytes)
    else:
        data = bytes(payload)

    if not data:
        raise ImageRejectedError("Image payload is empty")
    if len(data) > policy.max_bytes:
        raise ImageRejectedError(f"Image exceeds the {policy.max_bytes} byte limit")

    mime_type = sniff_mime_type(data)
    if mime_type is None and declared_mime and declared_mime.lower().startswith("image/"):
        mime_type = declared_mime.lower()
    if mime_type is None:
        raise ImageRejectedError("Payload is not a recognized image")
    if mime_type not in policy.allowed_mime_types:
        raise ImageRejectedError(f"Image type {mime_type} is not accepted")

    return PolicyImage(data=data, mime_type=mime_type)
