"""
Image blob helpers for the listing response.
"""

from __future__ import annotations

import base64

DEFAULT_MEDIA_TYPE = "image/jpeg"
PLACEHOLDER_IMAGE = "/placeholder-image.jpg"

# (prefix, media type); WebP is handled separately because its magic is split.
_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"BM", "image/bmp"),
)


def sniff_media_type(data: bytes) -> str:
    """
    Best-effort media type from leading magic bytes.

    Unknown content is labelled image/jpeg, which is what clients of this
    API have always received.
    """
    head = bytes(data[:16])
    if len(head) >= 12 and head[:4] == b"RIFF" and head[8:12] == b"WEBP":
        return "image/webp"
    for prefix, media_type in _SIGNATURES:
        if head.startswith(prefix):
            return media_type
    return DEFAULT_MEDIA_TYPE


def to_data_uri(data: bytes) -> str:
    payload = base64.b64encode(bytes(data)).decode("ascii")
    return f"data:{sniff_media_type(data)};base64,{payload}"


def image_field(blob: bytes | None) -> str:
    if not blob:
        return PLACEHOLDER_IMAGE
    return to_data_uri(blob)
