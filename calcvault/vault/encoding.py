"""
Self-describing text payloads: ``data:<mime>;base64,<body>``.

Every stored file carries its content in this form so a record can be
written to a JSON document and later handed back as a download without any
side metadata.
"""
import base64
import binascii
from urllib.parse import unquote_to_bytes

from calcvault.shared.errors import DecodeFailure

DEFAULT_MIME = "application/octet-stream"


def to_data_url(raw: bytes, mime_type: str | None) -> str:
    body = base64.b64encode(raw).decode("ascii")
    return f"data:{mime_type or DEFAULT_MIME};base64,{body}"


def parse_data_url(data: str) -> tuple[str, bytes]:
    """Return (mime_type, raw bytes) for a data URL."""
    if not data.startswith("data:") or "," not in data:
        raise DecodeFailure("payload is not a data URL")
    header, body = data[5:].split(",", 1)
    params = header.split(";")
    mime = params[0] or DEFAULT_MIME
    if "base64" in params[1:]:
        try:
            return mime, base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecodeFailure(f"corrupt base64 payload: {e}")
    return mime, unquote_to_bytes(body)


def estimated_size(data: str) -> int:
    """
    Byte estimate of a payload from its encoded length (len * 3/4, rounded
    half up). Used for compressed images instead of measuring bytes.
    """
    return (len(data) * 3 + 2) // 4
