"""Charset extraction and header-byte decoding."""

from __future__ import annotations

import codecs
import logging
import re
from typing import Optional, Sequence, Union

from charset_normalizer import from_bytes

from .errors import ResponseError

logger = logging.getLogger(__name__)

# Marker for bodies with no declared charset
BINARY = "binary"

CHARSET_CONTENT_TYPE_RE = re.compile(r'(?:charset|encoding)="?([a-z0-9-]+)"?', re.IGNORECASE)

# ISO-8859-1 defines no graphic characters in 0x80-0x9F
_ISO_8859_1_UNDEFINED_RE = re.compile(rb"[\x80-\x9f]")

HeaderValue = Union[str, bytes]


def charset_from_content_type(
    value: Optional[Union[HeaderValue, Sequence[HeaderValue]]],
) -> Optional[str]:
    """
    Extract the charset token from a Content-Type style header value.

    The token is returned as sent. Whether Python knows the charset is only
    checked when the body is decoded.

    Args:
        value: Header value, a list of values (the last one wins), or None

    Returns:
        Charset token, or None if the value declares no charset

    Example:
        >>> charset_from_content_type("text/html; charset=ISO-8859-1")
        'ISO-8859-1'
        >>> charset_from_content_type("text/html") is None
        True
    """
    if isinstance(value, (list, tuple)):
        value = value[-1] if value else None
    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode("latin-1")

    match = CHARSET_CONTENT_TYPE_RE.search(value)
    return match.group(1) if match else None


def is_binary(charset: Optional[str]) -> bool:
    """Check whether a charset means opaque binary content."""
    return charset is None or charset.lower() == BINARY


def lookup_codec(charset: Optional[str]) -> str:
    """
    Resolve a charset name to a Python codec name.

    Args:
        charset: Charset token, or None for binary

    Returns:
        Canonical codec name (e.g. 'utf-8', 'iso8859-7'), or BINARY

    Raises:
        ResponseError: HEADER_CHARSET_INVALID if Python has no usable text codec by that name
    """
    if is_binary(charset):
        return BINARY
    try:
        name = codecs.lookup(charset).name
        # Rejects bytes-to-bytes codecs such as base64 and the "undefined" codec
        b"".decode(name)
        return name
    except (LookupError, UnicodeError):
        logger.debug(f"Unknown charset: {charset!r}")
        raise ResponseError.header_charset_invalid(charset) from None


def decode_header_data(raw: bytes) -> HeaderValue:
    """
    Decode raw header bytes with a fixed fallback chain.

    Header bytes are nominally ISO-8859-1, but some servers send UTF-8 in
    values such as Content-Disposition filenames. Tries ISO-8859-1, then
    UTF-8, and gives back the bytes untouched if neither fits.

    Every byte is valid ISO-8859-1 to Python, so bytes in 0x80-0x9F (where
    ISO-8859-1 has no graphic characters) are what rules it out. UTF-8 for
    Cyrillic, CJK and most other scripts hits that range. UTF-8 for accented
    Latin letters often does not ('é' is C3 A9), so such values come back
    as ISO-8859-1 mojibake ('cafÃ©').

    Args:
        raw: Bytes of one header line or value

    Returns:
        Decoded text, or the original bytes
    """
    if not _ISO_8859_1_UNDEFINED_RE.search(raw):
        return raw.decode("iso-8859-1")
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        logger.debug(f"Header data is neither ISO-8859-1 nor UTF-8, keeping bytes: {raw!r}")
        return raw


def detect_charset(body: Optional[bytes]) -> Optional[str]:
    """
    Guess the charset of a body from its content.

    Diagnostic only: effective charset resolution never uses this.

    Args:
        body: Body bytes

    Returns:
        Best guess codec name, or None if nothing plausible was found
    """
    if not body:
        return None
    try:
        best = from_bytes(body).best()
    except Exception as e:
        logger.debug(f"Charset detection failed: {e}")
        return None
    return best.encoding if best else None
