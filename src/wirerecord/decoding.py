"""Response body decoding with strict and lossy modes."""

from __future__ import annotations

import codecs
import logging
import re
from typing import Optional, Union

from .charset import BINARY, lookup_codec
from .errors import ResponseError

logger = logging.getLogger(__name__)

DEFAULT_TARGET_ENCODING = "utf-8"
DEFAULT_PLACEHOLDER = "?"

STRICT = "strict"
LOSSY = "lossy"

# Binary bodies only convert where they overlap ASCII
_NON_ASCII_RE = re.compile(r"[^\x00-\x7f]")


def _target_codec(target: str) -> str:
    try:
        name = codecs.lookup(target).name
        "".encode(name)
        return name
    except (LookupError, UnicodeError):
        raise ValueError(f"Unknown target encoding: {target!r}") from None


def _read_source(body: bytes, charset: Optional[str]) -> tuple[str, str]:
    """Decode body under its charset, returning (text, source codec)."""
    source = lookup_codec(charset)
    if source == BINARY:
        return body.decode("latin-1"), BINARY
    try:
        return body.decode(source), source
    except UnicodeError as e:
        logger.debug(f"Body is not valid {source}: {e}")
        raise ResponseError.header_charset_invalid(charset) from None


def _substitute(text: str, target: str, placeholder: str) -> str:
    """Replace every character the target cannot encode with placeholder."""
    try:
        text.encode(target)
        return text
    except UnicodeEncodeError:
        pass

    missing = {}
    for char in set(text):
        try:
            char.encode(target)
        except UnicodeEncodeError:
            missing[ord(char)] = placeholder
    return text.translate(missing)


def strict_decode(
    body: Optional[bytes],
    charset: Optional[str] = None,
    target: str = DEFAULT_TARGET_ENCODING,
) -> Optional[str]:
    """
    Decode a body, failing on any mismatch or loss.

    Args:
        body: Body bytes, or None if the body was streamed elsewhere
        charset: Declared charset; None means opaque binary
        target: Encoding the resulting text must be representable in

    Returns:
        Decoded text, or None for an absent body

    Raises:
        ResponseError: HEADER_CHARSET_INVALID if the charset is unknown or the
            bytes are not valid in it; NON_REPRESENTABLE_BODY if the text has
            characters the target cannot hold
        ValueError: If the target encoding is unknown
    """
    if body is None:
        return None

    target_codec = _target_codec(target)
    text, source = _read_source(body, charset)

    if source == BINARY:
        match = _NON_ASCII_RE.search(text)
        if match:
            raise ResponseError.non_representable_body(BINARY, target_codec, match.start())

    try:
        text.encode(target_codec)
    except UnicodeEncodeError as e:
        raise ResponseError.non_representable_body(source, target_codec, e.start) from None
    return text


def lossy_decode(
    body: Optional[bytes],
    charset: Optional[str] = None,
    target: str = DEFAULT_TARGET_ENCODING,
    placeholder: str = DEFAULT_PLACEHOLDER,
) -> Optional[str]:
    """
    Decode a body, substituting characters the target cannot represent.

    The bytes must still be valid in the declared charset. Meant for logs
    and diagnostics, where a few question marks beat an exception.

    Raises:
        ResponseError: HEADER_CHARSET_INVALID, as for strict_decode
        ValueError: If the target encoding is unknown
    """
    if body is None:
        return None

    target_codec = _target_codec(target)
    text, source = _read_source(body, charset)

    if source == BINARY:
        text = _NON_ASCII_RE.sub(placeholder, text)
    return _substitute(text, target_codec, placeholder)


def is_decodable(
    body: Optional[bytes],
    charset: Optional[str] = None,
    target: str = DEFAULT_TARGET_ENCODING,
) -> bool:
    """Check whether strict_decode would succeed."""
    if body is None:
        return True
    try:
        strict_decode(body, charset, target)
    except ResponseError:
        return False
    return True


CacheKey = tuple[Optional[str], str, str, Optional[str]]


class BodyDecoder:
    """
    Decoder bound to one body and charset, memoising results.

    Results are cached by (charset, target, mode, placeholder). Errors are
    cached too, so probing with is_decodable() and then calling decode()
    does the work once. The cache is recompute-safe: two threads racing on
    the same key compute the same value.

    Example:
        decoder = BodyDecoder(b"caf\\xc3\\xa9", "utf-8")
        if decoder.is_decodable("ascii"):
            ...
        text = decoder.decode_lossy("ascii")  # 'caf?'
    """

    def __init__(self, body: Optional[bytes], charset: Optional[str] = None) -> None:
        self.body = body
        self.charset = charset
        self._cache: dict[CacheKey, Union[Optional[str], ResponseError]] = {}

    def _cached(self, key: CacheKey, compute) -> Optional[str]:
        if key not in self._cache:
            try:
                self._cache[key] = compute()
            except ResponseError as e:
                self._cache[key] = e
        result = self._cache[key]
        if isinstance(result, ResponseError):
            raise result.with_traceback(None)
        return result

    def decode(self, target: str = DEFAULT_TARGET_ENCODING) -> Optional[str]:
        """Strict decode; see strict_decode()."""
        key = (self.charset, _target_codec(target), STRICT, None)
        return self._cached(key, lambda: strict_decode(self.body, self.charset, target))

    def decode_lossy(
        self,
        target: str = DEFAULT_TARGET_ENCODING,
        placeholder: str = DEFAULT_PLACEHOLDER,
    ) -> Optional[str]:
        """Lossy decode; see lossy_decode()."""
        key = (self.charset, _target_codec(target), LOSSY, placeholder)
        return self._cached(
            key, lambda: lossy_decode(self.body, self.charset, target, placeholder)
        )

    def is_decodable(self, target: str = DEFAULT_TARGET_ENCODING) -> bool:
        """Check whether decode() would succeed, caching its outcome."""
        if self.body is None:
            return True
        try:
            self.decode(target)
        except ResponseError:
            return False
        return True
