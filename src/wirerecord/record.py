"""Immutable response record assembled from a completed transfer."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Union

from .charset import HeaderValue, charset_from_content_type
from .decoding import DEFAULT_PLACEHOLDER, DEFAULT_TARGET_ENCODING, BodyDecoder
from .headers import RawExchangeHeaders, final_exchange, parse_header_block
from .models.config import DecodeConfig

logger = logging.getLogger(__name__)

HeaderMapping = Mapping[str, Union[HeaderValue, tuple[HeaderValue, ...]]]


def headers_from_lines(lines: Iterable[HeaderValue]) -> HeaderMapping:
    """
    Build a header mapping from raw header lines.

    Each line is split on its first colon. Names keep their case; values
    are stripped. A name seen more than once maps to a tuple of its values
    in arrival order, a name seen once maps to a plain value.

    Args:
        lines: Header lines, e.g. RawExchangeHeaders.header_lines

    Returns:
        Read-only mapping of header name to value(s)
    """
    headers: dict[str, Union[HeaderValue, tuple[HeaderValue, ...]]] = {}
    for line in lines:
        if isinstance(line, bytes):
            raw_name, _, value = line.partition(b":")
            name = raw_name.decode("latin-1")
        else:
            name, _, value = line.partition(":")
        value = value.strip()

        if name not in headers:
            headers[name] = value
        elif isinstance(headers[name], tuple):
            headers[name] += (value,)
        else:
            headers[name] = (headers[name], value)
    return MappingProxyType(headers)


def get_header(headers: HeaderMapping, name: str, default=None):
    """Look up a header by name, ignoring case. An exact match wins."""
    if name in headers:
        return headers[name]
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return default


@dataclass(frozen=True)
class ResponseRecord:
    """
    Result of one logical HTTP request.

    Only the final exchange's status and headers are exposed directly;
    earlier exchanges (redirect hops, proxy CONNECT responses) are kept in
    `exchanges` for diagnostics. Building a record never decodes the body,
    so an error page in an unexpected charset is still fully inspectable.

    Attributes:
        url: Final URL after redirects
        status: HTTP status code reported by the transfer engine
        status_line: Status line of the final exchange
        redirect_count: Number of redirects followed
        headers: Final exchange headers; repeated names map to tuples
        body: Raw body bytes, or None if it was streamed to a file
        charset: Declared charset, else the caller default, else None (binary)
        exchanges: Every exchange found in the header dump, earliest first
    """

    url: str
    status: int
    status_line: str
    redirect_count: int
    headers: HeaderMapping
    body: Optional[bytes]
    charset: Optional[str]
    exchanges: tuple[RawExchangeHeaders, ...] = ()
    _decoder: BodyDecoder = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_decoder", BodyDecoder(self.body, self.charset))

    @property
    def ok(self) -> bool:
        """True for status codes below 400."""
        return self.status < 400

    @property
    def error(self) -> bool:
        """True for status codes of 400 and above."""
        return not self.ok

    @property
    def http_version(self) -> Optional[str]:
        """Protocol version of the final exchange, None without a status line."""
        return self.exchanges[-1].http_version if self.exchanges else None

    @property
    def reason(self) -> Optional[str]:
        """Reason phrase of the final exchange, None without a status line."""
        return self.exchanges[-1].reason if self.exchanges else None

    @property
    def cookies(self) -> list[HeaderValue]:
        """All Set-Cookie values of the final exchange."""
        cookies: list[HeaderValue] = []
        for name, value in self.headers.items():
            if name.lower() == "set-cookie":
                cookies.extend(value if isinstance(value, tuple) else [value])
        return cookies

    def get_header(self, name: str, default=None):
        """Look up a header by name, ignoring case."""
        return get_header(self.headers, name, default)

    def is_body_decodable(self, target: str = DEFAULT_TARGET_ENCODING) -> bool:
        """Check whether decoded_body(target) would succeed."""
        return self._decoder.is_decodable(target)

    def decoded_body(self, target: str = DEFAULT_TARGET_ENCODING) -> Optional[str]:
        """
        Body as text, representable in `target` without loss.

        Raises:
            ResponseError: HEADER_CHARSET_INVALID or NON_REPRESENTABLE_BODY
        """
        return self._decoder.decode(target)

    def inspectable_body(
        self,
        target: str = DEFAULT_TARGET_ENCODING,
        placeholder: str = DEFAULT_PLACEHOLDER,
    ) -> Optional[str]:
        """
        Body as text with unrepresentable characters replaced.

        Raises:
            ResponseError: HEADER_CHARSET_INVALID if the bytes do not match the charset
        """
        return self._decoder.decode_lossy(target, placeholder)


def build_response(
    url: str,
    status: int,
    redirect_count: int,
    raw_headers: Union[str, bytes],
    body: Optional[bytes],
    default_charset: Optional[str] = None,
) -> ResponseRecord:
    """
    Assemble a ResponseRecord from what the transfer engine collected.

    Args:
        url: Final URL
        status: Numeric status code
        redirect_count: Number of redirects followed
        raw_headers: Concatenated header dump of every exchange
        body: Body bytes, or None if streamed to a file
        default_charset: Charset to assume when Content-Type declares none

    Returns:
        The assembled record

    Raises:
        ResponseError: MALFORMED_HEADER_SEQUENCE if the header dump is malformed
    """
    exchanges = parse_header_block(raw_headers)
    last = final_exchange(exchanges)

    headers = headers_from_lines(last.header_lines if last else ())
    declared = charset_from_content_type(get_header(headers, "Content-Type"))
    charset = declared or default_charset or None

    logger.debug(
        f"Built response for {url}: status={status}, exchanges={len(exchanges)}, "
        f"declared charset={declared!r}, effective charset={charset!r}"
    )
    return ResponseRecord(
        url=url,
        status=status,
        status_line=last.status_line if last else "",
        redirect_count=redirect_count,
        headers=headers,
        body=body,
        charset=charset,
        exchanges=tuple(exchanges),
    )


def build_response_from_config(
    url: str,
    status: int,
    redirect_count: int,
    raw_headers: Union[str, bytes],
    body: Optional[bytes],
    config: DecodeConfig,
) -> ResponseRecord:
    """Same as build_response(), taking the default charset from config."""
    return build_response(url, status, redirect_count, raw_headers, body, config.default_charset)
