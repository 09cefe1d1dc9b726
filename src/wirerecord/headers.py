"""Parser for the accumulated header dump of one logical request."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Union

from .charset import HeaderValue, decode_header_data
from .errors import ResponseError

logger = logging.getLogger(__name__)

STATUS_LINE_RE = re.compile(r"^HTTP/(\d+(?:\.\d+)?) (\d{3})(?: (.*))?$")
HEADER_LINE_RE = re.compile(r"^[!#$%&'*+.^_`|~0-9A-Za-z-]+:")


@dataclass(frozen=True)
class RawExchangeHeaders:
    """
    Status line and header lines of one physical HTTP exchange.

    Attributes:
        status_line: Status line as received, trailing whitespace removed
        header_lines: Header lines in arrival order, surrounding whitespace removed.
            A line stays bytes only if it was neither ISO-8859-1 nor UTF-8.
    """

    status_line: str
    header_lines: tuple[HeaderValue, ...] = ()

    def __post_init__(self) -> None:
        if not STATUS_LINE_RE.match(self.status_line):
            raise ValueError(f"Not an HTTP status line: {self.status_line!r}")

    @property
    def http_version(self) -> str:
        """Protocol version from the status line (e.g. '1.1', '2')."""
        return STATUS_LINE_RE.match(self.status_line).group(1)

    @property
    def status(self) -> int:
        """Numeric status code from the status line."""
        return int(STATUS_LINE_RE.match(self.status_line).group(2))

    @property
    def reason(self) -> str:
        """Reason phrase, empty for HTTP/2 style status lines."""
        return (STATUS_LINE_RE.match(self.status_line).group(3) or "").strip()


def _split_lines(blob: Union[str, bytes]) -> list[tuple[str, HeaderValue]]:
    """Split a blob into (classification text, stored value) pairs."""
    if isinstance(blob, str):
        lines = [line.rstrip("\r") for line in blob.split("\n")]
        return [(line, line) for line in lines]

    pairs: list[tuple[str, HeaderValue]] = []
    for raw in blob.split(b"\n"):
        raw = raw.rstrip(b"\r")
        value = decode_header_data(raw)
        text = value if isinstance(value, str) else raw.decode("latin-1")
        pairs.append((text, value))
    return pairs


def parse_header_block(blob: Union[str, bytes]) -> list[RawExchangeHeaders]:
    """
    Parse every status-line + header block a transfer engine collected.

    Redirects and proxy tunnels mean one logical request can produce several
    blocks, all concatenated in the order they were received. Lines may end
    in CRLF or LF and the final line may have no terminator at all.

    Args:
        blob: Raw header dump as text or bytes

    Returns:
        One RawExchangeHeaders per status line found, earliest first

    Raises:
        ResponseError: MALFORMED_HEADER_SEQUENCE if a header line appears
            before any status line

    Example:
        >>> parse_header_block("HTTP/1.1 200 OK\\r\\nServer: x\\r\\n\\r\\n")
        [RawExchangeHeaders(status_line='HTTP/1.1 200 OK', header_lines=('Server: x',))]
    """
    # (status line, header lines) while still open
    blocks: list[tuple[str, list[HeaderValue]]] = []

    for line_number, (text, value) in enumerate(_split_lines(blob), start=1):
        stripped = text.rstrip()
        if not stripped:
            continue

        if STATUS_LINE_RE.match(stripped):
            blocks.append((stripped, []))
        elif HEADER_LINE_RE.match(stripped.lstrip()):
            if not blocks:
                raise ResponseError.malformed_header_sequence(value, line_number)
            blocks[-1][1].append(value.strip())
        else:
            logger.debug(f"Ignoring unrecognised header dump line {line_number}: {value!r}")

    exchanges = [RawExchangeHeaders(status, tuple(lines)) for status, lines in blocks]
    logger.debug(f"Parsed {len(exchanges)} exchange(s) from header dump")
    return exchanges


def final_exchange(exchanges: list[RawExchangeHeaders]) -> Optional[RawExchangeHeaders]:
    """Return the exchange whose headers describe the logical response."""
    return exchanges[-1] if exchanges else None
