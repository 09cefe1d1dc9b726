"""Build response records from responses completed by requests."""

from __future__ import annotations

import logging
from typing import Optional

import requests

from .record import ResponseRecord, build_response

logger = logging.getLogger(__name__)

# urllib3 reports the protocol version as an integer
_HTTP_VERSIONS = {9: "0.9", 10: "1.0", 11: "1.1", 20: "2", 30: "3"}


def _header_items(response: requests.Response) -> list[tuple[str, str]]:
    """Header pairs with repeated names kept separate where possible."""
    raw_headers = getattr(response.raw, "headers", None)
    if raw_headers is not None and hasattr(raw_headers, "items"):
        return list(raw_headers.items())
    return list(response.headers.items())


def _status_line(response: requests.Response) -> str:
    version = _HTTP_VERSIONS.get(getattr(response.raw, "version", None), "1.1")
    reason = response.reason or ""
    return f"HTTP/{version} {response.status_code} {reason}".rstrip()


def raw_headers_from_requests(response: requests.Response) -> str:
    """
    Rebuild the header dump of a completed requests call.

    Every redirect hop in `response.history` contributes its own block,
    followed by the final response, each terminated by a blank line.

    Args:
        response: Completed response

    Returns:
        Header dump suitable for parse_header_block()
    """
    blocks = []
    for hop in [*response.history, response]:
        lines = [_status_line(hop)]
        lines.extend(f"{name}: {value}" for name, value in _header_items(hop))
        blocks.append("\r\n".join(lines) + "\r\n\r\n")
    return "".join(blocks)


def record_from_requests(
    response: requests.Response,
    default_charset: Optional[str] = None,
    streamed: bool = False,
) -> ResponseRecord:
    """
    Build a ResponseRecord from a completed requests.Response.

    Args:
        response: Completed response
        default_charset: Charset to assume when Content-Type declares none
        streamed: True if the body was consumed elsewhere (e.g. written to a file)

    Returns:
        The assembled record
    """
    body = None if streamed else response.content
    logger.debug(
        f"Adapting response for {response.url} ({len(response.history)} redirect(s))"
    )
    return build_response(
        url=response.url,
        status=response.status_code,
        redirect_count=len(response.history),
        raw_headers=raw_headers_from_requests(response),
        body=body,
        default_charset=default_charset,
    )
