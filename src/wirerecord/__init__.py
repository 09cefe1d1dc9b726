"""
wirerecord - Interpret the headers and body a transfer engine collected.

Usage:
    from wirerecord import build_response, ResponseError

    record = build_response(url, status, redirect_count, raw_headers, body)
    if record.is_body_decodable("utf-8"):
        text = record.decoded_body("utf-8")
    else:
        text = record.inspectable_body("utf-8")
"""

__version__ = "1.0.0"

from .charset import (
    BINARY,
    charset_from_content_type,
    decode_header_data,
    detect_charset,
    lookup_codec,
)
from .decoding import BodyDecoder, is_decodable, lossy_decode, strict_decode
from .errors import ErrorKind, ResponseError, render_message
from .headers import RawExchangeHeaders, final_exchange, parse_header_block
from .models.config import DecodeConfig
from .record import (
    ResponseRecord,
    build_response,
    build_response_from_config,
    headers_from_lines,
)

__all__ = [
    "__version__",
    # Headers
    "RawExchangeHeaders",
    "parse_header_block",
    "final_exchange",
    "headers_from_lines",
    # Charsets
    "BINARY",
    "charset_from_content_type",
    "decode_header_data",
    "detect_charset",
    "lookup_codec",
    # Decoding
    "BodyDecoder",
    "is_decodable",
    "lossy_decode",
    "strict_decode",
    # Records
    "ResponseRecord",
    "build_response",
    "build_response_from_config",
    # Config
    "DecodeConfig",
    # Errors
    "ErrorKind",
    "ResponseError",
    "render_message",
]
