"""Error type for response interpretation failures."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Distinguishable failure modes when interpreting a completed response."""

    MALFORMED_HEADER_SEQUENCE = "malformed_header_sequence"
    HEADER_CHARSET_INVALID = "header_charset_invalid"
    NON_REPRESENTABLE_BODY = "non_representable_body"


class ResponseError(Exception):
    """
    Raised when a response cannot be interpreted.

    A single exception type tagged with an ErrorKind. Fields that do not
    apply to a given kind are None. Use the classmethod constructors rather
    than building instances by hand, and render_message() to turn an error
    into something a human should read.

    Attributes:
        kind: Which failure occurred
        line: Offending header line (MALFORMED_HEADER_SEQUENCE)
        line_number: 1-based line number of the offending header line
        declared_charset: Charset the server declared (HEADER_CHARSET_INVALID)
        source_encoding: Encoding the body was read in (NON_REPRESENTABLE_BODY)
        target_encoding: Encoding the caller asked for (NON_REPRESENTABLE_BODY)
        position: Index of the first unrepresentable character
    """

    def __init__(
        self,
        kind: ErrorKind,
        *,
        line: str | bytes | None = None,
        line_number: int | None = None,
        declared_charset: str | None = None,
        source_encoding: str | None = None,
        target_encoding: str | None = None,
        position: int | None = None,
    ) -> None:
        super().__init__(kind.value)
        self.kind = kind
        self.line = line
        self.line_number = line_number
        self.declared_charset = declared_charset
        self.source_encoding = source_encoding
        self.target_encoding = target_encoding
        self.position = position

    @classmethod
    def malformed_header_sequence(cls, line: str | bytes, line_number: int) -> ResponseError:
        """Create an error for a header line seen before any status line."""
        return cls(ErrorKind.MALFORMED_HEADER_SEQUENCE, line=line, line_number=line_number)

    @classmethod
    def header_charset_invalid(cls, declared_charset: str) -> ResponseError:
        """Create an error for an unknown charset or bytes invalid under it."""
        return cls(ErrorKind.HEADER_CHARSET_INVALID, declared_charset=declared_charset)

    @classmethod
    def non_representable_body(
        cls,
        source_encoding: str,
        target_encoding: str,
        position: int | None = None,
    ) -> ResponseError:
        """Create an error for text that cannot be converted to the target."""
        return cls(
            ErrorKind.NON_REPRESENTABLE_BODY,
            source_encoding=source_encoding,
            target_encoding=target_encoding,
            position=position,
        )

    def __repr__(self) -> str:
        fields = {
            "line": self.line,
            "line_number": self.line_number,
            "declared_charset": self.declared_charset,
            "source_encoding": self.source_encoding,
            "target_encoding": self.target_encoding,
            "position": self.position,
        }
        shown = ", ".join(f"{k}={v!r}" for k, v in fields.items() if v is not None)
        return f"ResponseError({self.kind.name}{', ' + shown if shown else ''})"


def render_message(error: ResponseError) -> str:
    """
    Render a human-readable explanation for a ResponseError.

    Args:
        error: The error to describe

    Returns:
        Message suitable for a console or a log line
    """
    if error.kind is ErrorKind.MALFORMED_HEADER_SEQUENCE:
        return (
            f"Header line {error.line_number} ({error.line!r}) appeared before any "
            "HTTP status line. The header dump is malformed."
        )
    if error.kind is ErrorKind.HEADER_CHARSET_INVALID:
        return (
            f"The server declared charset {error.declared_charset!r}, but it is either "
            "unknown or the body bytes are not valid in it. The body may be binary content "
            "mislabelled as text. Use the raw body and decode it yourself, or use the lossy "
            "decode for inspection."
        )
    at = f" (first at character {error.position})" if error.position is not None else ""
    return (
        f"The response body is {error.source_encoding}, but it cannot be represented "
        f"losslessly in {error.target_encoding}{at}. Use the raw body, choose a target "
        "encoding that covers the needed characters, or use the lossy decode."
    )
