from __future__ import annotations
from typing import Union


class ParseError(ValueError):
    """Raised when a line, or the value of a known field, fails its grammar.

    Every failure the parser can produce is reported through this one type.
    The underlying URL, timestamp and language-tag failures are converted to
    a message at the boundary where they happen, so callers only ever catch
    ``ParseError``.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"ParseError({self.message!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParseError):
            return NotImplemented
        return self.message == other.message

    def __hash__(self) -> int:
        return hash(self.message)

    @classmethod
    def missing_separator(cls) -> "ParseError":
        return cls("missing separator `:`")

    @classmethod
    def from_url_error(cls, value: str, reason: Union[str, Exception]) -> "ParseError":
        return cls(f"invalid URL {value!r}: {reason}")

    @classmethod
    def from_datetime_error(cls, value: str, reason: Union[str, Exception]) -> "ParseError":
        return cls(f"invalid RFC 5322 date-time {value!r}: {reason}")

    @classmethod
    def from_language_error(cls, value: str, reason: Union[str, Exception]) -> "ParseError":
        return cls(f"invalid language tag {value!r}: {reason}")
