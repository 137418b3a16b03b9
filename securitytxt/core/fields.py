from __future__ import annotations
from typing import Callable, Dict, Optional, Tuple
from urllib.parse import SplitResult

from . import constants as C
from .errors import ParseError
from .models import (
    Acknowledgments,
    Canonical,
    Comment,
    Contact,
    Encryption,
    Expires,
    Extension,
    Field,
    FieldLine,
    Hiring,
    Line,
    Policy,
    PreferredLanguages,
)
from .values import parse_language_tags, parse_rfc5322_datetime, parse_url


URL_VARIANTS: Dict[str, Callable[[SplitResult], Field]] = {
    C.ACKNOWLEDGMENTS: Acknowledgments,
    C.CANONICAL: Canonical,
    C.CONTACT: Contact,
    C.ENCRYPTION: Encryption,
    C.HIRING: Hiring,
    C.POLICY: Policy,
}


def split_field(text: str) -> Optional[Tuple[str, str]]:
    """Split at the first separator; ``None`` when there is none."""
    name, sep, value = text.partition(C.SEPARATOR)
    if not sep:
        return None
    return name, value


def parse_field(text: str) -> Field:
    """Parse one non-comment line of a security.txt file.

    The name before the first ``:`` is matched case-insensitively against the
    known fields and the value after it is handed to that field's parser.
    Unknown names become an :class:`Extension` holding the name exactly as
    written and the untouched value. Raises :class:`ParseError` when the line
    has no separator or a known field's value is malformed.
    """
    split = split_field(text)
    if split is None:
        raise ParseError.missing_separator()
    name, value = split

    key = name.lower()
    variant = URL_VARIANTS.get(key)
    if variant is not None:
        return variant(parse_url(value))
    if key == C.EXPIRES:
        return Expires(parse_rfc5322_datetime(value))
    if key == C.PREFERRED_LANGUAGES:
        return PreferredLanguages(parse_language_tags(value, C.LANGUAGE_SEPARATOR))
    return Extension(name, value)


def parse_line(text: str) -> Line:
    """Classify one physical line as a comment or a field."""
    if text.startswith(C.COMMENT_PREFIX):
        return Comment(text[len(C.COMMENT_PREFIX):])
    return FieldLine(parse_field(text))
