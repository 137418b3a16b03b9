from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, ClassVar, Dict, Optional, Tuple, Union
from urllib.parse import SplitResult

from langcodes import Language


class Field:
    """Base for every parsed field. Concrete variants are frozen dataclasses."""

    NAME: ClassVar[str] = ""

    @property
    def name(self) -> str:
        return self.NAME

    @property
    def value(self) -> Any:
        raise NotImplementedError("value must be implemented in subclasses")


@dataclass(frozen=True)
class _UrlField(Field):
    url: SplitResult

    @property
    def value(self) -> SplitResult:
        return self.url


@dataclass(frozen=True)
class Acknowledgments(_UrlField):
    NAME: ClassVar[str] = "Acknowledgments"


@dataclass(frozen=True)
class Canonical(_UrlField):
    NAME: ClassVar[str] = "Canonical"


@dataclass(frozen=True)
class Contact(_UrlField):
    NAME: ClassVar[str] = "Contact"


@dataclass(frozen=True)
class Encryption(_UrlField):
    NAME: ClassVar[str] = "Encryption"


@dataclass(frozen=True)
class Hiring(_UrlField):
    NAME: ClassVar[str] = "Hiring"


@dataclass(frozen=True)
class Policy(_UrlField):
    NAME: ClassVar[str] = "Policy"


@dataclass(frozen=True)
class Expires(Field):
    NAME: ClassVar[str] = "Expires"
    timestamp: datetime

    @property
    def value(self) -> datetime:
        return self.timestamp


@dataclass(frozen=True)
class PreferredLanguages(Field):
    NAME: ClassVar[str] = "Preferred-Languages"
    languages: Tuple[Language, ...]

    @property
    def value(self) -> Tuple[Language, ...]:
        return self.languages


@dataclass(frozen=True)
class Extension(Field):
    # ``field_name`` keeps the caller's original casing
    field_name: str
    raw_value: str

    @property
    def name(self) -> str:
        return self.field_name

    @property
    def value(self) -> str:
        return self.raw_value


@dataclass(frozen=True)
class Comment:
    text: str  # everything after the leading "#"


@dataclass(frozen=True)
class FieldLine:
    field: Field


Line = Union[Comment, FieldLine]


def value_to_json(f: Field) -> Any:
    """Render a field payload as something ``json.dumps`` accepts."""
    v = f.value
    if isinstance(v, SplitResult):
        return v.geturl()
    if isinstance(v, datetime):
        return v.isoformat()
    if isinstance(v, tuple):
        return [str(lang) for lang in v]
    return v


@dataclass
class LineResult:
    file_location: str  # string path for JSON serializable output
    line_num: int
    text: str
    kind: str  # "comment", "field" or "error"
    name: Optional[str] = None
    value: Any = None
    error: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_line(cls, path: Path, line_num: int, text: str, line: Line) -> "LineResult":
        if isinstance(line, Comment):
            return cls(str(path), line_num, text, "comment", value=line.text)
        return cls(
            str(path),
            line_num,
            text,
            "field",
            name=line.field.name,
            value=value_to_json(line.field),
            meta={"extension": isinstance(line.field, Extension)},
        )

    @classmethod
    def from_error(cls, path: Path, line_num: int, text: str, error: Exception) -> "LineResult":
        return cls(str(path), line_num, text, "error", error=str(error))
