from __future__ import annotations
import ipaddress
import re
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Tuple
from urllib.parse import SplitResult, urlsplit

import idna
import langcodes
from langcodes import Language

from .errors import ParseError

# ---------------------------------------------------------------------------
# URLs
# ---------------------------------------------------------------------------

C0_CONTROL_OR_SPACE = "".join(chr(i) for i in range(0, 0x21))
SPECIAL_SCHEMES = {"http", "https", "ws", "wss", "ftp"}
SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")
INVALID_URL_CHAR_RE = re.compile(r"[\x00-\x20\x7f]")
# forbidden host code points, minus the ones urlsplit already consumed
FORBIDDEN_HOST_RE = re.compile(r"[\x00-\x20#%/:<>?@\[\\\]^|\x7f]")
# a host whose last label looks like this must be an IPv4 address
NUMERIC_LABEL_RE = re.compile(r"^(?:\d+|0[xX][0-9A-Fa-f]*)$")


def _check_host(value: str, host: str) -> None:
    if not host.isascii():
        try:
            host = idna.encode(host, uts46=True).decode("ascii")
        except idna.IDNAError as exc:
            raise ParseError.from_url_error(value, f"invalid international domain name: {exc}") from exc
    if FORBIDDEN_HOST_RE.search(host):
        raise ParseError.from_url_error(value, "invalid domain character")

    labels = host.split(".")
    if len(labels) > 1 and not labels[-1]:
        labels.pop()
    if NUMERIC_LABEL_RE.match(labels[-1]):
        try:
            ipaddress.IPv4Address(".".join(labels))
        except ValueError as exc:
            raise ParseError.from_url_error(value, "invalid IPv4 address") from exc


def parse_url(value: str) -> SplitResult:
    """Parse ``value`` as an absolute URL.

    Surrounding C0 controls and spaces are ignored. A scheme is mandatory,
    and the schemes that address a network host (http, https, ws, wss, ftp)
    must carry a non-empty, well-formed host and a valid port. Non-ASCII
    hosts must survive IDNA (UTS 46) processing, and hosts ending in a
    numeric label must be dotted-quad IPv4 addresses.
    """
    text = value.strip(C0_CONTROL_OR_SPACE)
    if not text:
        raise ParseError.from_url_error(value, "empty URL")
    if INVALID_URL_CHAR_RE.search(text):
        raise ParseError.from_url_error(value, "invalid character in URL")
    if not SCHEME_RE.match(text):
        raise ParseError.from_url_error(value, "relative URL without a base")

    try:
        parts = urlsplit(text)
    except ValueError as exc:
        raise ParseError.from_url_error(value, exc) from exc

    if parts.scheme in SPECIAL_SCHEMES:
        host = parts.hostname
        if not host:
            raise ParseError.from_url_error(value, "empty host")
        if "[" not in parts.netloc:
            _check_host(value, host)
        try:
            parts.port
        except ValueError as exc:
            raise ParseError.from_url_error(value, "invalid port number") from exc

    return parts


# ---------------------------------------------------------------------------
# RFC 5322 section 3.3 date-time
# ---------------------------------------------------------------------------

DAY_NAMES = ["mon", "tue", "wed", "thu", "fri", "sat", "sun"]
MONTH_NAMES = ["jan", "feb", "mar", "apr", "may", "jun",
               "jul", "aug", "sep", "oct", "nov", "dec"]

# obs-zone names with a defined offset, in minutes east of UTC
NAMED_ZONES: Dict[str, int] = {
    "ut": 0, "gmt": 0,
    "est": -5 * 60, "edt": -4 * 60,
    "cst": -6 * 60, "cdt": -5 * 60,
    "mst": -7 * 60, "mdt": -6 * 60,
    "pst": -8 * 60, "pdt": -7 * 60,
}

DATE_TIME_RE = re.compile(
    r"""
    ^[ \t]*
    (?:(?P<dow>[A-Za-z]+)[ \t]*,[ \t]*)?
    (?P<day>\d{1,2})[ \t]+
    (?P<month>[A-Za-z]+)[ \t]+
    (?P<year>\d{2,})[ \t]+
    (?P<hour>\d{2})[ \t]*:[ \t]*(?P<minute>\d{2})
    (?:[ \t]*:[ \t]*(?P<second>\d{2}))?
    [ \t]+
    (?P<zone>[+-]\d{4}|[A-Za-z]+)
    [ \t]*$
    """,
    re.VERBOSE,
)


def _expand_year(digits: str) -> int:
    year = int(digits)
    if len(digits) == 2:
        return year + (2000 if year < 50 else 1900)
    if len(digits) == 3:
        return year + 1900
    return year


def _parse_zone(zone: str) -> timezone:
    if zone[0] in "+-":
        hours, minutes = int(zone[1:3]), int(zone[3:5])
        if minutes >= 60:
            raise ValueError(f"zone minutes out of range in {zone!r}")
        if hours >= 24:
            raise ValueError(f"zone offset out of range in {zone!r}")
        offset = timedelta(hours=hours, minutes=minutes)
        return timezone(-offset if zone[0] == "-" else offset)

    key = zone.lower()
    if key in NAMED_ZONES:
        return timezone(timedelta(minutes=NAMED_ZONES[key]))
    if len(key) == 1:
        raise ValueError(f"military zone {zone!r} carries no reliable offset")
    raise ValueError(f"unknown time zone {zone!r}")


def strip_comments(value: str) -> str:
    """Replace each parenthesised CFWS comment with a single space.

    Comments nest, and a backslash quotes the next character inside one.
    Raises ``ValueError`` for an unbalanced parenthesis.
    """
    out: List[str] = []
    depth = 0
    chars = iter(value)
    for ch in chars:
        if depth:
            if ch == "\\":
                if next(chars, None) is None:
                    break
            elif ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
                if not depth:
                    out.append(" ")
        elif ch == "(":
            depth = 1
        elif ch == ")":
            raise ValueError("unbalanced ')' in comment")
        else:
            out.append(ch)
    if depth:
        raise ValueError("unterminated comment")
    return "".join(out)


def parse_rfc5322_datetime(value: str) -> datetime:
    """Parse an RFC 5322 ``date-time`` into an offset-aware ``datetime``.

    Accepts the optional day-of-week, 2, 3 or 4+ digit years (obsolete short
    years are expanded as the RFC describes), optional seconds, and either a
    numeric ``+HHMM``/``-HHMM`` zone or one of the named North American and
    universal zones. Parenthesised comments are treated as whitespace. A value
    without a usable offset is rejected.
    """
    try:
        text = strip_comments(value)
    except ValueError as exc:
        raise ParseError.from_datetime_error(value, exc) from exc
    m = DATE_TIME_RE.match(text)
    if m is None:
        raise ParseError.from_datetime_error(value, "does not match the date-time grammar")

    month_name = m.group("month").lower()
    if month_name not in MONTH_NAMES:
        raise ParseError.from_datetime_error(value, f"unknown month {m.group('month')!r}")

    try:
        tz = _parse_zone(m.group("zone"))
        second = int(m.group("second") or 0)
        # leap seconds cannot be represented by datetime
        if second == 60:
            second = 59
        parsed = datetime(
            _expand_year(m.group("year")),
            MONTH_NAMES.index(month_name) + 1,
            int(m.group("day")),
            int(m.group("hour")),
            int(m.group("minute")),
            second,
            tzinfo=tz,
        )
    except ValueError as exc:
        raise ParseError.from_datetime_error(value, exc) from exc

    dow = m.group("dow")
    if dow is not None:
        if dow.lower() not in DAY_NAMES:
            raise ParseError.from_datetime_error(value, f"unknown day of week {dow!r}")
        if DAY_NAMES.index(dow.lower()) != parsed.weekday():
            raise ParseError.from_datetime_error(
                value, f"day of week {dow!r} does not match the date"
            )

    return parsed


# ---------------------------------------------------------------------------
# BCP 47 language tags
# ---------------------------------------------------------------------------

def parse_language_tag(value: str) -> Language:
    if not value:
        raise ParseError.from_language_error(value, "empty tag")
    if not langcodes.tag_is_valid(value):
        raise ParseError.from_language_error(value, "not a valid BCP 47 tag")
    try:
        return Language.get(value, normalize=False)
    except ValueError as exc:  # LanguageTagError
        raise ParseError.from_language_error(value, exc) from exc


def parse_language_tags(value: str, separator: str = ",") -> Tuple[Language, ...]:
    """Split ``value`` on ``separator`` and validate each element literally.

    Elements are not trimmed, so ``"en, fr"`` fails on ``" fr"``.
    """
    tags: List[Language] = []
    for element in value.split(separator):
        tags.append(parse_language_tag(element))
    return tuple(tags)
