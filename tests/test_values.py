from datetime import datetime, timedelta, timezone
from urllib.parse import urlsplit

import pytest

from securitytxt.core.errors import ParseError
from securitytxt.core.values import (
    parse_language_tag,
    parse_language_tags,
    parse_rfc5322_datetime,
    parse_url,
)


def tz(hours=0, minutes=0):
    return timezone(timedelta(hours=hours, minutes=minutes))


# URLs

@pytest.mark.parametrize(
    "value",
    [
        "https://example.com",
        "https://example.com/.well-known/security.txt",
        "mailto:security@example.com",
        "tel:+1-201-555-0123",
        "https://[::1]:8443/pgp.asc",
        "ftp://files.example.com/key.txt",
        "https://b\u00fccher.example/security",
        "http://127.0.0.1/",
    ],
)
def test_valid_urls(value):
    assert parse_url(value) == urlsplit(value)


def test_url_surrounding_space_is_stripped():
    assert parse_url("  https://example.com \t") == urlsplit("https://example.com")


@pytest.mark.parametrize(
    "value,reason",
    [
        ("", "empty URL"),
        ("not a url", "invalid character"),
        ("/relative/path", "relative URL without a base"),
        ("example.com/security", "relative URL without a base"),
        ("https://", "empty host"),
        ("https:example.com", "empty host"),
        ("https://exa<mple.com", "invalid domain character"),
        ("https://example.com:99999", "invalid port number"),
        ("https://example.com:port", "invalid port number"),
        ("https://ex\xa0ample.com", "domain"),
        ("https://exa\u3000mple.com", "domain"),
        ("http://1.2.3.999/", "invalid IPv4 address"),
        ("http://10.0.0.256/", "invalid IPv4 address"),
    ],
)
def test_invalid_urls(value, reason):
    with pytest.raises(ParseError) as err:
        parse_url(value)
    assert reason in str(err.value)


# RFC 5322 date-time

@pytest.mark.parametrize(
    "value,expected",
    [
        ("Fri, 21 Nov 1997 09:55:06 -0600", datetime(1997, 11, 21, 9, 55, 6, tzinfo=tz(-6))),
        ("Tue, 1 Jul 2003 10:52:37 +0200", datetime(2003, 7, 1, 10, 52, 37, tzinfo=tz(2))),
        ("21 Nov 1997 09:55 +0530", datetime(1997, 11, 21, 9, 55, tzinfo=tz(5, 30))),
        ("21 Nov 97 09:55:06 GMT", datetime(1997, 11, 21, 9, 55, 6, tzinfo=tz())),
        ("1 Jan 26 00:00:00 UT", datetime(2026, 1, 1, tzinfo=tz())),
        ("1 Jan 126 00:00:00 +0000", datetime(2026, 1, 1, tzinfo=tz())),
        ("thu, 31 dec 2026 23:59:59 PST", datetime(2026, 12, 31, 23, 59, 59, tzinfo=tz(-8))),
        (" Thu ,31 Dec 2026 23 : 59 : 59 -0000 ", datetime(2026, 12, 31, 23, 59, 59, tzinfo=tz())),
        ("31 Dec 2016 23:59:60 +0000", datetime(2016, 12, 31, 23, 59, 59, tzinfo=tz())),
        ("Thu, 13 Feb 1969 23:32 -0330 (Newfoundland Time)", datetime(1969, 2, 13, 23, 32, tzinfo=tz(-3, -30))),
        ("Thu,(x) 31 Dec 2026 23:59:59 +0000 (UTC (a \\) b))", datetime(2026, 12, 31, 23, 59, 59, tzinfo=tz())),
        ("31 Dec 2026 23:59:59 -0700(PDT)", datetime(2026, 12, 31, 23, 59, 59, tzinfo=tz(-7))),
    ],
)
def test_valid_datetimes(value, expected):
    parsed = parse_rfc5322_datetime(value)
    assert parsed == expected
    assert parsed.utcoffset() == expected.utcoffset()


@pytest.mark.parametrize(
    "value",
    [
        "",
        "2026-12-31T23:59:59Z",
        "31 Dec 2026 23:59:59",
        "Thu, 31 Dec 2026 23:59:59",
        "31 Dec 2026 23:59:59 Z",
        "31 Dec 2026 23:59:59 CET",
        "31 Dec 2026 23:59:59 +0260",
        "31 Dec 2026 23:59:59 +2400",
        "31 Foo 2026 23:59:59 +0000",
        "31 Feb 2026 23:59:59 +0000",
        "31 Dec 2026 24:00:00 +0000",
        "Mon, 31 Dec 2026 23:59:59 +0000",
        "Xyz, 31 Dec 2026 23:59:59 +0000",
        "31 Dec 2026 23:59:59 +0000 trailing",
        "31 Dec 2026 23:59:59 +0000 (UTC",
        "31 Dec 2026 23:59:59 +0000 UTC)",
        "31 Dec 2026 23:59:59 +0000 (UTC \\)",
    ],
)
def test_invalid_datetimes(value):
    with pytest.raises(ParseError):
        parse_rfc5322_datetime(value)


# language tags

@pytest.mark.parametrize("value", ["en", "fr-CA", "zh-Hant-TW", "en-US"])
def test_valid_language_tags(value):
    assert str(parse_language_tag(value)) == value


@pytest.mark.parametrize("value", ["", "???", " fr", "en-", "en,fr"])
def test_invalid_language_tags(value):
    with pytest.raises(ParseError):
        parse_language_tag(value)


def test_language_tags_first_failure_wins():
    with pytest.raises(ParseError) as err:
        parse_language_tags("en,!!,???")
    assert "'!!'" in str(err.value)


def test_language_tags_trailing_comma_fails():
    with pytest.raises(ParseError):
        parse_language_tags("en,")
