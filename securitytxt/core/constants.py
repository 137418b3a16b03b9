from __future__ import annotations
from typing import FrozenSet

# The conventional name of the file.
FILENAME = "security.txt"

# Where the file must live when served over HTTP.
WELL_KNOWN_PATH = "/.well-known/security.txt"

# The file must be served as plain text.
MIMETYPE = "text/plain"

COMMENT_PREFIX = "#"
SEPARATOR = ":"
LANGUAGE_SEPARATOR = ","

# Lowercase dispatch keys
ACKNOWLEDGMENTS = "acknowledgments"
CANONICAL = "canonical"
CONTACT = "contact"
ENCRYPTION = "encryption"
EXPIRES = "expires"
HIRING = "hiring"
POLICY = "policy"
PREFERRED_LANGUAGES = "preferred-languages"

URL_FIELDS: FrozenSet[str] = frozenset(
    {ACKNOWLEDGMENTS, CANONICAL, CONTACT, ENCRYPTION, HIRING, POLICY}
)
