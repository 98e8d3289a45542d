# =============================================================================
# core/validation.py  —  Small, pure input checks shared by several tools
# =============================================================================
#
# Shape validation (required fields, enums, ranges) is done by the tool
# signatures themselves.  What's left here are the content rules a type
# can't express: "is this an email address?", "is this a usable env key?".
# =============================================================================

import re

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_ENV_KEY_RE = re.compile(r"^[A-Z][A-Z0-9_]*$")
_ENV_KEY_INVALID_CHARS = re.compile(r"[^A-Z0-9_]")


def is_valid_email(address: str) -> bool:
    return bool(_EMAIL_RE.match(address))


def invalid_emails(addresses: list[str]) -> list[str]:
    return [address for address in addresses if not is_valid_email(address)]


def sanitize_env_key(key: str) -> str:
    """Upper-case the key and replace anything outside [A-Z0-9_] with '_'.

    >>> sanitize_env_key("db-host")
    'DB_HOST'
    """
    return _ENV_KEY_INVALID_CHARS.sub("_", key.upper())


def is_valid_env_key(key: str) -> bool:
    # Must start with a letter even after sanitizing ("1ABC" stays invalid).
    return bool(_ENV_KEY_RE.match(key))
