# =============================================================================
# core/utilities.py  —  Pure helpers behind the utility tools
# =============================================================================
#
# Date/time rendering, identifiers, random data and hashing.  Nothing here
# knows about MCP; the tools in tools/utility_tools.py only add input
# handling and wording around these functions.
# =============================================================================

import base64
import hashlib
import secrets
import string
import uuid
from datetime import datetime, timezone
from typing import Literal, Optional
from zoneinfo import ZoneInfo

DateFormat = Literal["iso", "local", "utc", "timestamp", "all"]
UuidFormat = Literal["standard", "compact", "uppercase"]
RandomKind = Literal["number", "string", "password", "hex", "base64"]
HashAlgorithm = Literal["md5", "sha1", "sha256", "sha512"]
HashEncoding = Literal["hex", "base64"]

_SYMBOLS = "!@#$%^&*()_+-=[]{}|;:,.<>?"


def describe_datetime(now: datetime, fmt: DateFormat = "all", tz_name: Optional[str] = None) -> list[str]:
    """Render `now` (timezone-aware) as one line per requested format."""
    lines = []
    if fmt in ("iso", "all"):
        lines.append(f"ISO 8601: {now.astimezone(timezone.utc).isoformat()}")
    if fmt in ("local", "all"):
        try:
            local = now.astimezone(ZoneInfo(tz_name)) if tz_name else now.astimezone()
            lines.append(f"Local: {local.strftime('%B %d, %Y, %I:%M:%S %p %Z')}")
        except (KeyError, ValueError) as exc:
            lines.append(f"Local: {now.astimezone().strftime('%B %d, %Y, %I:%M:%S %p %Z')} (timezone error: {exc})")
    if fmt in ("utc", "all"):
        lines.append(f"UTC: {now.astimezone(timezone.utc).strftime('%a, %d %b %Y %H:%M:%S GMT')}")
    if fmt in ("timestamp", "all"):
        lines.append(f"Unix Timestamp: {int(now.timestamp())}")
        lines.append(f"Milliseconds: {int(now.timestamp() * 1000)}")
    if fmt == "all":
        lines.append("")
        lines.append(f"Day of Week: {now.strftime('%A')}")
        lines.append(f"Day of Year: {now.timetuple().tm_yday}")
        lines.append(f"Week of Year: {now.isocalendar()[1]}")
    return lines


def generate_uuids(count: int = 1, fmt: UuidFormat = "standard") -> list[str]:
    values = []
    for _ in range(count):
        value = str(uuid.uuid4())
        if fmt == "compact":
            value = value.replace("-", "")
        elif fmt == "uppercase":
            value = value.upper()
        values.append(value)
    return values


def random_value(
    kind: RandomKind,
    length: Optional[int] = None,
    minimum: int = 0,
    maximum: int = 100,
    include_symbols: bool = False,
) -> str:
    """Generate random data with the `secrets` module.

    Raises:
        ValueError: for a number range where minimum >= maximum.
    """
    if kind == "number":
        if minimum >= maximum:
            raise ValueError("Minimum value must be less than maximum value")
        return str(minimum + secrets.randbelow(maximum - minimum + 1))
    if kind == "string":
        alphabet = string.ascii_letters + string.digits
        return "".join(secrets.choice(alphabet) for _ in range(length or 16))
    if kind == "password":
        alphabet = string.ascii_letters + string.digits + (_SYMBOLS if include_symbols else "")
        return "".join(secrets.choice(alphabet) for _ in range(length or 16))
    if kind == "hex":
        size = length or 32
        return secrets.token_hex((size + 1) // 2)[:size]
    size = length or 32
    return base64.b64encode(secrets.token_bytes((size * 3 + 3) // 4)).decode("ascii")[:size]


def calculate_hash(text: str, algorithm: HashAlgorithm = "sha256", encoding: HashEncoding = "hex") -> str:
    digest = hashlib.new(algorithm, text.encode("utf-8"))
    if encoding == "base64":
        return base64.b64encode(digest.digest()).decode("ascii")
    return digest.hexdigest()


def format_uptime(seconds: float) -> str:
    seconds = int(seconds)
    return f"{seconds // 3600}h {(seconds % 3600) // 60}m {seconds % 60}s"
