"""Value parsing helpers shared by providers."""

from datetime import datetime, timezone
from typing import Any, Optional


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse a timestamp into an aware UTC datetime.

    Accepts datetimes (naive ones are taken as UTC), unix timestamps in
    seconds (int, float or a numeric string) and ISO-8601 strings, with
    either a ``T`` or a space separator and an optional ``Z`` suffix.

    None, empty strings and zero timestamps mean "unset" and return None.

    Raises:
        ValueError: If the value cannot be interpreted as a timestamp
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    if isinstance(value, bool):
        raise ValueError(f"Cannot parse datetime from {value!r}")

    if isinstance(value, (int, float)):
        return _from_timestamp(value)

    if isinstance(value, str):
        text = value.strip()
        try:
            return _from_timestamp(float(text))
        except ValueError:
            pass

        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"Cannot parse datetime from {value!r}") from None
        return parse_datetime(parsed)

    raise ValueError(f"Cannot parse datetime from {type(value).__name__}")


def _from_timestamp(seconds: float) -> Optional[datetime]:
    if seconds == 0:
        return None
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError) as e:
        raise ValueError(f"Timestamp out of range: {seconds}") from e
