"""Cell formatting helpers used when projecting records into table rows."""
import json
from datetime import datetime, timezone
from typing import Any, Iterable, Optional, Union

TIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def parse_time(value: Any) -> Optional[datetime]:
    """Parse an API timestamp into a timezone aware datetime.

    Accepts ISO-8601 strings (with or without a trailing ``Z`` and fractional
    seconds), epoch seconds or epoch milliseconds. Returns None for empty or
    unparseable values.
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # epoch milliseconds are 13 digits for any date after 2001
        try:
            seconds = value / 1000 if value > 1e11 else value
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def format_time(value: Optional[datetime]) -> str:
    """Render a datetime as ISO-8601 UTC without sub-second precision."""
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(TIME_FORMAT)


def format_float(value: Union[int, float, None], precision: int = 3) -> str:
    """Render byte counters and CPU percentages with a fixed precision.

    Values that are not numbers are shown as they are.
    """
    try:
        return f"{float(value or 0):.{precision}f}"
    except (TypeError, ValueError):
        return str(value)


def format_int(value: Union[int, float, str, None]) -> str:
    try:
        return str(int(float(value or 0)))
    except (TypeError, ValueError, OverflowError):
        return str(value)


def join_values(values: Optional[Iterable[Any]], separator: str = ", ") -> str:
    """Join a multi-valued field into a single cell, keeping the input order."""
    if not values:
        return ""
    return separator.join(str(value) for value in values)


def yes_no(flag: Any) -> str:
    return "Yes" if flag else "No"


def enabled_disabled(flag: Any) -> str:
    return "Enabled" if flag else "Disabled"


def client_server_label(is_client: Any, is_server: Any) -> str:
    """Label an entity by the client and server flags reported for it.

    Returns "Client", "Server", "Server/Client" or an empty string when
    neither flag is set.
    """
    if is_client and is_server:
        return "Server/Client"
    if is_server:
        return "Server"
    if is_client:
        return "Client"
    return ""


def format_json_string(value: str) -> str:
    """Pretty print a JSON document, returning the input unchanged if it is not JSON."""
    try:
        return json.dumps(json.loads(value), indent=2)
    except (TypeError, ValueError):
        return value


def format_value(value: Any) -> str:
    """Render an arbitrary JSON value as a cell."""
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)
