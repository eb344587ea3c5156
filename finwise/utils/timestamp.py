"""Timestamp parsing utilities."""
from datetime import datetime, timezone


def parse_timestamp(s: str) -> datetime:
    """
    Parse a timestamp string into an aware datetime.

    Supports multiple formats:
    - ISO format with "Z" suffix: "2024-01-02T09:10:00Z"
    - ISO format with timezone: "2024-01-02T09:10:00+00:00"
    - ISO format without timezone: "2024-01-02T09:10:00" (read as local time)
    - Space-separated: "2024-01-02 09:10:00"
    - Date only: "2024-01-02" (local midnight)

    Args:
        s: Timestamp string

    Returns:
        datetime object

    Raises:
        ValueError: If timestamp cannot be parsed
    """
    if not s:
        raise ValueError("Empty timestamp string")

    # Strip whitespace
    s = s.strip()

    # Convert trailing "Z" to "+00:00" for ISO format compatibility
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        # Try replacing space with "T" for ISO-like format
        if " " in s and "T" not in s:
            try:
                dt = datetime.fromisoformat(s.replace(" ", "T"))
            except ValueError:
                dt = None
        else:
            dt = None

    if dt is None:
        raise ValueError(f"Unable to parse timestamp: {s}. Expected ISO format (e.g., '2024-01-02T09:10:00Z' or '2024-01-02T09:10:00+00:00')")

    # Naive values are wall-clock time in the local timezone
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt


def to_storage(dt: datetime) -> str:
    """
    Serialize a datetime for storage as a fixed-width UTC ISO string.

    Fixed width keeps lexical order equal to chronological order, so range
    filters can compare the stored text directly.
    """
    return dt.astimezone(timezone.utc).isoformat(timespec="microseconds")
