"""
Utility functions for prompt_composer.
"""
from datetime import timedelta


def format_duration(milliseconds: int, show_milliseconds: bool = False) -> str:
    """
    Format a duration in milliseconds to a human-readable string.

    Leading zero units are omitted.

    Args:
        milliseconds: Duration in milliseconds
        show_milliseconds: Whether to append the millisecond part

    Returns:
        Formatted duration string (e.g., "1h 23m 45s")
    """
    seconds, millis = divmod(int(milliseconds), 1000)
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    days, hours = divmod(hours, 24)

    units = [(days, "d"), (hours, "h"), (minutes, "m"), (seconds, "s")]
    if show_milliseconds:
        units.append((millis, "ms"))

    parts: list[str] = []
    for value, unit in units:
        if value or parts:
            parts.append(f"{value}{unit}")

    if not parts:
        return "0ms" if show_milliseconds else "0s"
    return " ".join(parts)


def format_timing(duration: timedelta) -> str:
    """Format a module's computation time for diagnostics (e.g. "1.25ms")."""
    millis = duration.total_seconds() * 1000
    if millis < 1:
        return f"{millis * 1000:.0f}µs"
    return f"{millis:.2f}ms"
