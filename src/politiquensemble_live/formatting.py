"""Date and text helpers shared by the feed, the view model and the CLI.

Output strings are French, like the public site.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from datetime import UTC, datetime

logger = logging.getLogger(__name__)

FRENCH_MONTHS = (
    "janvier",
    "février",
    "mars",
    "avril",
    "mai",
    "juin",
    "juillet",
    "août",
    "septembre",
    "octobre",
    "novembre",
    "décembre",
)

DEFAULT_DATE_FORMAT = "d MMMM yyyy"
TIME_FORMAT = "HH:mm"

_FORMAT_TOKENS = re.compile(r"yyyy|MMMM|MM|dd|d|HH|mm")


def parse_datetime(value: str | datetime | None) -> datetime | None:
    """Parse an ISO-8601 value from the API into an aware UTC datetime.

    Naive values are assumed to be UTC. Returns None for missing or
    unparseable input instead of raising.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            logger.debug("Unparseable timestamp %r", value)
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def format_date(value: str | datetime | None, fmt: str = DEFAULT_DATE_FORMAT) -> str:
    """Format a date with French month names.

    Supports the tokens ``yyyy``, ``MMMM``, ``MM``, ``dd``, ``d``, ``HH`` and
    ``mm``. Falls back to ``str(value)`` when the value cannot be parsed.
    """
    parsed = parse_datetime(value)
    if parsed is None:
        return "" if value is None else str(value)

    def _token(match: re.Match[str]) -> str:
        token = match.group(0)
        if token == "yyyy":
            return f"{parsed.year:04d}"
        if token == "MMMM":
            return FRENCH_MONTHS[parsed.month - 1]
        if token == "MM":
            return f"{parsed.month:02d}"
        if token == "dd":
            return f"{parsed.day:02d}"
        if token == "d":
            return str(parsed.day)
        if token == "HH":
            return f"{parsed.hour:02d}"
        return f"{parsed.minute:02d}"

    return _FORMAT_TOKENS.sub(_token, fmt)


def _plural(count: int, word: str) -> str:
    return f"il y a {count} {word}{'s' if count > 1 else ''}"


def time_ago(value: str | datetime | None, *, now: datetime | None = None) -> str:
    """Describe how long ago ``value`` happened ("il y a 5 minutes")."""
    parsed = parse_datetime(value)
    if parsed is None:
        return ""
    now = now or datetime.now(tz=UTC)
    seconds = int((now - parsed).total_seconds())

    if seconds < 60:
        return "à l'instant"
    minutes = seconds // 60
    if minutes < 60:
        return _plural(minutes, "minute")
    hours = minutes // 60
    if hours < 24:
        return _plural(hours, "heure")
    days = hours // 24
    if days < 30:
        return _plural(days, "jour")
    months = days // 30
    if months < 12:
        return f"il y a {months} mois"
    return _plural(months // 12, "an")


def truncate_text(text: str, max_length: int) -> str:
    """Cut ``text`` to ``max_length`` characters, adding an ellipsis when cut."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def slugify(title: str) -> str:
    """Build a URL slug from a coverage title.

    Accents are folded to ASCII before punctuation is dropped, so
    "Élection présidentielle" becomes "election-presidentielle".
    """
    folded = unicodedata.normalize("NFKD", title).encode("ascii", "ignore").decode("ascii")
    cleaned = re.sub(r"[^\w\s-]", "", folded.lower())
    return re.sub(r"[\s_-]+", "-", cleaned).strip("-")
