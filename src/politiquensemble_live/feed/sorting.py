"""Display ordering for coverage timelines."""

from politiquensemble_live.data import LiveUpdate


def _recency(update: LiveUpdate) -> tuple[bool, float]:
    ts = update.effective_timestamp
    # Missing or unparseable timestamps sort as the oldest entries.
    return (ts is not None, ts.timestamp() if ts is not None else 0.0)


def sort_for_display(updates: list[LiveUpdate]) -> list[LiveUpdate]:
    """Order updates newest first by ``timestamp``, falling back to ``created_at``.

    Equal timestamps are ordered by id ascending, so the result does not
    depend on the order the server returned and sorting twice changes nothing.

    Args:
        updates: Updates in any order.

    Returns:
        A new list; the input is not modified.
    """
    by_id = sorted(updates, key=lambda u: u.id)
    # Python's sort is stable with reverse=True, so the id order survives for ties.
    return sorted(by_id, key=_recency, reverse=True)
