"""Coverage timeline: ordering and the update feed store."""

from politiquensemble_live.feed.sorting import sort_for_display
from politiquensemble_live.feed.store import FeedSnapshot, UpdateFeedStore

__all__ = ["FeedSnapshot", "UpdateFeedStore", "sort_for_display"]
