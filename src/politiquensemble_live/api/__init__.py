"""REST access to the live-coverage endpoints."""

from politiquensemble_live.api.base import LiveCoverageAPI
from politiquensemble_live.api.http import HttpLiveCoverageAPI

__all__ = ["HttpLiveCoverageAPI", "LiveCoverageAPI"]
