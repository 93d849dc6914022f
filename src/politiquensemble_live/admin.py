"""Administration of coverages, their editors and their timelines."""

from __future__ import annotations

import logging

from politiquensemble_live.api.base import LiveCoverageAPI
from politiquensemble_live.cache import (
    QueryCache,
    coverage_key,
    coverage_slug_key,
    coverages_key,
    editors_key,
    updates_key,
)
from politiquensemble_live.data import (
    CoverageInput,
    CoveragePatch,
    EditorAssignment,
    EditorInput,
    LiveCoverage,
    LiveUpdate,
    UpdateInput,
)
from politiquensemble_live.mutations import run_mutation
from politiquensemble_live.notifications import LoggingNotifier, Notifier, Toast

logger = logging.getLogger(__name__)

MAX_ACTIVE_COVERAGES = 3


class CoverageAdmin:
    """CRUD over coverages plus editor assignment and timeline publishing.

    Reads go through the shared cache; writes follow the ``run_mutation`` flow
    and invalidate the same keys the admin screens refresh.

    Args:
        api: Live-coverage API client.
        cache: Shared query cache.
        notifier: Receives success and error toasts.
        max_active: Cap on simultaneously active coverages.
    """

    def __init__(
        self,
        api: LiveCoverageAPI,
        cache: QueryCache,
        notifier: Notifier | None = None,
        *,
        max_active: int = MAX_ACTIVE_COVERAGES,
    ) -> None:
        self._api = api
        self._cache = cache
        self._notifier = notifier or LoggingNotifier()
        self._max_active = max_active

    # Reads

    async def list_coverages(self) -> list[LiveCoverage]:
        return await self._cache.fetch(coverages_key(), self._api.list_coverages)

    async def list_active(self) -> list[LiveCoverage]:
        """Coverages shown on the public list page."""
        return await self._api.list_active_coverages()

    async def get(self, coverage_id: int) -> LiveCoverage:
        return await self._cache.fetch(
            coverage_key(coverage_id), lambda: self._api.get_coverage(coverage_id)
        )

    async def get_by_slug(self, slug: str) -> LiveCoverage:
        return await self._cache.fetch(
            coverage_slug_key(slug), lambda: self._api.get_coverage_by_slug(slug)
        )

    async def editors(self, coverage_id: int) -> list[EditorAssignment]:
        return await self._cache.fetch(
            editors_key(coverage_id), lambda: self._api.get_editors(coverage_id)
        )

    # Coverage writes

    async def create(self, coverage: CoverageInput) -> LiveCoverage:
        """Create a coverage.

        Raises:
            ValueError: ``coverage.active`` is set and the active cap is
                already reached. Checked before any write.
        """
        if coverage.active:
            await self._check_active_cap()
        created = await run_mutation(
            lambda: self._api.create_coverage(coverage),
            cache=self._cache,
            notifier=self._notifier,
            invalidate=[coverages_key()],
            success=Toast("Suivi créé", "Le suivi en direct a été créé avec succès."),
        )
        logger.info("Created coverage %d (%s)", created.id, created.slug)
        return created

    async def update(self, coverage_id: int, patch: CoveragePatch) -> LiveCoverage:
        """Apply a partial edit.

        Raises:
            ValueError: The patch reactivates an inactive coverage while the
                active cap is already reached. Checked before any write.
        """
        if patch.active:
            current = await self.get(coverage_id)
            if not current.active:
                await self._check_active_cap()
        return await run_mutation(
            lambda: self._api.update_coverage(coverage_id, patch),
            cache=self._cache,
            notifier=self._notifier,
            invalidate=[coverages_key(), coverage_key(coverage_id)],
            success=Toast("Suivi mis à jour", "Le suivi en direct a été mis à jour avec succès."),
        )

    async def delete(self, coverage_id: int) -> None:
        """Delete a coverage; the server removes its editors and updates with it."""
        await run_mutation(
            lambda: self._api.delete_coverage(coverage_id),
            cache=self._cache,
            notifier=self._notifier,
            invalidate=[coverages_key()],
            success=Toast("Suivi supprimé", "Le suivi en direct a été supprimé avec succès."),
        )
        logger.info("Deleted coverage %d", coverage_id)

    # Editors

    async def add_editor(self, coverage_id: int, editor: EditorInput) -> EditorAssignment:
        return await run_mutation(
            lambda: self._api.add_editor(coverage_id, editor),
            cache=self._cache,
            notifier=self._notifier,
            invalidate=[editors_key(coverage_id)],
            success=Toast(
                "Éditeur ajouté",
                "L'éditeur a été ajouté au suivi en direct avec succès",
            ),
        )

    async def remove_editor(self, coverage_id: int, editor_id: int) -> None:
        await run_mutation(
            lambda: self._api.remove_editor(coverage_id, editor_id),
            cache=self._cache,
            notifier=self._notifier,
            invalidate=[editors_key(coverage_id)],
            success=Toast(
                "Éditeur retiré",
                "L'éditeur a été retiré du suivi en direct avec succès",
            ),
        )

    # Timeline

    async def publish_update(self, coverage_id: int, update: UpdateInput) -> LiveUpdate:
        return await run_mutation(
            lambda: self._api.create_update(coverage_id, update),
            cache=self._cache,
            notifier=self._notifier,
            invalidate=[updates_key(coverage_id)],
            success=Toast("Mise à jour publiée", "Votre mise à jour a été publiée avec succès"),
        )

    async def delete_update(self, coverage_id: int, update_id: int) -> None:
        await run_mutation(
            lambda: self._api.delete_update(update_id),
            cache=self._cache,
            notifier=self._notifier,
            invalidate=[updates_key(coverage_id)],
            success=Toast("Mise à jour supprimée", "La mise à jour a été supprimée avec succès"),
        )

    async def _check_active_cap(self) -> None:
        coverages = await self.list_coverages()
        active = sum(1 for c in coverages if c.active)
        if active >= self._max_active:
            raise ValueError(
                f"Vous avez déjà {active} suivis actifs. "
                "Désactivez-en un avant d'en activer un nouveau."
            )
