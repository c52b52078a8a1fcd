"""
View state for the jobs list and the candidate board.

Both views hold the last authoritative snapshot they fetched. Optimistic
moves mutate the displayed state first and invalidate reads already in
flight; a failed write restores a freshly fetched snapshot, or the held one
if that fetch fails too. A committed reorder refetches the page.
"""

import logging
from typing import Callable, Optional

from api.schemas.candidates import Candidate, CandidateQuery, CandidateUpdate
from api.schemas.common import Pagination
from api.schemas.jobs import Job, JobQuery
from client.api import ApiClient
from client.optimistic import Mutation, MutationState, OptimisticMutationController
from client.queries import QueryTracker
from core.exceptions import StaleResponseError, TalentflowError
from core.utils.ordering import array_move
from database.models.candidates import STAGE_ORDER, CandidateStage

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[TalentflowError], None]


class JobListView:
    """One page of jobs with optimistic drag-to-reorder."""

    collection = "jobs"

    def __init__(
        self,
        api: ApiClient,
        query: Optional[JobQuery] = None,
        controller: Optional[OptimisticMutationController] = None,
        tracker: Optional[QueryTracker] = None,
        on_error: Optional[ErrorCallback] = None,
    ):
        self.api = api
        self.query = query or JobQuery()
        self.controller = controller or OptimisticMutationController()
        self.tracker = tracker or QueryTracker()
        self.on_error = on_error
        self.jobs: list[Job] = []
        self.pagination: Optional[Pagination] = None
        self._snapshot: list[Job] = []

    @property
    def is_pending(self) -> bool:
        return self.controller.is_pending(self.collection)

    async def _load(self):
        return await self.api.list_jobs(
            search=self.query.search,
            status=self.query.status,
            tags=self.query.tags,
            sort=self.query.sort,
            page=self.query.page,
            page_size=self.query.page_size,
        )

    async def refresh(self) -> bool:
        """
        Fetch the current page.

        Returns:
            False if the result was superseded by a newer refresh and dropped
        """
        try:
            page = await self.tracker.fetch(self.collection, self._load)
        except StaleResponseError:
            logger.debug("Dropped stale jobs page")
            return False
        self.jobs = list(page.data)
        self._snapshot = list(page.data)
        self.pagination = page.pagination
        return True

    async def _restore(self, error: TalentflowError) -> None:
        try:
            refreshed = await self.refresh()
        except TalentflowError as e:
            logger.warning(f"Snapshot fetch failed ({e.message}); using held snapshot")
            refreshed = False
        if not refreshed:
            self.jobs = list(self._snapshot)

    async def _resync(self) -> None:
        try:
            await self.refresh()
        except TalentflowError as e:
            logger.warning(f"Refetch after reorder failed ({e.message}); keeping reconciled page")

    async def move(self, job_id: str, to_index: int) -> Mutation:
        """
        Move a job to ``to_index`` on the displayed page.

        The displayed list changes immediately; the backend receives the
        global orders of the moving job and of the job it lands on.
        """
        from_index = next((i for i, job in enumerate(self.jobs) if job.id == job_id), None)
        if from_index is None:
            raise ValueError(f"Job {job_id} is not on the displayed page")
        to_index = max(0, min(to_index, len(self.jobs) - 1))
        from_order = self.jobs[from_index].order
        to_order = self.jobs[to_index].order

        def apply() -> None:
            self.tracker.invalidate(self.collection)
            self.jobs = array_move(self.jobs, from_index, to_index)

        def reconcile(_result) -> None:
            # The backend rewrote orders to positions; the page keeps its slots.
            slots = sorted(job.order for job in self.jobs)
            self.jobs = [job.model_copy(update={"order": slot}) for job, slot in zip(self.jobs, slots)]
            self._snapshot = list(self.jobs)

        mutation = await self.controller.run(
            self.collection,
            apply=apply,
            commit=lambda: self.api.reorder_job(job_id, from_order, to_order),
            rollback=self._restore,
            reconcile=reconcile,
            on_error=self.on_error,
            description=f"move {job_id} {from_index}->{to_index}",
        )
        if mutation.state is MutationState.COMMITTED:
            await self._resync()
        return mutation


class CandidateBoardView:
    """Candidates grouped into one column per stage, with optimistic stage moves."""

    collection = "candidates"

    def __init__(
        self,
        api: ApiClient,
        query: Optional[CandidateQuery] = None,
        controller: Optional[OptimisticMutationController] = None,
        tracker: Optional[QueryTracker] = None,
        on_error: Optional[ErrorCallback] = None,
    ):
        self.api = api
        self.query = query or CandidateQuery()
        self.controller = controller or OptimisticMutationController()
        self.tracker = tracker or QueryTracker()
        self.on_error = on_error
        self.columns: dict[CandidateStage, list[Candidate]] = self._group([])
        self._snapshot: dict[CandidateStage, list[Candidate]] = self._group([])

    @staticmethod
    def _group(candidates: list[Candidate]) -> dict[CandidateStage, list[Candidate]]:
        columns: dict[CandidateStage, list[Candidate]] = {stage: [] for stage in STAGE_ORDER}
        for candidate in candidates:
            columns[candidate.stage].append(candidate)
        return columns

    @staticmethod
    def _copy(columns: dict[CandidateStage, list[Candidate]]) -> dict[CandidateStage, list[Candidate]]:
        return {stage: list(cards) for stage, cards in columns.items()}

    @property
    def is_pending(self) -> bool:
        return self.controller.is_pending(self.collection)

    def find(self, candidate_id: str) -> Optional[Candidate]:
        for cards in self.columns.values():
            for candidate in cards:
                if candidate.id == candidate_id:
                    return candidate
        return None

    async def _load(self):
        return await self.api.list_candidates(
            search=self.query.search,
            stage=self.query.stage,
            job_id=self.query.job_id,
            page=self.query.page,
            page_size=self.query.page_size,
        )

    async def refresh(self) -> bool:
        """Fetch candidates and regroup them; False if the result was stale."""
        try:
            page = await self.tracker.fetch(self.collection, self._load)
        except StaleResponseError:
            logger.debug("Dropped stale candidates page")
            return False
        self.columns = self._group(list(page.data))
        self._snapshot = self._copy(self.columns)
        return True

    async def _restore(self, error: TalentflowError) -> None:
        try:
            refreshed = await self.refresh()
        except TalentflowError as e:
            logger.warning(f"Snapshot fetch failed ({e.message}); using held snapshot")
            refreshed = False
        if not refreshed:
            self.columns = self._copy(self._snapshot)

    async def change_stage(self, candidate_id: str, stage: CandidateStage) -> Mutation:
        """
        Move a card to the top of ``stage`` and persist the new stage.

        On success the card is replaced by the server's copy.
        """
        stage = CandidateStage(stage)
        candidate = self.find(candidate_id)
        if candidate is None:
            raise ValueError(f"Candidate {candidate_id} is not on the board")

        def apply() -> None:
            self.tracker.invalidate(self.collection)
            columns = self._copy(self.columns)
            columns[candidate.stage] = [c for c in columns[candidate.stage] if c.id != candidate_id]
            columns[stage] = [candidate.model_copy(update={"stage": stage})] + columns[stage]
            self.columns = columns

        def reconcile(server_copy: Candidate) -> None:
            columns = self._copy(self.columns)
            for column_stage, cards in columns.items():
                columns[column_stage] = [c for c in cards if c.id != candidate_id]
            # The card stays at the top of the column the server put it in.
            columns[server_copy.stage] = [server_copy] + columns[server_copy.stage]
            self.columns = columns
            self._snapshot = self._copy(columns)

        return await self.controller.run(
            self.collection,
            apply=apply,
            commit=lambda: self.api.update_candidate(candidate_id, CandidateUpdate(stage=stage)),
            rollback=self._restore,
            reconcile=reconcile,
            on_error=self.on_error,
            description=f"stage {candidate_id} {candidate.stage.value}->{stage.value}",
        )
