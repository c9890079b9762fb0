"""
Batch Runner

Executes batches in dependency order, committing once per batch. The first
failure rolls back the failing batch and aborts the run; batches committed
before it stay committed, which is safe because re-running is idempotent.
"""

import time
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from quizseed.core.config import SeedingConfig
from quizseed.core.exceptions import BatchExecutionError, DatabaseError, QuizSeedException
from quizseed.storage.store import Store
from quizseed.utils.logging import get_logger, PerformanceTimer

from .batch import Batch, BatchResult, BatchState
from .context import SeedContext
from .scheduler import resolve_order
from .upsert import SeedStats, UpsertOrchestrator
from .materializer import EntityMaterializer
from .validation import RecordValidator

logger = get_logger(__name__)


@dataclass
class RunReport:
    """Summary of a seeding run."""
    results: List[BatchResult] = field(default_factory=list)
    dry_run: bool = False
    duration: float = 0.0

    @property
    def order(self) -> List[str]:
        return [result.name for result in self.results]

    @property
    def stats(self) -> SeedStats:
        total = SeedStats()
        for result in self.results:
            total = total + result.stats
        return total

    @property
    def committed(self) -> List[str]:
        return [r.name for r in self.results if r.state is BatchState.COMMITTED]

    @property
    def failed(self) -> Optional[BatchResult]:
        for result in self.results:
            if result.state is BatchState.FAILED:
                return result
        return None

    @property
    def succeeded(self) -> bool:
        done = BatchState.ROLLED_BACK if self.dry_run else BatchState.COMMITTED
        return all(result.state is done for result in self.results)

    def result(self, name: str) -> BatchResult:
        for result in self.results:
            if result.name == name:
                return result
        raise KeyError(name)


class BatchRunner:
    """Runs declared batches against a store."""

    def __init__(self, store: Store, settings: Optional[SeedingConfig] = None,
                 orchestrator: Optional[UpsertOrchestrator] = None,
                 permissive: Optional[bool] = None, strict_records: bool = False):
        """
        Initialize the runner.

        Args:
            store: Persistence store shared by all batches
            settings: Seeding configuration (policies, validation mode)
            orchestrator: Pre-built orchestrator, mainly for tests
            permissive: Override the configured validation mode
            strict_records: Apply the validator's strict-mode checks
        """
        self.store = store
        self.settings = settings or SeedingConfig()
        self.permissive = self.settings.permissive if permissive is None else permissive
        self.orchestrator = orchestrator or UpsertOrchestrator(
            store,
            materializer=EntityMaterializer(RecordValidator(strict_mode=strict_records)),
            policies=self.settings.policies,
        )
        self.report: Optional[RunReport] = None

    def plan(self, batches: Sequence[Batch], groups: Optional[Iterable[str]] = None) -> List[Batch]:
        return resolve_order(batches, groups)

    def run(self, batches: Sequence[Batch], groups: Optional[Iterable[str]] = None,
            dry_run: bool = False) -> RunReport:
        """
        Seed every selected batch in dependency order.

        Args:
            batches: Declared batches
            groups: Optional group tags; dependencies of selected batches are included
            dry_run: Flush instead of committing and roll everything back at the end

        Returns:
            Run report with one result per executed batch

        Raises:
            ConfigurationError: On dependency problems (before anything runs)
                or missing reference data
            ValidationError: On an invalid record in strict mode
            DatabaseError: On persistence failures
        """
        ordered = self.plan(batches, groups)
        self.report = RunReport(results=[BatchResult(batch.name) for batch in ordered], dry_run=dry_run)

        logger.info(
            f"Seeding {len(ordered)} batch(es){' (dry run)' if dry_run else ''}: "
            f"{', '.join(self.report.order)}"
        )

        started = time.monotonic()
        try:
            for batch, result in zip(ordered, self.report.results):
                self._run_batch(batch, result, dry_run)
        finally:
            if dry_run:
                self.store.rollback()
                self.orchestrator.lookup.clear()
            self.report.duration = time.monotonic() - started

        return self.report

    def _run_batch(self, batch: Batch, result: BatchResult, dry_run: bool) -> None:
        result.state = BatchState.RUNNING
        self.orchestrator.stats = result.stats
        context = SeedContext(batch.name, self.orchestrator, permissive=self.permissive)
        timer = PerformanceTimer(f"batch '{batch.name}'", logger)

        try:
            with timer:
                batch.execute(context)
                if dry_run:
                    self.store.flush()
                else:
                    self.store.commit()
        except Exception as e:
            result.state = BatchState.FAILED
            result.error = str(e)
            result.duration = timer.duration
            self.store.rollback()
            self.orchestrator.lookup.clear()

            if isinstance(e, QuizSeedException):
                raise
            if isinstance(e, SQLAlchemyError):
                raise DatabaseError(
                    f"Batch '{batch.name}' failed: {str(e)}",
                    operation="seed"
                ) from e
            raise BatchExecutionError(
                f"Batch '{batch.name}' failed: {str(e)}",
                batch_name=batch.name
            ) from e

        # A dry run flushes only; the rollback at the end of run() discards every batch
        result.state = BatchState.ROLLED_BACK if dry_run else BatchState.COMMITTED
        result.duration = timer.duration
