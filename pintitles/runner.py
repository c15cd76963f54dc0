"""
Title repair orchestrator.

Responsibilities:
- Pull records from the sequencer one at a time.
- Run each admitted record through title lookup, then update.
- Isolate per-record failures; only listing failures end the run.

Invariant:
At most one request is in flight at any time. A record is fully
handled before the next one is pulled.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from .errors import AbsentTitleError, FatalTransportError, ItemError
from .filters import RecordFilter
from .logger import StructuredLogger, get_logger
from .models import Record
from .pagination import BatchSequencer, RunState

UPDATED = "updated"
RESOLVED = "resolved"
SKIPPED = "skipped"


@dataclass
class RunSummary:
    seen: int = 0
    candidates: int = 0
    resolved: int = 0
    updated: int = 0
    skipped: int = 0
    listing_requests: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def exit_status(self) -> int:
        return 0 if self.ok else 1


class PipelineRunner:
    def __init__(
        self,
        records: Callable[[RunState], Iterable[Record]],
        record_filter: RecordFilter,
        resolve_title: Callable[[str], Optional[str]],
        submit_update: Callable[[Record, str], None],
        dry_run: bool = False,
        logger: Optional[StructuredLogger] = None,
    ):
        self.records = records
        self.record_filter = record_filter
        self.resolve_title = resolve_title
        self.submit_update = submit_update
        self.dry_run = dry_run
        self.logger = logger or get_logger()

    def run(self, state: RunState) -> RunSummary:
        summary = RunSummary()
        try:
            for record in self.records(state):
                summary.seen += 1
                self.logger.record_seen()
                if not self.record_filter.should_process(record, state):
                    continue
                summary.candidates += 1
                outcome = self.process(record)
                if outcome == SKIPPED:
                    summary.skipped += 1
                    continue
                summary.resolved += 1
                if outcome == UPDATED:
                    summary.updated += 1
        except FatalTransportError as e:
            self.logger.record_error("fatal_transport")
            self.logger.error(f"Run aborted: {e}", requests=state.request_count)
            summary.error = str(e)
        except Exception as e:
            self.logger.record_error(type(e).__name__)
            self.logger.critical(f"Run aborted by unexpected error: {e!r}")
            summary.error = repr(e)
        summary.listing_requests = state.request_count
        self.logger.info(
            "Run finished",
            seen=summary.seen,
            candidates=summary.candidates,
            resolved=summary.resolved,
            updated=summary.updated,
            skipped=summary.skipped,
            ok=summary.ok,
        )
        return summary

    def process(self, record: Record) -> str:
        """Repair one record. Returns UPDATED, RESOLVED (dry run) or SKIPPED."""
        url = record.href
        self.logger.info(f"Fetching Title for {url}.")
        self.logger.record_title_attempt()
        try:
            title = self.resolve_title(url)
            if not title:
                raise AbsentTitleError(url)
            self.logger.record_title_found()
            self.logger.info(f'Title of {url} is "{title}".')
            if self.dry_run:
                self.logger.info("Dry run: not updating", url=url)
                return RESOLVED
            self.submit_update(record, title)
            self.logger.record_update(ok=True)
            self.logger.info("Updated bookmark", url=url)
            return UPDATED
        except ItemError as e:
            if e.kind == "update_failed":
                self.logger.record_update(ok=False)
            self.logger.record_error(e.kind)
            self.logger.warning(str(e), url=e.url, kind=e.kind)
            return SKIPPED


def build_runner(settings, client, resolver, updater, logger=None) -> PipelineRunner:
    """Wire the default pipeline for `settings`."""
    logger = logger or get_logger()

    def records(state: RunState) -> BatchSequencer:
        return BatchSequencer(
            client.fetch_page,
            state,
            delay_ms=settings.delay_ms,
            logger=logger,
        )

    return PipelineRunner(
        records=records,
        record_filter=RecordFilter(settings.excluded_suffixes),
        resolve_title=resolver.resolve_title,
        submit_update=updater.submit_update,
        dry_run=settings.dry_run,
        logger=logger,
    )
