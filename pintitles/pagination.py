"""
Paginated listing of every post, one request at a time.

Pinboard exposes no total count, so exhaustion is only visible once a
page comes back short or empty. Each fetch is tagged as Continue (a full
page, more may follow) or Exhausted (short or empty page, stop after
emitting it). The next request is issued only after the consumer has
finished every record of the current page.
"""

import time
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Union

from .logger import StructuredLogger, get_logger
from .models import Record

FetchPage = Callable[[int, int], List[Record]]


@dataclass
class RunState:
    """Counters for one run. Owned by the runner, mutated by the
    sequencer (request_count, last_batch_size) and the filter
    (total_processed, halted)."""

    page_size: int = 100
    limit: Optional[int] = None
    request_count: int = 0
    total_processed: int = 0
    last_batch_size: Optional[int] = None
    halted: bool = False

    @property
    def next_offset(self) -> int:
        return self.request_count * self.page_size


@dataclass(frozen=True)
class Continue:
    batch: List[Record]


@dataclass(frozen=True)
class Exhausted:
    batch: List[Record] = field(default_factory=list)


PageResult = Union[Continue, Exhausted]


class BatchSequencer:
    """Turns many listing requests into one ordered stream of records."""

    def __init__(
        self,
        fetch_page: FetchPage,
        state: RunState,
        delay_ms: int = 0,
        sleep: Callable[[float], None] = time.sleep,
        logger: Optional[StructuredLogger] = None,
    ):
        self.fetch_page = fetch_page
        self.state = state
        self.delay_ms = delay_ms
        self.sleep = sleep
        self.logger = logger or get_logger()

    def step(self) -> PageResult:
        """Issue the next listing request and tag its outcome.

        FatalTransportError from fetch_page propagates unchanged.
        """
        offset = self.state.next_offset
        self.state.request_count += 1
        batch = self.fetch_page(offset, self.state.page_size)
        self.state.last_batch_size = len(batch)
        self.logger.info(
            f"Received {len(batch)} posts",
            start=offset,
            request=self.state.request_count,
        )
        # Pinboard treats `results` as a cap, so a short page is the end of the list
        if len(batch) < self.state.page_size:
            return Exhausted(batch)
        return Continue(batch)

    def __iter__(self) -> Iterator[Record]:
        while not self.state.halted:
            if self.state.request_count and self.delay_ms:
                self.sleep(self.delay_ms / 1000.0)
            result = self.step()
            for record in result.batch:
                if self.state.halted:
                    break
                yield record
            if isinstance(result, Exhausted):
                return
        self.logger.info("Processing limit reached; no more posts requested",
                         limit=self.state.limit)
