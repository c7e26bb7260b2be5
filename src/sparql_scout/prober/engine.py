"""Bounded-concurrency verification of candidate endpoints.

All (record, candidate) pairs are flattened into one task list. A fixed
number of asyncio workers claim tasks from a shared cursor, probe the
URL and merge successes into per-record verified sets. Rows are
assembled in record order once every worker has finished.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Protocol, Sequence

from sparql_scout.core.config import Settings
from sparql_scout.core.logging import get_logger
from sparql_scout.core.models import (
    Candidate,
    PortalProjection,
    PortalRecord,
    ProbeOutcome,
    VerifiedEndpoint,
    VerifiedRow,
)
from sparql_scout.core.selection import choose_preferred
from sparql_scout.prober.scanner import EndpointProber

logger = get_logger("sparql_scout.engine")


class Prober(Protocol):
    async def probe(self, url: str) -> ProbeOutcome: ...


@dataclass(frozen=True)
class ProbeTask:
    """One candidate of one record."""
    
    record_index: int
    candidate: Candidate


class TaskCursor:
    """
    Hands out each task exactly once.
    
    :meth:`claim` does not await, so a claim cannot interleave with
    another worker's claim on the same event loop.
    """
    
    def __init__(self, tasks: Sequence[ProbeTask]):
        self._tasks = tasks
        self._next = 0
    
    def claim(self) -> Optional[ProbeTask]:
        if self._next >= len(self._tasks):
            return None
        task = self._tasks[self._next]
        self._next += 1
        return task
    
    @property
    def claimed(self) -> int:
        return self._next


class VerifiedSet:
    """Verified endpoints of one record, keyed by URL in arrival order."""
    
    def __init__(self) -> None:
        self._entries: dict[str, VerifiedEndpoint] = {}
    
    def add(self, endpoint: VerifiedEndpoint) -> bool:
        """Insert unless the URL is already present. Returns True if added."""
        if endpoint.url in self._entries:
            return False
        self._entries[endpoint.url] = endpoint
        return True
    
    def __contains__(self, url: object) -> bool:
        return url in self._entries
    
    def __len__(self) -> int:
        return len(self._entries)
    
    def __iter__(self) -> Iterator[VerifiedEndpoint]:
        return iter(list(self._entries.values()))


def flatten_tasks(records: Sequence[PortalRecord]) -> list[ProbeTask]:
    """List every candidate of every record, keeping candidate order."""
    return [
        ProbeTask(record_index=position, candidate=candidate)
        for position, record in enumerate(records)
        for candidate in record.candidates
    ]


class VerificationEngine:
    """
    Verifies candidate endpoints for many records under a concurrency cap.
    
    Features:
    - Fixed worker pool sharing one task cursor
    - Idempotent per-record merge of successful probes
    - Worker-level fault isolation (a crashing probe counts as a failure)
    - Optional per-task completion callback for progress display
    """
    
    def __init__(self, settings: Settings, prober: Optional[Prober] = None):
        self.settings = settings
        self.prober = prober
    
    @property
    def worker_count(self) -> int:
        return max(1, self.settings.engine.concurrency)
    
    async def verify(
        self,
        records: Sequence[PortalRecord],
        on_task_done: Optional[Callable[[], None]] = None,
    ) -> list[VerifiedRow]:
        """
        Probe all candidates and build one row per verified record.
        
        Args:
            records: Records with their candidate lists
            on_task_done: Called once after each task completes
            
        Returns:
            Rows in record order for records with at least one verified
            endpoint (and, in strict mode, an explicit candidate)
        """
        if self.prober is not None:
            verified = await self._run_pool(self.prober, records, on_task_done)
        else:
            async with EndpointProber(self.settings.prober) as prober:
                verified = await self._run_pool(prober, records, on_task_done)
        
        return self._assemble_rows(records, verified)
    
    async def _run_pool(
        self,
        prober: Prober,
        records: Sequence[PortalRecord],
        on_task_done: Optional[Callable[[], None]],
    ) -> list[VerifiedSet]:
        tasks = flatten_tasks(records)
        cursor = TaskCursor(tasks)
        verified = [VerifiedSet() for _ in records]
        
        logger.info(
            "verification_started",
            records=len(records),
            tasks=len(tasks),
            workers=self.worker_count,
            timeout_ms=self.settings.prober.timeout_ms,
        )
        start_time = time.time()
        
        async def worker(worker_id: int) -> None:
            while True:
                task = cursor.claim()
                if task is None:
                    return
                
                outcome = await self._probe_task(prober, task, worker_id)
                try:
                    if outcome.success and outcome.mode is not None:
                        verified[task.record_index].add(VerifiedEndpoint(
                            url=task.candidate.url,
                            source=task.candidate.source,
                            mode=outcome.mode,
                        ))
                    if on_task_done is not None:
                        on_task_done()
                except Exception as e:
                    logger.warning(
                        "task_completion_failed",
                        url=task.candidate.url,
                        worker=worker_id,
                        error=f"{type(e).__name__}: {e}",
                    )
        
        await asyncio.gather(*(worker(i) for i in range(self.worker_count)))
        
        logger.info(
            "verification_finished",
            tasks=cursor.claimed,
            verified=sum(len(v) for v in verified),
            duration_seconds=round(time.time() - start_time, 3),
        )
        return verified
    
    async def _probe_task(
        self,
        prober: Prober,
        task: ProbeTask,
        worker_id: int,
    ) -> ProbeOutcome:
        try:
            return await prober.probe(task.candidate.url)
        except Exception as e:
            logger.warning(
                "probe_crashed",
                url=task.candidate.url,
                worker=worker_id,
                error=f"{type(e).__name__}: {e}",
            )
            return ProbeOutcome.failed()
    
    def _assemble_rows(
        self,
        records: Sequence[PortalRecord],
        verified: Sequence[VerifiedSet],
    ) -> list[VerifiedRow]:
        rows: list[VerifiedRow] = []
        
        for record, endpoints in zip(records, verified):
            entries = list(endpoints)
            if not entries:
                continue
            # Gate on the declared candidates, not on which ones verified.
            if self.settings.engine.strict and not record.has_explicit:
                continue
            
            chosen = choose_preferred(entries)
            rows.append(VerifiedRow(
                **PortalProjection.project(record.raw),
                sparql_endpoint=chosen.url,
                sparql_guessed=not chosen.is_explicit,
                sparql_verified=True,
                sparql_verified_by=chosen.mode,
                sparql_endpoints_verified=[e.url for e in entries],
                sparql_endpoints_verified_meta=entries,
            ))
        
        return rows
