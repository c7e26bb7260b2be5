"""Main orchestrator for the portal filter pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional, Sequence

from rich.progress import Progress

from sparql_scout.core.candidates import prepare_records
from sparql_scout.core.config import Settings
from sparql_scout.core.documents import filter_by_country, load_records, write_results
from sparql_scout.core.logging import get_logger
from sparql_scout.core.models import PortalRecord, RunStats
from sparql_scout.core.selection import derive_rows
from sparql_scout.prober.engine import Prober, VerificationEngine

logger = get_logger("sparql_scout.orchestrator")


class PortalFilterOrchestrator:
    """Orchestrates a run: Load → Select → Prepare → Derive or Verify → Write."""
    
    def __init__(self, settings: Settings, prober: Optional[Prober] = None):
        self.settings = settings
        self.prober = prober
    
    async def run(
        self,
        input_path: Path,
        output_path: Optional[Path] = None,
        check: bool = False,
        progress: Optional[Progress] = None,
    ) -> RunStats:
        """Execute the pipeline and write the result document.
        
        Args:
            input_path: JSON document with portal records
            output_path: Result document path (defaults to the configured one)
            check: Verify candidates with live probes
            progress: Optional rich progress display to drive
        """
        output_path = output_path or self.settings.output.output_path
        country = self.settings.filter.country.strip()
        strict = self.settings.engine.strict
        
        records = load_records(input_path)
        selected = filter_by_country(records, country)
        logger.info(
            "records_loaded",
            input=str(input_path),
            total=len(records),
            selected=len(selected),
            country=country or None,
        )
        
        prepared = self._prepare(selected, progress)
        
        if check:
            rows: Sequence[Any] = await self._verify(prepared, progress)
        else:
            rows = self._derive(prepared, progress)
        
        write_results(rows, output_path)
        logger.info("results_written", output=str(output_path), rows=len(rows))
        
        return RunStats(
            total_in=len(records),
            total_selected=len(selected),
            country=country or None,
            exported=len(rows),
            checked=check,
            strict=strict,
        )
    
    def _prepare(
        self,
        selected: Sequence[Any],
        progress: Optional[Progress],
    ) -> list[PortalRecord]:
        prepared = prepare_records(selected)
        if progress is not None:
            task = progress.add_task("[cyan]Prepare", total=len(selected))
            progress.update(task, completed=len(prepared))
        return prepared
    
    async def _verify(
        self,
        prepared: Sequence[PortalRecord],
        progress: Optional[Progress],
    ) -> list[Any]:
        engine = VerificationEngine(self.settings, prober=self.prober)
        
        on_task_done: Optional[Callable[[], None]] = None
        if progress is not None:
            total = sum(len(r.candidates) for r in prepared)
            task = progress.add_task("[green]Check", total=total)
            
            def advance() -> None:
                progress.advance(task)
            
            on_task_done = advance
        
        return await engine.verify(prepared, on_task_done=on_task_done)
    
    def _derive(
        self,
        prepared: Sequence[PortalRecord],
        progress: Optional[Progress],
    ) -> list[Any]:
        rows = derive_rows(prepared, strict=self.settings.engine.strict)
        if progress is not None:
            task = progress.add_task("[yellow]Filter", total=len(prepared))
            progress.update(task, completed=len(prepared))
        return rows
