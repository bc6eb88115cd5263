"""Pipeline orchestrator that runs crawl pipelines in sequence."""

import time
from typing import Dict, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..config import Config
from ..db import Database, RunManager
from ..ingestion import (
    ApiClient,
    ArticleLister,
    BodyFetcher,
    CommentHarvester,
    FixedIntervalThrottle,
    Pipeline,
    Throttle,
)

console = Console()

PIPELINES = {
    "articles": (ArticleLister, "Listing archive articles"),
    "comments": (CommentHarvester, "Harvesting comment trees"),
    "bodies": (BodyFetcher, "Fetching article bodies"),
}

PIPELINE_ORDER = ["articles", "comments", "bodies"]


class PipelineStage:
    """Represents a pipeline stage."""

    def __init__(self, name: str, description: str):
        self.name = name
        self.description = description
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.success = False
        self.error: Optional[str] = None
        self.run_id: Optional[int] = None
        self.stats: Dict = {}

    def start(self):
        """Mark stage as started."""
        self.start_time = time.time()

    def complete(self, stats: Optional[Dict] = None):
        """Mark stage as completed successfully."""
        self.end_time = time.time()
        self.success = True
        if stats:
            self.stats.update(stats)

    def fail(self, error: str):
        """Mark stage as failed."""
        self.end_time = time.time()
        self.success = False
        self.error = error

    @property
    def duration(self) -> float:
        """Get stage duration in seconds."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


class PipelineOrchestrator:
    """Run crawl pipelines against one database, recording each run."""

    def __init__(
        self,
        config: Config,
        database: Database,
        client: Optional[ApiClient] = None,
        throttle: Optional[Throttle] = None,
    ) -> None:
        """
        Initialize pipeline orchestrator.

        Args:
            config: Configuration manager
            database: Open crawl database, exclusively owned during the run
            client: API client (built from config when omitted)
            throttle: Request throttle shared by all pipelines
        """
        self.config = config
        self.database = database
        api = config.config.api
        self.client = client or ApiClient(
            base_url=api.base_url,
            timeout=api.timeout,
            user_agent=api.user_agent,
        )
        self.throttle = throttle or FixedIntervalThrottle(config.config.throttle.delay_seconds)
        self.run_manager = RunManager(database)
        self.stages: List[PipelineStage] = []

    def _build_pipeline(self, name: str) -> Pipeline:
        pipeline_cls, _ = PIPELINES[name]
        kwargs = {}
        if pipeline_cls is ArticleLister:
            kwargs["page_size"] = self.config.config.api.page_size
        return pipeline_cls(
            self.database,
            self.client,
            self.throttle,
            run_manager=self.run_manager,
            **kwargs,
        )

    def run(self, names: List[str]) -> bool:
        """
        Run the named pipelines in order, stopping at the first fatal error.

        Returns:
            True if every pipeline completed, False otherwise
        """
        unknown = [name for name in names if name not in PIPELINES]
        if unknown:
            raise ValueError(f"Unknown pipeline(s): {', '.join(unknown)}")

        self.stages = [PipelineStage(name, PIPELINES[name][1]) for name in names]

        try:
            for stage in self.stages:
                console.print(f"[bold]{stage.description}...[/bold]")
                if not self._run_stage(stage):
                    return False
            return True
        finally:
            self._print_summary()

    def _run_stage(self, stage: PipelineStage) -> bool:
        pipeline = self._build_pipeline(stage.name)
        stage.run_id = self.run_manager.create_run(stage.name)
        stage.start()

        try:
            stats = pipeline.run(run_id=stage.run_id)
        except KeyboardInterrupt:
            stage.fail("Interrupted")
            self.run_manager.update_run_status(
                stage.run_id, "failed", {"error": "Interrupted", "skipped": pipeline.skipped}
            )
            raise
        except Exception as e:
            stage.fail(str(e))
            self.run_manager.update_run_status(
                stage.run_id, "failed", {"error": str(e), "skipped": pipeline.skipped}
            )
            return False

        stage.complete(stats)
        self.run_manager.update_run_status(stage.run_id, "success", stats)
        return True

    def _print_summary(self):
        """Print pipeline execution summary."""
        table = Table(title="Crawl Summary")
        table.add_column("Stage", style="cyan")
        table.add_column("Run", style="dim")
        table.add_column("Status", style="bold")
        table.add_column("Duration", style="yellow")
        table.add_column("Details", style="dim")

        for stage in self.stages:
            if stage.start_time is None:
                status = "[dim]-[/dim]"
            else:
                status = "[green]✓[/green]" if stage.success else "[red]✗[/red]"
            duration = f"{stage.duration:.1f}s" if stage.duration > 0 else "-"

            details = ""
            if stage.success:
                details = ", ".join(f"{key}: {value}" for key, value in stage.stats.items())
            elif stage.error:
                details = escape(stage.error)

            run = str(stage.run_id) if stage.run_id is not None else "-"
            table.add_row(stage.name.title(), run, status, duration, details)

        console.print("\n")
        console.print(table)

        failed = [s.name for s in self.stages if s.error]
        if failed:
            console.print(Panel(
                f"[red]❌ Crawl failed![/red]\n\n"
                f"Failed stages: {', '.join(failed)}\n"
                f"Skipped items are listed by: acxcrawl runs --failures RUN_ID",
                style="red",
            ))
