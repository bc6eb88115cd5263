"""Shared plumbing for the crawl pipelines."""

from typing import Any, Dict, Optional

from rich.console import Console
from rich.markup import escape

from ..db import Database, RunManager
from .client import ApiClient
from .throttle import Throttle

console = Console()
err_console = Console(stderr=True)


class Pipeline:
    """Minimal pipeline contract.

    Subclasses implement ``run()``, which crawls to completion and returns
    a stats dictionary. Recoverable errors go through ``skip()``; anything
    raised out of ``run()`` aborts the pipeline.
    """

    name: str = "base"

    def __init__(
        self,
        database: Database,
        client: ApiClient,
        throttle: Throttle,
        run_manager: Optional[RunManager] = None,
    ) -> None:
        self.database = database
        self.client = client
        self.throttle = throttle
        self.run_manager = run_manager
        self.run_id: Optional[int] = None
        self.skipped = 0

    def run(self, run_id: Optional[int] = None) -> Dict[str, Any]:
        raise NotImplementedError

    def skip(self, item_key: Any, stage: str, error: Any) -> None:
        """Report an item that could not be processed and move on."""
        self.skipped += 1
        err_console.print(
            f"[red]{self.name}: skipped {escape(str(item_key))} ({stage}): {escape(str(error))}[/red]",
            highlight=False,
        )
        if self.run_manager is not None:
            self.run_manager.record_failure(self.run_id, self.name, item_key, stage, error)
