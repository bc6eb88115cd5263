"""Run ledger: pipeline runs and the items they skipped."""

import json
import sqlite3
from typing import Any, Dict, List, Optional

import pendulum

from ..errors import StorageError
from ..models import Failure, Run
from .connection import Database


def _now() -> str:
    return pendulum.now("UTC").to_iso8601_string()


class RunManager:
    """Record pipeline runs and skipped items in the crawl database."""

    def __init__(self, database: Database) -> None:
        self.database = database
        self.database.ensure_schema("runs")

    def _execute(self, action: str, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        try:
            return self.database.execute(sql, params)
        except sqlite3.Error as e:
            raise StorageError(f"Failed to {action}: {e}") from e

    def create_run(self, pipeline: str, started_at: Optional[str] = None) -> int:
        """
        Create a new run record.

        Returns:
            Run ID
        """
        cursor = self._execute(
            "create run",
            "INSERT INTO crawl_runs (pipeline, started_at, status) VALUES (?, ?, 'running')",
            (pipeline, started_at or _now()),
        )
        return cursor.lastrowid

    def update_run_status(
        self,
        run_id: int,
        status: str,
        stats: Optional[Dict[str, Any]] = None,
        finished_at: Optional[str] = None,
    ) -> None:
        """Update run status and statistics."""
        if finished_at is None and status in ["success", "failed"]:
            finished_at = _now()

        stats_json = json.dumps(stats) if stats else None

        self._execute(
            f"update run {run_id}",
            """
            UPDATE crawl_runs
            SET status = ?, finished_at = ?, stats_json = ?
            WHERE id = ?
            """,
            (status, finished_at, stats_json, run_id),
        )

    def record_failure(
        self,
        run_id: Optional[int],
        pipeline: str,
        item_key: Any,
        stage: str,
        error: Any,
    ) -> None:
        """Record an item that was skipped."""
        self._execute(
            "record failure",
            """
            INSERT INTO crawl_failures (run_id, pipeline, item_key, stage, error, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (run_id, pipeline, str(item_key), stage, str(error), _now()),
        )

    def get_run(self, run_id: int) -> Optional[Run]:
        row = self._execute(
            f"read run {run_id}",
            "SELECT id, pipeline, started_at, finished_at, status, stats_json FROM crawl_runs WHERE id = ?",
            (run_id,),
        ).fetchone()
        return _to_run(row) if row else None

    def get_recent_runs(self, limit: int = 10) -> List[Run]:
        rows = self._execute(
            "read runs",
            """
            SELECT id, pipeline, started_at, finished_at, status, stats_json
            FROM crawl_runs
            ORDER BY id DESC
            LIMIT ?
            """,
            (limit,),
        ).fetchall()
        return [_to_run(row) for row in rows]

    def get_failures(self, run_id: int) -> List[Failure]:
        rows = self._execute(
            f"read failures of run {run_id}",
            """
            SELECT id, run_id, pipeline, item_key, stage, error, created_at
            FROM crawl_failures
            WHERE run_id = ?
            ORDER BY id
            """,
            (run_id,),
        ).fetchall()
        return [
            Failure(
                id=row[0],
                run_id=row[1],
                pipeline=row[2],
                item_key=row[3],
                stage=row[4],
                error=row[5],
                created_at=row[6],
            )
            for row in rows
        ]


def _to_run(row) -> Run:
    return Run(
        id=row[0],
        pipeline=row[1],
        started_at=row[2],
        finished_at=row[3],
        status=row[4],
        stats=json.loads(row[5]) if row[5] else None,
    )
