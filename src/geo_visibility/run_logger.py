"""Run logger for recording check cycle stages to JSON files."""

import dataclasses
import uuid
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from geo_visibility.data import CheckCycleResult, Usage


class StageRecord(BaseModel):
    """Record of a single check cycle stage."""

    stage: str
    component: str
    input: Any = None
    output: Any = None
    usage: dict[str, Any] | None = None
    timestamp: str = ""
    duration_seconds: float = 0.0


class RunRecord(BaseModel):
    """Record of a complete check cycle."""

    run_id: str
    mode: str
    request: dict[str, Any]
    started_at: str
    completed_at: str | None = None
    stages: list[StageRecord] = []
    cited_count: int = 0
    apis_called: int = 0
    visibility_percent: int = 0
    running_score: int | None = None
    persistence_errors: list[str] = []
    total_usage: dict[str, Any] | None = None


def _serialize(obj: Any) -> Any:
    """Serialize an object to JSON-compatible format.

    Handles dataclasses, Pydantic models, enums, dates, containers and
    primitives. Usage objects include their computed summaries.
    """
    if obj is None:
        return None
    if isinstance(obj, Usage):
        return {
            "api_calls": [_serialize(c) for c in obj.api_calls],
            "apis_called": obj.apis_called,
            "failed_calls": obj.failed_calls,
            "calls_by_platform": obj.calls_by_platform(),
            "trust_requests": obj.trust_requests,
        }
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: _serialize(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (list, tuple, set)):
        return [_serialize(item) for item in obj]
    if isinstance(obj, dict):
        return {str(k): _serialize(v) for k, v in obj.items()}
    if isinstance(obj, Path):
        return str(obj)
    if hasattr(obj, "isoformat"):
        return obj.isoformat()
    return obj


class RunLogger:
    """Accumulates check cycle stage records and writes a JSON file per run.

    Each cycle gets its own record, keyed by the run ID that ``start_run``
    returns, so concurrent cycles on one engine log independently. When
    ``enabled=False``, all methods are no-ops.

    Args:
        log_dir: Directory to write JSON log files.
        enabled: If False, all methods become no-ops.
    """

    def __init__(self, log_dir: Path, *, enabled: bool = True) -> None:
        self._log_dir = log_dir
        self._enabled = enabled
        self._records: dict[str, RunRecord] = {}
        self._last_log_path: Path | None = None

    @property
    def enabled(self) -> bool:
        """Whether logging is active."""
        return self._enabled

    @property
    def last_log_path(self) -> Path | None:
        """Path to the last written log file, or None."""
        return self._last_log_path

    def start_run(self, mode: str, request: Any) -> str | None:
        """Initialize a new run record.

        Args:
            mode: "sweep" for a full check, "recheck" for a single query.
            request: The check inputs (domain, plan, category, ...).

        Returns:
            The run ID to pass to ``log_stage`` and ``finish_run``, or None
            if logging is disabled.
        """
        if not self._enabled:
            return None

        run_id = str(uuid.uuid4())
        self._records[run_id] = RunRecord(
            run_id=run_id,
            mode=mode,
            request=_serialize(request),
            started_at=datetime.now(tz=UTC).isoformat(),
        )
        return run_id

    def log_stage(
        self,
        run_id: str | None,
        stage: str,
        component: str,
        input_data: Any,
        output_data: Any,
        usage: Usage | None,
        duration_seconds: float,
    ) -> None:
        """Append a stage record to a run.

        Args:
            run_id: ID returned by ``start_run``.
            stage: Stage name (e.g. "query_generation", "dispatch").
            component: Component class name.
            input_data: Stage input (will be serialized).
            output_data: Stage output (will be serialized).
            usage: Usage object for this stage (None for non-API stages).
            duration_seconds: Wall-clock time for this stage.
        """
        record = self._records.get(run_id) if run_id else None
        if not self._enabled or record is None:
            return

        record.stages.append(
            StageRecord(
                stage=stage,
                component=component,
                input=_serialize(input_data),
                output=_serialize(output_data),
                usage=_serialize(usage) if usage is not None else None,
                timestamp=datetime.now(tz=UTC).isoformat(),
                duration_seconds=round(duration_seconds, 4),
            )
        )

    def finish_run(self, run_id: str | None, result: CheckCycleResult) -> Path | None:
        """Write the run record to a JSON file and forget it.

        Args:
            run_id: ID returned by ``start_run``.
            result: The assembled check cycle result.

        Returns:
            Path to the written JSON file, or None if logging is disabled.
        """
        record = self._records.pop(run_id, None) if run_id else None
        if not self._enabled or record is None:
            return None

        record.completed_at = datetime.now(tz=UTC).isoformat()
        record.cited_count = result.cited_count
        record.apis_called = result.apis_called
        record.visibility_percent = result.visibility_percent
        record.running_score = result.running_score
        record.persistence_errors = list(result.persistence_errors)
        record.total_usage = _serialize(result.usage)

        self._log_dir.mkdir(parents=True, exist_ok=True)

        # run_2026-02-12T14-30-00_<id8>.json
        ts = record.started_at.replace(":", "-")
        ts = ts.split(".")[0].split("+")[0]
        filename = f"run_{ts}_{record.run_id[:8]}.json"
        filepath = self._log_dir / filename

        filepath.write_text(record.model_dump_json(indent=2))
        self._last_log_path = filepath
        return filepath

    def discard_run(self, run_id: str | None) -> None:
        """Drop a run record without writing it."""
        if run_id:
            self._records.pop(run_id, None)
