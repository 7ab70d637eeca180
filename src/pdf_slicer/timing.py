"""
Module: timing

Purpose:
    Timing instrumentation for the slicing pipeline, recording how long
    each run phase and each slice export takes.

Key Classes:
    - TimingLog: Collects run-level and request-level timings

Key Functions:
    - timed_phase: Context manager for timing code blocks

Dependencies:
    - time (std)
    - contextlib (std)
    - dataclasses (std)

Used By:
    - pipeline: run_slicer()
    - slicing.exporter: Per-request export timing
    - cli: --timings output
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class TimingLog:
    """
    Timing metrics for a slicing run.

    Attributes:
        run_timings: Dict of phase_name -> duration_seconds
        request_timings: Dict of description -> {phase_name -> duration_seconds}

    Example:
        >>> log = TimingLog()
        >>> log.log_run("read_requests", 0.004)
        >>> log.log_request("ch1", "export", 0.12)
        >>> print(log.summary())
    """
    run_timings: Dict[str, float] = field(default_factory=dict)
    request_timings: Dict[str, Dict[str, float]] = field(default_factory=dict)

    def log_run(self, phase: str, duration: float) -> None:
        """Log a run-level timing metric."""
        self.run_timings[phase] = duration

    def log_request(self, description: str, phase: str, duration: float) -> None:
        """
        Log a request-level timing metric.

        Repeated phases for one description add up, so requests sharing a
        description report their combined time.
        """
        phases = self.request_timings.setdefault(description, {})
        phases[phase] = phases.get(phase, 0.0) + duration

    def get_slowest_requests(self, n: int = 3) -> List[tuple]:
        """Get the N slowest requests as (description, total_seconds)."""
        totals = [
            (description, sum(phases.values()))
            for description, phases in self.request_timings.items()
        ]
        totals.sort(key=lambda x: x[1], reverse=True)
        return totals[:n]

    def summary(self) -> str:
        """Generate human-readable timing summary."""
        lines = ["", "=== Slicing Timing Summary ==="]

        if self.run_timings:
            lines.append("Run phases:")
            for phase, duration in self.run_timings.items():
                lines.append(f"  {phase:25s} {duration:.3f}s")

        slowest = self.get_slowest_requests(3)
        if slowest:
            lines.append("")
            lines.append("Slowest slices:")
            for description, total in slowest:
                lines.append(f"  {description}: {total:.3f}s")

        lines.append("")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Export timing data as dictionary."""
        return {
            "run_timings": self.run_timings,
            "request_timings": self.request_timings,
            "slowest_requests": [
                {"description": description, "total": total}
                for description, total in self.get_slowest_requests(5)
            ],
        }

    def save(self, path: Path) -> None:
        """Save timing data to a JSON file, overwriting it."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.debug(f"Saved timing data to {path}")


@contextmanager
def timed_phase(
    log: Optional[TimingLog],
    phase: str,
    request: Optional[str] = None,
) -> Generator[None, None, None]:
    """
    Context manager for timing a code phase.

    Does nothing when log is None.

    Args:
        log: TimingLog instance to record metrics
        phase: Name of the phase being timed
        request: If provided, records as a request-level metric;
                 otherwise records as a run-level metric

    Example:
        >>> log = TimingLog()
        >>> with timed_phase(log, "load_source"):
        ...     source = load_source(path)
        >>> with timed_phase(log, "export", request="ch1"):
        ...     export_slice(source, request, out_dir)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        if log is not None:
            elapsed = time.perf_counter() - start
            if request is not None:
                log.log_request(request, phase, elapsed)
            else:
                log.log_run(phase, elapsed)
