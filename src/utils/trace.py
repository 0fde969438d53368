"""Tracing module: logs KenKen solver steps and writes them to CSV."""

import csv
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class TraceStep:
    """A single step in the solving process."""

    timestamp: float
    step_number: int
    action_type: str  # 'assign', 'backtrack', 'forward_check', 'propagation_pass', etc.
    cell: Optional[str] = None
    value: Optional[int] = None
    domain_size: Optional[int] = None
    depth: Optional[int] = None  # Number of cells assigned
    is_valid: Optional[bool] = None
    reason: Optional[str] = None


class Tracer:
    """Records solver steps for logging and analysis."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.steps: List[TraceStep] = []
        self.start_time = datetime.now().timestamp()
        self.step_counter = 0

    def _get_timestamp(self) -> float:
        """Get elapsed time in seconds since tracer creation."""
        return datetime.now().timestamp() - self.start_time

    def _record(self, action_type: str, **fields: Any) -> None:
        if not self.enabled:
            return
        self.step_counter += 1
        self.steps.append(TraceStep(
            timestamp=self._get_timestamp(),
            step_number=self.step_counter,
            action_type=action_type,
            **fields,
        ))

    def log_assign(self, cell: Any, value: int, domain_size: int, depth: int, is_valid: bool = True):
        """Log an assignment attempt, accepted or rejected."""
        self._record(
            'assign',
            cell=str(cell),
            value=value,
            domain_size=domain_size,
            depth=depth,
            is_valid=is_valid,
        )

    def log_backtrack(self, cell: Any, reason: str = "No valid values"):
        """Log a backtrack event."""
        self._record('backtrack', cell=str(cell), reason=reason)

    def log_domain_reduction(self, cell: Any, new_domain_size: int, reason: str = ""):
        """Log domain reduction for a cell."""
        self._record('domain_reduced', cell=str(cell), domain_size=new_domain_size, reason=reason)

    def log_propagation_pass(self, pass_number: int, values_removed: int):
        """Log one full propagation pass."""
        self._record(
            'propagation_pass',
            reason=f"Pass {pass_number} removed {values_removed} candidates",
        )

    def log_forward_check(self, cell: Any, domains_pruned: int, is_valid: bool = True):
        """Log forward checking."""
        self._record(
            'forward_check',
            cell=str(cell),
            is_valid=is_valid,
            reason=f"Pruned {domains_pruned} values from other domains",
        )

    def log_solution_found(self, depth: int):
        """Log when a solution is found."""
        self._record('solution_found', depth=depth)

    def log_unsatisfiable(self, reason: str):
        """Log when the puzzle is proven to have no solution."""
        self._record('unsatisfiable', reason=reason)

    def to_csv(self, filepath: Path) -> None:
        """Write trace to CSV file."""
        if not self.steps:
            print("No trace steps to write")
            return

        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        fieldnames = [
            'timestamp', 'step_number', 'action_type', 'cell', 'value',
            'domain_size', 'depth', 'is_valid', 'reason'
        ]

        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            for step in self.steps:
                writer.writerow(asdict(step))

        print(f"Trace written to {filepath} ({len(self.steps)} steps)")

    def summary(self) -> Dict[str, Any]:
        """Get a summary of the trace."""
        action_counts: Dict[str, int] = {}
        for step in self.steps:
            action_counts[step.action_type] = action_counts.get(step.action_type, 0) + 1

        return {
            'total_steps': len(self.steps),
            'elapsed_time_seconds': self._get_timestamp(),
            'action_counts': action_counts,
            'num_assignments': action_counts.get('assign', 0),
            'num_backtracks': action_counts.get('backtrack', 0),
            'num_propagation_passes': action_counts.get('propagation_pass', 0),
        }


# Global tracer instance
_global_tracer: Optional[Tracer] = None


def get_tracer() -> Tracer:
    """Get or create the global tracer."""
    global _global_tracer
    if _global_tracer is None:
        _global_tracer = Tracer(enabled=True)
    return _global_tracer


def reset_tracer() -> None:
    """Reset the global tracer."""
    global _global_tracer
    _global_tracer = None


def enable_tracing(enabled: bool = True) -> None:
    """Enable or disable tracing."""
    get_tracer().enabled = enabled
