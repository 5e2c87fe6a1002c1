"""
Stage Assignment Engine
Greedy least-loaded assignment of one stage's orders to eligible employees.

Orders are taken in priority order (delay rank, then submission date) and each
one goes to the employee with the fewest assigned minutes so far. Start times
come from the TimeSlotPlanner and every planned task is handed to the schedule
sink as a ScheduleEntry.
"""

import traceback
import uuid
from datetime import date
from typing import Dict, List, Any, Optional, Callable
from dataclasses import dataclass, field

from gradingbot.algorithms.models import Stage, WorkItem, ScheduleEntry
from gradingbot.algorithms.priority import normalize_delay_code, priority_sort_key
from gradingbot.algorithms.time_slots import TimeSlotPlanner
from gradingbot.algorithms.workload import WorkloadState


class PlanningError(Exception):
    """Base error for planning failures."""


class StageConfigurationError(PlanningError):
    """A stage has pending work but nobody eligible to do it."""

    def __init__(self, stage: Stage, pending_count: int):
        self.stage = stage
        self.pending_count = pending_count
        super().__init__(
            f"No {stage.role} employees found but there are "
            f"{pending_count} orders {stage.label.lower()}"
        )


# =============================================================================
# DURATION STRATEGIES
# =============================================================================

@dataclass(frozen=True)
class PerCardDuration:
    """Duration proportional to the card count."""
    minutes_per_card: int = 3

    def is_skippable(self, item: WorkItem) -> bool:
        return not item.card_count or item.card_count <= 0

    def duration_for(self, item: WorkItem) -> int:
        return item.card_count * self.minutes_per_card


@dataclass(frozen=True)
class FixedDuration:
    """Same duration for every order, whatever its card count (scanning)."""
    minutes: int = 5

    def is_skippable(self, item: WorkItem) -> bool:
        return False

    def duration_for(self, item: WorkItem) -> int:
        return self.minutes


def duration_strategy_for(stage: Stage, minutes_per_card: int = 3,
                          scanning_minutes: int = 5):
    """Pick the duration rule for a stage."""
    if stage == Stage.SCANNING:
        return FixedDuration(minutes=scanning_minutes)
    return PerCardDuration(minutes_per_card=minutes_per_card)


# =============================================================================
# STAGE RESULT
# =============================================================================

@dataclass
class StageResult:
    """Outcome of one stage pass."""
    stage: Stage
    status: str = 'completed'  # completed, config_error, error, interrupted, not_run
    message: str = ''
    entries: List[ScheduleEntry] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)  # Zero/missing card count
    failed: List[str] = field(default_factory=list)  # Sink refused the entry
    unassignable: List[str] = field(default_factory=list)  # No employee to take it
    workloads: Dict[str, WorkloadState] = field(default_factory=dict)
    pending_count: int = 0

    @property
    def planned(self) -> int:
        return len(self.entries)

    @property
    def ok(self) -> bool:
        return self.status == 'completed'

    def get_statistics(self) -> Dict[str, Any]:
        """Totals across the entries planned for this stage."""
        return {
            'stage': self.stage.key,
            'assignment_count': self.planned,
            'total_cards': sum(e.card_count for e in self.entries),
            'total_minutes': sum(e.duration_minutes for e in self.entries),
            'employees_assigned': len({e.employee_id for e in self.entries}),
        }

    def get_workload_summaries(self) -> List[Dict[str, Any]]:
        return [state.get_summary() for state in self.workloads.values()]

    def get_summary(self) -> Dict[str, Any]:
        summary = {
            'stage': self.stage.key,
            'status': self.status,
            'message': self.message,
            'pending': self.pending_count,
            'planned': self.planned,
            'skipped': len(self.skipped),
            'failed': len(self.failed),
            'unassignable': len(self.unassignable),
            'skipped_items': list(self.skipped),
            'failed_items': list(self.failed),
            'unassignable_items': list(self.unassignable),
        }
        summary.update(self.get_statistics())
        return summary


# =============================================================================
# ENGINE
# =============================================================================

class StageAssignmentEngine:
    """
    Assigns the work items of one stage.

    The pass is strictly sequential: each choice depends on the workload
    updated by the previous assignment.
    """

    def __init__(self, stage: Stage, sink, planner: TimeSlotPlanner = None,
                 duration_strategy=None):
        """
        Args:
            stage: Stage being planned
            sink: Object with create_entry(entry) -> bool
            planner: Start time calculator (default working hours if None)
            duration_strategy: Duration rule; defaults to the stage's rule
        """
        self.stage = stage
        self.sink = sink
        self.planner = planner or TimeSlotPlanner()
        self.duration_strategy = duration_strategy or duration_strategy_for(stage)

    def _sort_items(self, items: List[WorkItem]) -> List[WorkItem]:
        return sorted(items, key=priority_sort_key)

    def _select_employee(self, workloads: Dict[str, WorkloadState]) -> Optional[WorkloadState]:
        """Least-loaded employee; the first one in pool order wins ties."""
        selected = None
        for state in workloads.values():
            if selected is None or state.total_minutes < selected.total_minutes:
                selected = state
        return selected

    def _build_entry(self, item: WorkItem, state: WorkloadState,
                     duration: int) -> ScheduleEntry:
        start = self.planner.next_start_time(state, duration)
        end = self.planner.end_time(start, duration)
        return ScheduleEntry(
            entry_id=uuid.uuid4().hex,
            item_id=item.item_id,
            order_number=item.order_number,
            employee_id=state.employee_id,
            employee_name=state.employee_name,
            planning_date=start.date(),
            start_time=start,
            end_time=end,
            duration_minutes=duration,
            stage=self.stage,
            delay_code=normalize_delay_code(item.delay_code),
            card_count=item.card_count or 0,
        )

    def _assign_items(self, items: List[WorkItem], workloads: Dict[str, WorkloadState],
                      result: 'StageResult', should_stop: Callable[[], bool] = None):
        for item in self._sort_items(items):
            if should_stop is not None and should_stop():
                result.status = 'interrupted'
                print(f"   [{self.stage.key}] [WARN] Stopped after {result.planned} orders")
                return

            if self.duration_strategy.is_skippable(item):
                result.skipped.append(item.item_id)
                continue

            duration = self.duration_strategy.duration_for(item)

            state = self._select_employee(workloads)
            if state is None:
                # Guard only: assign() rejects an empty pool before the loop
                result.unassignable.append(item.item_id)
                continue

            entry = self._build_entry(item, state, duration)

            if not self.sink.create_entry(entry):
                result.failed.append(item.item_id)
                continue

            state.record_assignment(duration, entry.start_time, entry.end_time)
            result.entries.append(entry)

    def assign(self, items: List[WorkItem], workloads: Dict[str, WorkloadState],
               planning_date: date,
               should_stop: Callable[[], bool] = None) -> StageResult:
        """
        Plan every item of the stage queue.

        Args:
            items: Pending work items of this stage (any order)
            workloads: Employee id -> WorkloadState for the eligible pool
            planning_date: Date the run plans for
            should_stop: Optional callable checked between items

        Returns:
            StageResult with the planned entries and the skipped/failed items.
            An unexpected error during the pass gives status 'error' and keeps
            the entries written before it.

        Raises:
            StageConfigurationError: items are pending but the pool is empty
        """
        result = StageResult(stage=self.stage, workloads=workloads, pending_count=len(items))

        if not items:
            result.message = f"No orders {self.stage.label.lower()}"
            print(f"   [{self.stage.key}] No orders to plan")
            return result

        if not workloads:
            raise StageConfigurationError(self.stage, len(items))

        print(f"   [{self.stage.key}] Planning {len(items)} orders for "
              f"{len(workloads)} employees from {planning_date}")

        try:
            self._assign_items(items, workloads, result, should_stop)
        except Exception as e:
            # Entries written before the failure stay in the result
            traceback.print_exc()
            result.status = 'error'
            result.message = (f"Error planning {self.stage.key} after "
                              f"{result.planned} of {len(items)} orders: {e}")
            print(f"   [{self.stage.key}] [ERROR] {result.message}")
            return result

        if result.skipped:
            print(f"   [{self.stage.key}] [WARN] Skipped {len(result.skipped)} orders with no cards")
        if result.failed:
            print(f"   [{self.stage.key}] [!!] {len(result.failed)} orders could not be saved")

        if result.status == 'interrupted':
            result.message = (f"Planning of {self.stage.key} stopped early: "
                              f"{result.planned} of {len(items)} orders planned")
        else:
            result.message = f"Planned {result.planned} of {len(items)} orders"
        print(f"   [{self.stage.key}] [OK] {result.message}")
        return result
