"""
Planning Orchestrator
Runs the stage assignment engine for every pipeline stage and builds the run report.
"""

import traceback
from datetime import date, datetime
from typing import Dict, List, Any, Callable
from dataclasses import dataclass, field

from gradingbot.algorithms.models import Stage, PLANNING_STAGE_ORDER
from gradingbot.algorithms.stage_scheduler import (
    StageAssignmentEngine,
    StageConfigurationError,
    StageResult,
    duration_strategy_for,
)
from gradingbot.algorithms.time_slots import TimeSlotPlanner, WorkdayConfig
from gradingbot.algorithms.workload import build_workloads


@dataclass
class PlanningReport:
    """Result of a planning run across all stages."""
    planning_date: date
    success: bool = True
    message: str = ''
    stage_results: Dict[Stage, StageResult] = field(default_factory=dict)
    cleaned_entries: int = 0

    @property
    def planned_by_stage(self) -> Dict[str, int]:
        return {stage.key: result.planned for stage, result in self.stage_results.items()}

    @property
    def total_planned(self) -> int:
        return sum(result.planned for result in self.stage_results.values())

    @property
    def entries(self) -> List:
        entries = []
        for result in self.stage_results.values():
            entries.extend(result.entries)
        return entries

    def workloads_by_stage(self) -> Dict[str, List[Dict[str, Any]]]:
        return {stage.key: result.get_workload_summaries()
                for stage, result in self.stage_results.items()}

    def get_summary(self) -> Dict[str, Any]:
        """JSON-friendly run report."""
        return {
            'success': self.success,
            'message': self.message,
            'planning_date': self.planning_date.isoformat(),
            'cleaned_entries': self.cleaned_entries,
            'planned_by_stage': self.planned_by_stage,
            'total_planned': self.total_planned,
            'stages': {stage.key: result.get_summary()
                       for stage, result in self.stage_results.items()},
            'workloads': self.workloads_by_stage(),
        }

    def print_summary(self):
        """Print formatted run summary."""
        print(f"\n{'='*70}")
        print("PLANNING SUMMARY")
        print(f"{'='*70}")
        print(f"\n{'[OK]' if self.success else '[FAIL]'} {self.message}")
        print(f"   Planning date: {self.planning_date}")
        print(f"   Total planned: {self.total_planned}")

        for stage, result in self.stage_results.items():
            print(f"\n{stage.key.upper()} ({result.status}):")
            print(f"   Planned: {result.planned} / {result.pending_count}")
            if result.skipped:
                print(f"   Skipped (no cards): {len(result.skipped)}")
            if result.failed:
                print(f"   Failed to save: {len(result.failed)}")
            if result.unassignable:
                print(f"   Unassignable: {len(result.unassignable)}")
            if not result.ok and result.message:
                print(f"   [!!] {result.message}")
            for summary in result.get_workload_summaries():
                flag = ' [FULL]' if summary['saturated'] else ''
                print(f"   - {summary['employee_name']}: {summary['total_minutes']} min "
                      f"({summary['total_hours']} h, {summary['utilization_pct']:.1f}%){flag}")


class PlanningOrchestrator:
    """
    Plans grading, certification, preparation and scanning, in that order.

    Each stage gets its own workload pool, so an employee serving two stages
    is balanced within each stage but not across them.
    """

    def __init__(self, source, sink, workday: WorkdayConfig = None,
                 minutes_per_card: int = 3, scanning_minutes: int = 5,
                 stages: List[Stage] = None):
        """
        Args:
            source: Provides list_pending_work_items(stage) and list_eligible_employees(stage)
            sink: Provides clear_entries_for_date(date) and create_entry(entry)
            workday: Working hours and break between tasks
            minutes_per_card: Duration per card for card-based stages
            scanning_minutes: Fixed duration per order for scanning
            stages: Stage sequence (defaults to the standard pipeline order)
        """
        self.source = source
        self.sink = sink
        self.planner = TimeSlotPlanner(workday or WorkdayConfig())
        self.minutes_per_card = minutes_per_card
        self.scanning_minutes = scanning_minutes
        self.stages = stages or list(PLANNING_STAGE_ORDER)

    @classmethod
    def from_config(cls, source, sink, config) -> 'PlanningOrchestrator':
        """Build an orchestrator from a PlanningConfig."""
        return cls(
            source,
            sink,
            workday=config.workday,
            minutes_per_card=config.minutes_per_card,
            scanning_minutes=config.scanning_minutes_per_order,
        )

    def _engine_for(self, stage: Stage) -> StageAssignmentEngine:
        strategy = duration_strategy_for(stage, self.minutes_per_card, self.scanning_minutes)
        return StageAssignmentEngine(stage, self.sink, self.planner, strategy)

    def _run_stage(self, stage: Stage, planning_date: date,
                   should_stop: Callable[[], bool] = None) -> StageResult:
        items = self.source.list_pending_work_items(stage)
        employees = self.source.list_eligible_employees(stage)
        print(f"\n[Planner] {stage.key}: {len(items)} orders, {len(employees)} {stage.role}s")

        workloads = build_workloads(employees, planning_date)
        engine = self._engine_for(stage)
        try:
            return engine.assign(items, workloads, planning_date, should_stop=should_stop)
        except StageConfigurationError as e:
            print(f"   [{stage.key}] [ERROR] {e}")
            return StageResult(stage=stage, status='config_error', message=str(e),
                               workloads=workloads, pending_count=len(items))

    def run(self, planning_date, clean_first: bool = False,
            should_stop: Callable[[], bool] = None) -> PlanningReport:
        """
        Run a planning pass for every stage.

        Args:
            planning_date: Date the first tasks are placed on
            clean_first: Remove existing entries for that date before planning
            should_stop: Optional callable; when it returns True the run stops
                         between two orders

        Returns:
            PlanningReport (never raises)
        """
        if isinstance(planning_date, datetime):
            planning_date = planning_date.date()

        report = PlanningReport(planning_date=planning_date)

        print(f"\n{'='*70}")
        print(f"PLANNING RUN: {planning_date}")
        print(f"{'='*70}")

        if clean_first:
            try:
                report.cleaned_entries = self.sink.clear_entries_for_date(planning_date)
                print(f"[Planner] Cleaned {report.cleaned_entries} existing entries for {planning_date}")
            except Exception as e:
                traceback.print_exc()
                report.success = False
                report.message = f"Error cleaning existing planning for {planning_date}: {e}"
                return report

        failed_stages = []
        for index, stage in enumerate(self.stages):
            try:
                result = self._run_stage(stage, planning_date, should_stop)
            except Exception as e:
                traceback.print_exc()
                result = StageResult(stage=stage, status='error',
                                     message=f"Error planning {stage.key}: {e}")

            report.stage_results[stage] = result
            if result.status in ('error', 'interrupted'):
                self._stop_run(report, index, result)
                return report
            if not result.ok:
                failed_stages.append(result)

        counts = ' + '.join(f"{result.planned} {stage.key}"
                            for stage, result in report.stage_results.items())
        if failed_stages:
            report.success = False
            problems = '; '.join(result.message for result in failed_stages)
            report.message = f"Planning completed with errors: {counts} tasks ({problems})"
        else:
            report.message = f"Planning completed: {counts} tasks"

        print(f"\n[Planner] {report.message}")
        return report

    def _stop_run(self, report: PlanningReport, index: int, result: StageResult):
        """End the run at stage `index`; later stages are reported as not run."""
        stage = result.stage
        if result.status == 'error':
            reason = f"Not run after {stage.key} failed"
            report.message = (f"Error during {stage.key} planning: {result.message} "
                              f"({report.total_planned} tasks planned)")
        else:
            reason = 'Run stopped'
            report.message = f"Planning stopped during {stage.key}: {report.total_planned} tasks planned"
        for remaining in self.stages[index + 1:]:
            report.stage_results[remaining] = StageResult(stage=remaining, status='not_run',
                                                          message=reason)
        report.success = False
        print(f"\n[Planner] [!!] {report.message}")
