"""
Data Validators
Checks the orders and the roster before a planning run.

Each issue keeps the stage it concerns (if any) and the order or employee
ids involved, so the printed report can be read stage by stage.
"""

from typing import Dict, List, Any, Optional, Iterable

from gradingbot.algorithms.models import Stage, WorkItem, EmployeeProfile
from gradingbot.algorithms.priority import is_valid_delay_code, DEFAULT_DELAY_CODE

MAX_IDS_SHOWN = 8


class ValidationReport:
    """Errors block the run; warnings and info are printed only."""

    LEVELS = [('error', '[ERROR] ERRORS'), ('warning', '[WARN] WARNINGS'), ('info', '[INFO] INFO')]

    def __init__(self):
        self.issues: List[Dict[str, Any]] = []

    def _add(self, level: str, message: str, stage: Optional[Stage], ids: Optional[Iterable[str]]):
        self.issues.append({
            'level': level,
            'message': message,
            'stage': stage,
            'ids': list(ids or []),
        })

    def add_error(self, message: str, stage: Stage = None, ids: Iterable[str] = None):
        self._add('error', message, stage, ids)

    def add_warning(self, message: str, stage: Stage = None, ids: Iterable[str] = None):
        self._add('warning', message, stage, ids)

    def add_info(self, message: str, stage: Stage = None, ids: Iterable[str] = None):
        self._add('info', message, stage, ids)

    def _messages(self, level: str) -> List[str]:
        return [issue['message'] for issue in self.issues if issue['level'] == level]

    @property
    def errors(self) -> List[str]:
        return self._messages('error')

    @property
    def warnings(self) -> List[str]:
        return self._messages('warning')

    @property
    def info(self) -> List[str]:
        return self._messages('info')

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def issues_for_stage(self, stage: Optional[Stage]) -> List[Dict[str, Any]]:
        return [issue for issue in self.issues if issue['stage'] == stage]

    def get_summary(self) -> Dict[str, Any]:
        """Issue counts per level, and per stage for stage-specific issues."""
        by_stage = {}
        for stage in Stage:
            issues = self.issues_for_stage(stage)
            if issues:
                by_stage[stage.key] = len(issues)
        return {
            'valid': self.is_valid,
            'errors': len(self.errors),
            'warnings': len(self.warnings),
            'info': len(self.info),
            'by_stage': by_stage,
        }

    @staticmethod
    def _format_ids(ids: List[str]) -> str:
        shown = ', '.join(ids[:MAX_IDS_SHOWN])
        if len(ids) > MAX_IDS_SHOWN:
            shown += f" (+{len(ids) - MAX_IDS_SHOWN} more)"
        return shown

    def print_report(self):
        """Print the report, general issues first, then one block per stage."""
        print("\n" + "=" * 70)
        print("VALIDATION REPORT")
        print("=" * 70)
        print("\n[OK] VALIDATION PASSED" if self.is_valid else "\n[FAIL] VALIDATION FAILED")

        for level, title in self.LEVELS:
            issues = [issue for issue in self.issues if issue['level'] == level]
            if not issues:
                continue
            print(f"\n{title} ({len(issues)}):")
            for stage in [None] + list(Stage):
                grouped = [issue for issue in issues if issue['stage'] == stage]
                if not grouped:
                    continue
                if stage is not None:
                    print(f"   {stage.key.upper()}:")
                for issue in grouped:
                    print(f"   - {issue['message']}")
                    if issue['ids']:
                        print(f"       ids: {self._format_ids(issue['ids'])}")


def validate_planning_data(items: List[WorkItem],
                           employees: List[EmployeeProfile]) -> ValidationReport:
    """
    Validate orders and employees before planning.

    Returns:
        ValidationReport with all validation results
    """
    report = ValidationReport()

    _validate_items(items, report)
    _validate_employees(employees, report)
    _cross_validate(items, employees, report)

    return report


def _duplicates(ids: List[str]) -> List[str]:
    seen = set()
    repeated = []
    for value in ids:
        if value in seen and value not in repeated:
            repeated.append(value)
        seen.add(value)
    return repeated


def _validate_items(items: List[WorkItem], report: ValidationReport):
    if not items:
        report.add_warning("No pending orders to plan")
        return

    report.add_info(f"Found {len(items)} pending orders")

    duplicates = _duplicates([i.item_id for i in items])
    if duplicates:
        report.add_error(f"Found {len(duplicates)} duplicate order IDs", ids=duplicates)

    for stage in Stage:
        stage_items = [i for i in items if i.stage == stage]
        if not stage_items:
            continue

        negative = [i.item_id for i in stage_items if i.card_count is not None and i.card_count < 0]
        if negative:
            report.add_error(f"{len(negative)} orders have a negative card count",
                             stage=stage, ids=negative)

        # Scanning time does not depend on the card count
        if stage != Stage.SCANNING:
            no_cards = [i.item_id for i in stage_items if not i.card_count]
            if no_cards:
                report.add_warning(f"{len(no_cards)} orders have no cards and will be skipped",
                                   stage=stage, ids=no_cards)

        bad_delay = [i.item_id for i in stage_items
                     if i.delay_code is not None and not is_valid_delay_code(i.delay_code)]
        if bad_delay:
            report.add_warning(
                f"{len(bad_delay)} orders have an unknown delay code and will be planned "
                f"as '{DEFAULT_DELAY_CODE}'",
                stage=stage, ids=bad_delay,
            )

        undated = [i.item_id for i in stage_items if i.submitted_at is None]
        if undated:
            report.add_info(f"{len(undated)} orders have no date and are planned last in their tier",
                            stage=stage, ids=undated)


def _validate_employees(employees: List[EmployeeProfile], report: ValidationReport):
    if not employees:
        report.add_error("No employees found")
        return

    active = [e for e in employees if e.active]
    report.add_info(f"Found {len(employees)} employees ({len(active)} active)")

    duplicates = _duplicates([e.employee_id for e in employees])
    if duplicates:
        report.add_warning(
            f"{len(duplicates)} employee IDs appear more than once; only the first row is planned",
            ids=duplicates,
        )

    bad_hours = [e.employee_id for e in active if e.work_hours_per_day <= 0]
    if bad_hours:
        report.add_error(f"{len(bad_hours)} employees have no working hours", ids=bad_hours)

    no_role = [e.employee_id for e in active
               if not any(e.has_role(stage.role) for stage in Stage)]
    if no_role:
        report.add_warning(f"{len(no_role)} active employees have no planning role", ids=no_role)


def _cross_validate(items: List[WorkItem], employees: List[EmployeeProfile],
                    report: ValidationReport):
    """Stages with work but nobody to do it."""
    for stage in Stage:
        pending = sum(1 for i in items if i.stage == stage)
        staffed = sum(1 for e in employees if e.active and e.has_role(stage.role))
        if pending and not staffed:
            report.add_warning(
                f"{pending} orders {stage.label.lower()} but no active {stage.role}; "
                f"the {stage.key} stage will not be planned",
                stage=stage,
            )
