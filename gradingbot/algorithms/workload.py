"""
Workload Tracking
Per-employee running totals used for least-loaded assignment.
"""

from datetime import date, datetime
from typing import Dict, List, Any, Optional
from dataclasses import dataclass

from gradingbot.algorithms.models import EmployeeProfile


@dataclass
class WorkloadState:
    """
    Running workload of one employee during one stage pass.

    Tracks:
    - total_minutes: minutes assigned so far (the load-balancing key)
    - last_end_time: end of the most recently assigned task
    - current_date: day the employee is currently being filled
    """
    employee: EmployeeProfile
    current_date: date
    total_minutes: int = 0
    last_end_time: Optional[datetime] = None
    assignment_count: int = 0

    @property
    def employee_id(self) -> str:
        return self.employee.employee_id

    @property
    def employee_name(self) -> str:
        return self.employee.name

    @property
    def total_hours(self) -> float:
        return round(self.total_minutes / 60.0, 1)

    def record_assignment(self, duration_minutes: int, start: datetime, end: datetime):
        """Book a task for this employee."""
        self.total_minutes += duration_minutes
        self.last_end_time = end
        self.assignment_count += 1
        if start.date() > self.current_date:
            self.current_date = start.date()

    def workload_percentage(self) -> float:
        """
        Assigned minutes as a percentage of one day's capacity.

        Informational only: assignment never stops at 100%.
        """
        capacity = self.employee.daily_capacity_minutes
        if capacity <= 0:
            return 0.0
        return self.total_minutes / capacity * 100

    @property
    def is_saturated(self) -> bool:
        return self.workload_percentage() > 100

    def get_summary(self) -> Dict[str, Any]:
        """Workload summary for the run report."""
        utilization = round(self.workload_percentage(), 1)
        return {
            'employee_id': self.employee_id,
            'employee_name': self.employee_name,
            'total_minutes': self.total_minutes,
            'total_hours': self.total_hours,
            'assignment_count': self.assignment_count,
            'utilization_pct': utilization,
            'saturated': self.is_saturated,
            'status': 'FULL' if self.is_saturated else 'AVAILABLE',
            'next_available': self.last_end_time.isoformat() if self.last_end_time else None,
        }


def build_workloads(employees: List[EmployeeProfile],
                    planning_date: date) -> Dict[str, WorkloadState]:
    """Create a fresh workload state per employee, keeping the employee order."""
    workloads = {}
    for employee in employees:
        if employee.employee_id in workloads:
            continue
        workloads[employee.employee_id] = WorkloadState(employee=employee, current_date=planning_date)
    return workloads
