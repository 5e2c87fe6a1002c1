"""
Time Slot Planning
Decides when an employee's next task starts within the working day.
"""

from datetime import date, datetime, time, timedelta
from dataclasses import dataclass

from gradingbot.algorithms.workload import WorkloadState


@dataclass
class WorkdayConfig:
    """
    Working hours configuration.

    Every calendar day is a working day; weekends and holidays are not modelled.
    """
    workday_start: time = time(9, 0)
    workday_end: time = time(18, 0)
    break_minutes: int = 5  # Gap between two consecutive tasks

    def __post_init__(self):
        if self.workday_end <= self.workday_start:
            raise ValueError(
                f"Workday end {self.workday_end} must be after start {self.workday_start}"
            )
        if self.break_minutes < 0:
            raise ValueError(f"Break minutes must be >= 0, got {self.break_minutes}")

    @property
    def workday_minutes(self) -> int:
        start = datetime.combine(date.min, self.workday_start)
        end = datetime.combine(date.min, self.workday_end)
        return int((end - start).total_seconds() // 60)


class TimeSlotPlanner:
    """Computes start times for tasks appended to an employee's schedule."""

    def __init__(self, config: WorkdayConfig = None):
        self.config = config or WorkdayConfig()

    def day_start(self, day: date) -> datetime:
        return datetime.combine(day, self.config.workday_start)

    def day_end(self, day: date) -> datetime:
        return datetime.combine(day, self.config.workday_end)

    @staticmethod
    def end_time(start: datetime, duration_minutes: int) -> datetime:
        return start + timedelta(minutes=duration_minutes)

    def fits_in_day(self, start: datetime, end: datetime) -> bool:
        """True if the task starts and ends on the same day, by workday end."""
        if start.date() != end.date():
            return False
        limit = self.day_end(start.date())
        return start <= limit and end <= limit

    def next_start_time(self, state: WorkloadState, duration_minutes: int) -> datetime:
        """
        Start time for the employee's next task.

        - First task of the run: the current day at workday start.
        - Otherwise: previous end plus the break, if the whole task fits
          before workday end on that day.
        - Otherwise: the next calendar day at workday start. Tasks are never
          split, and a task longer than a workday overflows past workday end.
        """
        if state.last_end_time is None:
            return self.day_start(state.current_date)

        candidate_start = state.last_end_time + timedelta(minutes=self.config.break_minutes)
        candidate_end = self.end_time(candidate_start, duration_minutes)

        if self.fits_in_day(candidate_start, candidate_end):
            return candidate_start

        return self.day_start(candidate_start.date() + timedelta(days=1))
