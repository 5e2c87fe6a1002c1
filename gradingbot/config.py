"""
Planning Configuration
Settings are read from environment variables (optionally from a .env file).

Environment Variables:
    - WORKDAY_START: Start of the working day, HH:MM (default: 09:00)
    - WORKDAY_END: End of the working day, HH:MM (default: 18:00)
    - TASK_BREAK_MINUTES: Break between two tasks (default: 5)
    - MINUTES_PER_CARD: Time per card for grading/certification/preparation (default: 3)
    - SCANNING_MINUTES_PER_ORDER: Fixed scanning time per order (default: 5)
    - DATA_DIR: Folder holding the Orders/Employees files (default: ./data)
    - OUTPUT_DIR: Folder for exported reports (default: ./outputs)
    - SCHEDULE_FILE: JSON file storing schedule entries (default: <DATA_DIR>/state/schedule.json)
"""

import os
from datetime import datetime, time
from dataclasses import dataclass, replace

from dotenv import load_dotenv

from gradingbot.algorithms.time_slots import WorkdayConfig

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))


def _parse_time(name: str, value: str) -> time:
    try:
        return datetime.strptime(value.strip(), '%H:%M').time()
    except ValueError:
        raise ValueError(f"{name} must be HH:MM, got {value!r}") from None


def _parse_int(name: str, value: str, minimum: int = 0) -> int:
    try:
        number = int(str(value).strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None
    if number < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {number}")
    return number


@dataclass
class PlanningConfig:
    """Planning parameters and file locations."""
    workday_start: time = time(9, 0)
    workday_end: time = time(18, 0)
    task_break_minutes: int = 5
    minutes_per_card: int = 3
    scanning_minutes_per_order: int = 5
    data_dir: str = os.path.join(REPO_ROOT, 'data')
    output_dir: str = os.path.join(REPO_ROOT, 'outputs')
    schedule_file: str = None

    def __post_init__(self):
        if self.schedule_file is None:
            self.schedule_file = os.path.join(self.data_dir, 'state', 'schedule.json')

    @property
    def workday(self) -> WorkdayConfig:
        return WorkdayConfig(
            workday_start=self.workday_start,
            workday_end=self.workday_end,
            break_minutes=self.task_break_minutes,
        )

    def with_data_dir(self, data_dir: str) -> 'PlanningConfig':
        """
        Copy of this config reading its inputs from another folder.

        A schedule file derived from the old data folder moves with it;
        an explicit SCHEDULE_FILE is kept.
        """
        derived = os.path.join(self.data_dir, 'state', 'schedule.json')
        schedule_file = None if self.schedule_file == derived else self.schedule_file
        return replace(self, data_dir=data_dir, schedule_file=schedule_file)

    @classmethod
    def from_env(cls, env: dict = None, dotenv_path: str = None) -> 'PlanningConfig':
        """
        Build a config from environment variables.

        Args:
            env: Mapping to read instead of os.environ (a .env file is not loaded then)
            dotenv_path: Explicit .env file (default: .env at the repository root)
        """
        if env is None:
            load_dotenv(dotenv_path or os.path.join(REPO_ROOT, '.env'))
            env = os.environ

        data_dir = env.get('DATA_DIR', os.path.join(REPO_ROOT, 'data'))
        config = cls(
            workday_start=_parse_time('WORKDAY_START', env.get('WORKDAY_START', '09:00')),
            workday_end=_parse_time('WORKDAY_END', env.get('WORKDAY_END', '18:00')),
            task_break_minutes=_parse_int('TASK_BREAK_MINUTES', env.get('TASK_BREAK_MINUTES', '5')),
            minutes_per_card=_parse_int('MINUTES_PER_CARD', env.get('MINUTES_PER_CARD', '3'), minimum=1),
            scanning_minutes_per_order=_parse_int(
                'SCANNING_MINUTES_PER_ORDER', env.get('SCANNING_MINUTES_PER_ORDER', '5'), minimum=1),
            data_dir=data_dir,
            output_dir=env.get('OUTPUT_DIR', os.path.join(REPO_ROOT, 'outputs')),
            schedule_file=env.get('SCHEDULE_FILE') or None,
        )
        if config.workday_end <= config.workday_start:
            raise ValueError(
                f"WORKDAY_END ({config.workday_end}) must be after WORKDAY_START ({config.workday_start})"
            )
        return config
