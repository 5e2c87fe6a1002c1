"""
Planning Models
Work items, employees and schedule entries shared by the planning algorithms.
"""

from datetime import date, datetime, timedelta
from typing import Dict, Any, Optional, Set
from dataclasses import dataclass, field
from enum import Enum


class Stage(Enum):
    """
    Pipeline stage an order is waiting in.

    Values are the order status codes of the order workflow:
    - GRADING (2): to be graded
    - CERTIFICATION (3): to be encapsulated/certified
    - PREPARATION (4): to be prepared
    - SCANNING (10): to be scanned
    """
    GRADING = 2
    CERTIFICATION = 3
    PREPARATION = 4
    SCANNING = 10

    @property
    def status_code(self) -> int:
        return self.value

    @property
    def role(self) -> str:
        """Employee role that works this stage."""
        return STAGE_ROLES[self]

    @property
    def label(self) -> str:
        return STAGE_LABELS[self]

    @property
    def key(self) -> str:
        """Lowercase name used in reports (e.g. 'grading')."""
        return self.name.lower()

    @classmethod
    def parse(cls, value) -> Optional['Stage']:
        """
        Resolve a stage from a status code, stage name or role name.

        Returns None for values that are not a planning stage.
        """
        if value is None:
            return None
        if isinstance(value, Stage):
            return value
        if isinstance(value, (int, float)):
            try:
                return cls(int(value))
            except ValueError:
                return None

        text = str(value).strip().lower()
        if not text:
            return None
        if text.isdigit():
            return cls.parse(int(text))
        for stage in cls:
            if text in (stage.key, stage.role, stage.label.lower()):
                return stage
        return None


STAGE_ROLES = {
    Stage.GRADING: 'grader',
    Stage.CERTIFICATION: 'certifier',
    Stage.PREPARATION: 'preparer',
    Stage.SCANNING: 'scanner',
}

STAGE_LABELS = {
    Stage.GRADING: 'To be graded',
    Stage.CERTIFICATION: 'To be encapsulated',
    Stage.PREPARATION: 'To be prepared',
    Stage.SCANNING: 'To be scanned',
}

# Order in which a planning run processes the stages
PLANNING_STAGE_ORDER = [
    Stage.GRADING,
    Stage.CERTIFICATION,
    Stage.PREPARATION,
    Stage.SCANNING,
]


@dataclass(frozen=True)
class WorkItem:
    """An order waiting for work at one pipeline stage."""
    item_id: str
    stage: Stage
    card_count: Optional[int] = None
    delay_code: Optional[str] = 'C'
    submitted_at: Optional[datetime] = None
    order_number: Optional[str] = None
    position: int = 0  # Arrival order in the source queue


@dataclass(frozen=True)
class EmployeeProfile:
    """An employee who can be assigned work."""
    employee_id: str
    first_name: str = ''
    last_name: str = ''
    work_hours_per_day: int = 8
    roles: frozenset = field(default_factory=frozenset)
    active: bool = True

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip() or self.employee_id

    @property
    def daily_capacity_minutes(self) -> int:
        return self.work_hours_per_day * 60

    def has_role(self, role: str) -> bool:
        return role in self.roles


@dataclass(frozen=True)
class ScheduleEntry:
    """A planned task: one work item assigned to one employee."""
    entry_id: str
    item_id: str
    employee_id: str
    planning_date: date
    start_time: datetime
    end_time: datetime
    duration_minutes: int
    stage: Stage
    delay_code: str = 'C'
    card_count: int = 0
    order_number: Optional[str] = None
    employee_name: Optional[str] = None
    completed: bool = False

    def __post_init__(self):
        if self.end_time != self.start_time + timedelta(minutes=self.duration_minutes):
            raise ValueError(
                f"Entry {self.entry_id}: end time must equal start + {self.duration_minutes} min"
            )

    @property
    def status_code(self) -> int:
        return self.stage.status_code

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for JSON storage."""
        return {
            'entry_id': self.entry_id,
            'item_id': self.item_id,
            'order_number': self.order_number,
            'employee_id': self.employee_id,
            'employee_name': self.employee_name,
            'planning_date': self.planning_date.isoformat(),
            'start_time': self.start_time.isoformat(),
            'end_time': self.end_time.isoformat(),
            'duration_minutes': self.duration_minutes,
            'stage': self.stage.key,
            'status_code': self.status_code,
            'delay_code': self.delay_code,
            'card_count': self.card_count,
            'completed': self.completed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ScheduleEntry':
        stage = Stage.parse(data.get('stage') or data.get('status_code'))
        if stage is None:
            raise ValueError(f"Entry {data.get('entry_id')}: unknown stage {data.get('stage')!r}")
        return cls(
            entry_id=data['entry_id'],
            item_id=data['item_id'],
            order_number=data.get('order_number'),
            employee_id=data['employee_id'],
            employee_name=data.get('employee_name'),
            planning_date=date.fromisoformat(data['planning_date']),
            start_time=datetime.fromisoformat(data['start_time']),
            end_time=datetime.fromisoformat(data['end_time']),
            duration_minutes=int(data['duration_minutes']),
            stage=stage,
            delay_code=data.get('delay_code', 'C'),
            card_count=int(data.get('card_count') or 0),
            completed=bool(data.get('completed', False)),
        )
