"""Shared test fixtures for GradingBot tests."""

import os
import sys
import pytest
from datetime import date, datetime

# Add repository root to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from gradingbot.algorithms.models import Stage, WorkItem, EmployeeProfile
from gradingbot.data_loader import DataLoader
from gradingbot.schedule_store import ScheduleStore


class RecordingSink:
    """Schedule sink that keeps entries in memory and can refuse some of them."""

    def __init__(self, fail_items=None):
        self.fail_items = set(fail_items or [])
        self.entries = []
        self.attempts = []
        self.cleared = []

    def create_entry(self, entry):
        self.attempts.append(entry)
        if entry.item_id in self.fail_items:
            return False
        self.entries.append(entry)
        return True

    def clear_entries_for_date(self, planning_date):
        self.cleared.append(planning_date)
        removed = [e for e in self.entries if e.planning_date == planning_date]
        self.entries = [e for e in self.entries if e.planning_date != planning_date]
        return len(removed)


def make_item(item_id, cards=10, delay='C', stage=Stage.GRADING,
              submitted=datetime(2026, 2, 10, 10, 0), position=0):
    return WorkItem(
        item_id=item_id,
        order_number=f"ORD-{item_id}",
        stage=stage,
        card_count=cards,
        delay_code=delay,
        submitted_at=submitted,
        position=position,
    )


def make_employee(employee_id, first_name='Test', last_name=None, hours=8, roles=('grader',),
                  active=True):
    return EmployeeProfile(
        employee_id=employee_id,
        first_name=first_name,
        last_name=last_name if last_name is not None else employee_id,
        work_hours_per_day=hours,
        roles=frozenset(roles),
        active=active,
    )


@pytest.fixture
def planning_date():
    """A Monday."""
    return date(2026, 2, 16)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def memory_store():
    return ScheduleStore()


@pytest.fixture
def sample_employees():
    """One employee per role, plus a grader/certifier and an inactive grader."""
    return [
        make_employee('E1', 'Alice', 'Martin', roles=('grader',)),
        make_employee('E2', 'Bruno', 'Petit', roles=('grader', 'certifier')),
        make_employee('E3', 'Chloe', 'Roux', roles=('preparer',)),
        make_employee('E4', 'David', 'Blanc', hours=7, roles=('scanner',)),
        make_employee('E5', 'Emma', 'Noir', roles=('grader',), active=False),
    ]


@pytest.fixture
def sample_orders():
    """Orders spread over the four planning stages."""
    return [
        make_item('G1', cards=6, delay='C', stage=Stage.GRADING, position=0),
        make_item('G2', cards=4, delay='X', stage=Stage.GRADING, position=1),
        make_item('G3', cards=10, delay='F', stage=Stage.GRADING, position=2),
        make_item('C1', cards=5, delay='F+', stage=Stage.CERTIFICATION, position=3),
        make_item('P1', cards=8, delay='E', stage=Stage.PREPARATION, position=4),
        make_item('S1', cards=0, delay='C', stage=Stage.SCANNING, position=5),
        make_item('S2', cards=40, delay='X', stage=Stage.SCANNING, position=6),
    ]


@pytest.fixture
def sample_loader(sample_orders, sample_employees):
    return DataLoader(data_dir='unused', orders=sample_orders, employees=sample_employees)
