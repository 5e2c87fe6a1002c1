"""
Employee Parser
Parses the employee roster: who works, how many hours a day, and in which roles.

Expected columns (alternatives in brackets):
    Employee ID [ID], First Name, Last Name,
    Work Hours Per Day [Hours], Roles [Role], Active
"""

from typing import List, Tuple

import pandas as pd

from gradingbot.algorithms.models import EmployeeProfile, Stage
from .common import read_table, clean_id, clean_int, first_present

DEFAULT_WORK_HOURS = 8

# Role names used by the source system, mapped to planning roles
ROLE_ALIASES = {
    'noteur': 'grader',
    'role_noteur': 'grader',
    'role_grader': 'grader',
    'certificateur': 'certifier',
    'role_certificateur': 'certifier',
    'role_certifier': 'certifier',
    'preparateur': 'preparer',
    'role_preparateur': 'preparer',
    'role_preparer': 'preparer',
    'role_scanner': 'scanner',
}


def normalize_role(role: str) -> str:
    """Lowercase a role name and map source-system aliases to planning roles."""
    text = str(role).strip().lower()
    return ROLE_ALIASES.get(text, text)


def parse_roles(value) -> frozenset:
    """Split a comma/semicolon separated role cell."""
    if value is None or pd.isna(value):
        return frozenset()
    parts = str(value).replace(';', ',').split(',')
    return frozenset(normalize_role(p) for p in parts if p.strip())


def _parse_active(value) -> bool:
    if value is None or pd.isna(value):
        return True
    if isinstance(value, str):
        return value.strip().lower() not in ('0', 'false', 'no', 'n', 'inactive')
    return bool(value)


def parse_employees(filepath: str, sheet_name=0) -> Tuple[List[EmployeeProfile], List[str]]:
    """
    Parse the employee roster.

    Args:
        filepath: Path to the Excel or CSV file
        sheet_name: Sheet to read for Excel files (default: first sheet)

    Returns:
        Tuple of (employees in file order, row errors)
    """
    df = read_table(filepath, sheet_name=sheet_name)
    print(f"Loaded {len(df)} rows from {filepath}")

    employees = []
    errors = []

    for index, row in df.iterrows():
        employee_id = clean_id(first_present(row, 'Employee ID', 'ID'))
        if not employee_id:
            errors.append(f"Row {index}: Missing employee ID")
            continue

        hours = clean_int(first_present(row, 'Work Hours Per Day', 'Hours'))
        first_name = first_present(row, 'First Name')
        last_name = first_present(row, 'Last Name')

        employees.append(EmployeeProfile(
            employee_id=employee_id,
            first_name=str(first_name).strip() if first_name is not None else '',
            last_name=str(last_name).strip() if last_name is not None else '',
            work_hours_per_day=hours if hours is not None else DEFAULT_WORK_HOURS,
            roles=parse_roles(first_present(row, 'Roles', 'Role')),
            active=_parse_active(first_present(row, 'Active')),
        ))

    print(f"  - Parsed: {len(employees)} employees")
    for stage in Stage:
        staffed = sum(1 for e in employees if e.active and e.has_role(stage.role))
        print(f"  - {stage.role}s: {staffed}")
    if errors:
        print(f"  - Errors: {len(errors)}")
        for error in errors[:10]:
            print(f"    - {error}")

    return employees, errors
