"""
Data Loader
Loads the orders and employee roster, and serves them to the planner by stage.
"""

import os
import glob
import traceback
from pathlib import Path
from typing import Dict, List, Any, Optional

from gradingbot.algorithms.models import Stage, WorkItem, EmployeeProfile
from gradingbot.algorithms.priority import priority_sort_key
from gradingbot.parsers import parse_orders, parse_employees, count_by_stage


class DataLoader:
    """
    Manages loading of the planning input files.

    Also acts as the planner's work source: pending work items and eligible
    employees per stage.
    """

    ORDER_PATTERNS = ["Orders*.xlsx", "Orders*.csv"]
    EMPLOYEE_PATTERNS = ["Employees*.xlsx", "Employees*.csv"]

    def __init__(self, data_dir: str = "data", orders: List[WorkItem] = None,
                 employees: List[EmployeeProfile] = None):
        self.data_dir = Path(data_dir)
        self.orders: List[WorkItem] = list(orders or [])
        self.employees: List[EmployeeProfile] = list(employees or [])
        self.errors: List[str] = []

    def _find_most_recent_file(self, pattern: str) -> Optional[Path]:
        """
        Find the most recently modified file matching a glob pattern.

        Also tries the underscore variant of a pattern with spaces.
        """
        patterns_to_try = [pattern]
        if ' ' in pattern:
            patterns_to_try.append(pattern.replace(' ', '_'))

        matches = []
        for p in patterns_to_try:
            matches.extend(glob.glob(str(self.data_dir / p)))

        if not matches:
            return None

        matches.sort(key=lambda x: os.path.getmtime(x), reverse=True)
        return Path(matches[0])

    def _find_input_file(self, patterns: List[str]) -> Optional[Path]:
        for pattern in patterns:
            found = self._find_most_recent_file(pattern)
            if found:
                return found
        return None

    def load_orders(self, filepath: Optional[str] = None) -> bool:
        """
        Load pending orders.

        Args:
            filepath: Optional explicit filepath. If None, finds most recent file.

        Returns:
            True if loaded successfully, False otherwise
        """
        orders_file = Path(filepath) if filepath else self._find_input_file(self.ORDER_PATTERNS)
        if not orders_file or not orders_file.exists():
            print("[ERROR] No Orders file found!")
            return False

        print(f"  Loading: {orders_file.name}")
        self.orders, errors = parse_orders(str(orders_file))
        self.errors.extend(errors)
        print(f"  [OK] Loaded {len(self.orders)} orders")
        return True

    def load_employees(self, filepath: Optional[str] = None) -> bool:
        """
        Load the employee roster.

        Args:
            filepath: Optional explicit filepath. If None, finds most recent file.

        Returns:
            True if loaded successfully, False otherwise
        """
        employees_file = Path(filepath) if filepath else self._find_input_file(self.EMPLOYEE_PATTERNS)
        if not employees_file or not employees_file.exists():
            print("[ERROR] No Employees file found!")
            return False

        print(f"  Loading: {employees_file.name}")
        self.employees, errors = parse_employees(str(employees_file))
        self.errors.extend(errors)
        print(f"  [OK] Loaded {len(self.employees)} employees")
        return True

    def load_all(self, orders_file: Optional[str] = None,
                 employees_file: Optional[str] = None) -> bool:
        """
        Load all data files.

        Returns:
            True if both files loaded successfully
        """
        print("=" * 70)
        print("LOADING PLANNING DATA")
        print("=" * 70)

        try:
            print("\n[1/2] Loading Orders...")
            if not self.load_orders(orders_file):
                return False

            print("\n[2/2] Loading Employees...")
            if not self.load_employees(employees_file):
                return False

            return True

        except Exception as e:
            print(f"\n[ERROR] ERROR loading data: {str(e)}")
            traceback.print_exc()
            return False

    # ----- Work source used by the planner -----

    def list_pending_work_items(self, stage: Stage) -> List[WorkItem]:
        """Orders waiting in a stage, by priority then submission date."""
        items = [o for o in self.orders if o.stage == stage]
        return sorted(items, key=priority_sort_key)

    def list_eligible_employees(self, stage: Stage) -> List[EmployeeProfile]:
        """Active employees holding the stage's role, sorted by name."""
        eligible = [e for e in self.employees if e.active and e.has_role(stage.role)]
        return sorted(eligible, key=lambda e: (e.first_name.lower(), e.last_name.lower()))

    def get_summary(self) -> Dict[str, Any]:
        """Order and staffing counts per stage."""
        by_stage = count_by_stage(self.orders)
        for stage in Stage:
            by_stage[stage.key]['employees'] = len(self.list_eligible_employees(stage))
        return {
            'orders': len(self.orders),
            'employees': len(self.employees),
            'active_employees': sum(1 for e in self.employees if e.active),
            'errors': len(self.errors),
            'stages': by_stage,
        }

    def print_summary(self):
        """Print a formatted summary."""
        summary = self.get_summary()

        print("\n" + "=" * 70)
        print("DATA LOADING SUMMARY")
        print("=" * 70)
        print(f"\n   Orders: {summary['orders']}")
        print(f"   Employees: {summary['employees']} ({summary['active_employees']} active)")
        for stage_key, counts in summary['stages'].items():
            print(f"   {stage_key}: {counts['orders']} orders, {counts['cards']} cards, "
                  f"{counts['employees']} employees")
        if summary['errors']:
            print(f"   [WARN] {summary['errors']} rows could not be parsed")
        print("\n" + "=" * 70)
