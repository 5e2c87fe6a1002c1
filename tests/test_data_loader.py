"""Tests for input file parsing and the data loader work source."""

import pytest
import pandas as pd
from datetime import datetime

from gradingbot.algorithms.models import Stage
from gradingbot.data_loader import DataLoader
from gradingbot.parsers import parse_orders, parse_employees, parse_roles, normalize_role, count_by_stage


@pytest.fixture
def orders_csv(tmp_path):
    path = tmp_path / 'Orders_2026-02-16.csv'
    pd.DataFrame([
        {'Order ID': 101, 'Order Number': 'CMD-101', 'Cards': 6, 'Delay': 'C',
         'Status': 2, 'Date': '2026-02-10 10:00'},
        {'Order ID': 102, 'Order Number': 'CMD-102', 'Cards': 4, 'Delay': 'X',
         'Status': 2, 'Date': '2026-02-11 09:00'},
        {'Order ID': 103, 'Order Number': 'CMD-103', 'Cards': 5, 'Delay': 'F+',
         'Status': 3, 'Date': '2026-02-09 08:00'},
        {'Order ID': 104, 'Order Number': 'CMD-104', 'Cards': 2, 'Delay': 'E',
         'Status': 7, 'Date': '2026-02-09 08:00'},
        {'Order ID': 105, 'Order Number': 'CMD-105', 'Cards': None, 'Delay': None,
         'Status': 10, 'Date': None},
        {'Order ID': None, 'Order Number': None, 'Cards': 3, 'Delay': 'C',
         'Status': 2, 'Date': '2026-02-09 08:00'},
    ]).to_csv(path, index=False)
    return path


@pytest.fixture
def employees_csv(tmp_path):
    path = tmp_path / 'Employees.csv'
    pd.DataFrame([
        {'Employee ID': 'E1', 'First Name': 'Bruno', 'Last Name': 'Petit',
         'Work Hours Per Day': 8, 'Roles': 'noteur, certificateur', 'Active': 'yes'},
        {'Employee ID': 'E2', 'First Name': 'alice', 'Last Name': 'Martin',
         'Work Hours Per Day': 6, 'Roles': 'grader', 'Active': 'yes'},
        {'Employee ID': 'E3', 'First Name': 'Chloe', 'Last Name': 'Roux',
         'Work Hours Per Day': None, 'Roles': 'ROLE_PREPARATEUR;scanner', 'Active': 'no'},
        {'Employee ID': None, 'First Name': 'Ghost', 'Last Name': '',
         'Work Hours Per Day': 8, 'Roles': 'grader', 'Active': 'yes'},
    ]).to_csv(path, index=False)
    return path


class TestOrderParser:
    """Tests for the orders file parser."""

    def test_parses_planning_stages_only(self, orders_csv):
        items, errors = parse_orders(str(orders_csv))

        assert [i.item_id for i in items] == ['101', '102', '103', '105']
        assert [i.stage for i in items] == [
            Stage.GRADING, Stage.GRADING, Stage.CERTIFICATION, Stage.SCANNING,
        ]
        assert len(errors) == 1
        assert 'Missing order ID' in errors[0]

    def test_field_values(self, orders_csv):
        items, _ = parse_orders(str(orders_csv))
        first = items[0]

        assert first.order_number == 'CMD-101'
        assert first.card_count == 6
        assert first.delay_code == 'C'
        assert first.submitted_at == datetime(2026, 2, 10, 10, 0)
        assert [i.position for i in items] == [0, 1, 2, 3]

    def test_blank_cells(self, orders_csv):
        items, _ = parse_orders(str(orders_csv))
        scanning = items[-1]

        assert scanning.card_count is None
        assert scanning.delay_code is None
        assert scanning.submitted_at is None

    def test_alternative_columns(self, tmp_path):
        path = tmp_path / 'orders.csv'
        pd.DataFrame([
            {'ID': 'A-1', 'Card Count': 12, 'Delai': ' f ', 'Stage': 'preparation'},
        ]).to_csv(path, index=False)
        items, errors = parse_orders(str(path))

        assert errors == []
        assert items[0].item_id == 'A-1'
        assert items[0].order_number == 'A-1'
        assert items[0].stage == Stage.PREPARATION
        assert items[0].card_count == 12
        assert items[0].delay_code == 'f'

    def test_unknown_delay_kept_as_read(self, tmp_path):
        path = tmp_path / 'orders.csv'
        pd.DataFrame([{'Order ID': 'A', 'Cards': 1, 'Delay': 'ZZ', 'Status': 2}]).to_csv(path, index=False)
        items, _ = parse_orders(str(path))
        assert items[0].delay_code == 'ZZ'

    def test_count_by_stage(self, orders_csv):
        items, _ = parse_orders(str(orders_csv))
        counts = count_by_stage(items)

        assert counts['grading'] == {'orders': 2, 'cards': 10}
        assert counts['certification'] == {'orders': 1, 'cards': 5}
        assert counts['preparation'] == {'orders': 0, 'cards': 0}
        assert counts['scanning'] == {'orders': 1, 'cards': 0}


class TestEmployeeParser:
    """Tests for the roster parser."""

    def test_parses_roster(self, employees_csv):
        employees, errors = parse_employees(str(employees_csv))

        assert [e.employee_id for e in employees] == ['E1', 'E2', 'E3']
        assert len(errors) == 1

    def test_role_aliases(self, employees_csv):
        employees, _ = parse_employees(str(employees_csv))
        by_id = {e.employee_id: e for e in employees}

        assert by_id['E1'].roles == frozenset({'grader', 'certifier'})
        assert by_id['E3'].roles == frozenset({'preparer', 'scanner'})

    def test_hours_and_active(self, employees_csv):
        employees, _ = parse_employees(str(employees_csv))
        by_id = {e.employee_id: e for e in employees}

        assert by_id['E2'].work_hours_per_day == 6
        assert by_id['E3'].work_hours_per_day == 8
        assert by_id['E1'].active is True
        assert by_id['E3'].active is False

    @pytest.mark.parametrize('raw,expected', [
        ('Noteur', 'grader'),
        ('role_certifier', 'certifier'),
        ('preparateur', 'preparer'),
        (' SCANNER ', 'scanner'),
        ('admin', 'admin'),
    ])
    def test_normalize_role(self, raw, expected):
        assert normalize_role(raw) == expected

    def test_parse_roles_blank(self):
        assert parse_roles(None) == frozenset()
        assert parse_roles('') == frozenset()
        assert parse_roles('grader,,') == frozenset({'grader'})


class TestDataLoader:
    """Tests for file discovery and the per-stage work source."""

    def test_load_all_from_directory(self, orders_csv, employees_csv):
        loader = DataLoader(data_dir=str(orders_csv.parent))
        assert loader.load_all() is True
        assert len(loader.orders) == 4
        assert len(loader.employees) == 3
        assert len(loader.errors) == 2

    def test_explicit_files(self, orders_csv, employees_csv, tmp_path):
        loader = DataLoader(data_dir=str(tmp_path / 'elsewhere'))
        assert loader.load_all(orders_file=str(orders_csv), employees_file=str(employees_csv)) is True

    def test_missing_orders_file(self, tmp_path, capsys):
        loader = DataLoader(data_dir=str(tmp_path))
        assert loader.load_all() is False
        assert 'No Orders file found' in capsys.readouterr().out

    def test_missing_employees_file(self, orders_csv):
        loader = DataLoader(data_dir=str(orders_csv.parent))
        assert loader.load_orders() is True
        assert loader.load_employees() is False

    def test_pending_items_sorted_by_priority(self, orders_csv, employees_csv):
        loader = DataLoader(data_dir=str(orders_csv.parent))
        loader.load_all()

        grading = loader.list_pending_work_items(Stage.GRADING)
        assert [i.item_id for i in grading] == ['102', '101']
        assert loader.list_pending_work_items(Stage.PREPARATION) == []

    def test_eligible_employees(self, orders_csv, employees_csv):
        loader = DataLoader(data_dir=str(orders_csv.parent))
        loader.load_all()

        # Sorted by name, case-insensitive; inactive employees excluded
        assert [e.employee_id for e in loader.list_eligible_employees(Stage.GRADING)] == ['E2', 'E1']
        assert [e.employee_id for e in loader.list_eligible_employees(Stage.CERTIFICATION)] == ['E1']
        assert loader.list_eligible_employees(Stage.PREPARATION) == []
        assert loader.list_eligible_employees(Stage.SCANNING) == []

    def test_summary(self, sample_loader):
        summary = sample_loader.get_summary()

        assert summary['orders'] == 7
        assert summary['employees'] == 5
        assert summary['active_employees'] == 4
        assert summary['stages']['grading'] == {'orders': 3, 'cards': 20, 'employees': 2}
        assert summary['stages']['scanning']['employees'] == 1
