"""Tests for delay code classification."""

import pytest
from datetime import datetime

from gradingbot.algorithms.priority import (
    get_priority_rank,
    get_delay_label,
    normalize_delay_code,
    is_valid_delay_code,
    priority_sort_key,
)
from conftest import make_item


class TestPriorityRank:
    """Tests for delay code ranks."""

    @pytest.mark.parametrize('code,rank', [
        ('X', 1), ('F+', 2), ('F', 3), ('C', 4), ('E', 5),
    ])
    def test_known_codes(self, code, rank):
        assert get_priority_rank(code) == rank

    def test_missing_code_ranks_as_classic(self):
        assert get_priority_rank(None) == 4
        assert get_priority_rank('') == 4

    def test_unknown_code_ranks_as_classic(self):
        assert get_priority_rank('Z') == 4
        assert get_priority_rank('F++') == 4

    def test_lowercase_and_whitespace(self):
        assert get_priority_rank(' x ') == 1
        assert get_priority_rank('f+') == 2


class TestDelayLabels:
    """Tests for delay code labels and normalization."""

    def test_labels(self):
        assert get_delay_label('X') == 'Express'
        assert get_delay_label('F+') == 'Fast Plus'
        assert get_delay_label('F') == 'Fast'
        assert get_delay_label('C') == 'Classic'
        assert get_delay_label('E') == 'Economy'

    def test_unknown_label_is_classic(self):
        assert get_delay_label(None) == 'Classic'
        assert get_delay_label('?') == 'Classic'

    def test_normalize(self):
        assert normalize_delay_code(' f+ ') == 'F+'
        assert normalize_delay_code('bogus') == 'C'
        assert normalize_delay_code(None) == 'C'

    def test_is_valid(self):
        assert is_valid_delay_code('E') is True
        assert is_valid_delay_code('e') is True
        assert is_valid_delay_code('Q') is False
        assert is_valid_delay_code(None) is False


class TestPrioritySortKey:
    """Tests for work item ordering."""

    def test_rank_before_date(self):
        older_classic = make_item('A', delay='C', submitted=datetime(2026, 1, 1))
        newer_express = make_item('B', delay='X', submitted=datetime(2026, 2, 1))
        ordered = sorted([older_classic, newer_express], key=priority_sort_key)
        assert [i.item_id for i in ordered] == ['B', 'A']

    def test_older_first_within_rank(self):
        newer = make_item('A', delay='F', submitted=datetime(2026, 2, 1), position=0)
        older = make_item('B', delay='F', submitted=datetime(2026, 1, 1), position=1)
        ordered = sorted([newer, older], key=priority_sort_key)
        assert [i.item_id for i in ordered] == ['B', 'A']

    def test_arrival_order_breaks_ties(self):
        same = datetime(2026, 2, 1, 9, 0)
        items = [make_item(f'I{n}', delay='C', submitted=same, position=n) for n in range(5)]
        ordered = sorted(reversed(items), key=priority_sort_key)
        assert [i.item_id for i in ordered] == ['I0', 'I1', 'I2', 'I3', 'I4']

    def test_undated_after_dated(self):
        undated = make_item('A', delay='C', submitted=None, position=0)
        dated = make_item('B', delay='C', submitted=datetime(2026, 2, 1), position=1)
        ordered = sorted([undated, dated], key=priority_sort_key)
        assert [i.item_id for i in ordered] == ['B', 'A']
