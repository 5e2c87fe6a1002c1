"""
Priority Classification
Maps order delay codes to a numeric rank (lower is more urgent) and a label.
"""

from datetime import datetime
from typing import Optional

DEFAULT_DELAY_CODE = 'C'

# Delay code -> (rank, label)
DELAY_CODES = {
    'X': (1, 'Express'),
    'F+': (2, 'Fast Plus'),
    'F': (3, 'Fast'),
    'C': (4, 'Classic'),
    'E': (5, 'Economy'),
}


def is_valid_delay_code(code: Optional[str]) -> bool:
    """Check if a delay code is one of the known service levels."""
    if code is None:
        return False
    return str(code).strip().upper() in DELAY_CODES


def normalize_delay_code(code: Optional[str]) -> str:
    """
    Normalize a delay code.

    Missing or unrecognized codes fall back to the Classic default.
    """
    if is_valid_delay_code(code):
        return str(code).strip().upper()
    return DEFAULT_DELAY_CODE


def get_priority_rank(code: Optional[str]) -> int:
    """Rank for a delay code: X=1, F+=2, F=3, C=4, E=5. Unknown codes rank as C."""
    return DELAY_CODES[normalize_delay_code(code)][0]


def get_delay_label(code: Optional[str]) -> str:
    """Human label for a delay code, used in reports."""
    return DELAY_CODES[normalize_delay_code(code)][1]


def priority_sort_key(item):
    """
    Sort key for work items: rank, then submission date, then arrival order.

    Items without a submission date go after dated items of the same rank.
    """
    submitted = item.submitted_at
    if isinstance(submitted, datetime):
        date_key = submitted.timestamp()
    elif submitted is not None and hasattr(submitted, 'toordinal'):
        date_key = datetime.combine(submitted, datetime.min.time()).timestamp()
    else:
        date_key = float('inf')
    return (get_priority_rank(item.delay_code), date_key, item.position)
