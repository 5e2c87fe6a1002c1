"""
Data parsers package initialization.
"""

from .order_parser import parse_orders, count_by_stage
from .employee_parser import parse_employees, parse_roles, normalize_role

__all__ = [
    'parse_orders',
    'count_by_stage',
    'parse_employees',
    'parse_roles',
    'normalize_role',
]
