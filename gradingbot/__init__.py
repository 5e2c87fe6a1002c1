"""
GradingBot - role-based work planning for card processing orders.
"""

__version__ = '1.0.0'
