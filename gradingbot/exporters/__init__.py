"""
Exporters package
Export the planned schedule and workload reports to Excel.
"""

from .excel_exporter import export_schedule, schedule_to_dataframe
from .workload_exporter import export_workload_report, workload_to_dataframe

__all__ = [
    'export_schedule',
    'schedule_to_dataframe',
    'export_workload_report',
    'workload_to_dataframe',
]
