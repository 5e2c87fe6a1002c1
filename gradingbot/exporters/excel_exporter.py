"""
Excel Exporter
Export the planned timetable to Excel format.
"""

from typing import List

import pandas as pd
from openpyxl.utils import get_column_letter

from gradingbot.algorithms.priority import get_delay_label


def format_sheet(worksheet, df: pd.DataFrame, max_width: int = 40):
    """Auto-size columns and freeze the header row."""
    for idx, col in enumerate(df.columns):
        col_data = df[col].fillna('').astype(str)
        max_data_len = col_data.str.len().max() if len(col_data) > 0 else 0
        max_length = max(max_data_len, len(col)) + 2
        worksheet.column_dimensions[get_column_letter(idx + 1)].width = min(max_length, max_width)
    worksheet.freeze_panes = 'A2'


def schedule_to_dataframe(entries: List) -> pd.DataFrame:
    """One row per schedule entry, by employee then start time."""
    data = []
    for entry in sorted(entries, key=lambda e: (e.employee_name or e.employee_id, e.start_time)):
        data.append({
            'Employee': entry.employee_name or entry.employee_id,
            'Employee ID': entry.employee_id,
            'Stage': entry.stage.key.capitalize(),
            'Order': entry.order_number or entry.item_id,
            'Date': entry.planning_date,
            'Start': entry.start_time,
            'End': entry.end_time,
            'Minutes': entry.duration_minutes,
            'Cards': entry.card_count,
            'Delay': entry.delay_code,
            'Priority': get_delay_label(entry.delay_code),
        })
    columns = ['Employee', 'Employee ID', 'Stage', 'Order', 'Date', 'Start', 'End',
               'Minutes', 'Cards', 'Delay', 'Priority']
    return pd.DataFrame(data, columns=columns)


def export_schedule(entries: List, output_path: str) -> str:
    """
    Export the planned timetable to Excel.

    Args:
        entries: List of ScheduleEntry objects
        output_path: Path for output Excel file

    Returns:
        Path to the created file
    """
    df = schedule_to_dataframe(entries)

    with pd.ExcelWriter(output_path, engine='openpyxl') as writer:
        df.to_excel(writer, sheet_name='Schedule', index=False)
        format_sheet(writer.sheets['Schedule'], df)

    print(f"[OK] Schedule exported to: {output_path}")
    return output_path
