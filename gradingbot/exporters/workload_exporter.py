"""
Workload Exporter
Per-stage, per-employee workload and stage statistics from a planning run.
"""

import pandas as pd

from .excel_exporter import format_sheet


def workload_to_dataframe(report) -> pd.DataFrame:
    """One row per employee per stage, most utilized first within a stage."""
    rows = []
    for stage, result in report.stage_results.items():
        for summary in result.get_workload_summaries():
            rows.append({
                'Stage': stage.key.capitalize(),
                'Employee': summary['employee_name'],
                'Employee ID': summary['employee_id'],
                'Tasks': summary['assignment_count'],
                'Total Minutes': summary['total_minutes'],
                'Total Hours': summary['total_hours'],
                'Utilization %': summary['utilization_pct'],
                'Status': summary['status'],
            })
    columns = ['Stage', 'Employee', 'Employee ID', 'Tasks', 'Total Minutes',
               'Total Hours', 'Utilization %', 'Status']
    df = pd.DataFrame(rows, columns=columns)
    if not df.empty:
        df = df.sort_values(['Stage', 'Utilization %'], ascending=[True, False])
    return df


def stage_statistics_to_dataframe(report) -> pd.DataFrame:
    rows = []
    for stage, result in report.stage_results.items():
        stats = result.get_statistics()
        rows.append({
            'Stage': stage.key.capitalize(),
            'Status': result.status,
            'Pending': result.pending_count,
            'Planned': result.planned,
            'Skipped': len(result.skipped),
            'Failed': len(result.failed),
            'Unassignable': len(result.unassignable),
            'Total Cards': stats['total_cards'],
            'Total Minutes': stats['total_minutes'],
            'Employees Assigned': stats['employees_assigned'],
            'Message': result.message,
        })
    return pd.DataFrame(rows)


def export_workload_report(report, output_path: str) -> str:
    """
    Export workload report to Excel.

    Args:
        report: PlanningReport from a planning run
        output_path: Path for output Excel file

    Returns:
        Path to the created file
    """
    workload_df = workload_to_dataframe(report)
    stats_df = stage_statistics_to_dataframe(report)

    with pd.ExcelWriter(output_path, engine='openpyxl') as writer:
        workload_df.to_excel(writer, sheet_name='Employee Workload', index=False)
        stats_df.to_excel(writer, sheet_name='Stage Statistics', index=False)

        format_sheet(writer.sheets['Employee Workload'], workload_df, max_width=30)
        format_sheet(writer.sheets['Stage Statistics'], stats_df, max_width=60)

    print(f"[OK] Workload report exported to: {output_path}")
    return output_path
