"""
Order Parser
Parses the pending orders export into work items.

Expected columns (alternatives in brackets):
    Order ID [ID], Order Number, Cards [Card Count, Total Cards],
    Delay [Delai], Status [Stage], Date [Order Date, Submitted]
"""

from typing import List, Dict, Any, Tuple

import pandas as pd

from gradingbot.algorithms.models import Stage, WorkItem
from .common import read_table, clean_id, clean_int, first_present


def parse_orders(filepath: str, sheet_name=0) -> Tuple[List[WorkItem], List[str]]:
    """
    Parse the orders file.

    Orders whose status is not a planning stage (e.g. already sent) are left out.

    Args:
        filepath: Path to the Excel or CSV file
        sheet_name: Sheet to read for Excel files (default: first sheet)

    Returns:
        Tuple of (work items in file order, row errors)
    """
    df = read_table(filepath, sheet_name=sheet_name)
    print(f"Loaded {len(df)} rows from {filepath}")

    items = []
    errors = []
    not_planned = 0

    for index, row in df.iterrows():
        try:
            item_id = clean_id(first_present(row, 'Order ID', 'ID'))
            order_number = clean_id(first_present(row, 'Order Number'))
            if not item_id:
                item_id = order_number
            if not item_id:
                errors.append(f"Row {index}: Missing order ID")
                continue

            stage = Stage.parse(first_present(row, 'Status', 'Stage'))
            if stage is None:
                not_planned += 1
                continue

            delay = first_present(row, 'Delay', 'Delai')
            submitted = first_present(row, 'Date', 'Order Date', 'Submitted')
            submitted_at = pd.to_datetime(submitted).to_pydatetime() if submitted is not None else None

            items.append(WorkItem(
                item_id=item_id,
                order_number=order_number or item_id,
                stage=stage,
                card_count=clean_int(first_present(row, 'Cards', 'Card Count', 'Total Cards')),
                delay_code=str(delay).strip() if delay is not None else None,
                submitted_at=submitted_at,
                position=len(items),
            ))
        except (TypeError, ValueError) as e:
            errors.append(f"Row {index}: Error parsing - {str(e)}")
            continue

    print(f"  - Parsed: {len(items)} orders")
    if not_planned:
        print(f"  - Not in a planning stage: {not_planned}")
    if errors:
        print(f"  - Errors: {len(errors)}")
        for error in errors[:10]:
            print(f"    - {error}")

    return items, errors


def count_by_stage(items: List[WorkItem]) -> Dict[str, Any]:
    """Number of orders and cards waiting in each stage."""
    counts = {stage.key: {'orders': 0, 'cards': 0} for stage in Stage}
    for item in items:
        counts[item.stage.key]['orders'] += 1
        counts[item.stage.key]['cards'] += item.card_count or 0
    return counts
