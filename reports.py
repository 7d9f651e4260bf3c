"""
Report generation for PrintWise layouts.
Creates text reports, placement sheets and summary statistics from packed pages.
"""

import csv
import io
import logging
from typing import Any, Dict, List, Sequence

import pandas as pd

from data_models import Page, RectSize
from utils import format_area, format_percentage, format_size

logger = logging.getLogger(__name__)

PLACEMENT_COLUMNS = [
    'Page', 'Item ID', 'Photo ID', 'X (mm)', 'Y (mm)',
    'Width (mm)', 'Height (mm)', 'Image', 'Background'
]


def _placement_rows(pages: Sequence[Page]) -> List[List[Any]]:
    rows = []
    for page in pages:
        for item in page.items:
            rows.append([
                page.page_number,
                item.id,
                item.source_id,
                item.x,
                item.y,
                item.width,
                item.height,
                item.image_ref,
                item.background_color or ''
            ])
    return rows


def summarize_layout(pages: Sequence[Page]) -> Dict[str, Any]:
    """
    Calculate summary statistics for a layout.

    Args:
        pages: Packed pages

    Returns:
        Dictionary with page and print counts and utilization figures
    """
    total_pages = len(pages)
    total_items = sum(page.item_count for page in pages)
    avg_utilization = (sum(page.get_utilization_percentage() for page in pages) / total_pages
                       if total_pages > 0 else 0.0)

    return {
        'total_pages': total_pages,
        'total_items': total_items,
        'average_utilization': avg_utilization,
        'items_per_page': [page.item_count for page in pages]
    }


def generate_layout_text(pages: Sequence[Page], title: str = "") -> str:
    """
    Generate text-based layout report.

    Args:
        pages: Packed pages
        title: Optional title to include in the report header

    Returns:
        Formatted text report
    """
    report_lines = []

    if title:
        report_lines.append(f"PRINT LAYOUT REPORT - {title}")
    else:
        report_lines.append("PRINT LAYOUT REPORT")

    report_lines.append("=" * 60)
    report_lines.append("")

    summary = summarize_layout(pages)
    report_lines.append("SUMMARY:")
    report_lines.append(f"Total Pages: {summary['total_pages']}")
    report_lines.append(f"Total Prints: {summary['total_items']}")
    report_lines.append(f"Average Utilization: {format_percentage(summary['average_utilization'])}")
    report_lines.append("")

    if not pages:
        report_lines.append("No pages: the paper has no printable area or nothing was requested.")
        return "\n".join(report_lines)

    for page in pages:
        report_lines.append(f"PAGE {page.page_number}")
        report_lines.append(f"Paper: {format_size(RectSize(page.width, page.height))}")
        report_lines.append(f"Printed Area: {format_area(page.used_area)}")
        report_lines.append(f"Utilization: {format_percentage(page.get_utilization_percentage())}")
        report_lines.append(f"Prints: {page.item_count}")
        report_lines.append("")
        report_lines.append("Item ID".ljust(20) + "Size".ljust(15) + "Position".ljust(18) + "Background")
        report_lines.append("-" * 70)

        for item in page.items:
            size = f"{item.width:g}x{item.height:g}"
            position = f"({item.x:g},{item.y:g})"
            report_lines.append(
                str(item.id)[:19].ljust(20) +
                size.ljust(15) +
                position.ljust(18) +
                (item.background_color or "-")
            )

        report_lines.append("")
        report_lines.append("-" * 60)
        report_lines.append("")

    return "\n".join(report_lines)


def generate_placement_csv(pages: Sequence[Page]) -> str:
    """
    Generate the placement sheet consumed by the print export stage.
    One row per print, positions relative to the paper's top-left corner.

    Returns:
        CSV content as string
    """
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(PLACEMENT_COLUMNS)
    writer.writerows(_placement_rows(pages))

    logger.info(f"Placement sheet generated for {len(pages)} pages")
    return output.getvalue()


def pages_to_dataframe(pages: Sequence[Page]) -> pd.DataFrame:
    """Placement rows as a DataFrame, one row per print."""
    return pd.DataFrame(_placement_rows(pages), columns=PLACEMENT_COLUMNS)
