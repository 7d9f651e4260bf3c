import csv
import io

import pytest

from data_models import LayoutConfig, PhotoBatch, RectSize
from packing_engine import run_packing
from reports import (PLACEMENT_COLUMNS, generate_layout_text, generate_placement_csv,
                     pages_to_dataframe, summarize_layout)


@pytest.fixture
def pages():
    batches = [
        PhotoBatch("p", "p.png", RectSize(30, 40), 38, "#ffffff"),
        PhotoBatch("q", "q.png", RectSize(20, 30), 2),
    ]
    return run_packing(batches, RectSize(210, 297), LayoutConfig(5, 2))


def test_summarize_layout(pages):
    summary = summarize_layout(pages)

    assert summary['total_pages'] == 2
    assert summary['total_items'] == 40
    assert summary['items_per_page'] == [p.item_count for p in pages]
    assert 0 < summary['average_utilization'] < 100


def test_summarize_empty_layout():
    assert summarize_layout([]) == {
        'total_pages': 0,
        'total_items': 0,
        'average_utilization': 0.0,
        'items_per_page': []
    }


def test_placement_csv_has_one_row_per_print(pages):
    rows = list(csv.reader(io.StringIO(generate_placement_csv(pages))))

    assert rows[0] == PLACEMENT_COLUMNS
    assert len(rows) == 41
    assert rows[1] == ["1", "p-0", "p", "5", "5", "30", "40", "p.png", "#ffffff"]
    # the smaller photos back-fill the bottom of page 1
    assert rows[37] == ["1", "q-38", "q", "5", "257", "20", "30", "q.png", ""]
    assert rows[-1][:3] == ["2", "p-37", "p"]


def test_dataframe_matches_layout(pages):
    df = pages_to_dataframe(pages)

    assert list(df.columns) == PLACEMENT_COLUMNS
    assert len(df) == 40
    assert set(df['Page']) == {1, 2}
    assert df.iloc[0]['Item ID'] == "p-0"


def test_layout_text_report(pages):
    text = generate_layout_text(pages, "Order 17")

    assert text.startswith("PRINT LAYOUT REPORT - Order 17")
    assert "Total Pages: 2" in text
    assert "Total Prints: 40" in text
    assert "PAGE 2" in text
    assert "Paper: 210 x 297 mm" in text
    # p-36 and p-37 on the second sheet
    assert "Printed Area: 24.0 cm²" in text
    assert "p-37" in text


def test_layout_text_report_without_pages():
    text = generate_layout_text([])

    assert "Total Pages: 0" in text
    assert "No pages" in text
