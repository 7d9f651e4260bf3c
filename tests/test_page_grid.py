import pytest

from data_models import PlacementRequest, RectSize
from page_grid import PageGrid, cells_to_cover, cells_within, footprint_fits


def place(grid, width, height, item_id="p-0"):
    return grid.attempt_place(RectSize(width, height), "img.png", item_id, "p")


# ------------------------------------------------------------
# Cell snapping
# ------------------------------------------------------------

@pytest.mark.parametrize("length, expected", [(30, 30), (30.2, 31), (2.5, 3), (30.0000000001, 30)])
def test_cells_to_cover_rounds_up(length, expected):
    assert cells_to_cover(length) == expected


@pytest.mark.parametrize("length, expected", [(200, 200), (199.5, 199), (0.5, 0), (-3, 0)])
def test_cells_within_rounds_down(length, expected):
    assert cells_within(length) == expected


# ------------------------------------------------------------
# Placement
# ------------------------------------------------------------

def test_first_item_goes_top_left_with_margin_offset():
    grid = PageGrid(100, 100, 1, margin=5, spacing=0)
    item = place(grid, 30, 40)

    assert (item.x, item.y) == (5, 5)
    assert (item.width, item.height) == (30, 40)
    assert grid.items == [item]


def test_spacing_is_kept_to_the_right():
    grid = PageGrid(100, 100, 1, margin=0, spacing=2)
    place(grid, 10, 10, "a")
    second = place(grid, 10, 10, "b")

    assert (second.x, second.y) == (12, 0)


def test_scan_is_row_major_and_fills_earlier_gaps():
    grid = PageGrid(10, 10, 1)
    first = place(grid, 6, 2, "a")
    second = place(grid, 6, 2, "b")
    third = place(grid, 4, 2, "c")

    assert (first.x, first.y) == (0, 0)
    # no room for another 6-wide item on the top rows
    assert (second.x, second.y) == (0, 2)
    # the narrower item takes the gap left on the top rows
    assert (third.x, third.y) == (6, 0)


def test_spacing_clearance_is_clipped_at_grid_edge():
    grid = PageGrid(10, 10, 1, spacing=2)
    place(grid, 10, 4)

    # 10 wide (clipped) x 6 tall marked
    assert grid.free_cell_count == 40
    assert grid.is_region_free(0, 6, 10, 4)
    assert not grid.is_region_free(0, 5, 1, 1)


def test_failure_leaves_grid_untouched():
    grid = PageGrid(5, 5, 1)
    place(grid, 5, 5)
    free_before = grid.free_cell_count

    assert place(grid, 1, 1, "b") is None
    assert len(grid.items) == 1
    assert grid.free_cell_count == free_before


def test_oversized_item_fails_immediately():
    grid = PageGrid(10, 10, 1)

    assert not footprint_fits(RectSize(11, 1), grid.width, grid.height)
    assert footprint_fits(RectSize(10, 9.5), grid.width, grid.height)
    assert place(grid, 11, 1) is None
    assert place(grid, 1, 11) is None
    assert grid.free_cell_count == 100


def test_rejected_footprint_skips_later_scans(monkeypatch):
    grid = PageGrid(10, 10, 1)
    place(grid, 6, 6, "a")

    assert place(grid, 6, 6, "b") is None
    assert grid.rejected_footprints == {(6, 6)}

    scans = []
    original = PageGrid.find_first_free

    def counting_find_first_free(self, w, h):
        scans.append((w, h))
        return original(self, w, h)

    monkeypatch.setattr(PageGrid, "find_first_free", counting_find_first_free)

    assert place(grid, 7, 6.5, "c") is None
    assert scans == []

    # smaller footprints are still scanned
    smaller = place(grid, 4, 4, "d")
    assert scans == [(4, 4)]
    assert (smaller.x, smaller.y) == (6, 0)


def test_fractional_sizes_occupy_whole_cells():
    grid = PageGrid(10, 10, 1)
    first = place(grid, 2.5, 2.5, "a")
    second = place(grid, 2.5, 2.5, "b")

    assert first.width == 2.5
    assert (second.x, second.y) == (3, 0)


def test_place_request_uses_request_identity():
    grid = PageGrid(50, 50, 3, margin=1.5)
    request = PlacementRequest("photo", 7, RectSize(10, 10), "photo.png", "#ff0000")
    item = grid.place_request(request)

    assert item.id == "photo-7"
    assert item.source_id == "photo"
    assert item.image_ref == "photo.png"
    assert item.background_color == "#ff0000"
    assert (item.x, item.y) == (1.5, 1.5)


def test_invalid_grid_dimensions_rejected():
    with pytest.raises(ValueError):
        PageGrid(0, 10, 1)


# ------------------------------------------------------------
# Region primitives
# ------------------------------------------------------------

def test_region_outside_grid_is_never_free():
    grid = PageGrid(10, 10, 1)

    assert not grid.is_region_free(8, 0, 3, 1)
    assert not grid.is_region_free(0, 9, 1, 2)
    assert not grid.is_region_free(-1, 0, 1, 1)
    assert grid.is_region_free(0, 0, 10, 10)


def test_mark_region_uses_row_major_layout():
    grid = PageGrid(4, 3, 1)
    grid.mark_region(1, 2, 2, 1)

    assert grid.grid.tolist() == [False] * 9 + [True, True, False]


@pytest.mark.parametrize("w, h", [(1, 1), (2, 3), (3, 2), (4, 4), (7, 1)])
def test_first_free_matches_cell_by_cell_scan(w, h):
    grid = PageGrid(12, 9, 1)
    grid.mark_region(0, 0, 5, 2)
    grid.mark_region(7, 1, 2, 4)
    grid.mark_region(2, 4, 3, 3)
    grid.mark_region(10, 6, 2, 2)

    expected = None
    for y in range(grid.height - h + 1):
        for x in range(grid.width - w + 1):
            if grid.is_region_free(x, y, w, h):
                expected = (x, y)
                break
        if expected:
            break

    assert grid.find_first_free(w, h) == expected


def test_to_page_reports_paper_size():
    grid = PageGrid(200, 287, 2, margin=5)
    place(grid, 30, 40)
    page = grid.to_page(RectSize(210, 297))

    assert page.page_number == 2
    assert (page.width, page.height) == (210, 297)
    assert page.items == tuple(grid.items)
