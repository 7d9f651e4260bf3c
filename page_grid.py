"""
Occupancy grid for a single sheet of paper.
Tracks which 1mm cells of the printable area are taken and places prints
first-fit in row-major order.
"""

import logging
import math
from typing import List, Optional, Set, Tuple

import numpy as np

from data_models import Page, PlacedItem, PlacementRequest, RectSize

logger = logging.getLogger(__name__)

# Rounding applied before snapping to whole cells, so 30.000000001 stays 30
_CELL_PRECISION = 6


def cells_to_cover(length: float) -> int:
    """
    Number of whole 1mm cells needed to cover a length.

    Args:
        length: Length in mm

    Returns:
        Cell count (rounded up)
    """
    return int(math.ceil(round(length, _CELL_PRECISION)))


def cells_within(length: float) -> int:
    """
    Number of whole 1mm cells that fit inside a length.

    Args:
        length: Length in mm

    Returns:
        Cell count (rounded down, never negative)
    """
    return max(0, int(math.floor(round(length, _CELL_PRECISION))))


def footprint_fits(size: RectSize, grid_width: int, grid_height: int) -> bool:
    """
    Check if a print of this size could fit on an empty grid.

    Args:
        size: Print size in mm
        grid_width, grid_height: Grid dimensions in whole mm cells

    Returns:
        True if the footprint is no larger than the grid
    """
    return (cells_to_cover(size.width) <= grid_width and
            cells_to_cover(size.height) <= grid_height)


class PageGrid:
    """
    One page's printable area as a boolean occupancy mask.
    The mask is a flat row-major array; cell (x, y) lives at y * width + x.
    """

    def __init__(self, width: int, height: int, page_number: int,
                 margin: float = 0.0, spacing: float = 0.0):
        """
        Initialize an empty grid.

        Args:
            width, height: Printable area in whole mm cells
            page_number: 1-based page number
            margin: Page margin in mm, added to every placed position
            spacing: Clearance in mm kept to the right of and below each print
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")

        self.width = width
        self.height = height
        self.page_number = page_number
        self.margin = margin
        self.spacing = spacing
        self.spacing_cells = cells_to_cover(spacing)
        self.items: List[PlacedItem] = []
        self.grid = np.zeros(width * height, dtype=bool)
        # Footprints (w, h) that found no free window; occupancy only grows
        self.rejected_footprints: Set[Tuple[int, int]] = set()

    @property
    def cells(self) -> np.ndarray:
        """2D (row, column) view onto the flat mask."""
        return self.grid.reshape(self.height, self.width)

    @property
    def free_cell_count(self) -> int:
        return int(self.grid.size - np.count_nonzero(self.grid))

    def is_known_full(self, w: int, h: int) -> bool:
        """Check if a footprint at least this large was already rejected."""
        return any(w >= rejected_w and h >= rejected_h
                   for rejected_w, rejected_h in self.rejected_footprints)

    def is_region_free(self, x: int, y: int, w: int, h: int) -> bool:
        """Check that every cell in [x, x+w) x [y, y+h) is inside the grid and unoccupied."""
        if x < 0 or y < 0 or x + w > self.width or y + h > self.height:
            return False
        return not self.cells[y:y + h, x:x + w].any()

    def mark_region(self, x: int, y: int, w: int, h: int) -> None:
        self.cells[y:y + h, x:x + w] = True

    def find_first_free(self, w: int, h: int) -> Optional[Tuple[int, int]]:
        """
        Find the first free w x h window in row-major scan order.

        Equivalent to testing is_region_free for y = 0..height-h and, for each
        y, x = 0..width-w, stopping at the first hit. A summed-area table gives
        the occupied-cell count of every window at once.

        Args:
            w, h: Window size in cells

        Returns:
            (x, y) of the first free window, or None if there is none
        """
        if w <= 0 or h <= 0 or w > self.width or h > self.height:
            return None

        table = np.zeros((self.height + 1, self.width + 1), dtype=np.int64)
        table[1:, 1:] = self.cells.cumsum(axis=0, dtype=np.int64).cumsum(axis=1)

        windows = table[h:, w:] - table[:-h, w:] - table[h:, :-w] + table[:-h, :-w]
        free_positions = np.flatnonzero(windows.ravel() == 0)
        if free_positions.size == 0:
            return None

        y, x = divmod(int(free_positions[0]), self.width - w + 1)
        return x, y

    def attempt_place(self, size: RectSize, image_ref: str, item_id: str,
                      source_id: str, background_color: Optional[str] = None) -> Optional[PlacedItem]:
        """
        Place a print at the first free position.

        On success the print's footprint plus the spacing clearance on its
        right and bottom edges (clipped to the grid) is marked occupied.
        On failure the occupancy is untouched; the footprint is remembered so
        later attempts with a footprint at least as large fail without a scan.

        Args:
            size: Print size in mm
            image_ref: Image handle carried through to the placed item
            item_id: Unique id for the placed item
            source_id: Id of the originating photo batch
            background_color: Optional solid background colour

        Returns:
            The PlacedItem, or None if no position is free
        """
        item_w = cells_to_cover(size.width)
        item_h = cells_to_cover(size.height)

        if self.is_known_full(item_w, item_h):
            return None

        position = self.find_first_free(item_w, item_h)
        if position is None:
            self.rejected_footprints.add((item_w, item_h))
            return None

        x, y = position
        placed = PlacedItem(
            id=item_id,
            source_id=source_id,
            image_ref=image_ref,
            x=x + self.margin,
            y=y + self.margin,
            width=size.width,
            height=size.height,
            background_color=background_color
        )

        mark_w = min(item_w + self.spacing_cells, self.width - x)
        mark_h = min(item_h + self.spacing_cells, self.height - y)
        self.mark_region(x, y, mark_w, mark_h)

        self.items.append(placed)
        logger.debug(f"Placed {item_id} on page {self.page_number} at ({x},{y})")
        return placed

    def place_request(self, request: PlacementRequest) -> Optional[PlacedItem]:
        return self.attempt_place(request.size, request.image_ref, request.item_id,
                                  request.source_id, request.background_color)

    def to_page(self, paper_size: RectSize) -> Page:
        """
        Freeze this grid into an output Page.

        Args:
            paper_size: Full paper dimensions reported on the page

        Returns:
            Page with the items in placement order
        """
        return Page(
            page_number=self.page_number,
            width=paper_size.width,
            height=paper_size.height,
            items=tuple(self.items)
        )

    def __str__(self) -> str:
        return f"PageGrid({self.page_number}, {self.width}x{self.height}, {len(self.items)} items)"

    def __repr__(self) -> str:
        return self.__str__()
