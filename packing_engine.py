"""
Page packing engine for PrintWise.
Expands photo batches into individual prints and places them first-fit across
as many pages as needed, creating pages on demand.
"""

import logging
from typing import List, Sequence, Tuple

from data_models import LayoutConfig, Page, PhotoBatch, PlacementRequest, RectSize
from page_grid import PageGrid, cells_within, footprint_fits

logger = logging.getLogger(__name__)


class PackingError(ValueError):
    """Base class for packing failures."""


class UnsatisfiableRequestError(PackingError):
    """
    Raised when a photo size can never fit the printable area of the paper.

    Attributes:
        source_id: Id of the offending photo batch
        size: Requested print size
        printable_size: Printable area (width, height) of the paper in mm
    """

    def __init__(self, source_id: str, size: RectSize, printable_size: Tuple[float, float]):
        self.source_id = source_id
        self.size = size
        self.printable_size = printable_size
        super().__init__(
            f"Photo {source_id} ({size}) does not fit the printable area "
            f"{printable_size[0]:g}x{printable_size[1]:g}mm"
        )


def expand_batches(photo_batches: Sequence[PhotoBatch]) -> List[PlacementRequest]:
    """
    Expand photo batches into one placement request per print.

    Args:
        photo_batches: Batches in the order they should be placed

    Returns:
        Requests in batch order, then print order within a batch, with
        strictly increasing sequence indices starting at 0
    """
    requests = []
    sequence_index = 0

    for batch in photo_batches:
        for _ in range(batch.quantity):
            requests.append(PlacementRequest(
                source_id=batch.id,
                sequence_index=sequence_index,
                size=batch.size,
                image_ref=batch.image_ref,
                background_color=batch.background_color
            ))
            sequence_index += 1

    return requests


class PackingEngine:
    """First-fit, multi-page packing of photo prints onto paper sheets."""

    def __init__(self, paper_size: RectSize, config: LayoutConfig):
        """
        Initialize the engine for one paper size and layout configuration.

        Args:
            paper_size: Full paper dimensions in mm
            config: Page margin and item spacing
        """
        self.paper_size = paper_size
        self.config = config
        self.printable_width, self.printable_height = config.printable_area(paper_size)
        self.grid_width = cells_within(self.printable_width)
        self.grid_height = cells_within(self.printable_height)

    @property
    def is_usable(self) -> bool:
        """False when the margins leave no printable area on the paper."""
        return (self.printable_width > 0 and self.printable_height > 0 and
                self.grid_width > 0 and self.grid_height > 0)

    def fits_printable_area(self, size: RectSize) -> bool:
        return footprint_fits(size, self.grid_width, self.grid_height)

    def _new_grid(self, page_number: int) -> PageGrid:
        return PageGrid(self.grid_width, self.grid_height, page_number,
                        self.config.page_margin, self.config.item_spacing)

    def _check_requests(self, requests: List[PlacementRequest]) -> None:
        checked = set()
        for request in requests:
            if request.size in checked:
                continue
            if not self.fits_printable_area(request.size):
                logger.warning(f"Photo {request.source_id} ({request.size}) exceeds printable area "
                               f"{self.printable_width:g}x{self.printable_height:g}mm")
                raise UnsatisfiableRequestError(
                    request.source_id, request.size,
                    (self.printable_width, self.printable_height)
                )
            checked.add(request.size)

    def pack(self, photo_batches: Sequence[PhotoBatch]) -> List[Page]:
        """
        Lay out every print of every batch.

        Args:
            photo_batches: Batches in placement priority order

        Returns:
            Pages in creation order; empty if the margins leave no printable area

        Raises:
            UnsatisfiableRequestError: If a photo size exceeds the printable area
        """
        if not self.is_usable:
            logger.warning(f"Paper {self.paper_size} is too small for a {self.config.page_margin:g}mm margin, "
                           f"no pages produced")
            return []

        requests = expand_batches(photo_batches)
        self._check_requests(requests)

        logger.info(f"Packing {len(requests)} prints from {len(photo_batches)} photos onto "
                    f"{self.paper_size} paper (printable {self.grid_width}x{self.grid_height}mm)")

        grids: List[PageGrid] = []

        for request in requests:
            placed = False

            # Try existing pages in creation order
            for grid in grids:
                if grid.place_request(request) is not None:
                    placed = True
                    break

            if not placed:
                new_grid = self._new_grid(len(grids) + 1)
                if new_grid.place_request(request) is None:
                    raise UnsatisfiableRequestError(
                        request.source_id, request.size,
                        (self.printable_width, self.printable_height)
                    )
                grids.append(new_grid)
                logger.info(f"Created page {new_grid.page_number} for {request.item_id}")

        pages = [grid.to_page(self.paper_size) for grid in grids]
        logger.info(f"Packing complete: {len(requests)} prints on {len(pages)} pages")
        return pages


def run_packing(photo_batches: Sequence[PhotoBatch], paper_size: RectSize,
                config: LayoutConfig) -> List[Page]:
    """Pack photo batches onto pages of the given paper size."""
    engine = PackingEngine(paper_size, config)
    return engine.pack(photo_batches)


def would_create_new_page(photo_batches: Sequence[PhotoBatch], candidate: PhotoBatch,
                          paper_size: RectSize, config: LayoutConfig) -> bool:
    """
    Check whether adding a batch would need more pages than the current layout.

    Both layouts are packed from scratch, so the answer always agrees with
    what pack() returns once the candidate is committed.

    Args:
        photo_batches: Batches already committed
        candidate: Batch being considered
        paper_size: Full paper dimensions
        config: Page margin and item spacing

    Returns:
        True if the candidate increases the page count

    Raises:
        UnsatisfiableRequestError: If any photo size exceeds the printable area
    """
    current_pages = run_packing(photo_batches, paper_size, config)
    simulated_pages = run_packing(list(photo_batches) + [candidate], paper_size, config)
    return len(simulated_pages) > len(current_pages)
