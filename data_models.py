"""
Core data models for PrintWise photo sheet packing.
Defines RectSize, PhotoBatch, PlacementRequest, PlacedItem, Page and LayoutConfig.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RectSize:
    """
    Physical rectangle dimensions in millimetres.
    Used both for photo print sizes and for paper sizes.
    """
    width: float
    height: float

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Dimensions must be positive, got {self.width}x{self.height}mm")

    def __str__(self) -> str:
        return f"{self.width:g}x{self.height:g}mm"


@dataclass(frozen=True)
class LayoutConfig:
    """Margins applied to one packing run, in millimetres."""
    page_margin: float = 0.0
    item_spacing: float = 0.0

    def __post_init__(self):
        if self.page_margin < 0:
            raise ValueError(f"Page margin cannot be negative: {self.page_margin}")
        if self.item_spacing < 0:
            raise ValueError(f"Item spacing cannot be negative: {self.item_spacing}")

    def printable_area(self, paper_size: RectSize) -> Tuple[float, float]:
        """
        Calculate the printable area of a paper sheet.

        Args:
            paper_size: Full paper dimensions

        Returns:
            Tuple of (width, height); either may be zero or negative when
            the margins consume the whole sheet
        """
        return (paper_size.width - 2 * self.page_margin,
                paper_size.height - 2 * self.page_margin)


@dataclass(frozen=True)
class PhotoBatch:
    """
    One photo declared by the editor with its print size and quantity.

    Attributes:
        id: Unique identifier of the photo batch
        image_ref: Opaque handle to the finished pixel data (path, URL, key)
        size: Declared print size
        quantity: Number of prints requested
        background_color: Solid background colour, or None to keep the
            image's own background
    """
    id: str
    image_ref: str
    size: RectSize
    quantity: int = 1
    background_color: Optional[str] = None

    def __post_init__(self):
        if not str(self.id).strip():
            raise ValueError("Photo batch id cannot be empty")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValueError(f"Quantity for photo {self.id} must be an integer, got {self.quantity!r}")
        if self.quantity <= 0:
            raise ValueError(f"Quantity for photo {self.id} must be positive, got {self.quantity}")

    def __str__(self) -> str:
        return f"PhotoBatch({self.id}, {self.size}, x{self.quantity})"


@dataclass(frozen=True)
class PlacementRequest:
    """A single print waiting to be placed, expanded from a PhotoBatch."""
    source_id: str
    sequence_index: int
    size: RectSize
    image_ref: str
    background_color: Optional[str] = None

    @property
    def item_id(self) -> str:
        return f"{self.source_id}-{self.sequence_index}"


@dataclass(frozen=True)
class PlacedItem:
    """
    A print placed on a page.
    x and y are the top-left corner relative to the paper's top-left corner,
    with the page margin already applied.
    """
    id: str
    source_id: str
    image_ref: str
    x: float
    y: float
    width: float
    height: float
    background_color: Optional[str] = None

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def overlaps(self, other: 'PlacedItem') -> bool:
        """
        Check if two placed items intersect (shared edges do not count).

        Args:
            other: Item to compare against

        Returns:
            True if the rectangles overlap
        """
        return not (self.right <= other.x or other.right <= self.x or
                    self.bottom <= other.y or other.bottom <= self.y)

    def __str__(self) -> str:
        return f"PlacedItem({self.id}, {self.width:g}x{self.height:g} at ({self.x:g},{self.y:g}))"


@dataclass(frozen=True)
class Page:
    """
    One paper sheet of the final layout.
    width and height are the full paper dimensions, not the printable area.
    """
    page_number: int
    width: float
    height: float
    items: Tuple[PlacedItem, ...] = ()

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def used_area(self) -> float:
        return sum(item.width * item.height for item in self.items)

    def get_utilization_percentage(self) -> float:
        """
        Calculate the percentage of the paper covered by prints.

        Returns:
            Utilization percentage (0-100)
        """
        total_area = self.width * self.height
        if total_area == 0:
            return 0.0
        return (self.used_area / total_area) * 100

    def __str__(self) -> str:
        return f"Page({self.page_number}, {self.width:g}x{self.height:g}mm, {len(self.items)} items)"
