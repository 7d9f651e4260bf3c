"""
Standard photo print sizes, paper sizes and layout defaults.
"""

from typing import Dict

from data_models import LayoutConfig, RectSize


# Standard passport/ID photo sizes
PHOTO_SIZES: Dict[str, RectSize] = {
    '2x3 cm': RectSize(20, 30),
    '3x4 cm': RectSize(30, 40),
    '4x6 cm': RectSize(40, 60),
    '1x2 cm': RectSize(15, 20),
    'Visa Custom (3.5x4.5)': RectSize(35, 45),
    'Square (5x5)': RectSize(50, 50),
}

PAPER_SIZES: Dict[str, RectSize] = {
    'A4': RectSize(210, 297),
    'F4': RectSize(215, 330),
    'Letter': RectSize(216, 279),
    'Legal': RectSize(216, 356),
    '4R': RectSize(102, 152),
}

PAGE_MARGIN_MM = 5.0
ITEM_SPACING_MM = 2.0  # Cutting allowance between prints


def default_layout_config() -> LayoutConfig:
    return LayoutConfig(page_margin=PAGE_MARGIN_MM, item_spacing=ITEM_SPACING_MM)


def _lookup(catalog: Dict[str, RectSize], label: str, kind: str) -> RectSize:
    wanted = str(label).strip().lower()
    for name, size in catalog.items():
        if name.lower() == wanted:
            return size
    raise ValueError(f"Unknown {kind} size '{label}'. Known sizes: {', '.join(catalog)}")


def get_photo_size(label: str) -> RectSize:
    """
    Look up a catalog photo size by label (case insensitive).

    Args:
        label: Catalog label such as '3x4 cm'

    Returns:
        RectSize for the label

    Raises:
        ValueError: If the label is not in the catalog
    """
    return _lookup(PHOTO_SIZES, label, 'photo')


def get_paper_size(label: str) -> RectSize:
    """
    Look up a catalog paper size by label (case insensitive).

    Args:
        label: Catalog label such as 'A4'

    Returns:
        RectSize for the label

    Raises:
        ValueError: If the label is not in the catalog
    """
    return _lookup(PAPER_SIZES, label, 'paper')
