"""
Input parsers for PrintWise photo sheet packing.
Handles reading photo order sheets and custom paper catalogs from CSV files.
"""

import pandas as pd
import logging
from typing import List, Dict, Any, Optional, Sequence

from catalog import get_photo_size
from data_models import LayoutConfig, PhotoBatch, RectSize
from packing_engine import PackingEngine

logger = logging.getLogger(__name__)

# Alternative column names accepted in order sheets
ORDER_COLUMN_ALIASES = {
    'Photo ID': 'PHOTO ID',
    'ID': 'PHOTO ID',
    'Image': 'IMAGE',
    'Image Path': 'IMAGE',
    'File': 'IMAGE',
    'Quantity': 'QTY',
    'Qty': 'QTY',
    'Size': 'SIZE',
    'Width': 'WIDTH (mm)',
    'Width (mm)': 'WIDTH (mm)',
    'Height': 'HEIGHT (mm)',
    'Height (mm)': 'HEIGHT (mm)',
    'Background': 'BACKGROUND',
    'Background Color': 'BACKGROUND',
}

NO_BACKGROUND_VALUES = {'', 'none', 'transparent'}

# Read ids as text so numeric ids never turn into floats like "1.0"
ID_COLUMN_DTYPES = {name: str for name in ('PHOTO ID', 'Photo ID', 'ID')}


def _safe_str(value) -> str:
    """Convert a cell to a stripped string, treating NaN as empty."""
    if pd.isna(value):
        return ''
    return str(value).strip()


def _parse_background(value) -> Optional[str]:
    text = _safe_str(value)
    if text.lower() in NO_BACKGROUND_VALUES:
        return None
    return text


def _row_size(row: pd.Series, has_size_column: bool, has_dimension_columns: bool) -> RectSize:
    """
    Resolve the print size of an order row.
    Explicit width/height take precedence over a catalog size label.
    """
    if has_dimension_columns:
        width = row['WIDTH (mm)']
        height = row['HEIGHT (mm)']
        if not pd.isna(width) and not pd.isna(height):
            return RectSize(float(width), float(height))

    if has_size_column:
        label = _safe_str(row['SIZE'])
        if label:
            return get_photo_size(label)

    raise ValueError("no SIZE label or WIDTH/HEIGHT given")


def load_photo_batches(filepath: str) -> List[PhotoBatch]:
    """
    Load photo batches from an order sheet CSV.

    Args:
        filepath: Path to the order sheet CSV file

    Returns:
        List of PhotoBatch objects in file order

    Expected CSV columns:
        - PHOTO ID: Unique identifier of the photo
        - IMAGE: Path or handle of the finished image
        - QTY: Number of prints
        - SIZE: Catalog size label (e.g. '3x4 cm'), or
        - WIDTH (mm), HEIGHT (mm): Custom print size
        - BACKGROUND: Optional background colour ('none' to keep the image's own)
    """
    batches = []

    try:
        df = pd.read_csv(filepath, dtype=ID_COLUMN_DTYPES)

        for old_name, new_name in ORDER_COLUMN_ALIASES.items():
            if old_name in df.columns and new_name not in df.columns:
                df = df.rename(columns={old_name: new_name})

        required_columns = ['PHOTO ID', 'IMAGE', 'QTY']
        missing_columns = [col for col in required_columns if col not in df.columns]

        has_size_column = 'SIZE' in df.columns
        has_dimension_columns = 'WIDTH (mm)' in df.columns and 'HEIGHT (mm)' in df.columns
        if not has_size_column and not has_dimension_columns:
            missing_columns.append('SIZE or WIDTH (mm)/HEIGHT (mm)')

        if missing_columns:
            logger.error(f"Missing required columns in order sheet: {missing_columns}")
            logger.error(f"Available columns: {list(df.columns)}")
            raise ValueError(f"Missing required columns in order sheet: {missing_columns}")

        logger.info(f"Loading {len(df)} photos from {filepath}")

        seen_ids = set()
        for index, row in df.iterrows():
            photo_id = _safe_str(row['PHOTO ID'])
            try:
                image_ref = _safe_str(row['IMAGE'])
                raw_quantity = float(row['QTY'])
                size = _row_size(row, has_size_column, has_dimension_columns)
                background = _parse_background(row['BACKGROUND']) if 'BACKGROUND' in df.columns else None

                if not image_ref:
                    logger.warning(f"Missing image for photo {photo_id}, skipping")
                    continue

                if pd.isna(row['QTY']):
                    logger.warning(f"Missing quantity for photo {photo_id}, skipping")
                    continue

                if not raw_quantity.is_integer():
                    logger.warning(f"Fractional quantity for photo {photo_id}: {raw_quantity:g}")
                    continue

                quantity = int(raw_quantity)

                if quantity <= 0:
                    logger.warning(f"Invalid quantity for photo {photo_id}: {quantity}")
                    continue

                if photo_id in seen_ids:
                    logger.warning(f"Duplicate photo id {photo_id} in order sheet")
                seen_ids.add(photo_id)

                batches.append(PhotoBatch(
                    id=photo_id,
                    image_ref=image_ref,
                    size=size,
                    quantity=quantity,
                    background_color=background
                ))

            except (ValueError, TypeError) as e:
                logger.warning(f"Skipping order row {index} ({photo_id or 'no id'}): {e}")
                continue

        logger.info(f"Successfully loaded {len(batches)} photos, "
                    f"{sum(batch.quantity for batch in batches)} prints")
        return batches

    except FileNotFoundError:
        logger.error(f"Order sheet not found: {filepath}")
        raise
    except Exception as e:
        logger.error(f"Error loading order sheet from {filepath}: {e}")
        raise


def load_paper_sizes(filepath: str) -> Dict[str, RectSize]:
    """
    Load a custom paper catalog from CSV.

    Args:
        filepath: Path to the paper catalog CSV file

    Returns:
        Dictionary mapping paper label to its size

    Expected CSV columns:
        - LABEL: Paper name (e.g. 'A5')
        - WIDTH (mm): Paper width
        - HEIGHT (mm): Paper height
    """
    try:
        df = pd.read_csv(filepath)

        required_columns = ['LABEL', 'WIDTH (mm)', 'HEIGHT (mm)']
        missing_columns = [col for col in required_columns if col not in df.columns]

        if missing_columns:
            raise ValueError(f"Missing required columns in paper catalog: {missing_columns}")

        paper_sizes = {}

        logger.info(f"Loading {len(df)} paper sizes from {filepath}")

        for index, row in df.iterrows():
            label = _safe_str(row['LABEL'])
            try:
                if not label:
                    logger.warning(f"Paper row {index} has no label, skipping")
                    continue
                paper_sizes[label] = RectSize(float(row['WIDTH (mm)']), float(row['HEIGHT (mm)']))

            except (ValueError, TypeError) as e:
                logger.warning(f"Invalid dimensions for paper {label}: {e}")
                continue

        logger.info(f"Successfully loaded {len(paper_sizes)} paper sizes")
        return paper_sizes

    except FileNotFoundError:
        logger.error(f"Paper catalog not found: {filepath}")
        raise
    except Exception as e:
        logger.error(f"Error loading paper catalog from {filepath}: {e}")
        raise


def validate_batches(batches: Sequence[PhotoBatch], paper_size: RectSize,
                     config: LayoutConfig) -> Dict[str, Any]:
    """
    Check photo batches against a paper size before packing.

    Args:
        batches: Photo batches to check
        paper_size: Full paper dimensions
        config: Page margin and item spacing

    Returns:
        Dictionary with validation results and statistics
    """
    engine = PackingEngine(paper_size, config)

    validation_results = {
        'total_batches': len(batches),
        'total_prints': sum(batch.quantity for batch in batches),
        'printable_width': engine.printable_width,
        'printable_height': engine.printable_height,
        'usable_config': engine.is_usable,
        'oversized_batches': [],
        'valid_batches': 0
    }

    if not engine.is_usable:
        logger.warning(f"Paper {paper_size} has no printable area with a {config.page_margin:g}mm margin")
        return validation_results

    for batch in batches:
        if engine.fits_printable_area(batch.size):
            validation_results['valid_batches'] += 1
        else:
            validation_results['oversized_batches'].append(batch.id)

    if validation_results['oversized_batches']:
        logger.warning(f"Photos too large for {paper_size} paper: {validation_results['oversized_batches']}")

    logger.info(f"Validation complete: {validation_results['valid_batches']} valid photos, "
                f"{len(validation_results['oversized_batches'])} oversized")

    return validation_results
