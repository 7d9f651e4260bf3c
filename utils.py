"""
Utility functions for PrintWise photo sheet packing.
"""

import logging

from data_models import RectSize


def setup_logging(log_level: str = "INFO") -> None:
    """
    Set up logging configuration for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=log_format,
        handlers=[
            logging.StreamHandler(),
        ]
    )


def format_area(area_mm2: float) -> str:
    """
    Format area for display with appropriate units.

    Args:
        area_mm2: Area in square millimeters

    Returns:
        Formatted area string
    """
    if area_mm2 >= 1_000_000:
        return f"{area_mm2 / 1_000_000:.2f} m²"
    elif area_mm2 >= 100:
        return f"{area_mm2 / 100:.1f} cm²"
    else:
        return f"{area_mm2:.0f} mm²"


def format_percentage(value: float) -> str:
    return f"{value:.1f}%"


def format_size(size: RectSize) -> str:
    """Format a size as 'W x H mm', dropping trailing zeros."""
    return f"{size.width:g} x {size.height:g} mm"
