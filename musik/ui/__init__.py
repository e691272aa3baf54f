"""
Musik UI - Terminal rendering and formatting.
"""
from .helpers import (
    format_price,
    format_date,
    format_year,
    format_duration,
    truncate_text,
    parse_choice,
)
from .renderer import Renderer

__all__ = [
    'format_price',
    'format_date',
    'format_year',
    'format_duration',
    'truncate_text',
    'parse_choice',
    'Renderer',
]
