"""
UI Helpers - Text formatting for track fields.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional


def format_price(price: Optional[Decimal], currency: Optional[str] = None) -> str:
    """Price with currency prefix, 'N/A' when unknown."""
    if price is None:
        return 'N/A'
    return f'{currency or "$"}{Decimal(price):.2f}'


def format_date(value: Optional[datetime]) -> str:
    """Release date as 'Jan 5, 2020'."""
    if not value:
        return 'N/A'
    return f'{value:%b} {value.day}, {value.year}'


def format_year(value: Optional[datetime]) -> str:
    return str(value.year) if value else 'N/A'


def format_duration(milliseconds: Optional[int]) -> str:
    """Duration as m:ss."""
    if not milliseconds:
        return 'N/A'
    minutes, seconds = divmod(milliseconds // 1000, 60)
    return f'{minutes}:{seconds:02d}'


def truncate_text(text: Optional[str], max_length: int = 30) -> str:
    if not text:
        return 'N/A'
    return f'{text[:max_length]}...' if len(text) > max_length else text


def parse_choice(choice: str, count: int) -> list:
    """
    Parse a row selection like '1,3-5' into zero-based indexes.

    Out-of-range rows are skipped. Raises ValueError on malformed input.
    """
    indexes = []
    for part in choice.split(','):
        part = part.strip()
        if not part:
            continue
        if '-' in part:
            start, end = map(int, part.split('-', 1))
            rows = range(max(start, 1), min(end, count) + 1)
        else:
            rows = [int(part)]
        for row in rows:
            if 1 <= row <= count and row - 1 not in indexes:
                indexes.append(row - 1)
    return indexes
