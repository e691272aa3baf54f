"""
Search Form - Validates user input and builds search queries.
"""
import logging
from typing import Dict, Optional

from ..config import (
    FORM_DEFAULTS, MEDIA_TYPES, COUNTRIES, EXPLICIT_CHOICES,
    KEYWORD_MIN_LENGTH, KEYWORD_MAX_LENGTH, LIMIT_MIN, LIMIT_MAX,
)
from ..models import SearchQuery, Validation

logger = logging.getLogger(__name__)

FIELDS = tuple(FORM_DEFAULTS)


def _parse_limit(value) -> Optional[int]:
    """Parse the limit field, None unless it is a whole number in range."""
    if value is None:
        return None
    text = str(value).strip()
    # Plain ASCII digits only, int() would also take '1_0' or other scripts
    if not (text.isascii() and text.isdecimal()):
        return None
    limit = int(text)
    if limit < LIMIT_MIN or limit > LIMIT_MAX:
        return None
    return limit


def validate(raw: Dict[str, str]) -> Validation:
    """
    Validate raw form fields and build a SearchQuery.

    Every rule is checked so all field errors are reported together.
    No query is built when any rule fails.
    """
    errors: Dict[str, str] = {}

    keyword = (raw.get('keyword') or '')[:KEYWORD_MAX_LENGTH].strip()
    if not keyword:
        errors['keyword'] = 'Search keyword is required'
    elif len(keyword) < KEYWORD_MIN_LENGTH:
        errors['keyword'] = f'Keyword must be at least {KEYWORD_MIN_LENGTH} characters'

    media_type = raw.get('mediaType') or ''
    if media_type not in MEDIA_TYPES:
        errors['mediaType'] = 'Please select a media type'

    country = raw.get('country') or ''
    if country not in COUNTRIES:
        errors['country'] = 'Please select a country'

    limit = _parse_limit(raw.get('limit'))
    if limit is None:
        errors['limit'] = f'Limit must be between {LIMIT_MIN} and {LIMIT_MAX}'

    explicit = raw.get('explicit') or 'all'
    if explicit not in EXPLICIT_CHOICES:
        logger.warning(f'Unknown explicit preference {explicit!r}, using "all"')
        explicit = 'all'

    if errors:
        logger.debug(f'Search form invalid: {sorted(errors)}')
        return Validation(errors=errors)

    return Validation(query=SearchQuery(
        keyword=keyword,
        media_type=media_type,
        country=country,
        limit=limit,
        explicit=explicit,
    ))


class SearchForm:
    """Holds the raw search fields and their current errors."""

    def __init__(self, **values):
        self.values: Dict[str, str] = dict(FORM_DEFAULTS)
        self.errors: Dict[str, str] = {}
        for name, value in values.items():
            self.update(name, value)

    def update(self, name: str, value) -> None:
        """Set one field. Clears any error shown for that field."""
        if name not in FIELDS:
            raise KeyError(f'Unknown search field: {name}')
        value = '' if value is None else str(value)
        if name == 'keyword':
            value = value[:KEYWORD_MAX_LENGTH]
        self.values[name] = value
        self.errors.pop(name, None)

    def submit(self) -> Validation:
        """Validate the current fields, remembering any errors."""
        result = validate(self.values)
        self.errors = dict(result.errors)
        return result

    def reset(self) -> None:
        """Restore default values and clear all errors."""
        self.values = dict(FORM_DEFAULTS)
        self.errors = {}
