"""
Musik Handlers - User input handling.
"""
from .search_form import SearchForm, validate

__all__ = ['SearchForm', 'validate']
