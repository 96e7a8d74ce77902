"""
Core addressing and lookup logic

Pure helpers over sheet snapshots plus the get-or-create resolver.
"""
from . import addressing
from . import table
from .resolver import RecordResolver, DEFAULT_KEY_HEADER

__all__ = ['addressing', 'table', 'RecordResolver', 'DEFAULT_KEY_HEADER']
