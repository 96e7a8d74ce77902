"""
Result update orchestration.
"""
from .service import ResultUpdater, UpdateResult

__all__ = ['ResultUpdater', 'UpdateResult']
