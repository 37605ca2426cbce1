"""Navigation tree and page synchronization."""

from .tree import NavigationTree, NavigationCycleError, NO_PARENT
from .sync import PageSynchronizer, SyncAction, SyncResult
from .service import NavigationService

__all__ = [
    "NavigationTree",
    "NavigationCycleError",
    "NO_PARENT",
    "PageSynchronizer",
    "SyncAction",
    "SyncResult",
    "NavigationService"
]
