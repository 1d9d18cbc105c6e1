# TaskTime - Services
# Business logic layer

from .entry_store import EntryStore
from .session_guard import ActiveSessionGuard, StopOutcome
from .stats import StatsEngine, StatsResult
from .time_entry import TimeEntryService
from .validator import EntryValidator

__all__ = [
    "ActiveSessionGuard",
    "EntryStore",
    "EntryValidator",
    "StatsEngine",
    "StatsResult",
    "StopOutcome",
    "TimeEntryService",
]
