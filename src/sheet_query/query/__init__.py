from .builder import QueryBuilder, UpdateFn, WhereFn, sheet_query
from .cache import CachedValue, CacheState
from .models import BatchResult, RowHandle, RowRecord

__all__ = [
    "QueryBuilder",
    "sheet_query",
    "WhereFn",
    "UpdateFn",
    "CachedValue",
    "CacheState",
    "BatchResult",
    "RowHandle",
    "RowRecord",
]
