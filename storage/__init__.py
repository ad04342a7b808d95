from .schema import LEVELS, MODULES, DTYPES, ITEM_DTYPES, ItemRecord, SessionRow
from .store import (
    init_store,
    save_pool,
    load_pool,
    list_scopes,
    delete_pool,
    validate_records,
    append_session_rows,
    load_sessions,
    query_trend,
    export_ndjson,
)
from .records import RecordStore

__all__ = [
    "LEVELS",
    "MODULES",
    "DTYPES",
    "ITEM_DTYPES",
    "ItemRecord",
    "SessionRow",
    "init_store",
    "save_pool",
    "load_pool",
    "list_scopes",
    "delete_pool",
    "validate_records",
    "append_session_rows",
    "load_sessions",
    "query_trend",
    "export_ndjson",
    "RecordStore",
]
