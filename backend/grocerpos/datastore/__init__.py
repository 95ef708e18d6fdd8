from .interface import DataStore, DataStoreError, Filter, as_filters, eq, gte, lte, in_


def build_store(config) -> DataStore:
    """Create the data store selected by DATA_BACKEND."""
    backend = config.get("DATA_BACKEND", "sql")
    if backend == "sql":
        from .sql_store import SqlStore
        return SqlStore()
    if backend == "supabase":
        from .supabase_store import SupabaseStore
        return SupabaseStore.from_config(config.get("SUPABASE_URL"), config.get("SUPABASE_KEY"))
    raise ValueError(f"Unknown DATA_BACKEND: {backend}")


__all__ = [
    'DataStore', 'DataStoreError', 'Filter', 'as_filters',
    'eq', 'gte', 'lte', 'in_', 'build_store',
]
