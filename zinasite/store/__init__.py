"""
Gateway persistence backends.
"""

from zinasite.config import Settings
from zinasite.store.base import RecordStore
from zinasite.store.hosted_store import HostedStore
from zinasite.store.json_store import JsonFileStore


def build_store(settings: Settings) -> RecordStore:
    """Store selected by GATEWAY_STORE: the flat file, or the hosted proxy."""
    if settings.gateway_store == "hosted":
        return HostedStore.with_service_key(settings.supabase_url, settings.supabase_service_key)
    return JsonFileStore(settings.gateway_data_dir)


__all__ = ["RecordStore", "JsonFileStore", "HostedStore", "build_store"]
