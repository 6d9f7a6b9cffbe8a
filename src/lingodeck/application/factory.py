"""
Composition root.
Builds the store, data owner and remote adapter from resolved configuration.
"""

from lingodeck.application.app_data import AppDataStore
from lingodeck.application.config import AppConfig
from lingodeck.domain.ports import RemoteSnapshotStore
from lingodeck.infrastructure.adapters.kv_store import FileKeyValueStore
from lingodeck.infrastructure.adapters.paste_service import PasteServiceStore


def get_app_data(config: AppConfig) -> AppDataStore:
    store = FileKeyValueStore(config.data_dir)
    return AppDataStore(store, namespace=config.store_namespace)


def get_remote_store(config: AppConfig) -> RemoteSnapshotStore:
    return PasteServiceStore(
        api_url=config.paste_api_url,
        proxy_url=config.paste_proxy_url,
        expiry_days=config.paste_expiry_days,
        timeout=config.request_timeout,
    )
