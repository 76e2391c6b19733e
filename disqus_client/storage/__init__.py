"""Identity storage backends."""

from disqus_client.config.settings import IDENTITY_STORAGE_KEY, DisqusSettings
from disqus_client.storage.base import IdentityStorage
from disqus_client.storage.json_file import JsonFileStorage
from disqus_client.storage.keyring_storage import KeyringStorage
from disqus_client.storage.memory import MemoryStorage


def create_storage(settings: DisqusSettings) -> IdentityStorage:
    """Create the storage backend selected by ``settings.storage.backend``."""
    storage_settings = settings.storage
    if storage_settings.backend == "keyring":
        return KeyringStorage(
            service=storage_settings.keyring_service,
            username=IDENTITY_STORAGE_KEY,
        )
    if storage_settings.backend == "memory":
        return MemoryStorage()
    return JsonFileStorage(storage_settings.path)


__all__ = [
    "IdentityStorage",
    "JsonFileStorage",
    "KeyringStorage",
    "MemoryStorage",
    "create_storage",
]
