"""In-memory identity storage."""

from disqus_client.models import Identity
from disqus_client.storage.base import IdentityStorage


class MemoryStorage(IdentityStorage):
    """Keeps the serialized identity for the lifetime of the process."""

    def __init__(self, identity: Identity | None = None):
        self._data = identity.to_storage() if identity is not None else None

    async def load(self) -> Identity | None:
        if self._data is None:
            return None
        return Identity.model_validate(self._data)

    async def save(self, identity: Identity) -> bool:
        self._data = identity.to_storage()
        return True

    async def exists(self) -> bool:
        return self._data is not None

    async def delete(self) -> bool:
        existed = self._data is not None
        self._data = None
        return existed

    def get_location(self) -> str:
        return "memory"
