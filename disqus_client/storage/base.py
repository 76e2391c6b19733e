"""Abstract base class for identity storage."""

from abc import ABC, abstractmethod

from disqus_client.models import Identity


class IdentityStorage(ABC):
    """Abstract interface for persisting the authenticated identity.

    Implementations store a single identity under a fixed key. ``save`` is
    called on every identity mutation and ``delete`` on logout.
    """

    @abstractmethod
    async def load(self) -> Identity | None:
        """Load the identity from storage.

        Returns:
            Parsed identity if found, None otherwise

        Raises:
            CredentialsInvalidError: If the stored data cannot be decoded
            CredentialsStorageError: If the storage cannot be read
        """
        pass

    @abstractmethod
    async def save(self, identity: Identity) -> bool:
        """Save the identity to storage.

        Args:
            identity: Identity to save

        Returns:
            True if saved successfully
        """
        pass

    @abstractmethod
    async def exists(self) -> bool:
        """Check if an identity exists in storage."""
        pass

    @abstractmethod
    async def delete(self) -> bool:
        """Delete the identity from storage.

        Returns:
            True if something was deleted, False if storage was already empty
        """
        pass

    @abstractmethod
    def get_location(self) -> str:
        """Get a human-readable description of where the identity is stored."""
        pass
