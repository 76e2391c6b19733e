"""System keyring storage backend for the authenticated identity."""

import asyncio
import json

import keyring
from keyring.errors import KeyringError, PasswordDeleteError
from pydantic import ValidationError

from disqus_client.core.logging import get_logger
from disqus_client.exceptions import CredentialsInvalidError, CredentialsStorageError
from disqus_client.models import Identity
from disqus_client.storage.base import IdentityStorage


logger = get_logger(__name__)


class KeyringStorage(IdentityStorage):
    """Stores the identity JSON as a password in the system keyring."""

    def __init__(self, service: str, username: str = "disqusLoggedUser"):
        """Initialize keyring storage.

        Args:
            service: Keyring service name
            username: Keyring entry name holding the identity
        """
        self.service = service
        self.username = username

    async def load(self) -> Identity | None:
        try:
            payload = await asyncio.to_thread(
                keyring.get_password, self.service, self.username
            )
        except KeyringError as e:
            raise CredentialsStorageError(f"Keyring read failed: {e}") from e

        if not payload:
            logger.debug("keyring_identity_not_found", service=self.service)
            return None

        try:
            return Identity.model_validate(json.loads(payload))
        except (json.JSONDecodeError, ValidationError) as e:
            raise CredentialsInvalidError(
                f"Invalid identity data in keyring entry {self.service}/{self.username}: {e}"
            ) from e

    async def save(self, identity: Identity) -> bool:
        payload = json.dumps(identity.to_storage())
        try:
            await asyncio.to_thread(
                keyring.set_password, self.service, self.username, payload
            )
        except KeyringError as e:
            raise CredentialsStorageError(f"Keyring write failed: {e}") from e
        logger.debug("keyring_identity_saved", service=self.service)
        return True

    async def exists(self) -> bool:
        try:
            payload = await asyncio.to_thread(
                keyring.get_password, self.service, self.username
            )
        except KeyringError:
            return False
        return bool(payload)

    async def delete(self) -> bool:
        try:
            await asyncio.to_thread(
                keyring.delete_password, self.service, self.username
            )
        except PasswordDeleteError:
            return False
        except KeyringError as e:
            raise CredentialsStorageError(f"Keyring delete failed: {e}") from e
        logger.debug("keyring_identity_deleted", service=self.service)
        return True

    def get_location(self) -> str:
        return f"keyring:{self.service}/{self.username}"
