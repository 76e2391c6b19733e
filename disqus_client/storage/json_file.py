"""JSON file storage backend for the authenticated identity."""

import asyncio
import contextlib
import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from disqus_client.core.logging import get_logger
from disqus_client.exceptions import CredentialsInvalidError, CredentialsStorageError
from disqus_client.models import Identity
from disqus_client.storage.base import IdentityStorage


logger = get_logger(__name__)


class JsonFileStorage(IdentityStorage):
    """Stores the identity as a JSON file readable by its owner only.

    Writes are atomic: data goes to a temporary file which then replaces
    the target.
    """

    def __init__(self, file_path: Path):
        """Initialize JSON file storage.

        Args:
            file_path: Path to the JSON identity file
        """
        self.file_path = file_path

    async def load(self) -> Identity | None:
        data = await self._read_json()
        if data is None:
            logger.debug("identity_file_not_found", path=str(self.file_path))
            return None

        try:
            identity = Identity.model_validate(data)
        except ValidationError as e:
            raise CredentialsInvalidError(
                f"Invalid identity data in {self.file_path}: {e}"
            ) from e

        logger.debug("identity_loaded", path=str(self.file_path))
        return identity

    async def save(self, identity: Identity) -> bool:
        await self._write_json(identity.to_storage())
        return True

    async def exists(self) -> bool:
        return await asyncio.to_thread(
            lambda: self.file_path.exists() and self.file_path.is_file()
        )

    async def delete(self) -> bool:
        try:
            if await self.exists():
                await asyncio.to_thread(self.file_path.unlink)
                logger.debug("identity_file_deleted", path=str(self.file_path))
                return True
            return False
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error(
                "identity_file_delete_error",
                path=str(self.file_path),
                error=str(e),
                exc_info=e,
            )
            raise CredentialsStorageError(
                f"Error deleting {self.file_path}: {e}"
            ) from e

    def get_location(self) -> str:
        return str(self.file_path)

    async def _read_json(self) -> dict[str, Any] | None:
        if not await self.exists():
            return None

        def read_file() -> Any:
            with self.file_path.open("r") as f:
                return json.load(f)

        try:
            data = await asyncio.to_thread(read_file)
        except json.JSONDecodeError as e:
            logger.error(
                "json_decode_error",
                path=str(self.file_path),
                error=str(e),
                line=e.lineno,
            )
            raise CredentialsInvalidError(
                f"Invalid JSON in {self.file_path}: {e}"
            ) from e
        except FileNotFoundError:
            # Deleted between the exists() check and the read
            return None
        except OSError as e:
            logger.error(
                "file_read_error",
                path=str(self.file_path),
                error=str(e),
                exc_info=e,
            )
            raise CredentialsStorageError(f"Error reading {self.file_path}: {e}") from e

        if not isinstance(data, dict):
            raise CredentialsInvalidError(
                f"Expected a JSON object in {self.file_path}"
            )
        return data

    async def _write_json(self, data: dict[str, Any]) -> None:
        temp_path = self.file_path.with_suffix(".tmp")

        try:
            await asyncio.to_thread(
                self.file_path.parent.mkdir,
                parents=True,
                exist_ok=True,
            )

            def write_file() -> None:
                with temp_path.open("w") as f:
                    json.dump(data, f, indent=2)
                temp_path.chmod(0o600)
                temp_path.replace(self.file_path)

            await asyncio.to_thread(write_file)

            logger.debug("identity_file_written", path=str(self.file_path))

        except (TypeError, ValueError) as e:
            raise CredentialsStorageError(f"Failed to encode JSON: {e}") from e

        except OSError as e:
            logger.error(
                "file_write_error",
                path=str(self.file_path),
                error=str(e),
                exc_info=e,
            )
            raise CredentialsStorageError(f"Error writing {self.file_path}: {e}") from e

        finally:
            if temp_path.exists():
                with contextlib.suppress(OSError):
                    temp_path.unlink()
