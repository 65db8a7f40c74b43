"""
Durable storage of the vault collection as a single JSON file.
"""

import os
import json
import shutil
import logging
import threading
from typing import List, Optional, Sequence, Union

from .models import Vault
from .utils import set_owner_only_permissions
from . import config

logger = logging.getLogger(__name__)


def default_storage_path() -> str:
    """Get the default path of the vaults file under the user's home directory."""
    home = os.path.expanduser("~")
    return os.path.join(home, config.CONFIG_DIR_NAME, config.DATA_DIR_NAME, config.VAULTS_FILE_NAME)


def _check_collection(vaults: List[Vault]) -> None:
    """Reject a decoded collection that no manager could have written."""
    ids = [v.id for v in vaults]
    if len(ids) != len(set(ids)):
        raise ValueError("duplicate vault ids")
    passcodes = [v.passcode for v in vaults if v.passcode is not None]
    if len(passcodes) != len(set(passcodes)):
        raise ValueError("duplicate passcodes")
    if sum(1 for v in vaults if v.biometric_enabled) > 1:
        raise ValueError("more than one biometric vault")


class VaultsStorage:
    """Persists and retrieves the whole vault collection.

    The store has no notion of "the" collection: each save replaces the file
    with exactly the sequence it is given.
    """

    def __init__(self, filepath: Optional[Union[str, os.PathLike]] = None):
        """
        Initialize the store.
        Args:
            filepath: Path to the vaults file. Defaults to default_storage_path().
        """
        self.filepath = os.fspath(filepath) if filepath is not None else default_storage_path()
        self._lock = threading.Lock()

    @property
    def tmp_filepath(self) -> str:
        return self.filepath + config.TMP_FILE_SUFFIX

    def exists(self) -> bool:
        """Check if the vaults file has been written yet."""
        return os.path.exists(self.filepath)

    def save(self, vaults: Sequence[Vault]) -> None:
        """
        Replace the persisted collection with `vaults`.
        The file is written to a temporary sibling first and moved over the
        real one, so a failed save leaves the previous contents readable.
        Raises the underlying OSError/TypeError/ValueError on failure.
        """
        plaintext = json.dumps([v.to_dict() for v in vaults], indent=config.JSON_INDENT)

        with self._lock:
            try:
                directory = os.path.dirname(self.filepath)
                if directory:
                    os.makedirs(directory, exist_ok=True)

                with open(self.tmp_filepath, 'w', encoding=config.JSON_ENCODING) as f:
                    f.write(plaintext)

                # Atomic replace using shutil.move
                shutil.move(self.tmp_filepath, self.filepath)
            except Exception as e:
                logger.error(f"Error saving vaults file {self.filepath}: {e}", exc_info=True)
                if os.path.exists(self.tmp_filepath):
                    os.remove(self.tmp_filepath)
                raise

            # The file is already in place; hardening failures must not fail the save.
            try:
                if not set_owner_only_permissions(self.filepath):
                    logger.warning(f"Failed to set owner-only permissions for vaults file: {self.filepath}.")
            except OSError as e:
                logger.warning(f"Could not change permissions of {self.filepath}: {e}")

        logger.debug(f"Saved {len(vaults)} vault(s) to {self.filepath}")

    def load(self) -> List[Vault]:
        """
        Load the persisted collection.
        Returns an empty list if no file exists yet. A file that cannot be read
        or decoded is logged and also yields an empty list.
        """
        with self._lock:
            if not os.path.exists(self.filepath):
                logger.info(f"No vaults file at {self.filepath}, starting empty.")
                return []

            try:
                with open(self.filepath, 'r', encoding=config.JSON_ENCODING) as f:
                    data = json.load(f)
                if not isinstance(data, list):
                    raise ValueError(f"expected a JSON array, got {type(data).__name__}")
                vaults = [Vault.from_dict(item) for item in data]
                _check_collection(vaults)
            except (OSError, ValueError, KeyError, TypeError) as e:
                logger.error(f"Error loading vaults from {self.filepath}: {e}", exc_info=True)
                return []

        logger.info(f"Loaded {len(vaults)} vault(s) from {self.filepath}")
        return vaults
