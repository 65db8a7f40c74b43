"""
Per-vault folder lifecycle.
"""

import os
import shutil
import logging
from pathlib import Path
from typing import Union

from .errors import VaultFolderError

logger = logging.getLogger(__name__)


class VaultFolders:
    """Creates and removes the folder backing each vault.

    Both operations resolve folders against the same parent folder and are
    idempotent.
    """

    def __init__(self, parent_folder: Union[str, os.PathLike]):
        self.parent_folder = Path(parent_folder)

    def folder_for(self, vault_id: str) -> Path:
        return self.parent_folder / vault_id

    def folder_exists(self, vault_id: str) -> bool:
        return self.folder_for(vault_id).is_dir()

    def create_folder(self, vault_id: str) -> Path:
        folder = self.folder_for(vault_id)
        try:
            folder.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise VaultFolderError(f"Could not create folder {folder}: {e}") from e
        logger.debug(f"Created vault folder {folder}")
        return folder

    def delete_folder(self, vault_id: str) -> None:
        folder = self.folder_for(vault_id)
        if not folder.exists():
            return
        try:
            shutil.rmtree(folder)
        except OSError as e:
            raise VaultFolderError(f"Could not delete folder {folder}: {e}") from e
        logger.debug(f"Deleted vault folder {folder}")
