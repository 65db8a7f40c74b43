"""
In-memory manager of the vault collection.

The manager is the only writer of the collection. Every public operation runs
under one lock for its whole check-mutate-persist sequence, after the initial
background load of the durable store has been applied.
"""

import os
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Union

from .errors import (
    PasscodeAlreadyExistsError,
    VaultFolderError,
    VaultNotFoundError,
    VaultPersistenceError,
)
from .folders import VaultFolders
from .models import Vault
from .storage import VaultsStorage
from . import config

logger = logging.getLogger(__name__)


class VaultsCoreManager:
    """Owns the live vault collection and keeps it consistent with disk."""

    def __init__(self, parent_folder: Union[str, os.PathLike],
                 storage: Optional[VaultsStorage] = None,
                 folders: Optional[VaultFolders] = None):
        """
        Initialize the manager and start loading the store in the background.
        Args:
            parent_folder: Folder under which each vault gets its own folder
            storage: Durable store. Defaults to VaultsStorage() at the default path
            folders: Folder lifecycle. Defaults to VaultFolders(parent_folder)
        """
        self._parent_folder = Path(parent_folder)
        self.storage = storage if storage is not None else VaultsStorage()
        self.folders = folders if folders is not None else VaultFolders(self._parent_folder)
        self._lock = threading.Lock()
        self._vaults: List[Vault] = []

        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=config.LOAD_THREAD_NAME_PREFIX)
        self._load_future: Optional[Future] = executor.submit(self.storage.load)
        executor.shutdown(wait=False)
        logger.info(f"{config.APP_NAME} v{config.APP_VERSION} started for {self._parent_folder}")

    @property
    def parent_folder(self) -> Path:
        return self._parent_folder

    # Loading

    def _ensure_loaded_locked(self) -> None:
        if self._load_future is not None:
            self._vaults = list(self._load_future.result())
            self._load_future = None

    @contextmanager
    def _loaded(self) -> Iterator[None]:
        with self._lock:
            self._ensure_loaded_locked()
            yield

    def ensure_loaded(self) -> None:
        """Block until the initial load has been applied."""
        with self._loaded():
            pass

    # Core functionality

    def add_vault(self, passcode: Optional[str] = None) -> Vault:
        """
        Create a new vault, optionally with a passcode.
        Raises PasscodeAlreadyExistsError, VaultFolderError or VaultPersistenceError.
        """
        with self._loaded():
            return self._create_vault(passcode, biometric_enabled=False)

    def create_biometric_vault(self, passcode: Optional[str] = None) -> Optional[Vault]:
        """
        Create the vault that may be opened via biometrics.
        Returns None, without side effects, if a biometric vault already exists.
        """
        with self._loaded():
            if self._biometric_vault() is not None:
                logger.warning("A biometric vault already exists, not creating another.")
                return None
            return self._create_vault(passcode, biometric_enabled=True)

    def delete_vault(self, vault: Union[Vault, str]) -> None:
        """
        Delete a vault, given either the vault or its id, together with its folder.
        Raises VaultNotFoundError, VaultFolderError or VaultPersistenceError.
        """
        vault_id = vault.id if isinstance(vault, Vault) else vault
        with self._loaded():
            index = self._index_of(vault_id)
            self.folders.delete_folder(vault_id)

            remaining = self._vaults[:index] + self._vaults[index + 1:]
            try:
                self._commit(remaining)
            except VaultPersistenceError:
                self._restore_folder(vault_id)
                raise
            logger.info(f"Deleted vault {vault_id}")

    def list_vaults(self) -> List[Vault]:
        """Get all vaults in creation order."""
        with self._loaded():
            return list(self._vaults)

    def get_vault(self, vault_id: str) -> Optional[Vault]:
        with self._loaded():
            return next((v for v in self._vaults if v.id == vault_id), None)

    # Biometric vault management

    def get_biometric_vault(self) -> Optional[Vault]:
        """Return the single vault allowed to be opened via biometrics, if any."""
        with self._loaded():
            return self._biometric_vault()

    def biometric_vault_exists(self) -> bool:
        with self._loaded():
            return self._biometric_vault() is not None

    # Passcode management

    def find_by_passcode(self, passcode: str) -> Optional[Vault]:
        with self._loaded():
            return self._passcode_holder(passcode)

    def set_passcode(self, vault_id: str, new_passcode: str) -> Vault:
        """
        Set the passcode of the vault with the given id.
        Raises VaultNotFoundError, PasscodeAlreadyExistsError or VaultPersistenceError.
        """
        with self._loaded():
            index = self._index_of(vault_id)
            self._check_passcode_free(new_passcode, owner_id=vault_id)
            return self._update_at(index, passcode=new_passcode)

    def change_passcode(self, old_passcode: str, new_passcode: str) -> Vault:
        """
        Change the passcode of whichever vault currently holds `old_passcode`.
        An unknown `old_passcode` raises VaultNotFoundError.
        """
        with self._loaded():
            current = self._passcode_holder(old_passcode)
            if current is None:
                raise VaultNotFoundError("No vault holds the given passcode")
            self._check_passcode_free(new_passcode, owner_id=current.id)
            return self._update_at(self._index_of(current.id), passcode=new_passcode)

    def remove_passcode(self, vault_id: str) -> Vault:
        with self._loaded():
            return self._update_at(self._index_of(vault_id), passcode=None)

    def validate_passcode_uniqueness(self, passcode: str) -> bool:
        """True if no vault currently holds `passcode`."""
        with self._loaded():
            return self._passcode_holder(passcode) is None

    # Phone number management

    def update_phone_number(self, vault_id: str, number: str) -> Vault:
        with self._loaded():
            return self._update_at(self._index_of(vault_id), phone_number=number)

    def find_by_phone_number(self, number: str) -> Optional[Vault]:
        with self._loaded():
            if number is None:
                return None
            return next((v for v in self._vaults if v.phone_number == number), None)

    # Helper methods, called with the lock held

    def _create_vault(self, passcode: Optional[str], biometric_enabled: bool) -> Vault:
        if passcode is not None:
            self._check_passcode_free(passcode)

        vault = Vault.new(passcode=passcode, biometric_enabled=biometric_enabled)
        self.folders.create_folder(vault.id)
        try:
            self._commit(self._vaults + [vault])
        except VaultPersistenceError:
            self._discard_folder(vault.id)
            raise

        logger.info(f"Created vault {vault.id} (biometric={biometric_enabled})")
        return vault

    def _commit(self, vaults: List[Vault]) -> None:
        """Persist `vaults` and only then make them the live collection."""
        try:
            self.storage.save(vaults)
        except (OSError, TypeError, ValueError) as e:
            raise VaultPersistenceError(f"Could not save vaults: {e}") from e
        self._vaults = vaults

    def _update_at(self, index: int, **changes) -> Vault:
        updated = self._vaults[index].with_changes(**changes)
        vaults = list(self._vaults)
        vaults[index] = updated
        self._commit(vaults)
        return updated

    def _index_of(self, vault_id: str) -> int:
        for index, vault in enumerate(self._vaults):
            if vault.id == vault_id:
                return index
        logger.debug(f"Vault {vault_id} not found")
        raise VaultNotFoundError(f"Vault {vault_id} not found")

    def _biometric_vault(self) -> Optional[Vault]:
        return next((v for v in self._vaults if v.biometric_enabled), None)

    def _passcode_holder(self, passcode: Optional[str]) -> Optional[Vault]:
        if passcode is None:
            return None
        return next((v for v in self._vaults if v.passcode == passcode), None)

    def _check_passcode_free(self, passcode: Optional[str], owner_id: Optional[str] = None) -> None:
        holder = self._passcode_holder(passcode)
        if holder is not None and holder.id != owner_id:
            logger.warning("Rejected passcode: already used by another vault.")
            raise PasscodeAlreadyExistsError("A vault with this passcode already exists")

    def _discard_folder(self, vault_id: str) -> None:
        try:
            self.folders.delete_folder(vault_id)
        except VaultFolderError as e:
            logger.warning(f"Could not remove folder of unsaved vault {vault_id}: {e}")

    def _restore_folder(self, vault_id: str) -> None:
        try:
            self.folders.create_folder(vault_id)
        except VaultFolderError as e:
            logger.warning(f"Could not recreate folder of vault {vault_id}: {e}")
