"""
Vaults Core Manager

Manages a small collection of vaults for a single user on a single device.
Each vault has its own folder under a parent folder, and the whole collection
is stored in one JSON file. Passcodes are stored as plain text; the vaults
file is restricted to its owner.
"""

from .errors import (
    PasscodeAlreadyExistsError,
    VaultError,
    VaultFolderError,
    VaultNotFoundError,
    VaultPersistenceError,
)
from .folders import VaultFolders
from .manager import VaultsCoreManager
from .models import Vault
from .storage import VaultsStorage

__all__ = [
    "PasscodeAlreadyExistsError",
    "Vault",
    "VaultError",
    "VaultFolderError",
    "VaultFolders",
    "VaultNotFoundError",
    "VaultPersistenceError",
    "VaultsCoreManager",
    "VaultsStorage",
]
