"""
Error types raised by the vaults core manager.

Every error is local to the operation that raised it: the manager stays
consistent with disk and usable for subsequent calls.
"""


class VaultError(Exception):
    """Base class for all vault manager errors."""


class VaultNotFoundError(VaultError):
    """No vault in the live collection matches the given id or passcode."""


class PasscodeAlreadyExistsError(VaultError):
    """Another vault already holds the requested passcode."""


class VaultFolderError(VaultError):
    """Creating or deleting a vault's backing folder failed."""


class VaultPersistenceError(VaultError):
    """Writing the vault collection to the durable store failed."""
