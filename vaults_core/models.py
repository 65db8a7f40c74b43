"""
Vault record type.
"""

import datetime
import uuid
from dataclasses import dataclass, asdict, replace
from typing import Dict, Any, Optional


@dataclass(frozen=True)
class Vault:
    """Represents a single vault.

    Instances are immutable; the manager derives updated copies with
    ``with_changes`` and swaps them into its collection.
    """
    id: str
    creation_date: str
    phone_number: Optional[str] = None
    passcode: Optional[str] = None
    biometric_enabled: bool = False

    @classmethod
    def new(cls, passcode: Optional[str] = None, biometric_enabled: bool = False) -> 'Vault':
        """Allocate a vault with a fresh id and creation timestamp."""
        return cls(
            id=str(uuid.uuid4()),
            creation_date=datetime.datetime.now().isoformat(),
            passcode=passcode,
            biometric_enabled=biometric_enabled,
        )

    def with_changes(self, **changes: Any) -> 'Vault':
        """Return a copy with the given mutable fields replaced."""
        if 'id' in changes or 'creation_date' in changes:
            raise AttributeError("id and creation_date cannot be changed")
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Vault':
        """Create from dictionary.

        Missing optional fields decode as None (biometric_enabled as False);
        a missing id or creation_date raises KeyError and a field of the
        wrong type raises TypeError.
        """
        if not isinstance(data, dict):
            raise TypeError(f"vault must be a JSON object, got {type(data).__name__}")

        vault = cls(
            id=data['id'],
            creation_date=data['creation_date'],
            phone_number=data.get('phone_number'),
            passcode=data.get('passcode'),
            biometric_enabled=data.get('biometric_enabled', False),
        )
        for name in ('id', 'creation_date'):
            if not isinstance(getattr(vault, name), str):
                raise TypeError(f"{name} must be a string")
        for name in ('phone_number', 'passcode'):
            if getattr(vault, name) is not None and not isinstance(getattr(vault, name), str):
                raise TypeError(f"{name} must be a string or null")
        if not isinstance(vault.biometric_enabled, bool):
            raise TypeError("biometric_enabled must be a boolean")
        return vault
