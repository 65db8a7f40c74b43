"""Test bootstrap.

Ensures the project root is importable and gives each test its own store
and parent folder under ``tmp_path``.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "VaultData" / "vaults.json"


@pytest.fixture
def parent_folder(tmp_path):
    return tmp_path / "vaults"


@pytest.fixture
def storage(store_path):
    from vaults_core.storage import VaultsStorage

    return VaultsStorage(store_path)


@pytest.fixture
def manager(parent_folder, storage):
    from vaults_core.manager import VaultsCoreManager

    return VaultsCoreManager(parent_folder, storage=storage)
