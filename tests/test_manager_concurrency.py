"""Initial load gating and serialization of concurrent callers."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from vaults_core.errors import PasscodeAlreadyExistsError
from vaults_core.manager import VaultsCoreManager
from vaults_core.models import Vault
from vaults_core.storage import VaultsStorage


class _GatedStorage(VaultsStorage):
    """Store whose load blocks until the test releases it."""

    def __init__(self, filepath):
        super().__init__(filepath)
        self.release = threading.Event()
        self.load_started = threading.Event()
        self.load_calls = 0

    def load(self):
        self.load_calls += 1
        self.load_started.set()
        assert self.release.wait(timeout=5)
        return super().load()


@pytest.fixture
def gated_storage(store_path):
    return _GatedStorage(store_path)


def test_construction_does_not_wait_for_load(parent_folder, gated_storage):
    manager = VaultsCoreManager(parent_folder, storage=gated_storage)

    assert gated_storage.load_started.wait(timeout=5)
    gated_storage.release.set()
    manager.ensure_loaded()


def test_operations_wait_for_initial_load(parent_folder, gated_storage):
    """No caller sees the collection before the persisted state is applied."""
    existing = Vault.new(passcode="1234")
    VaultsStorage(gated_storage.filepath).save([existing])

    manager = VaultsCoreManager(parent_folder, storage=gated_storage)
    results = {}

    def _lookup():
        results["found"] = manager.find_by_passcode("1234")

    caller = threading.Thread(target=_lookup)
    caller.start()
    caller.join(timeout=0.2)
    assert caller.is_alive()
    assert "found" not in results

    gated_storage.release.set()
    caller.join(timeout=5)

    assert results["found"] == existing


def test_load_happens_once(parent_folder, gated_storage):
    gated_storage.release.set()
    manager = VaultsCoreManager(parent_folder, storage=gated_storage)

    manager.add_vault()
    manager.list_vaults()
    manager.biometric_vault_exists()

    assert gated_storage.load_calls == 1


def test_first_write_does_not_clobber_persisted_vaults(parent_folder, gated_storage):
    """A write issued during startup lands on top of the loaded collection."""
    existing = Vault.new(passcode="1234")
    VaultsStorage(gated_storage.filepath).save([existing])
    manager = VaultsCoreManager(parent_folder, storage=gated_storage)

    with ThreadPoolExecutor(max_workers=1) as pool:
        pending = pool.submit(manager.add_vault, "1234")
        gated_storage.release.set()
        with pytest.raises(PasscodeAlreadyExistsError):
            pending.result(timeout=5)

    assert manager.list_vaults() == [existing]


def test_concurrent_adds_with_same_passcode_admit_one(manager, storage):
    barrier = threading.Barrier(8)

    def _add():
        barrier.wait(timeout=5)
        try:
            return manager.add_vault(passcode="1234")
        except PasscodeAlreadyExistsError:
            return None

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: _add(), range(8)))

    created = [r for r in results if r is not None]
    assert len(created) == 1
    assert manager.list_vaults() == created
    assert storage.load() == created


def test_concurrent_biometric_creation_admits_one(manager, storage):
    barrier = threading.Barrier(8)

    def _create():
        barrier.wait(timeout=5)
        return manager.create_biometric_vault()

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: _create(), range(8)))

    created = [r for r in results if r is not None]
    assert len(created) == 1
    assert manager.get_biometric_vault() == created[0]
    assert storage.load() == created


def test_concurrent_distinct_adds_all_persist(manager, storage):
    with ThreadPoolExecutor(max_workers=8) as pool:
        created = list(pool.map(lambda i: manager.add_vault(passcode=str(i)), range(20)))

    vaults = manager.list_vaults()
    assert sorted(v.id for v in vaults) == sorted(v.id for v in created)
    assert storage.load() == vaults
