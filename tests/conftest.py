from __future__ import annotations

import pytest

from pelada.config import Settings
from pelada.ledger import LedgerService
from pelada.media import LocalPhotoStore
from pelada.payments import PaymentTracker
from pelada.persistence import JsonFileStore
from pelada.roster import PlayerRegistry


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings.for_directory(tmp_path)


@pytest.fixture
def store(settings):
    return JsonFileStore(settings.data_dir)


@pytest.fixture
def photos(settings):
    return LocalPhotoStore(settings.uploads_dir)


@pytest.fixture
def registry(store, photos):
    return PlayerRegistry(store, photos)


@pytest.fixture
def ledger_service(store):
    return LedgerService(store)


@pytest.fixture
def tracker(store, registry, ledger_service):
    return PaymentTracker(store, registry, ledger_service, monthly_fee_base=540.0)
