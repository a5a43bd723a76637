import json

import pytest

from pelada.cli import main
from pelada.models import Direction, FeeType
from pelada.persistence import LEDGER


@pytest.fixture(autouse=True)
def _pelada_env(monkeypatch, settings):
    monkeypatch.setenv("PELADA_DATA_DIR", str(settings.data_dir))
    monkeypatch.setenv("PELADA_UPLOADS_DIR", str(settings.uploads_dir))
    monkeypatch.delenv("PELADA_DB_PATH", raising=False)
    monkeypatch.setenv("PELADA_MONTHLY_FEE_BASE", "540")


def test_summary_prints_fees_and_balance(registry, tracker, capsys):
    ana = registry.create("Ana", False)
    registry.create("Bia", False)
    registry.create("Gil", True)
    tracker.pay(ana.id, FeeType.MONTHLY, 270.0)

    assert main(["summary"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["non_goalkeeper_count"] == 2
    assert payload["monthly_fee_per_player"] == pytest.approx(270.0)
    assert payload["total_collected"] == pytest.approx(270.0)
    assert payload["balance"] == pytest.approx(270.0)


def test_verify_ledger_detects_and_repairs_drift(ledger_service, store, capsys):
    ledger_service.record(description="Doação", amount=50.0, direction=Direction.CREDIT)
    document = store.read(LEDGER, None)
    document["balance"] = 999.0
    store.write(LEDGER, document)

    assert main(["verify-ledger"]) == 1
    assert "drifted" in capsys.readouterr().out

    assert main(["verify-ledger", "--repair"]) == 0
    assert ledger_service.load().balance == pytest.approx(50.0)
    assert main(["verify-ledger"]) == 0
