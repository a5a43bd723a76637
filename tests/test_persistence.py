import pytest

from pelada.config import Settings
from pelada.errors import StorageFailure
from pelada.models import FeeType, PaymentState
from pelada.persistence import JsonFileStore, SqliteDocumentStore, open_store


@pytest.fixture(params=["json", "sqlite"])
def any_store(request, tmp_path):
    if request.param == "json":
        return JsonFileStore(tmp_path / "data")
    return SqliteDocumentStore(tmp_path / "pelada.sqlite")


def test_missing_document_returns_copy_of_default(any_store):
    default = {"items": []}
    first = any_store.read("players", default)
    first["items"].append(1)
    assert any_store.read("players", default) == {"items": []}


def test_write_many_persists_every_document(any_store):
    any_store.write_many({"players": [{"id": "a"}], "teams": {"team1": {}}})
    assert any_store.read("players", None) == [{"id": "a"}]
    assert any_store.read("teams", None) == {"team1": {}}

    any_store.write("players", [])
    assert any_store.read("players", None) == []


def test_corrupt_json_falls_back_to_default(tmp_path):
    store = JsonFileStore(tmp_path)
    (tmp_path / "ledger.json").write_text("{not json", encoding="utf-8")
    assert store.read("ledger", {"balance": 0}) == {"balance": 0}


def test_unserializable_document_raises_storage_failure(any_store):
    with pytest.raises(StorageFailure):
        any_store.write("players", {"bad": object()})


def test_json_store_leaves_no_temp_files(tmp_path):
    store = JsonFileStore(tmp_path)
    store.write_many({"players": [], "teams": {}})
    assert sorted(p.name for p in tmp_path.iterdir()) == ["players.json", "teams.json"]


def test_open_store_picks_backend(tmp_path):
    json_settings = Settings.for_directory(tmp_path)
    assert isinstance(open_store(json_settings), JsonFileStore)

    sqlite_settings = Settings.for_directory(tmp_path, db_path=tmp_path / "db.sqlite")
    assert isinstance(open_store(sqlite_settings), SqliteDocumentStore)


def test_payment_state_reads_legacy_document():
    state = PaymentState.from_document(
        {
            "valorChurrascoBase": "45.5",
            "pagamentosJogadores": {
                "17": {"mensalidade": 1700000000001, "churrasco": None},
                "18": {"desconhecido": 5},
            },
        }
    )
    assert state.config.event_fee_base == pytest.approx(45.5)
    assert state.book.get("17", FeeType.MONTHLY) == 1700000000001
    assert not state.book.is_paid("17", FeeType.EVENT)
    assert "18" not in state.book.player_ids()
    assert state.to_document()["payments"] == {"17": {"monthly": 1700000000001, "event": None}}


def test_settings_from_env_parses_and_falls_back():
    settings = Settings.from_env(
        {
            "PELADA_DATA_DIR": "/tmp/pelada-data",
            "PELADA_TOKEN_TTL": "not-a-number",
            "PELADA_MONTHLY_FEE_BASE": "600",
            "PELADA_COOKIE_SECURE": "true",
        }
    )
    assert str(settings.data_dir) == "/tmp/pelada-data"
    assert settings.token_ttl == 12 * 60 * 60
    assert settings.monthly_fee_base == pytest.approx(600.0)
    assert settings.cookie_secure is True
    assert settings.db_path is None
