import random
from datetime import datetime, timezone

import pytest

from pelada.errors import NotFound
from pelada.models import Direction, FeeType, Ledger, Transaction
from pelada.persistence import LEDGER


NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _tx(tx_id: int, amount: float, direction: Direction = Direction.CREDIT) -> Transaction:
    return Transaction(
        id=tx_id,
        timestamp=NOW,
        description=f"entry {tx_id}",
        amount=amount,
        direction=direction,
    )


def test_append_updates_balance_and_inserts_newest_first():
    ledger = Ledger()
    ledger.append(_tx(1, 100.0))
    ledger.append(_tx(2, 30.0, Direction.DEBIT))

    assert ledger.balance == pytest.approx(70.0)
    assert [t.id for t in ledger.transactions] == [2, 1]


def test_append_does_not_validate_amount():
    ledger = Ledger()
    ledger.append(_tx(1, -5.0))
    assert ledger.balance == pytest.approx(-5.0)
    assert ledger.is_consistent()


def test_remove_reverses_credit_and_debit():
    ledger = Ledger()
    ledger.append(_tx(1, 50.0))
    ledger.append(_tx(2, 20.0, Direction.DEBIT))

    removed = ledger.remove(2)
    assert removed.id == 2
    assert ledger.balance == pytest.approx(50.0)

    ledger.remove(1)
    assert ledger.balance == pytest.approx(0.0)
    assert ledger.transactions == []


def test_remove_missing_transaction_raises_not_found():
    ledger = Ledger()
    ledger.append(_tx(1, 10.0))
    with pytest.raises(NotFound):
        ledger.remove(999)
    assert ledger.balance == pytest.approx(10.0)
    assert len(ledger.transactions) == 1


def test_reset_clears_everything():
    ledger = Ledger()
    ledger.append(_tx(1, 10.0))
    ledger.reset()
    assert ledger.balance == 0.0
    assert ledger.transactions == []


def test_balance_matches_fold_for_random_sequences():
    rng = random.Random(1234)
    for _ in range(50):
        ledger = Ledger()
        next_id = 1
        for _ in range(40):
            if ledger.transactions and rng.random() < 0.35:
                victim = rng.choice(ledger.transactions)
                ledger.remove(victim.id)
            else:
                direction = rng.choice([Direction.CREDIT, Direction.DEBIT])
                ledger.append(_tx(next_id, round(rng.uniform(0.5, 300.0), 2), direction))
                next_id += 1
            expected = sum(
                t.amount if t.direction is Direction.CREDIT else -t.amount for t in ledger.transactions
            )
            assert ledger.balance == pytest.approx(expected)
            assert ledger.is_consistent()


def test_next_transaction_id_is_unique_within_same_millisecond():
    ledger = Ledger()
    first = ledger.next_transaction_id(NOW)
    ledger.append(_tx(first, 1.0))
    second = ledger.next_transaction_id(NOW)
    assert second == first + 1


def test_service_record_and_reset_persist(ledger_service):
    ledger_service.record(description="Bola nova", amount=80.0, direction=Direction.DEBIT)
    ledger_service.record(description="Doação", amount=100.0, direction=Direction.CREDIT, player_name="Ana")

    ledger = ledger_service.load()
    assert ledger.balance == pytest.approx(20.0)
    assert ledger.transactions[0].description == "Doação"
    assert ledger.transactions[0].player_name == "Ana"

    ledger_service.reset()
    assert ledger_service.load().transactions == []


def test_reset_nulls_payment_references(ledger_service, tracker, registry):
    ana = registry.create("Ana", False)
    bia = registry.create("Bia", False)
    tracker.pay(ana.id, FeeType.EVENT, 10.0)
    tracker.pay(bia.id, FeeType.MONTHLY, 270.0)
    tracker.set_fee_config(10)

    ledger_service.reset()

    state = tracker.load()
    assert state.book.get(ana.id, FeeType.EVENT) is None
    assert state.book.get(bia.id, FeeType.MONTHLY) is None
    assert state.book.to_nested() == {ana.id: {"event": None}, bia.id: {"monthly": None}}
    assert state.config.event_fee_base == pytest.approx(10.0)

    # No longer a duplicate: the player can pay again.
    outcome = tracker.pay(ana.id, FeeType.EVENT, 10.0)
    assert outcome.ledger.balance == pytest.approx(10.0)
    assert outcome.ledger.find(outcome.state.book.get(ana.id, FeeType.EVENT)) is not None


def test_legacy_ledger_document_is_upgraded(ledger_service, store):
    store.write(
        LEDGER,
        {
            "saldoTotal": 50,
            "transacoes": [
                {
                    "id": 1718000000002,
                    "data": "2024-06-10T09:00:00.000Z",
                    "descricao": "Bolas",
                    "valor": 30,
                    "tipo": "saida",
                    "jogadorId": None,
                    "jogadorNome": None,
                },
                {
                    "id": 1718000000001,
                    "data": "2024-06-10T08:00:00.000Z",
                    "descricao": "Pagamento Churrasco - Ana",
                    "valor": 80,
                    "tipo": "entrada",
                    "jogadorId": 1717000000000,
                    "jogadorNome": "Ana",
                },
            ],
        },
    )

    ledger = ledger_service.load()

    assert ledger.balance == pytest.approx(50.0)
    assert [t.direction for t in ledger.transactions] == [Direction.DEBIT, Direction.CREDIT]
    assert ledger.transactions[1].player_id == "1717000000000"
    assert ledger.transactions[1].amount == pytest.approx(80.0)
    assert ledger.is_consistent()

    # Saved back in the current layout.
    ledger_service.save(ledger)
    assert "saldoTotal" not in store.read(LEDGER, {})


def test_service_check_repairs_drifted_balance(ledger_service, store):
    ledger_service.record(description="Entrada", amount=40.0, direction=Direction.CREDIT)
    document = store.read("ledger", {})
    document["balance"] = 999.0
    store.write("ledger", document)

    report = ledger_service.check()
    assert not report.consistent

    repaired = ledger_service.check(repair=True)
    assert repaired.recomputed_balance == pytest.approx(40.0)
    assert ledger_service.load().balance == pytest.approx(40.0)
