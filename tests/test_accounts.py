"""
test_accounts.py

Unit tests for AccountService against the SQL ledger store (in-memory SQLite).
"""

import logging
import uuid

import pytest

from oneoften.core.config import settings
from oneoften.models.player import Player
from oneoften.services.accounts import AccountService
from oneoften.services.ledger import SqlLedgerStore
from oneoften.services.resolver import BetResolver, Wager
from oneoften.services.results import Rejection

pytestmark = pytest.mark.unit


@pytest.fixture
def accounts(db):
    return AccountService(SqlLedgerStore(db), starting_balance=10000)


# ---------------------------------------------------------------------------
# create_player
# ---------------------------------------------------------------------------


def test_create_player_assigns_id_and_starting_balance(accounts):
    outcome = accounts.create_player("alice", "secret1")

    assert outcome.ok
    player = outcome.value
    assert isinstance(player.id, uuid.UUID)
    assert player.login == "alice"
    assert player.balance == 10000


def test_create_player_never_stores_plaintext_secret(accounts):
    player = accounts.create_player("alice", "secret1").value
    assert player.password_hash != "secret1"
    assert "secret1" not in player.password_hash


def test_default_starting_balance_comes_from_settings(db):
    player = AccountService(SqlLedgerStore(db)).create_player("bob", "pw").value
    assert player.balance == settings.STARTING_BALANCE


def test_create_player_duplicate_login_is_rejected(accounts, db):
    accounts.create_player("alice", "secret1")
    outcome = accounts.create_player("alice", "another")

    assert not outcome.ok
    assert outcome.rejection == Rejection.DUPLICATE_IDENTITY
    assert db.query(Player).filter(Player.login == "alice").count() == 1


def test_login_uniqueness_is_case_sensitive(accounts):
    accounts.create_player("alice", "secret1")
    assert accounts.create_player("Alice", "secret1").ok


@pytest.mark.parametrize("login,secret", [("", "secret1"), ("alice", ""), ("", "")])
def test_create_player_empty_fields_are_invalid(accounts, db, login, secret):
    outcome = accounts.create_player(login, secret)

    assert outcome.rejection == Rejection.INVALID_INPUT
    assert db.query(Player).count() == 0


class _StaleLoginLedger(SqlLedgerStore):
    """Login lookups miss, as when another registration commits first."""

    def find_player_by_login(self, login):
        return None


def test_registration_race_is_a_quiet_duplicate(accounts, db, caplog):
    caplog.set_level(logging.WARNING)
    accounts.create_player("alice", "secret1")
    racing = AccountService(_StaleLoginLedger(db), starting_balance=10000)

    outcome = racing.create_player("alice", "secret2")

    assert outcome.rejection == Rejection.DUPLICATE_IDENTITY
    assert db.query(Player).filter(Player.login == "alice").count() == 1
    assert not [r for r in caplog.records if r.levelno >= logging.ERROR]


# ---------------------------------------------------------------------------
# authenticate
# ---------------------------------------------------------------------------


def test_authenticate_returns_player_id(accounts):
    player = accounts.create_player("alice", "secret1").value
    outcome = accounts.authenticate("alice", "secret1")

    assert outcome.ok
    assert outcome.value == player.id


@pytest.mark.parametrize(
    "login,secret",
    [
        ("alice", "wrong"),
        ("bob", "secret1"),
        ("", "secret1"),
        ("alice", ""),
        ("ALICE", "secret1"),
        ("a" * 5000, "b" * 5000),
        ("' OR '1'='1", "' OR '1'='1"),
    ],
)
def test_authenticate_failures_are_indistinguishable(accounts, login, secret):
    accounts.create_player("alice", "secret1")
    outcome = accounts.authenticate(login, secret)

    assert not outcome.ok
    assert outcome.rejection == Rejection.AUTHENTICATION_FAILED
    assert outcome.message == "Incorrect login or password"


# ---------------------------------------------------------------------------
# get_balance / list_settlements / get_stats
# ---------------------------------------------------------------------------


def test_get_balance_for_existing_player(accounts):
    player = accounts.create_player("alice", "secret1").value
    outcome = accounts.get_balance(player.id)
    assert outcome.ok
    assert outcome.value == 10000


def test_get_balance_unknown_player_is_not_found(accounts):
    outcome = accounts.get_balance(uuid.uuid4())
    assert outcome.rejection == Rejection.ACCOUNT_NOT_FOUND
    assert outcome.value is None


def test_list_settlements_unknown_player_is_not_found(accounts):
    assert accounts.list_settlements(uuid.uuid4()).rejection == (
        Rejection.ACCOUNT_NOT_FOUND
    )


def test_list_settlements_newest_first(accounts, db, scripted):
    player = accounts.create_player("alice", "secret1").value
    resolver = BetResolver(SqlLedgerStore(db), scripted(1, 2, 3))
    for stake in (10, 20, 30):
        resolver.resolve(Wager(player.id, 1, stake))

    history = accounts.list_settlements(player.id).value
    assert [s.stake for s in history] == [30, 20, 10]
    assert [s.drawn_number for s in history] == [3, 2, 1]


def test_stats_summarise_history(accounts, db, scripted):
    player = accounts.create_player("alice", "secret1").value
    resolver = BetResolver(SqlLedgerStore(db), scripted(7, 0, 0, 7))
    for _ in range(4):
        resolver.resolve(Wager(player.id, 7, 10))

    stats = accounts.get_stats(player.id).value
    assert stats.total_bets == 4
    assert stats.wins == 2
    assert stats.losses == 2
    assert stats.win_rate == 50.0
    assert stats.total_staked == 40
    assert stats.net_delta == 2 * 90 - 2 * 10
    assert stats.current_balance == 10000 + stats.net_delta


def test_stats_without_bets(accounts):
    player = accounts.create_player("alice", "secret1").value
    stats = accounts.get_stats(player.id).value
    assert stats.total_bets == 0
    assert stats.win_rate == 0.0
    assert stats.current_balance == 10000


def test_stats_unknown_player_is_not_found(accounts):
    assert accounts.get_stats(uuid.uuid4()).rejection == Rejection.ACCOUNT_NOT_FOUND
