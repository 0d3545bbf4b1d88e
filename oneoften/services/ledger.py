"""
Ledger store: player balances plus the append-only settlement history.

The resolver and the account service only depend on the ``LedgerStore``
protocol. ``SqlLedgerStore`` implements it on a SQLAlchemy session; the
balance update and the settlement insert of one bet share a single commit.
"""

import logging
import threading
import uuid
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Protocol

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from oneoften.models.player import Player
from oneoften.models.settlement import Settlement

logger = logging.getLogger(__name__)


class LedgerStore(Protocol):
    def find_player_by_id(
        self, player_id: uuid.UUID, for_update: bool = False
    ) -> Optional[Player]:
        """Return the player, or None if the id does not resolve."""
        ...

    def find_player_by_login(self, login: str) -> Optional[Player]:
        """Exact, case-sensitive login lookup."""
        ...

    def insert_player(self, player: Player) -> Player:
        """Persist a new player and return it with its assigned id."""
        ...

    def apply_settlement(self, player: Player, settlement: Settlement) -> Settlement:
        """Add ``settlement.delta`` to the balance and append the record atomically."""
        ...

    def list_settlements(self, player_id: uuid.UUID) -> List[Settlement]:
        """History of one player, newest first."""
        ...

    def locked(self, player_id: uuid.UUID):
        """Context manager serialising settlements of one player."""
        ...


class PlayerLocks:
    """Process-wide registry of one mutex per player id."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[uuid.UUID, threading.Lock] = {}

    def get(self, player_id: uuid.UUID) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(player_id)
            if lock is None:
                lock = self._locks[player_id] = threading.Lock()
            return lock

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, player_id: uuid.UUID) -> Iterator[None]:
        with self.get(player_id):
            yield


player_locks = PlayerLocks()


class SqlLedgerStore:
    def __init__(self, db: Session, locks: PlayerLocks = player_locks):
        self.db = db
        self.locks = locks

    def find_player_by_id(
        self, player_id: uuid.UUID, for_update: bool = False
    ) -> Optional[Player]:
        stmt = select(Player).where(Player.id == player_id)
        if for_update:
            # Row lock where the backend supports it; SQLite ignores the clause.
            # populate_existing discards a balance cached earlier in the session.
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return self.db.execute(stmt).scalar_one_or_none()

    def find_player_by_login(self, login: str) -> Optional[Player]:
        return self.db.execute(
            select(Player).where(Player.login == login)
        ).scalar_one_or_none()

    def insert_player(self, player: Player) -> Player:
        self.db.add(player)
        # A unique-login violation is an expected race, not a ledger fault.
        self._commit("insert_player", expected=(IntegrityError,), login=player.login)
        self.db.refresh(player)
        return player

    def apply_settlement(self, player: Player, settlement: Settlement) -> Settlement:
        # Read the sequence before any pending change can autoflush.
        settlement.sequence = self._next_sequence(player.id)
        player.balance = player.balance + settlement.delta
        settlement.player_id = player.id
        settlement.balance_after = player.balance
        self.db.add(settlement)
        self._commit("apply_settlement", player_id=str(player.id))
        return settlement

    def list_settlements(self, player_id: uuid.UUID) -> List[Settlement]:
        return list(
            self.db.execute(
                select(Settlement)
                .where(Settlement.player_id == player_id)
                .order_by(Settlement.sequence.desc())
            ).scalars()
        )

    @contextmanager
    def locked(self, player_id: uuid.UUID) -> Iterator[None]:
        with self.locks.hold(player_id):
            try:
                yield
            finally:
                # End any transaction still holding the row lock (rejected bets).
                if self.db.in_transaction():
                    self.db.rollback()

    def _next_sequence(self, player_id: uuid.UUID) -> int:
        last = self.db.execute(
            select(func.max(Settlement.sequence)).where(
                Settlement.player_id == player_id
            )
        ).scalar()
        return (last or 0) + 1

    def _commit(self, operation: str, expected=(), **context) -> None:
        try:
            self.db.commit()
        except expected:
            self.db.rollback()
            logger.warning(
                f"Ledger {operation} rejected by a constraint, transaction rolled back",
                extra=context,
            )
            raise
        # Drivers raise OverflowError or ValueError for out-of-range integers.
        except (SQLAlchemyError, OverflowError, ValueError):
            self.db.rollback()
            logger.error(
                f"Ledger {operation} failed, transaction rolled back",
                exc_info=True,
                extra=context,
            )
            raise
