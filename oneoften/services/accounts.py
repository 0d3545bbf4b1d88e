import logging
import uuid
from dataclasses import dataclass
from typing import List

from sqlalchemy.exc import IntegrityError

from oneoften.core.config import settings
from oneoften.core.security import get_password_hash, verify_password
from oneoften.models.player import Player
from oneoften.models.settlement import Settlement
from oneoften.services.ledger import LedgerStore
from oneoften.services.results import Rejection, ServiceResult

logger = logging.getLogger(__name__)


@dataclass
class StatsSummary:
    total_bets: int
    wins: int
    losses: int
    win_rate: float
    total_staked: int
    net_delta: int
    current_balance: int


class AccountService:
    """Account creation, credential checks and read-only balance queries."""

    def __init__(
        self, ledger: LedgerStore, starting_balance: int = settings.STARTING_BALANCE
    ):
        self.ledger = ledger
        self.starting_balance = starting_balance

    def create_player(self, login: str, secret: str) -> ServiceResult[Player]:
        if not login or not secret:
            return ServiceResult.reject(
                Rejection.INVALID_INPUT, "Login and password must not be empty."
            )

        if self.ledger.find_player_by_login(login) is not None:
            logger.warning("Registration with a taken login rejected")
            return self._duplicate()

        player = Player(
            login=login,
            password_hash=get_password_hash(secret),
            balance=self.starting_balance,
        )
        try:
            player = self.ledger.insert_player(player)
        except IntegrityError:
            # Lost a race against a concurrent registration of the same login.
            return self._duplicate()

        logger.info("Player created", extra={"player_id": str(player.id)})
        return ServiceResult.found(player)

    def authenticate(self, login: str, secret: str) -> ServiceResult[uuid.UUID]:
        """
        Return the player id for matching credentials.

        Empty input, an unknown login and a wrong secret all produce the same
        rejection so callers cannot tell which part was wrong.
        """
        if login and secret:
            player = self.ledger.find_player_by_login(login)
            if player is not None and verify_password(secret, player.password_hash):
                return ServiceResult.found(player.id)

        return ServiceResult.reject(
            Rejection.AUTHENTICATION_FAILED, "Incorrect login or password"
        )

    def get_balance(self, player_id: uuid.UUID) -> ServiceResult[int]:
        player = self.ledger.find_player_by_id(player_id)
        if player is None:
            return self._not_found()
        return ServiceResult.found(player.balance)

    def list_settlements(self, player_id: uuid.UUID) -> ServiceResult[List[Settlement]]:
        if self.ledger.find_player_by_id(player_id) is None:
            return self._not_found()
        return ServiceResult.found(self.ledger.list_settlements(player_id))

    def get_stats(self, player_id: uuid.UUID) -> ServiceResult[StatsSummary]:
        player = self.ledger.find_player_by_id(player_id)
        if player is None:
            return self._not_found()

        history = self.ledger.list_settlements(player_id)
        wins = sum(1 for s in history if s.won)
        total = len(history)
        win_rate = (wins / total * 100) if total > 0 else 0.0

        return ServiceResult.found(
            StatsSummary(
                total_bets=total,
                wins=wins,
                losses=total - wins,
                win_rate=round(win_rate, 2),
                total_staked=sum(s.stake for s in history),
                net_delta=sum(s.delta for s in history),
                current_balance=player.balance,
            )
        )

    @staticmethod
    def _duplicate() -> ServiceResult:
        return ServiceResult.reject(
            Rejection.DUPLICATE_IDENTITY,
            "Sorry, the login you selected is already in use.",
        )

    @staticmethod
    def _not_found() -> ServiceResult:
        return ServiceResult.reject(Rejection.ACCOUNT_NOT_FOUND, "Player not found.")
