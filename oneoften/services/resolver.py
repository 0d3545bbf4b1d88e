import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Tuple

from oneoften.core.config import settings
from oneoften.models.player import AMOUNT_MAX
from oneoften.models.settlement import BetResult, Settlement
from oneoften.services.ledger import LedgerStore
from oneoften.services.outcome import OutcomeGenerator
from oneoften.services.results import Rejection, ServiceResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Wager:
    player_id: uuid.UUID
    chosen_number: int
    stake: int


def _is_int(value) -> bool:
    # bool is an int subclass but never a meaningful number or stake
    return isinstance(value, int) and not isinstance(value, bool)


def compute_settlement(
    chosen_number: int, drawn_number: int, stake: int, multiplier: int
) -> Tuple[int, BetResult]:
    """Return (delta, result) for a wager given the drawn number."""
    if drawn_number == chosen_number:
        return stake * multiplier, BetResult.WON
    return -stake, BetResult.LOST


class BetResolver:
    """
    Resolves one wager at a time: validate, draw, settle, commit.

    The whole read-check-draw-write sequence runs while holding the
    player's ledger lock, so concurrent wagers on the same player are
    applied one after the other and never overwrite each other's delta.
    Rejections come back as ``ServiceResult`` values with no side effects;
    persistence errors propagate unchanged after the ledger rolls back.
    """

    def __init__(
        self,
        ledger: LedgerStore,
        generator: OutcomeGenerator,
        multiplier: int = settings.WIN_MULTIPLIER,
        min_number: int = settings.MIN_NUMBER,
        max_number: int = settings.MAX_NUMBER,
    ):
        self.ledger = ledger
        self.generator = generator
        self.multiplier = multiplier
        self.min_number = min_number
        self.max_number = max_number

    def resolve(self, wager: Optional[Wager]) -> ServiceResult[Settlement]:
        if wager is None:
            return self._reject(None, Rejection.INVALID_INPUT, "Bet cannot be empty.")

        if not _is_int(wager.chosen_number) or not (
            self.min_number <= wager.chosen_number <= self.max_number
        ):
            return self._reject(
                wager,
                Rejection.INVALID_INPUT,
                f"Bet number must be an integer between {self.min_number} "
                f"and {self.max_number} (inclusive).",
            )

        if not _is_int(wager.stake) or wager.stake <= 0:
            return self._reject(
                wager, Rejection.INVALID_INPUT, "Points must be a positive integer."
            )

        # Unknown ids are turned away before they get a lock of their own.
        if self.ledger.find_player_by_id(wager.player_id) is None:
            return self._not_found(wager)

        with self.ledger.locked(wager.player_id):
            player = self.ledger.find_player_by_id(wager.player_id, for_update=True)
            if player is None:
                return self._not_found(wager)

            if player.balance < wager.stake:
                return self._reject(
                    wager, Rejection.INSUFFICIENT_FUNDS, "Insufficient balance."
                )

            if player.balance + wager.stake * self.multiplier > AMOUNT_MAX:
                return self._reject(
                    wager,
                    Rejection.INVALID_INPUT,
                    "Points are too large: a win would exceed the maximum balance.",
                )

            drawn_number = self.generator.draw(self.min_number, self.max_number)
            delta, result = compute_settlement(
                wager.chosen_number, drawn_number, wager.stake, self.multiplier
            )

            settlement = self.ledger.apply_settlement(
                player,
                Settlement(
                    chosen_number=wager.chosen_number,
                    drawn_number=drawn_number,
                    stake=wager.stake,
                    delta=delta,
                    result=result.value,
                    created_at=datetime.now(timezone.utc),
                ),
            )

        logger.info(
            "Bet settled",
            extra={
                "player_id": str(wager.player_id),
                "settlement_id": str(settlement.id),
                "stake": wager.stake,
                "chosen_number": wager.chosen_number,
                "drawn_number": drawn_number,
                "bet_result": result.value,
            },
        )
        return ServiceResult.found(settlement)

    def _not_found(self, wager: Wager) -> ServiceResult[Settlement]:
        return self._reject(wager, Rejection.ACCOUNT_NOT_FOUND, "Player not found.")

    def _reject(
        self, wager: Optional[Wager], rejection: Rejection, message: str
    ) -> ServiceResult[Settlement]:
        extra = {"bet_result": rejection.value}
        if wager is not None:
            extra["player_id"] = str(wager.player_id)
        logger.warning(f"Bet rejected: {message}", extra=extra)
        return ServiceResult.reject(rejection, message)
