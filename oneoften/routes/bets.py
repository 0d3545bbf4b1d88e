from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from oneoften.core.database import get_db
from oneoften.core.security import get_current_player
from oneoften.models.player import Player
from oneoften.schemas.bet import BetRequest, BetResponse, BalanceResponse
from oneoften.services.accounts import AccountService
from oneoften.services.ledger import SqlLedgerStore
from oneoften.services.outcome import OutcomeGenerator, get_outcome_generator
from oneoften.services.resolver import BetResolver, Wager
from oneoften.services.results import Rejection, ServiceResult

router = APIRouter()

_REJECTION_STATUS = {
    Rejection.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    Rejection.INSUFFICIENT_FUNDS: status.HTTP_400_BAD_REQUEST,
    Rejection.ACCOUNT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
}


def _raise_for_rejection(outcome: ServiceResult) -> None:
    if not outcome.ok:
        raise HTTPException(
            status_code=_REJECTION_STATUS.get(
                outcome.rejection, status.HTTP_400_BAD_REQUEST
            ),
            detail=outcome.message,
        )


@router.post("", response_model=BetResponse)
def place_bet(
    bet: BetRequest,
    current_player: Player = Depends(get_current_player),
    db: Session = Depends(get_db),
    generator: OutcomeGenerator = Depends(get_outcome_generator),
):
    """Stake points on a digit and settle the bet immediately."""
    resolver = BetResolver(SqlLedgerStore(db), generator)
    outcome = resolver.resolve(
        Wager(
            player_id=current_player.id,
            chosen_number=bet.number,
            stake=bet.points,
        )
    )
    _raise_for_rejection(outcome)

    return BetResponse.from_settlement(outcome.value)


@router.get("/history", response_model=List[BetResponse])
def get_history(
    current_player: Player = Depends(get_current_player),
    db: Session = Depends(get_db),
):
    """All settled bets of the current player, newest first."""
    outcome = AccountService(SqlLedgerStore(db)).list_settlements(current_player.id)
    _raise_for_rejection(outcome)

    return [BetResponse.from_settlement(s) for s in outcome.value]


@router.get("/balance", response_model=BalanceResponse)
def get_balance(
    current_player: Player = Depends(get_current_player),
    db: Session = Depends(get_db),
):
    outcome = AccountService(SqlLedgerStore(db)).get_balance(current_player.id)
    _raise_for_rejection(outcome)

    return BalanceResponse(balance=outcome.value)
