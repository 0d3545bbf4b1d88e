from dataclasses import asdict
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from oneoften.core.database import get_db
from oneoften.core.security import get_current_player
from oneoften.models.player import Player
from oneoften.schemas.stats import PlayerStats
from oneoften.services.accounts import AccountService
from oneoften.services.ledger import SqlLedgerStore

router = APIRouter()


@router.get("", response_model=PlayerStats)
def get_stats(
    current_player: Player = Depends(get_current_player),
    db: Session = Depends(get_db),
):
    """Get player statistics"""
    outcome = AccountService(SqlLedgerStore(db)).get_stats(current_player.id)
    if not outcome.ok:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=outcome.message)

    return PlayerStats(**asdict(outcome.value))
