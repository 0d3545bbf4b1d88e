from datetime import timedelta
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from oneoften.core.database import get_db
from oneoften.core.limiter import limiter, LOGIN_LIMIT, REGISTER_LIMIT
from oneoften.core.security import create_access_token, get_current_player
from oneoften.core.config import settings
from oneoften.models.player import Player
from oneoften.schemas.auth import PlayerCredentials, Token, PlayerResponse
from oneoften.services.accounts import AccountService
from oneoften.services.ledger import SqlLedgerStore

router = APIRouter()


@router.post(
    "/register", response_model=PlayerResponse, status_code=status.HTTP_201_CREATED
)
@limiter.limit(REGISTER_LIMIT)
def register(
    request: Request, credentials: PlayerCredentials, db: Session = Depends(get_db)
):
    accounts = AccountService(SqlLedgerStore(db))
    outcome = accounts.create_player(credentials.login, credentials.password)
    if not outcome.ok:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=outcome.message
        )

    return outcome.value


@router.post("/login", response_model=Token)
@limiter.limit(LOGIN_LIMIT)
def login(
    request: Request, credentials: PlayerCredentials, db: Session = Depends(get_db)
):
    accounts = AccountService(SqlLedgerStore(db))
    outcome = accounts.authenticate(credentials.login, credentials.password)
    if not outcome.ok:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=outcome.message,
        )

    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        data={"sub": str(outcome.value)}, expires_delta=access_token_expires
    )

    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/me", response_model=PlayerResponse)
def get_current_player_info(current_player: Player = Depends(get_current_player)):
    return current_player
