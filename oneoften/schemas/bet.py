from pydantic import BaseModel
from datetime import datetime
import uuid


class BetRequest(BaseModel):
    number: int
    points: int


class BetResponse(BaseModel):
    id: uuid.UUID
    number: int
    drawn_number: int
    result: str
    # Signed change to the balance: +stake * multiplier or -stake
    points: int
    stake: int
    balance: int
    created_at: datetime

    @classmethod
    def from_settlement(cls, settlement) -> "BetResponse":
        return cls(
            id=settlement.id,
            number=settlement.chosen_number,
            drawn_number=settlement.drawn_number,
            result=settlement.result,
            points=settlement.delta,
            stake=settlement.stake,
            balance=settlement.balance_after,
            created_at=settlement.created_at,
        )


class BalanceResponse(BaseModel):
    balance: int
