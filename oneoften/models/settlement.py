import uuid
from enum import Enum
from sqlalchemy import Column, String, Integer, BigInteger, DateTime, ForeignKey
from sqlalchemy import Uuid, UniqueConstraint

from oneoften.core.database import Base
from oneoften.models.player import _utc_now


class BetResult(str, Enum):
    WON = "Won"
    LOST = "Lost"


class Settlement(Base):
    """Immutable record of one resolved wager."""

    __tablename__ = "settlements"
    __table_args__ = (
        UniqueConstraint("player_id", "sequence", name="uq_settlements_player_sequence"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    player_id = Column(
        Uuid(as_uuid=True), ForeignKey("players.id"), nullable=False, index=True
    )
    # 1, 2, 3... per player, in commit order
    sequence = Column(BigInteger, nullable=False)
    chosen_number = Column(Integer, nullable=False)
    drawn_number = Column(Integer, nullable=False)
    stake = Column(BigInteger, nullable=False)
    delta = Column(BigInteger, nullable=False)  # +stake * multiplier or -stake
    result = Column(String, nullable=False)  # BetResult value
    balance_after = Column(BigInteger, nullable=False)
    created_at = Column(DateTime, default=_utc_now, nullable=False)

    @property
    def won(self) -> bool:
        return self.result == BetResult.WON.value
