import uuid
from sqlalchemy import Column, String, BigInteger, DateTime
from sqlalchemy import Uuid
from datetime import datetime, timezone

from oneoften.core.database import Base

# Signed 64-bit range of the BigInteger amount columns
AMOUNT_MIN = -(2**63)
AMOUNT_MAX = 2**63 - 1


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Player(Base):
    __tablename__ = "players"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    login = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    # Only the ledger's settlement commit writes this column.
    balance = Column(BigInteger, nullable=False)
    created_at = Column(DateTime, default=_utc_now, nullable=False)

    def __repr__(self):
        return f"Player(login={self.login!r}, balance={self.balance})"
