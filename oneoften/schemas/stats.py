from pydantic import BaseModel


class PlayerStats(BaseModel):
    total_bets: int
    wins: int
    losses: int
    win_rate: float
    total_staked: int
    net_delta: int
    current_balance: int
