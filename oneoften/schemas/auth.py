from pydantic import BaseModel, ConfigDict
import uuid


class PlayerCredentials(BaseModel):
    # Emptiness is checked by the account service so every rejection
    # goes through the same path.
    login: str
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str


class PlayerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    login: str
    balance: int
