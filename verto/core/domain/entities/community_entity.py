# verto/core/domain/entities/community_entity.py

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..enums.verto_enums import TokenType


class VaultEntry(BaseModel):
    """A time-locked balance, unlocked once the ledger reaches `end`."""
    balance: float = Field(..., ge=0)
    start: int
    end: int

    def is_locked_at(self, height: int) -> bool:
        return height < self.end


class TokenHolderState(BaseModel):
    """
    Profit-sharing token (PST) contract state: balances, vault and the
    free-form settings list ([[key, value], ...]).
    """
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    ticker: Optional[str] = None
    balances: Dict[str, float] = {}
    vault: Dict[str, List[VaultEntry]] = {}
    settings: List[List[Any]] = []

    def setting(self, key: str) -> Optional[Any]:
        for entry in self.settings:
            if len(entry) == 2 and entry[0] == key:
                return entry[1]
        return None


class CommunityToken(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    type: Optional[TokenType] = None
    lister: Optional[str] = None


class UserEntity(BaseModel):
    model_config = ConfigDict(extra="ignore")

    username: str
    name: str
    addresses: List[str] = []
    image: Optional[str] = None
    bio: Optional[str] = None
    links: Dict[str, str] = {}

    def matches(self, value: str) -> bool:
        return self.username == value or value in self.addresses


class CommunityState(BaseModel):
    """Community registry contract: listed tokens and registered people."""
    model_config = ConfigDict(extra="allow")

    tokens: List[CommunityToken] = []
    people: List[UserEntity] = []
