# verto/core/domain/entities/token_entity.py

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..enums.verto_enums import TransactionDirection, TransactionStatus


class TokenEntity(BaseModel):
    id: str
    name: str
    ticker: str


class UserBalance(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    contract_id: str = Field(..., alias="contractId")
    name: Optional[str] = None
    ticker: Optional[str] = None
    logo: Optional[str] = None
    balance: float
    user_address: str = Field(..., alias="userAddress")


class TransactionEntity(BaseModel):
    id: str
    status: TransactionStatus
    type: TransactionDirection
    amount: str
    timestamp: Optional[int] = None


class OrderLogEntry(BaseModel):
    """
    One row of the cache service order log, e.g.
    {"id": "...", "status": "success", "input": "10 AR", "output": "2500 VRT", "timestamp": 1620000000}
    """
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    status: str
    input: str
    output: str
    timestamp: int

    @staticmethod
    def _split(value: str) -> Tuple[float, str]:
        qty, _, unit = value.strip().partition(" ")
        return float(qty), unit.strip()

    @property
    def input_amount(self) -> float:
        return self._split(self.input)[0]

    @property
    def input_unit(self) -> str:
        return self._split(self.input)[1]

    @property
    def output_amount(self) -> float:
        return self._split(self.output)[0]
