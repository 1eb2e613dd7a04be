# verto/core/domain/entities/order_entity.py

import math
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

TokenPair = Tuple[str, str]


class Order(BaseModel):
    """
    One resting order of the CLOB contract, as found in state.pairs[].orders[].

    `price` is "units of the other token per unit of `token`".
    `quantity` is what is still unfilled, in units of `token`.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    creator: str
    token: str
    price: Optional[float] = None
    quantity: float = Field(..., ge=0)
    original_quantity: Optional[float] = Field(default=None, alias="originalQuantity")
    transaction: Optional[str] = None


class OrderWithPair(Order):
    pair: TokenPair

    @field_validator("pair", mode="before")
    @classmethod
    def pair_of_two(cls, v: Any) -> Any:
        if len(v) != 2:
            raise ValueError("pair must have exactly two token ids")
        return tuple(v)


class PairState(BaseModel):
    model_config = ConfigDict(extra="ignore")

    pair: TokenPair
    orders: List[Order] = []
    price_data: Optional[Dict[str, Any]] = Field(default=None, alias="priceData")


class ClobState(BaseModel):
    """
    Typed view over the CLOB contract state. Only `pairs` is read by the SDK,
    everything else is kept untouched in `model_extra`.
    """
    model_config = ConfigDict(extra="allow")

    pairs: List[PairState] = []

    def orders_with_pair(self) -> List[OrderWithPair]:
        return [
            OrderWithPair(pair=p.pair, **order.model_dump())
            for p in self.pairs
            for order in p.orders
        ]


class SwapPair(BaseModel):
    """
    from_token: token you send to the exchange.
    to_token: token you wish to receive.
    """
    model_config = ConfigDict(populate_by_name=True)

    from_token: str = Field(..., alias="from")
    to_token: str = Field(..., alias="to")

    def as_tuple(self) -> TokenPair:
        return (self.from_token, self.to_token)


class EstimateResult(BaseModel):
    """
    immediate: `to` tokens receivable right now from resting orders.
    rest: `to` tokens receivable for the unmatched remainder at the limit
          price (or the average same-direction price). None when the whole
          amount fills immediately; NaN when no price reference exists.
    """
    immediate: float = 0.0
    rest: Optional[float] = None

    @property
    def fully_matched(self) -> bool:
        return self.rest is None

    @property
    def has_price_reference(self) -> bool:
        return self.rest is None or not math.isnan(self.rest)
