import math
import re
from typing import Any, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from .entities.order_entity import SwapPair
from .exceptions import ValidationError

# 43 chars, base64url alphabet, anchored on both ends
HASH_RE = re.compile(r"^[a-zA-Z0-9_-]{43}$")


def validate_hash(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    return HASH_RE.fullmatch(value) is not None


def ensure_valid_hash(value: Any, what: str = "address") -> str:
    if not validate_hash(value):
        raise ValidationError(f"Invalid {what} {value!r}. Must be a valid contract/wallet ID")
    return value


def ensure_valid_pair(pair: Sequence[str]) -> tuple:
    if not isinstance(pair, (list, tuple)):
        raise ValidationError(f"Invalid pair {pair!r}. Expected a list or tuple of two token ids.")
    if len(pair) != 2:
        raise ValidationError("Invalid pair. Length should be 2.")
    for token_id in pair:
        ensure_valid_hash(token_id, "token address in pair")
    return tuple(pair)


def ensure_positive_amount(amount: Any) -> float:
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise ValidationError(f"Amount must be a number, got {amount!r}")
    if math.isnan(amount) or amount <= 0:
        raise ValidationError(f"Amount must be > 0, got {amount!r}")
    return float(amount)


def ensure_swap_pair(pair: Any) -> SwapPair:
    """Accept a SwapPair or a {"from": ..., "to": ...} mapping; both ids must be valid."""
    if not isinstance(pair, SwapPair):
        try:
            pair = SwapPair.model_validate(pair)
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid swap pair {pair!r}") from exc
    if not validate_hash(pair.from_token) or not validate_hash(pair.to_token):
        raise ValidationError("Invalid ID in pair. Must be a valid contract ID")
    if pair.from_token == pair.to_token:
        raise ValidationError("Invalid pair. Tokens must differ.")
    return pair


def ensure_limit_price(price: Any) -> Optional[float]:
    if price is None:
        return None
    if isinstance(price, bool) or not isinstance(price, (int, float)) or math.isnan(price) or price <= 0:
        raise ValidationError(f"Limit price must be > 0, got {price!r}")
    return float(price)
