# verto/core/domain/enums/verto_enums.py

from enum import Enum


class FeeTarget(str, Enum):
    """
    Who receives a protocol fee.
    """
    EXCHANGE = "exchange"           # fixed exchange wallet
    TOKEN_HOLDER = "token_holder"   # weighted random VRT holder (balances + live vault)


class TokenType(str, Enum):
    ART = "art"
    COMMUNITY = "community"
    COLLECTION = "collection"
    CUSTOM = "custom"


class InteractionAction(str, Enum):
    """
    Value of the `Action` tag attached to every write interaction.
    """
    ORDER = "Order"
    CANCEL_ORDER = "CancelOrder"
    ADD_PAIR = "AddPair"
    TRANSFER = "Transfer"
    LIST_TOKEN = "ListToken"


class TransactionStatus(str, Enum):
    SUCCESS = "success"
    PENDING = "pending"
    ERROR = "error"


class TransactionDirection(str, Enum):
    IN = "in"
    OUT = "out"
