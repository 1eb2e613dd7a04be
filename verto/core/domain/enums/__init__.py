from .verto_enums import FeeTarget, InteractionAction, TokenType, TransactionDirection, TransactionStatus
