from .order_entity import ClobState, EstimateResult, Order, OrderWithPair, PairState, SwapPair, TokenPair
from .community_entity import CommunityState, CommunityToken, TokenHolderState, UserEntity, VaultEntry
from .interaction_entity import FeeResult, InteractionReceipt, Tag, build_tags, get_tag_value
from .token_entity import OrderLogEntry, TokenEntity, TransactionEntity, UserBalance
