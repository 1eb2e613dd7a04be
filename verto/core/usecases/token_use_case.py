import logging
from typing import Iterable, List, Literal, Optional

from ..domain.entities.interaction_entity import Tag, build_tags
from ..domain.entities.token_entity import TokenEntity
from ..domain.enums.verto_enums import InteractionAction, TokenType
from ..domain.exceptions import InteractionFailedError, ValidationError
from ..domain.validators import ensure_positive_amount, ensure_valid_hash
from ..repositories.cache_repository import CacheRepository
from ..repositories.ledger_repository import LedgerRepository
from ..services.contract_state_service import ContractStateService

LOGO_URL = "https://meta.viewblock.io/AR.{id}/logo?t={theme}"


class TokenUseCase:
    """
    Token listing (community contract) and token transfers.
    """

    def __init__(
        self,
        ledger: LedgerRepository,
        cache: Optional[CacheRepository],
        state_service: ContractStateService,
        community_contract: str,
        logger: logging.Logger | None = None,
    ):
        self._ledger = ledger
        self._cache = cache
        self._states = state_service
        self._community_contract = community_contract
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    async def get_tokens(self, type: Optional[TokenType] = None) -> List[TokenEntity]:
        """
        Tokens listed on Verto, optionally filtered by type.
        Tokens whose state cannot be resolved are skipped.
        """
        if self._states.use_cache:
            listed = await self._cache.fetch_tokens(type)
        else:
            community = await self._states.get_community_state(self._community_contract)
            listed = [t for t in community.tokens if type is None or t.type == type]

        tokens: List[TokenEntity] = []
        for listed_token in listed:
            if self._states.use_cache:
                meta = await self._cache.fetch_token_state_metadata(listed_token.id)
                if not meta:
                    continue
                tokens.append(meta)
            else:
                state = await self._states.get_token_state(listed_token.id)
                if state.name is None or state.ticker is None:
                    continue
                tokens.append(TokenEntity(id=listed_token.id, name=state.name, ticker=state.ticker))
        return tokens

    async def get_token_type(self, token_id: str) -> Optional[TokenType]:
        if self._states.use_cache:
            meta = await self._cache.fetch_token_metadata(token_id)
            return meta.type if meta else None

        community = await self._states.get_community_state(self._community_contract)
        for listed_token in community.tokens:
            if listed_token.id == token_id:
                return listed_token.type
        return None

    @staticmethod
    def get_logo(token_id: str, theme: Literal["light", "dark"] = "light") -> str:
        return LOGO_URL.format(id=token_id, theme=theme)

    async def transfer(self, amount: float, token_id: str, target: str, tags: Iterable[Tag] = ()) -> str:
        """
        :param amount: Quantity of tokens.
        :param token_id: Token contract id.
        :param target: Receiving wallet.
        :param tags: Extra tags appended after Exchange/Action.
        :return: Transfer interaction id.
        """
        ensure_positive_amount(amount)
        ensure_valid_hash(token_id, "token id")
        ensure_valid_hash(target, "target address")

        receipt = await self._ledger.submit_interaction(
            token_id,
            {"function": "transfer", "target": target, "qty": amount},
            build_tags(InteractionAction.TRANSFER, tags),
            target=target,
            quantity="0",
        )
        if not receipt.id:
            raise InteractionFailedError("Could not create transfer interaction.")

        self._logger.info("Transfer %s of %s to %s: %s", amount, token_id, target, receipt.id)
        await self._states.refresh(token_id)
        return receipt.id

    async def list(self, address: str, type: TokenType, tags: Iterable[Tag] = ()) -> str:
        """List a token on the community contract. Returns the interaction id."""
        ensure_valid_hash(address, "token address")
        try:
            type = TokenType(type)
        except ValueError as exc:
            raise ValidationError(f"Unknown token type {type!r}") from exc

        receipt = await self._ledger.submit_interaction(
            self._community_contract,
            {"function": "list", "id": address, "type": type.value},
            build_tags(InteractionAction.LIST_TOKEN, tags),
        )
        if not receipt.id:
            raise InteractionFailedError("Could not list token.")

        await self._states.refresh(self._community_contract)
        return receipt.id
