import logging
import random
from typing import Any, Iterable, List, Optional, Sequence

from .adapters.external.cache.cache_http_client import CacheHttpClient
from .adapters.external.hook.webhook_http_client import WebhookHttpClient
from .adapters.external.ledger.gateway_http_client import GatewayHttpClient
from .config import Settings, get_settings
from .core.domain.entities.interaction_entity import Tag
from .core.domain.entities.order_entity import EstimateResult, OrderWithPair
from .core.repositories.cache_repository import CacheRepository
from .core.repositories.hook_repository import SwapHookRepository
from .core.repositories.ledger_repository import LedgerRepository
from .core.services.contract_state_service import ContractStateService
from .core.services.fee_calculator_service import FeeCalculatorService
from .core.services.order_estimator_service import OrderEstimatorService
from .core.services.price_aggregation_service import PriceAggregationService
from .core.services.stake_service import StakeService
from .core.services.weighted_selector_service import WeightedSelectorService
from .core.usecases.clob_interaction_use_case import ClobInteractionUseCase
from .core.usecases.create_fee_use_case import CreateFeeUseCase
from .core.usecases.estimate_swap_use_case import EstimateSwapUseCase
from .core.usecases.order_book_use_case import OrderBookUseCase
from .core.usecases.price_history_use_case import PriceHistoryUseCase
from .core.usecases.swap_use_case import SwapUseCase
from .core.usecases.token_use_case import TokenUseCase
from .core.usecases.trading_post_use_case import TradingPostUseCase
from .core.usecases.user_use_case import UserUseCase


class Exchange:
    """Order book reads and CLOB writes (swap, estimate, add pair, cancel)."""

    def __init__(
        self,
        order_book: OrderBookUseCase,
        estimate_swap_use_case: EstimateSwapUseCase,
        swap_use_case: SwapUseCase,
        clob_interaction: ClobInteractionUseCase,
    ):
        self._order_book = order_book
        self._estimate = estimate_swap_use_case
        self._swap = swap_use_case
        self._clob = clob_interaction

    async def get_order_book(self, selector: Any = None) -> List[OrderWithPair]:
        return await self._order_book.get_order_book(selector)

    async def get_order(self, order_id: str) -> Optional[OrderWithPair]:
        return await self._order_book.get_order(order_id)

    async def estimate_swap(self, pair: Any, amount: float, price: Optional[float] = None) -> EstimateResult:
        return await self._estimate.estimate_swap(pair, amount, price)

    async def swap(self, pair: Any, amount: float, price: Optional[float] = None, tags: Iterable[Tag] = ()) -> str:
        return await self._swap.swap(pair, amount, price, tags)

    async def add_pair(self, pair: Sequence[str], tags: Iterable[Tag] = ()) -> str:
        return await self._clob.add_pair(pair, tags)

    async def cancel(self, order_id: str) -> str:
        return await self._clob.cancel(order_id)

    async def wait_for_hooks(self) -> None:
        await self._swap.wait_for_hooks()


class Verto:
    """
    Entry point of the SDK. Wires settings, collaborators, services and use
    cases.

      verto = Verto()
      estimate = await verto.exchange.estimate_swap({"from": a, "to": b}, 10)

    Collaborators can be injected (tests, custom gateways); otherwise the HTTP
    adapters are built from `settings`.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        ledger: Optional[LedgerRepository] = None,
        cache: Optional[CacheRepository] = None,
        hook: Optional[SwapHookRepository] = None,
        rng: Optional[random.Random] = None,
    ):
        self.settings = s = settings or get_settings()
        self._logger = logging.getLogger(self.__class__.__name__)

        self.ledger = ledger or GatewayHttpClient(
            s.gateway_url,
            s.relay_url,
            s.evaluator_url,
            timeout_sec=s.http_timeout_sec,
            max_pages=s.max_gql_pages,
        )
        self.cache = cache or CacheHttpClient(s.cache_url, timeout_sec=s.http_timeout_sec)
        if hook is None and s.hook_url:
            hook = WebhookHttpClient(s.hook_url, timeout_sec=s.http_timeout_sec)

        # services
        states = ContractStateService(self.ledger, self.cache, use_cache=s.use_cache)
        selector = WeightedSelectorService(rng=rng)
        fee_calculator = FeeCalculatorService(selector, s.exchange_wallet)

        # use cases
        order_book = OrderBookUseCase(states, s.clob_contract)
        self.token = TokenUseCase(self.ledger, self.cache, states, s.community_contract)
        create_fee = CreateFeeUseCase(
            self.ledger, states, fee_calculator, self.token, s.exchange_contract, s.exchange_fee_rate
        )
        self.exchange = Exchange(
            order_book=order_book,
            estimate_swap_use_case=EstimateSwapUseCase(order_book, OrderEstimatorService()),
            swap_use_case=SwapUseCase(
                self.ledger, states, self.token, create_fee, s.clob_contract, hook=hook
            ),
            clob_interaction=ClobInteractionUseCase(self.ledger, states, order_book, s.clob_contract),
        )
        self.fees = create_fee
        self.user = UserUseCase(
            self.ledger, self.cache, states, self.token, order_book, s.community_contract
        )
        self.prices = PriceHistoryUseCase(
            self.cache, PriceAggregationService(s.native_unit), max_lookback_days=s.max_lookback_days
        )
        self.trading_posts = TradingPostUseCase(
            self.ledger, states, selector, StakeService(), s.exchange_contract, s.exchange_wallet
        )

        self._logger.debug("Verto client ready (use_cache=%s, gateway=%s)", s.use_cache, s.gateway_url)
