# verto/config.py
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


@dataclass
class Settings:
    # protocol contracts / wallets (43-char ledger ids)
    clob_contract: str = ""
    community_contract: str = ""
    exchange_contract: str = ""          # VRT token, its holders share fees
    exchange_wallet: str = ""            # fixed recipient of exchange fees

    # fees
    exchange_fee_rate: float = 0.005     # 0.5% per fee target

    # collaborators
    gateway_url: str = "https://arweave.net"
    cache_url: str = "https://v2.cache.verto.exchange"
    relay_url: str = "http://localhost:1984"      # signs + posts interactions with the caller wallet
    evaluator_url: str = "http://localhost:8080"  # evaluates contract state from the ledger
    hook_url: str = "https://hook.verto.exchange" # empty -> no swap webhook
    native_unit: str = "AR"

    # behaviour
    use_cache: bool = True
    http_timeout_sec: float = 30.0
    max_lookback_days: int = 30          # latest_price: days scanned before giving up
    max_gql_pages: int = 50              # GraphQL pagination guard

    # generic
    log_level: str = "INFO"


def _bool(s: str | None, default: bool = False) -> bool:
    if s is None:
        return default
    return str(s).strip().lower() in ("1", "true", "yes", "y", "on")


@lru_cache()
def get_settings() -> Settings:
    d = Settings()
    return Settings(
        clob_contract=os.environ.get("VERTO_CLOB_CONTRACT", d.clob_contract),
        community_contract=os.environ.get("VERTO_COMMUNITY_CONTRACT", d.community_contract),
        exchange_contract=os.environ.get("VERTO_EXCHANGE_CONTRACT", d.exchange_contract),
        exchange_wallet=os.environ.get("VERTO_EXCHANGE_WALLET", d.exchange_wallet),
        exchange_fee_rate=float(os.environ.get("VERTO_EXCHANGE_FEE_RATE", d.exchange_fee_rate)),
        gateway_url=os.environ.get("VERTO_GATEWAY_URL", d.gateway_url),
        cache_url=os.environ.get("VERTO_CACHE_URL", d.cache_url),
        relay_url=os.environ.get("VERTO_RELAY_URL", d.relay_url),
        evaluator_url=os.environ.get("VERTO_EVALUATOR_URL", d.evaluator_url),
        hook_url=os.environ.get("VERTO_HOOK_URL", d.hook_url),
        native_unit=os.environ.get("VERTO_NATIVE_UNIT", d.native_unit),
        use_cache=_bool(os.environ.get("VERTO_USE_CACHE"), default=d.use_cache),
        http_timeout_sec=float(os.environ.get("VERTO_HTTP_TIMEOUT_SEC", d.http_timeout_sec)),
        max_lookback_days=int(os.environ.get("VERTO_MAX_LOOKBACK_DAYS", d.max_lookback_days)),
        max_gql_pages=int(os.environ.get("VERTO_MAX_GQL_PAGES", d.max_gql_pages)),
        log_level=os.environ.get("LOG_LEVEL", d.log_level),
    )
