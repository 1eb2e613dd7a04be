import logging
import random

import pytest

from verto import Verto
from verto.adapters.external.hook.webhook_http_client import WebhookHttpClient
from verto.config import Settings, _bool, get_settings
from verto.utils.log import LOG_FORMAT, setup_logging

from .conftest import CLOB, COMMUNITY, EXCHANGE_TOKEN, EXCHANGE_WALLET, TOKEN_A, TOKEN_B, clob_state, order


def _settings(**overrides):
    values = dict(
        clob_contract=CLOB,
        community_contract=COMMUNITY,
        exchange_contract=EXCHANGE_TOKEN,
        exchange_wallet=EXCHANGE_WALLET,
        hook_url="",
    )
    values.update(overrides)
    return Settings(**values)


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.exchange_fee_rate == 0.005
        assert s.use_cache is True
        assert s.max_lookback_days == 30

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("VERTO_CLOB_CONTRACT", CLOB)
        monkeypatch.setenv("VERTO_EXCHANGE_FEE_RATE", "0.01")
        monkeypatch.setenv("VERTO_USE_CACHE", "false")
        monkeypatch.setenv("VERTO_MAX_LOOKBACK_DAYS", "7")
        get_settings.cache_clear()
        try:
            s = get_settings()
            assert s.clob_contract == CLOB
            assert s.exchange_fee_rate == 0.01
            assert s.use_cache is False
            assert s.max_lookback_days == 7
        finally:
            get_settings.cache_clear()

    @pytest.mark.parametrize("raw,expected", [("1", True), ("YES", True), ("off", False), (None, True)])
    def test_bool(self, raw, expected):
        assert _bool(raw, default=True) is expected


class TestVerto:
    def test_builds_http_adapters_and_hook(self):
        verto = Verto(_settings(hook_url="https://hook.test"))
        assert isinstance(verto.exchange._swap._hook, WebhookHttpClient)

    def test_no_hook_when_url_empty(self):
        verto = Verto(_settings())
        assert verto.exchange._swap._hook is None

    @pytest.mark.asyncio
    async def test_estimate_through_facade(self, ledger, cache):
        ledger.states[CLOB] = clob_state({"pair": [TOKEN_A, TOKEN_B], "orders": [order("o1", TOKEN_B, 2, 100)]})
        verto = Verto(_settings(), ledger=ledger, cache=cache, rng=random.Random(1))
        result = await verto.exchange.estimate_swap({"from": TOKEN_A, "to": TOKEN_B}, 10)
        assert result.immediate == pytest.approx(5)
        assert (await verto.exchange.get_order("o1")).pair == (TOKEN_A, TOKEN_B)

    @pytest.mark.asyncio
    async def test_swap_through_facade(self, ledger, cache):
        ledger.states[EXCHANGE_TOKEN] = {"balances": {}}
        verto = Verto(_settings(), ledger=ledger, cache=cache)
        order_id = await verto.exchange.swap({"from": TOKEN_A, "to": TOKEN_B}, 100)
        await verto.exchange.wait_for_hooks()
        assert order_id == "tx2"
        # no holder weight: token-holder fee goes to the exchange wallet
        assert [c["target"] for c in ledger.submitted[2:]] == [EXCHANGE_WALLET, EXCHANGE_WALLET]


class TestLogging:
    def test_setup_logging_uses_level(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
        setup_logging("debug")
        assert calls == [{"level": "DEBUG", "format": LOG_FORMAT}]

    def test_setup_logging_reads_env(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
        monkeypatch.setenv("LOG_LEVEL", "warning")
        setup_logging()
        assert calls[0]["level"] == "WARNING"
