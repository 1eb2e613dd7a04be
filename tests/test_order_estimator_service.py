import math

import pytest

from verto.core.domain.entities.order_entity import Order, SwapPair
from verto.core.domain.exceptions import ComputationError
from verto.core.services.order_estimator_service import OrderEstimatorService

from .conftest import TOKEN_A, TOKEN_B, order

PAIR = SwapPair(from_token=TOKEN_A, to_token=TOKEN_B)


def _orders(*raw):
    return [Order.model_validate(o) for o in raw]


@pytest.fixture
def estimator():
    return OrderEstimatorService()


class TestSplitAndAverage:
    def test_split_by_token(self, estimator):
        orders = _orders(order("1", TOKEN_B, 2, 10), order("2", TOKEN_A, 3, 10))
        reverse, same = estimator.split_orders(orders, PAIR)
        assert [o.id for o in reverse] == ["1"]
        assert [o.id for o in same] == ["2"]

    def test_average_ignores_unpriced(self, estimator):
        orders = _orders(order("1", TOKEN_A, 2, 1), order("2", TOKEN_A, 4, 1), order("3", TOKEN_A, None, 1))
        assert estimator.average_price(orders) == 3

    def test_average_of_nothing_is_nan(self, estimator):
        assert math.isnan(estimator.average_price([]))


class TestEstimate:
    def test_single_order_fills_whole_amount(self, estimator):
        result = estimator.estimate(_orders(order("1", TOKEN_B, 2, 100)), PAIR, 10)
        assert result.immediate == pytest.approx(5)
        assert result.rest is None
        assert result.fully_matched

    def test_fill_check_uses_reverse_price_without_limit(self, estimator):
        # 150 * 0.5 = 75 <= 100, so the order covers everything
        result = estimator.estimate(_orders(order("1", TOKEN_B, 2, 100)), PAIR, 150)
        assert result.immediate == pytest.approx(75)
        assert result.rest is None

    def test_negative_remainder_counts_as_filled(self, estimator):
        # limit 2: 150 * 2 > 100 -> order consumed, remaining = 150 - 100 * 2 = -50
        result = estimator.estimate(_orders(order("1", TOKEN_B, 2, 100)), PAIR, 150, price=2)
        assert result.immediate == pytest.approx(100)
        assert result.rest is None

    def test_book_exhausted_uses_average_same_direction_price(self, estimator):
        orders = _orders(
            order("1", TOKEN_B, 2, 100),
            order("2", TOKEN_A, 3, 5),
            order("3", TOKEN_A, 5, 5),
        )
        # 250 * 0.5 = 125 > 100 -> consumed, remaining = 250 - 200 = 50
        result = estimator.estimate(orders, PAIR, 250)
        assert result.immediate == pytest.approx(100)
        assert result.rest == pytest.approx(50 * 4)

    def test_walks_orders_in_snapshot_order(self, estimator):
        orders = _orders(order("1", TOKEN_B, 1, 10), order("2", TOKEN_B, 2, 100))
        # first: 30 * 1 > 10 -> +10, remaining 20; second: 20 * 0.5 <= 100 -> +10
        result = estimator.estimate(orders, PAIR, 30)
        assert result.immediate == pytest.approx(20)
        assert result.rest is None

    def test_empty_book_without_price_is_nan(self, estimator):
        result = estimator.estimate([], PAIR, 10)
        assert result.immediate == 0
        assert math.isnan(result.rest)
        assert not result.has_price_reference

    def test_empty_book_with_limit_price(self, estimator):
        result = estimator.estimate([], PAIR, 10, price=3)
        assert result.immediate == 0
        assert result.rest == pytest.approx(30)

    def test_limit_price_skips_other_prices(self, estimator):
        orders = _orders(order("1", TOKEN_B, 2, 100), order("2", TOKEN_B, 4, 100))
        result = estimator.estimate(orders, PAIR, 10, price=4)
        # only order 2 matches: 10 * 4 <= 100 -> 10 * 0.25
        assert result.immediate == pytest.approx(2.5)
        assert result.rest is None

    def test_limit_price_with_no_match_goes_to_rest(self, estimator):
        result = estimator.estimate(_orders(order("1", TOKEN_B, 2, 100)), PAIR, 10, price=5)
        assert result.immediate == 0
        assert result.rest == pytest.approx(50)

    def test_unpriced_reverse_orders_are_skipped(self, estimator):
        orders = _orders(order("1", TOKEN_B, None, 100), order("2", TOKEN_B, 2, 100))
        result = estimator.estimate(orders, PAIR, 10)
        assert result.immediate == pytest.approx(5)

    def test_zero_price_raises(self, estimator):
        with pytest.raises(ComputationError):
            estimator.estimate(_orders(order("1", TOKEN_B, 0, 100)), PAIR, 10)
