import math

import pytest

from verto.core.domain.entities.order_entity import SwapPair
from verto.core.domain.exceptions import ValidationError
from verto.core.domain.validators import (
    ensure_limit_price,
    ensure_positive_amount,
    ensure_swap_pair,
    ensure_valid_pair,
    validate_hash,
)

from .conftest import TOKEN_A, TOKEN_B


class TestValidateHash:
    def test_accepts_43_char_base64url(self):
        assert validate_hash("usjm4PCxUd5mtaon7zc97-dt-3qf67yPyqgzLnLqk5A")
        assert validate_hash("a" * 43)
        assert validate_hash("_-" * 21 + "Z")

    @pytest.mark.parametrize("value", ["a" * 42, "a" * 44, "", "a" * 42 + "=", "a" * 42 + "+", " " + "a" * 42])
    def test_rejects_wrong_length_or_alphabet(self, value):
        assert not validate_hash(value)

    @pytest.mark.parametrize("value", [None, 123, b"a" * 43, ["a" * 43]])
    def test_rejects_non_strings(self, value):
        assert not validate_hash(value)

    def test_rejects_trailing_newline(self):
        assert not validate_hash("a" * 43 + "\n")


class TestEnsurePair:
    def test_valid_pair_returns_tuple(self):
        assert ensure_valid_pair([TOKEN_A, TOKEN_B]) == (TOKEN_A, TOKEN_B)

    def test_wrong_length(self):
        with pytest.raises(ValidationError, match="Length should be 2"):
            ensure_valid_pair([TOKEN_A])

    def test_invalid_member(self):
        with pytest.raises(ValidationError):
            ensure_valid_pair([TOKEN_A, "nope"])

    @pytest.mark.parametrize("pair", [None, "ab", 5, {TOKEN_A, TOKEN_B}])
    def test_rejects_non_sequences(self, pair):
        with pytest.raises(ValidationError, match="Invalid pair"):
            ensure_valid_pair(pair)

    def test_swap_pair_same_token(self):
        with pytest.raises(ValidationError, match="Tokens must differ"):
            ensure_swap_pair({"from": TOKEN_A, "to": TOKEN_A})

    def test_swap_pair_from_mapping(self):
        pair = ensure_swap_pair({"from": TOKEN_A, "to": TOKEN_B})
        assert isinstance(pair, SwapPair)
        assert pair.as_tuple() == (TOKEN_A, TOKEN_B)

    def test_swap_pair_by_field_name(self):
        pair = ensure_swap_pair(SwapPair(from_token=TOKEN_A, to_token=TOKEN_B))
        assert pair.from_token == TOKEN_A

    def test_swap_pair_missing_key(self):
        with pytest.raises(ValidationError):
            ensure_swap_pair({"from": TOKEN_A})

    def test_swap_pair_bad_id(self):
        with pytest.raises(ValidationError, match="Invalid ID in pair"):
            ensure_swap_pair({"from": TOKEN_A, "to": "short"})


class TestAmountsAndPrices:
    def test_positive_amount(self):
        assert ensure_positive_amount(10) == 10.0

    @pytest.mark.parametrize("amount", [0, -1, math.nan, "10", None, True])
    def test_rejects_bad_amount(self, amount):
        with pytest.raises(ValidationError):
            ensure_positive_amount(amount)

    def test_limit_price_optional(self):
        assert ensure_limit_price(None) is None
        assert ensure_limit_price(2) == 2.0

    @pytest.mark.parametrize("price", [0, -2, math.nan, "2"])
    def test_rejects_bad_limit_price(self, price):
        with pytest.raises(ValidationError):
            ensure_limit_price(price)

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            ensure_positive_amount(-1)
