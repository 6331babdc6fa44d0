"""Tests for ordering buy-get promotions ahead of the others."""

from functools import cmp_to_key

from promotions.compute_actions.buy_get import sort_by_buy_get_type
from promotions.compute_actions.dto import PromotionDTO


def _promotion(code, promotion_type):
    return PromotionDTO(code=code, type=promotion_type)


class TestSortByBuyGetType:
    def test_buy_get_before_standard(self):
        assert sort_by_buy_get_type(_promotion("A", "buyget"), _promotion("B", "standard")) == -1

    def test_standard_after_buy_get(self):
        assert sort_by_buy_get_type(_promotion("A", "standard"), _promotion("B", "buyget")) == 1

    def test_same_bucket_is_a_tie(self):
        assert sort_by_buy_get_type(_promotion("A", "standard"), _promotion("B", "standard")) == 0
        assert sort_by_buy_get_type(_promotion("A", "buyget"), _promotion("B", "buyget")) == 0

    def test_stable_sort_keeps_input_order_within_bucket(self):
        promotions = [
            _promotion("S1", "standard"),
            _promotion("B1", "buyget"),
            _promotion("S2", "standard"),
            _promotion("B2", "buyget"),
            _promotion("S3", "standard"),
        ]

        ordered = sorted(promotions, key=cmp_to_key(sort_by_buy_get_type))

        assert [p.code for p in ordered] == ["B1", "B2", "S1", "S2", "S3"]
