"""
Unit tests for value normalization.
"""

import pytest
from zestimator.extractor.normalize import normalize_number, parse_numeric_string


@pytest.mark.unit
class TestNormalizeNumber:
    @pytest.mark.parametrize("raw", [598500, 0, 1234.5])
    def test_numbers_pass_through(self, raw):
        assert normalize_number(raw) == raw

    @pytest.mark.parametrize("raw", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_numbers_are_rejected(self, raw):
        assert normalize_number(raw) is None

    @pytest.mark.parametrize("raw", [True, False, None, [], [598500], object()])
    def test_unsupported_types(self, raw):
        assert normalize_number(raw) is None

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("598500", 598500),
            ("$1,234,500", 1234500),
            ("$812,300.50", 812300.5),
            ("  450000 USD", 450000),
        ],
    )
    def test_numeric_strings(self, raw, expected):
        assert normalize_number(raw) == expected

    @pytest.mark.parametrize("raw", ["", "n/a", "1.2.3", "."])
    def test_unparseable_strings(self, raw):
        assert normalize_number(raw) is None

    def test_amount_is_preferred_over_value(self):
        assert normalize_number({"amount": 100000, "value": 200000}) == 100000

    def test_value_used_when_amount_missing_or_null(self):
        assert normalize_number({"value": 200000}) == 200000
        assert normalize_number({"amount": None, "value": "$300,000"}) == 300000

    def test_carrier_strings_and_nesting(self):
        assert normalize_number({"amount": "3,747,600"}) == 3747600
        assert normalize_number({"amount": {"value": 5000}}) == 5000

    def test_carrier_without_known_fields(self):
        assert normalize_number({"currency": "USD"}) is None

    def test_carrier_with_unusable_amount(self):
        assert normalize_number({"amount": "unknown", "value": 1000}) is None


@pytest.mark.unit
def test_parse_numeric_string_overflow():
    assert parse_numeric_string("9" * 400 + ".5") is None


@pytest.mark.unit
@pytest.mark.parametrize("raw", [-5, -0.5, {"amount": -250000}])
def test_negative_numbers_are_rejected(raw):
    assert normalize_number(raw) is None
