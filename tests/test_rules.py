"""Tests for identifier parsing and canonical formatting."""

import pytest

from packet_logger import BareRule, CompositeRule, ConfigurationError
from packet_logger.pipeline.rules import (
    format_exclusions,
    parse_number,
    parse_rule,
    parse_rules,
    parse_rules_lenient,
)


class TestParseRule:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (40, BareRule(0x028)),
            ("0x028", BareRule(0x028)),
            ("0X28", BareRule(0x028)),
            ("40", BareRule(0x028)),
            (" 0x00d ", BareRule(0x00D)),
            ("0x028_0x1844", CompositeRule(0x028, 0x1844)),
            ("40_6212", CompositeRule(0x028, 0x1844)),
        ],
    )
    def test_accepted_forms(self, value, expected):
        assert parse_rule(value) == expected

    def test_rule_objects_pass_through(self):
        rule = CompositeRule(0x028, 0x58E0)
        assert parse_rule(rule) is rule

    @pytest.mark.parametrize(
        "value",
        ["", "   ", "zz", "0x", "0x028_", "_0x1844", "0x028_0x1844_0x1", "1.5", None, 2.0, True, -1, "-0x5", "+40", "\u0664\u0660", "0x_1F", "0x0_28", "1 2"],
    )
    def test_malformed_identifiers(self, value):
        with pytest.raises(ConfigurationError):
            parse_rule(value)

    def test_subcategory_must_fit_sixteen_bits(self):
        with pytest.raises(ConfigurationError, match="16 bits"):
            parse_rule("0x028_0x10000")

    def test_composite_rule_needs_subcategory_family(self):
        with pytest.raises(ConfigurationError, match="no sub-category field"):
            parse_rule("0x029_0x0001")

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_rule("bogus")


class TestParseNumber:
    def test_hex_and_decimal(self):
        assert parse_number("0x1F") == 31
        assert parse_number("0X1f") == 31
        assert parse_number("31") == 31
        assert parse_number(" 40 ") == 40

    @pytest.mark.parametrize("token", ["4_0", "-1", "+40", "\u0664\u0660", "0x", "0x_28", "", "1e3"])
    def test_rejects_non_ascii_and_python_only_forms(self, token):
        with pytest.raises(ValueError):
            parse_number(token)


class TestParseRules:
    def test_deduplicates_equivalent_forms(self):
        assert parse_rules(["0x028", 40, "40"]) == frozenset({BareRule(0x028)})

    def test_first_bad_identifier_raises(self):
        with pytest.raises(ConfigurationError):
            parse_rules(["0x00D", "nope"])

    def test_lenient_collects_errors(self):
        rules, errors = parse_rules_lenient(["0x00D", "nope", "0x028_0x1844"])
        assert rules == frozenset({BareRule(0x00D), CompositeRule(0x028, 0x1844)})
        assert len(errors) == 1
        assert "nope" in errors[0]


class TestFormatExclusions:
    def test_empty_set_is_none(self):
        assert format_exclusions(frozenset()) == "NONE"

    def test_canonical_sorted_order(self):
        rules = {
            CompositeRule(0x028, 0x58E0),
            BareRule(0x119),
            CompositeRule(0x028, 0x1844),
            BareRule(0x028),
            BareRule(0x00D),
        }
        assert format_exclusions(rules) == (
            "0x00D, 0x028, 0x028_0x1844, 0x028_0x58E0, 0x119"
        )

    def test_identifier_round_trip(self):
        for text in ("0x00D", "0x028_0x1844"):
            assert parse_rule(text).identifier == text
