# tests/unit/core/test_port_table.py
"""Tests for the port compatibility table."""

import pytest

from flowguard.contracts import CompatibilityLevel
from flowguard.core.ports import DEFAULT_PORT_RULES, PortCompatibilityRule, PortCompatibilityTable


class TestDefaultRules:
    """The built-in rule set."""

    @pytest.mark.parametrize(
        ("source", "target"),
        [
            ("flow_out", "flow_in"),
            ("loop_out", "flow_in"),
            ("var_name_out", "var_name_in"),
            ("var_data_out", "var_data_in"),
            ("error_out", "error_in"),
        ],
    )
    def test_allowed_pairs(self, source: str, target: str) -> None:
        assert PortCompatibilityTable().is_compatible(source, target)

    @pytest.mark.parametrize(
        ("source", "target"),
        [
            ("flow_in", "flow_out"),
            ("var_data_in", "var_data_out"),
            ("flow_out", "var_data_in"),
            ("var_name_out", "var_data_in"),
            ("flow_out", "flow_out"),
        ],
    )
    def test_everything_else_rejected(self, source: str, target: str) -> None:
        """Rules are one-directional and kinds do not mix across families."""
        assert not PortCompatibilityTable().is_compatible(source, target)

    def test_unknown_kinds_fail_closed(self) -> None:
        table = PortCompatibilityTable()

        assert not table.is_compatible("custom_out", "flow_in")
        assert table.compatible_targets("custom_out") == frozenset()

    def test_loop_output_is_a_perfect_match_for_flow_input(self) -> None:
        assert PortCompatibilityTable().compatibility(["loop_out"], ["flow_in"]) is CompatibilityLevel.PERFECT


class TestCompatibilityLevels:
    """Levels over composite (multi-kind) ports."""

    def test_any_compatible_pair_connects_composites(self) -> None:
        table = PortCompatibilityTable()

        level = table.compatibility(["var_name_out", "flow_out"], ["var_data_in", "flow_in"])

        assert level is CompatibilityLevel.PERFECT

    def test_cross_family_rule_is_a_conversion(self) -> None:
        table = PortCompatibilityTable([*DEFAULT_PORT_RULES, PortCompatibilityRule("var_name_out", "var_data_in")])

        assert table.compatibility(["var_name_out"], ["var_data_in"]) is CompatibilityLevel.CONVERSION

    def test_perfect_wins_over_conversion(self) -> None:
        table = PortCompatibilityTable([PortCompatibilityRule("var_name_out", "var_data_in"), *DEFAULT_PORT_RULES])

        level = table.compatibility(["var_name_out"], ["var_data_in", "var_name_in"])

        assert level is CompatibilityLevel.PERFECT

    def test_no_pair_is_incompatible(self) -> None:
        assert PortCompatibilityTable().compatibility(["flow_out"], ["var_data_in"]) is CompatibilityLevel.INCOMPATIBLE


class TestMutation:
    """Adding and removing rules invalidates cached lookups."""

    def test_add_rule_takes_effect_after_a_lookup(self) -> None:
        table = PortCompatibilityTable()
        assert not table.is_compatible("error_out", "flow_in")

        table.add_rule(PortCompatibilityRule("error_out", "flow_in"))

        assert table.is_compatible("error_out", "flow_in")

    def test_add_existing_rule_is_a_no_op(self) -> None:
        table = PortCompatibilityTable()

        table.add_rule(DEFAULT_PORT_RULES[0])

        assert table.rules == DEFAULT_PORT_RULES

    def test_remove_rule(self) -> None:
        table = PortCompatibilityTable()
        assert table.is_compatible("error_out", "error_in")

        assert table.remove_rule("error_out", "error_in") is True
        assert not table.is_compatible("error_out", "error_in")
        assert table.remove_rule("error_out", "error_in") is False

    def test_bidirectional_rule_allows_reverse(self) -> None:
        table = PortCompatibilityTable([PortCompatibilityRule("sync_out", "sync_in", bidirectional=True)])

        assert table.is_compatible("sync_out", "sync_in")
        assert table.is_compatible("sync_in", "sync_out")

    def test_tables_do_not_share_state(self) -> None:
        first = PortCompatibilityTable()
        second = PortCompatibilityTable()

        first.add_rule(PortCompatibilityRule("error_out", "flow_in"))

        assert not second.is_compatible("error_out", "flow_in")

    def test_compatible_sources(self) -> None:
        assert PortCompatibilityTable().compatible_sources("flow_in") == frozenset({"flow_out", "loop_out"})
