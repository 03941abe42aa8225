# tests/unit/validation/test_flow_validator.py
"""End-to-end tests for FlowValidator over the test catalog."""

import pytest

from flowguard.contracts import BlockSchema, Flow, SchemaLookupError, ValidationCode
from flowguard.core.config import ValidatorSettings
from flowguard.core.registry import SchemaRegistry
from flowguard.validation import FlowValidator, validate_flow
from tests.helpers.flows import block, build_flow, linear_flow, wire


class TestReferenceScenarios:
    """The two smallest interesting flows."""

    def test_start_wired_to_end_is_clean(self, validator: FlowValidator) -> None:
        flow = build_flow([block("b1", "start"), block("b2", "end")], [wire("c1", "b1", "o1", "b2", "i1")])

        report = validator.validate_flow(flow)

        assert report.is_valid
        assert report.errors == ()
        assert report.warnings == ()
        assert report.summary.total_blocks == 2
        assert report.summary.orphaned_blocks == 0
        assert report.summary.has_start_block
        assert report.summary.has_reachable_end
        assert report.summary.checks_passed == 7
        assert report.summary.checks_failed == 0

    def test_disconnected_end_is_one_broken_chain_error(self, validator: FlowValidator) -> None:
        flow = build_flow([block("b1", "start"), block("b2", "end")])

        report = validator.validate_flow(flow)

        assert not report.is_valid
        assert report.codes() == [ValidationCode.BROKEN_FLOW_CHAIN]
        assert report.summary.has_reachable_end is False
        assert report.summary.orphaned_blocks == 1
        assert report.summary.invalid_blocks == 1


class TestStructure:
    """Whole-flow structural findings."""

    def test_empty_flow(self, validator: FlowValidator) -> None:
        report = validator.validate_flow(Flow())

        assert report.codes() == [ValidationCode.NO_BLOCKS]
        assert report.summary.total_blocks == 0
        assert report.summary.checks_failed == 1

    def test_empty_flow_counts_its_connections_invalid(self, validator: FlowValidator) -> None:
        report = validator.validate_flow(build_flow([], [wire("c1", "a", "out", "b", "in")]))

        assert report.codes() == [ValidationCode.NO_BLOCKS]
        assert report.summary.total_connections == 1
        assert report.summary.invalid_connections == 1

    def test_duplicate_block_ids(self, validator: FlowValidator) -> None:
        flow = linear_flow(("a", "action"))
        flow = build_flow([*flow.blocks, block("a", "action")], flow.connections)

        report = validator.validate_flow(flow)

        assert report.codes() == [ValidationCode.DUPLICATE_BLOCK_ID]
        assert report.summary.total_blocks == 3

    def test_duplicate_connection_ids(self, validator: FlowValidator) -> None:
        flow = build_flow(
            [block("s", "start"), block("a", "action"), block("b", "action"), block("e", "end")],
            [
                wire("c1", "s", "o1", "a", "in"),
                wire("c2", "a", "out", "e", "i1"),
                wire("c3", "s", "o1", "b", "in"),
                wire("c2", "b", "out", "e", "i1"),
            ],
        )

        report = validator.validate_flow(flow)

        assert report.codes() == [ValidationCode.DUPLICATE_CONNECTION_ID, ValidationCode.TOO_MANY_CONNECTIONS]
        assert report.errors[0].connection_id == "c2"
        assert report.summary.invalid_connections == 1

    def test_unknown_block_type(self, validator: FlowValidator) -> None:
        report = validator.validate_flow(linear_flow(("x", "mystery")))

        assert ValidationCode.MISSING_BLOCK_DEFINITION in report.codes()
        assert report.errors[0].block_id == "x"
        assert report.errors[0].context["block_type"] == "mystery"

    def test_deprecated_and_experimental_types_warn(self, validator: FlowValidator) -> None:
        report = validator.validate_flow(linear_flow(("old", "legacy_action"), ("new", "beta_action")))

        assert report.is_valid
        assert report.codes() == [ValidationCode.DEPRECATED_BLOCK, ValidationCode.EXPERIMENTAL_BLOCK]


class TestPassOrdering:
    """Findings follow the fixed pass order."""

    def test_errors_grouped_by_pass(self, validator: FlowValidator) -> None:
        flow = build_flow(
            [
                block("s", "start"),
                block("s", "start"),
                block("h", "http_request", url="u", timeout=1, body="x"),
                block("e", "end"),
                block("lost", "action"),
            ],
            [wire("c1", "s", "o1", "h", "out"), wire("c2", "h", "out", "e", "i1")],
        )

        report = validator.validate_flow(flow)

        assert [issue.code for issue in report.errors] == [
            ValidationCode.DUPLICATE_BLOCK_ID,
            ValidationCode.MISSING_REQUIRED_INPUT,
            ValidationCode.MISSING_TARGET_PORT,
            ValidationCode.BROKEN_FLOW_CHAIN,
            ValidationCode.ORPHANED_BLOCK,
        ]

    def test_connection_counts(self, validator: FlowValidator) -> None:
        flow = build_flow(
            [block("s", "start"), block("a", "action"), block("b", "action"), block("e", "end")],
            [
                wire("c1", "s", "o1", "a", "in"),
                wire("c2", "s", "o1", "b", "in"),
                wire("c3", "a", "out", "e", "i1"),
                wire("c4", "b", "out", "e", "i1"),
            ],
        )

        report = validator.validate_flow(flow)

        assert report.summary.total_connections == 4
        assert report.summary.valid_connections == 3
        assert report.summary.invalid_connections == 1
        assert report.codes() == [ValidationCode.TOO_MANY_CONNECTIONS]
        assert report.errors[0].connection_id == "c4"

    def test_more_lenient_settings(self, registry: SchemaRegistry) -> None:
        flow = build_flow(
            [block("s", "start"), block("a", "action"), block("b", "action"), block("e", "end")],
            [
                wire("c1", "s", "o1", "a", "in"),
                wire("c2", "s", "o1", "b", "in"),
                wire("c3", "a", "out", "e", "i1"),
                wire("c4", "b", "out", "e", "i1"),
            ],
        )

        report = validate_flow(flow, registry, settings=ValidatorSettings(default_input_connection_limit=2))

        assert report.is_valid


class TestDeterminism:
    """Validation is a pure function of the snapshot."""

    def test_repeated_runs_are_identical(self, validator: FlowValidator) -> None:
        flow = build_flow(
            [block("s", "start"), block("v", "set_var_name", name="t"), block("d", "set_var_data", source="nope"), block("r", "sensor_read")],
            [wire("c1", "s", "o1", "r", "in"), wire("c2", "v", "name_out", "d", "name_in")],
        )

        first = validator.validate_flow(flow)
        second = validator.validate_flow(flow)

        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_fresh_validators_agree(self, registry: SchemaRegistry) -> None:
        flow = linear_flow(("a", "action"), ("h", "http_request"))

        assert FlowValidator(registry).validate_flow(flow) == validate_flow(flow, registry)


class TestExecutability:
    """Tests for is_flow_executable."""

    def test_clean_flow_is_executable(self, validator: FlowValidator) -> None:
        assert validator.is_flow_executable(linear_flow(("a", "action")))

    def test_warnings_do_not_block_execution(self, validator: FlowValidator) -> None:
        assert validator.is_flow_executable(linear_flow(("a", "legacy_action")))

    def test_orphaned_auxiliary_blocks_execution(self, validator: FlowValidator) -> None:
        flow = linear_flow(("a", "action"))
        flow = build_flow([*flow.blocks, block("d", "display")], flow.connections)

        assert validator.validate_flow(flow).is_valid
        assert not validator.is_flow_executable(flow)

    def test_invalid_flow_is_not_executable(self, validator: FlowValidator) -> None:
        assert not validator.is_flow_executable(build_flow([block("s", "start")]))


class TestLookupFailure:
    """A failing schema lookup aborts validation."""

    def test_lookup_error_propagates(self) -> None:
        def loader(block_type: str) -> BlockSchema | None:
            raise OSError("catalog unavailable")

        with pytest.raises(SchemaLookupError, match="catalog unavailable"):
            FlowValidator(SchemaRegistry(loader=loader)).validate_flow(linear_flow())

    def test_validate_connection_delegates(self, validator: FlowValidator) -> None:
        result = validator.validate_connection(block("a", "action"), "out", block("a", "action"), "in")

        assert result.error is not None
        assert result.error.code is ValidationCode.SELF_CONNECTION
