# tests/property/validation/test_connection_properties.py
"""Property-based tests for connection and port-compatibility rules.

Properties:
1. A block can never be connected to itself, whatever its ports
2. Default compatibility rules never hold in reverse
3. Compatible kinds always share a family under the default rules
4. Bulk validation classifies every connection exactly once
"""

from __future__ import annotations

from hypothesis import HealthCheck, assume, given, settings
from hypothesis import strategies as st

from flowguard.contracts import CompatibilityLevel, PortKind, ValidationCode, kind_family
from flowguard.core.graph import FlowIndex
from flowguard.core.ports import DEFAULT_PORT_RULES, PortCompatibilityTable
from flowguard.validation import ConnectionValidator
from tests.helpers.catalog import catalog_registry, catalog_schemas
from tests.helpers.flows import block
from tests.property.settings import QUICK_SETTINGS, STANDARD_SETTINGS
from tests.strategies import random_flows

_REGISTRY = catalog_registry()
_CONNECTIONS = ConnectionValidator(_REGISTRY)

_WIRABLE = [schema for schema in catalog_schemas() if schema.inputs and schema.outputs]


@st.composite
def self_wirings(draw: st.DrawFn) -> tuple[str, str, str]:
    schema = draw(st.sampled_from(_WIRABLE))
    output = draw(st.sampled_from([p.id for p in schema.outputs]))
    input_ = draw(st.sampled_from([p.id for p in schema.inputs]))
    return schema.id, output, input_


class TestSelfConnectionProperties:
    """Self-loops are rejected regardless of port kinds."""

    @given(wiring=self_wirings(), block_id=st.text(min_size=1, max_size=8))
    @STANDARD_SETTINGS
    def test_self_connection_always_invalid(self, wiring: tuple[str, str, str], block_id: str) -> None:
        block_type, output, input_ = wiring
        b = block(block_id, block_type)

        result = _CONNECTIONS.validate(b, output, b, input_)

        assert not result.valid
        assert result.error is not None
        assert result.error.code is ValidationCode.SELF_CONNECTION


class TestCompatibilityProperties:
    """The default rule table is directional and family-preserving."""

    @given(rule=st.sampled_from(DEFAULT_PORT_RULES))
    @QUICK_SETTINGS
    def test_default_rules_are_one_directional(self, rule) -> None:
        table = PortCompatibilityTable()

        assert table.is_compatible(rule.source, rule.target)
        assert not table.is_compatible(rule.target, rule.source)

    @given(source=st.sampled_from(list(PortKind)), target=st.sampled_from(list(PortKind)))
    @settings(STANDARD_SETTINGS, suppress_health_check=[*STANDARD_SETTINGS.suppress_health_check, HealthCheck.filter_too_much])
    def test_compatible_kinds_share_a_family(self, source: PortKind, target: PortKind) -> None:
        table = PortCompatibilityTable()
        assume(table.is_compatible(source, target))

        assert kind_family(source) == kind_family(target)
        assert table.compatibility([source], [target]) is CompatibilityLevel.PERFECT


class TestBulkProperties:
    """Every connection lands in exactly one bucket."""

    @given(flow=random_flows())
    @STANDARD_SETTINGS
    def test_every_connection_classified_once(self, flow) -> None:
        result = _CONNECTIONS.validate_all(FlowIndex.build(flow, _REGISTRY))

        valid_ids = [c.id for c in result.valid]
        invalid_ids = [item.connection.id for item in result.invalid]
        assert sorted(valid_ids + invalid_ids) == sorted(c.id for c in flow.connections)
        assert all(issue.is_error for issue in result.errors)
        assert all(not issue.is_error for issue in result.warnings)
