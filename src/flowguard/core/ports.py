"""Port compatibility table.

Answers "may an output port of kind A feed an input port of kind B?".
Rules are one-directional: ``flow_out -> flow_in`` says nothing about
``flow_in -> flow_out``. A rule may opt into symmetry explicitly. Kinds no
rule mentions are incompatible with everything (fail closed).

Lookups go through a precomputed source-kind -> target-kinds matrix built
lazily on first use; every mutation drops the matrix so the next lookup
rebuilds it.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from flowguard.contracts.enums import CompatibilityLevel, PortKind, kind_family


@dataclass(frozen=True, slots=True)
class PortCompatibilityRule:
    """Allows ``source`` output kinds to connect to ``target`` input kinds.

    When ``bidirectional`` is set the reverse pairing is allowed too.
    """

    source: str
    target: str
    bidirectional: bool = False


DEFAULT_PORT_RULES: tuple[PortCompatibilityRule, ...] = (
    PortCompatibilityRule(PortKind.FLOW_OUT, PortKind.FLOW_IN),
    PortCompatibilityRule(PortKind.LOOP_OUT, PortKind.FLOW_IN),
    PortCompatibilityRule(PortKind.VAR_NAME_OUT, PortKind.VAR_NAME_IN),
    PortCompatibilityRule(PortKind.VAR_DATA_OUT, PortKind.VAR_DATA_IN),
    PortCompatibilityRule(PortKind.ERROR_OUT, PortKind.ERROR_IN),
)


class PortCompatibilityTable:
    """Compatibility lookups over a mutable rule list.

    Instances are owned by whoever constructs them (normally one per
    FlowValidator); there is no shared global table.
    """

    def __init__(self, rules: Iterable[PortCompatibilityRule] = DEFAULT_PORT_RULES) -> None:
        self._rules: list[PortCompatibilityRule] = []
        for rule in rules:
            if rule not in self._rules:
                self._rules.append(rule)
        self._matrix: Mapping[str, frozenset[str]] | None = None

    @property
    def rules(self) -> tuple[PortCompatibilityRule, ...]:
        return tuple(self._rules)

    def add_rule(self, rule: PortCompatibilityRule) -> None:
        """Add a rule and invalidate the lookup matrix. Adding an existing rule is a no-op."""
        if rule in self._rules:
            return
        self._rules.append(rule)
        self._matrix = None

    def remove_rule(self, source: str, target: str) -> bool:
        """Remove every rule for ``source -> target``.

        Returns:
            True if at least one rule was removed
        """
        remaining = [rule for rule in self._rules if not (rule.source == source and rule.target == target)]
        removed = len(remaining) != len(self._rules)
        if removed:
            self._rules = remaining
            self._matrix = None
        return removed

    def _lookup(self) -> Mapping[str, frozenset[str]]:
        if self._matrix is None:
            matrix: dict[str, set[str]] = {}
            for rule in self._rules:
                matrix.setdefault(rule.source, set()).add(rule.target)
                if rule.bidirectional:
                    matrix.setdefault(rule.target, set()).add(rule.source)
            self._matrix = MappingProxyType({kind: frozenset(targets) for kind, targets in matrix.items()})
        return self._matrix

    def is_compatible(self, source_kind: str, target_kind: str) -> bool:
        return target_kind in self._lookup().get(source_kind, frozenset())

    def compatibility(self, source_kinds: Iterable[str], target_kinds: Iterable[str]) -> CompatibilityLevel:
        """Best compatibility level across every (source, target) kind pair.

        Composite ports connect when any pair of their kinds is compatible.
        A compatible pair sharing a family is PERFECT; a compatible pair across
        families is a CONVERSION.
        """
        targets = tuple(target_kinds)
        best = CompatibilityLevel.INCOMPATIBLE
        for source in source_kinds:
            for target in targets:
                if not self.is_compatible(source, target):
                    continue
                if kind_family(source) == kind_family(target):
                    return CompatibilityLevel.PERFECT
                best = CompatibilityLevel.CONVERSION
        return best

    def compatible_targets(self, source_kind: str) -> frozenset[str]:
        """Input kinds a ``source_kind`` output may feed."""
        return self._lookup().get(source_kind, frozenset())

    def compatible_sources(self, target_kind: str) -> frozenset[str]:
        """Output kinds that may feed a ``target_kind`` input."""
        return frozenset(source for source, targets in self._lookup().items() if target_kind in targets)
