"""Conditional-requirement expressions over block parameters.

Grammar (deliberately tiny, catalog authors write these by hand):

    condition := clause (" OR " clause)*
    clause    := parameter operator literal
    operator  := "===" | "!==" | "==" | "!="
    literal   := 'quoted' | "quoted" | bare-word

``OR`` inside a quoted literal is part of the literal.

A missing or None parameter compares as the empty string. Booleans compare
as ``true``/``false`` and numbers by their text form, so ``mode === 1``
matches both ``1`` and ``"1"``.

Parsing happens once when a schema is loaded; evaluation is a pure function
of the parameter mapping.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from flowguard.contracts.errors import ConditionSyntaxError

_OR_SEPARATOR = " OR "

# Longest operators first so "===" is not read as "==" followed by "=".
_CLAUSE_PATTERN = re.compile(
    r"""^\s*
    (?P<param>['"]?[A-Za-z_][\w.\-]*['"]?)
    \s*(?P<op>===|!==|==|!=)\s*
    (?P<literal>'[^']*'|"[^"]*"|[^\s'"]+)
    \s*$""",
    re.VERBOSE,
)


def _split_clauses(source: str) -> list[str]:
    parts: list[str] = []
    start = 0
    quote: str | None = None
    i = 0
    while i < len(source):
        char = source[i]
        if quote is not None:
            if char == quote:
                quote = None
        elif char in "'\"":
            quote = char
        elif source.startswith(_OR_SEPARATOR, i):
            parts.append(source[start:i])
            i += len(_OR_SEPARATOR)
            start = i
            continue
        i += 1
    parts.append(source[start:])
    return parts


def _unquote(token: str) -> str:
    if len(token) >= 2 and token[0] == token[-1] and token[0] in "'\"":
        return token[1:-1]
    return token


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True, slots=True)
class Clause:
    """One ``parameter <op> literal`` comparison."""

    parameter: str
    negated: bool
    literal: str

    def evaluate(self, parameters: Mapping[str, Any]) -> bool:
        matches = _as_text(parameters.get(self.parameter)) == self.literal
        return not matches if self.negated else matches


@dataclass(frozen=True, slots=True)
class Condition:
    """A parsed condition: true when any clause holds."""

    source: str
    clauses: tuple[Clause, ...]

    def evaluate(self, parameters: Mapping[str, Any]) -> bool:
        return any(clause.evaluate(parameters) for clause in self.clauses)

    @property
    def parameters(self) -> tuple[str, ...]:
        """Parameter names the condition reads, in clause order."""
        return tuple(dict.fromkeys(clause.parameter for clause in self.clauses))


@lru_cache(maxsize=512)
def parse_condition(source: str) -> Condition:
    """Parse a conditional-requirement expression.

    Args:
        source: Expression text, e.g. ``mode === 'timed' OR mode === 'cyclic'``

    Returns:
        Parsed condition

    Raises:
        ConditionSyntaxError: If any clause does not match the grammar
    """
    if not source.strip():
        raise ConditionSyntaxError(source, "condition is empty")

    clauses: list[Clause] = []
    for part in _split_clauses(source):
        match = _CLAUSE_PATTERN.match(part)
        if match is None:
            raise ConditionSyntaxError(source, f"cannot parse clause {part.strip()!r}")
        clauses.append(
            Clause(
                parameter=_unquote(match.group("param")),
                negated=match.group("op").startswith("!"),
                literal=_unquote(match.group("literal")),
            )
        )
    return Condition(source=source, clauses=tuple(clauses))


def evaluate_condition(source: str, parameters: Mapping[str, Any]) -> bool:
    """Parse (cached) and evaluate a condition against block parameters."""
    return parse_condition(source).evaluate(parameters)
