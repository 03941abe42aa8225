"""Hypothesis strategies for property-based tests.

Re-exports commonly used strategies for convenience:
    from tests.strategies import block_ids, linear_flows, random_flows
"""

from tests.strategies.flows import execution_dags, linear_flows, random_flows
from tests.strategies.ids import block_ids, unique_block_ids, variable_names

__all__ = [
    "block_ids",
    "execution_dags",
    "linear_flows",
    "random_flows",
    "unique_block_ids",
    "variable_names",
]
