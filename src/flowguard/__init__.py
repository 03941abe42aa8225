"""
Flowguard: static validation for block-and-port automation flows.

Checks a flow snapshot for port compatibility, connection cardinality,
execution-chain completeness, variable consistency and block architecture,
and reports every finding as data.
"""

__version__ = "0.1.0"
