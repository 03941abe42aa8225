"""Semantic type aliases for compile-time type safety.

NewType creates distinct types that mypy treats as incompatible,
preventing accidental misuse of semantically different string values.
"""

from typing import NewType

BlockID = NewType("BlockID", str)
"""Block instance identifier, unique within one flow (e.g., 'block_7f3a')"""

ConnectionID = NewType("ConnectionID", str)
"""Connection (edge) identifier, unique within one flow"""

PortID = NewType("PortID", str)
"""Port identifier declared by a block-type schema (e.g., 'flow_out', 'data')"""

BlockTypeID = NewType("BlockTypeID", str)
"""Block-type identifier resolved through the schema registry (e.g., 'http_request')"""
