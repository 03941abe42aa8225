"""Reading catalogs and flow documents from disk.

The validation engine itself never touches files; this module turns the
YAML/JSON documents used by the CLI into BlockSchema and Flow objects.

Catalog document (YAML):

    block_types:
      - id: start
        category: core
        sentinel: start
        outputs: [{id: o1, kinds: [flow_out]}]

Flow document (YAML or JSON, chosen by file suffix):

    name: demo
    blocks:
      - {id: b1, type: start}
      - {id: b2, type: end}
    connections:
      - {id: c1, source: {block: b1, port: o1}, target: {block: b2, port: i1}}

Blocks may carry explicit ``inputs``/``outputs`` port maps. When no block in
the document does, the maps are derived from the connection list.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from flowguard.contracts.errors import FlowLoadError
from flowguard.contracts.flow import Block, Connection, Flow
from flowguard.contracts.schema import BlockSchema
from flowguard.contracts.types import BlockID, BlockTypeID, ConnectionID, PortID
from flowguard.core.logging import get_logger
from flowguard.core.registry import SchemaRegistry

logger = get_logger(__name__)


class _Endpoint(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    block: str = Field(min_length=1)
    port: str = Field(min_length=1)


class _ConnectionDocument(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    id: str = Field(min_length=1)
    source: _Endpoint
    target: _Endpoint


class _BlockDocument(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    id: str = Field(min_length=1)
    type: str = Field(min_length=1)
    parameters: dict[str, Any] = Field(default_factory=dict)
    inputs: dict[str, list[str]] | None = None
    outputs: dict[str, list[str]] | None = None


class FlowDocument(BaseModel):
    """On-disk shape of a flow snapshot."""

    model_config = {"frozen": True, "extra": "forbid"}

    name: str | None = None
    globals: dict[str, Any] = Field(default_factory=dict)
    blocks: list[_BlockDocument] = Field(default_factory=list)
    connections: list[_ConnectionDocument] = Field(default_factory=list)

    def to_flow(self) -> Flow:
        connections = [
            Connection(
                id=ConnectionID(c.id),
                source_block_id=BlockID(c.source.block),
                source_port_id=PortID(c.source.port),
                target_block_id=BlockID(c.target.block),
                target_port_id=PortID(c.target.port),
            )
            for c in self.connections
        ]
        blocks = [
            Block(
                id=BlockID(b.id),
                block_type=BlockTypeID(b.type),
                inputs=b.inputs or {},
                outputs=b.outputs or {},
                parameters=b.parameters,
            )
            for b in self.blocks
        ]
        explicit_ports = any(b.inputs is not None or b.outputs is not None for b in self.blocks)
        if explicit_ports:
            return Flow(blocks=tuple(blocks), connections=tuple(connections), name=self.name, globals=self.globals)
        return Flow.assemble(blocks, connections, name=self.name, globals=self.globals)


class CatalogDocument(BaseModel):
    """On-disk shape of a block-type catalog."""

    model_config = {"frozen": True, "extra": "forbid"}

    block_types: list[BlockSchema] = Field(default_factory=list)


def _read_document(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".json":
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise FlowLoadError(f"Cannot parse {path.name}: {e}") from e


def load_flow(path: Path) -> Flow:
    """Load a flow snapshot from a YAML or JSON document.

    Raises:
        FileNotFoundError: If the file does not exist
        FlowLoadError: If the document is not valid YAML/JSON or not a mapping
        ValidationError: If the document does not match the flow shape
    """
    data = _read_document(path)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FlowLoadError(f"{path.name}: top level must be a mapping, got {type(data).__name__}")
    flow = FlowDocument.model_validate(data).to_flow()
    logger.debug("flow_loaded", path=str(path), blocks=len(flow.blocks), connections=len(flow.connections))
    return flow


def load_catalog(path: Path) -> SchemaRegistry:
    """Load a block-type catalog into a new registry.

    Raises:
        FileNotFoundError: If the file does not exist
        FlowLoadError: If the document is not valid YAML/JSON or not a mapping
        ValidationError: If a schema is malformed (including bad conditions)
        DuplicateSchemaError: If two different schemas share an id
    """
    data = _read_document(path)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FlowLoadError(f"{path.name}: top level must be a mapping, got {type(data).__name__}")
    catalog = CatalogDocument.model_validate(data)
    registry = SchemaRegistry(catalog.block_types)
    logger.debug("catalog_loaded", path=str(path), block_types=len(registry))
    return registry
