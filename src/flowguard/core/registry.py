# src/flowguard/core/registry.py
"""Block schema registry.

The validator needs exactly one capability from its environment: resolve a
block-type id to its schema, or None when the type is unknown. Anything
with a ``get_block_schema`` method satisfies the SchemaLookup protocol;
SchemaRegistry is the in-process implementation with an optional loader
for types not registered up front.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import Protocol, TypeAlias, runtime_checkable

from flowguard.contracts.errors import DuplicateSchemaError, SchemaLookupError
from flowguard.contracts.schema import BlockSchema
from flowguard.core.logging import get_logger

logger = get_logger(__name__)

SchemaLoader: TypeAlias = Callable[[str], BlockSchema | None]


@runtime_checkable
class SchemaLookup(Protocol):
    """Synchronous block-type schema lookup."""

    def get_block_schema(self, block_type: str) -> BlockSchema | None: ...


class SchemaRegistry:
    """Append-only schema registry with per-instance memoization.

    Schemas registered directly are always served first. Types the registry
    does not hold are passed to ``loader`` (if any); loader hits are cached
    on this instance and never evicted, so sharing one registry between
    concurrent validation calls is safe. Loader misses are not cached, which
    lets a catalog that grows later serve the type on a subsequent call.

    Args:
        schemas: Schemas to register up front
        loader: Fallback resolver for unregistered types
    """

    def __init__(self, schemas: Iterable[BlockSchema] = (), *, loader: SchemaLoader | None = None) -> None:
        self._schemas: dict[str, BlockSchema] = {}
        self._loader = loader
        for schema in schemas:
            self.register(schema)

    def register(self, schema: BlockSchema) -> None:
        """Register a schema under its id.

        Re-registering an equal schema is a no-op.

        Raises:
            DuplicateSchemaError: If a different schema is already registered under the id
        """
        existing = self._schemas.get(schema.id)
        if existing is not None:
            if existing == schema:
                return
            raise DuplicateSchemaError(schema.id)
        self._schemas[schema.id] = schema

    def get_block_schema(self, block_type: str) -> BlockSchema | None:
        """Resolve a block type.

        Returns:
            The schema, or None if neither the registry nor the loader knows the type

        Raises:
            SchemaLookupError: If the loader raises
        """
        schema = self._schemas.get(block_type)
        if schema is not None or self._loader is None:
            return schema

        try:
            loaded = self._loader(block_type)
        except Exception as e:
            raise SchemaLookupError(block_type, str(e)) from e

        if loaded is None:
            logger.debug("schema_not_found", block_type=block_type)
            return None
        if loaded.id != block_type:
            raise SchemaLookupError(block_type, f"loader returned schema for '{loaded.id}'")
        self._schemas[block_type] = loaded
        logger.debug("schema_loaded", block_type=block_type)
        return loaded

    def block_types(self) -> list[str]:
        """Registered (or already loaded) block-type ids, sorted."""
        return sorted(self._schemas)

    def __contains__(self, block_type: object) -> bool:
        return block_type in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)

    def __iter__(self) -> Iterator[BlockSchema]:
        return iter(self._schemas[key] for key in sorted(self._schemas))
