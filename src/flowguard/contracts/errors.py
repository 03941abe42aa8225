"""Exceptions raised by the validation engine.

Expected validation failures are never raised: they are ValidationIssue
entries in the report. The exceptions here mean validation could not run
at all, or that a schema or input document is malformed.
"""


class SchemaLookupError(RuntimeError):
    """Raised when the schema lookup capability itself fails.

    A lookup that simply has no schema for a block type returns None
    instead; this exception means the lookup could not answer.
    """

    def __init__(self, block_type: str, reason: str) -> None:
        self.block_type = block_type
        self.reason = reason
        super().__init__(f"Schema lookup failed for block type '{block_type}': {reason}")


class DuplicateSchemaError(ValueError):
    """Raised when a different schema is registered under an existing block-type id."""

    def __init__(self, block_type: str) -> None:
        self.block_type = block_type
        super().__init__(f"Block type '{block_type}' is already registered with a different schema")


class ConditionSyntaxError(ValueError):
    """Raised when a conditional-requirement expression cannot be parsed."""

    def __init__(self, condition: str, reason: str) -> None:
        self.condition = condition
        self.reason = reason
        super().__init__(f"Invalid condition '{condition}': {reason}")


class FlowLoadError(ValueError):
    """Raised when a flow or catalog document cannot be read into the data model."""

    pass
