"""Schema registry and format checks.

Schemas are addressed by identifier only; nothing here knows about
documents or editor positions.
"""

from .registry import SchemaError, SchemaRegistry

__all__ = ["SchemaError", "SchemaRegistry"]
