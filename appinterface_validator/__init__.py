"""Schema validation and completion for AppInterface YAML documents."""

__version__ = "0.1.0"
