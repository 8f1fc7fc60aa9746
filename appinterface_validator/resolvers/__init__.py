"""Schema-path resolution."""
