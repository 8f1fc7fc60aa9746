"""Language server for AppInterface YAML documents."""
