"""Project-agnostic helpers: YAML config IO, strict config namespaces, logging setup."""
