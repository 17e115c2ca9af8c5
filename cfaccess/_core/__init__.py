"""Transport and wire-shape internals."""
