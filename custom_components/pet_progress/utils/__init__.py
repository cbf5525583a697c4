"""Pure Python utilities for Pet Progress (no Home Assistant imports)."""
