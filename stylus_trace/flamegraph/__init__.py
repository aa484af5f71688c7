"""Flamegraph rendering."""

from .generator import FlamegraphConfig, FlamegraphPalette, generate_flamegraph, parse_palette

__all__ = ["FlamegraphConfig", "FlamegraphPalette", "generate_flamegraph", "parse_palette"]
