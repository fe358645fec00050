"""Montages: grid layout, fused tiling and the fluent builder."""

from kymotools.montage.layout import MontageLayout
from kymotools.montage.assembler import MontageAssembler, iter_tiles
from kymotools.montage.builder import MontageBuilder

__all__ = ["MontageLayout", "MontageAssembler", "iter_tiles", "MontageBuilder"]
