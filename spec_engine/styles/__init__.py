"""Spec styles: thin syntax adapters over the suite registration primitives."""

from spec_engine.styles.featurespec import FeatureSpec
from spec_engine.styles.flatspec import FlatSpec
from spec_engine.styles.funspec import FunSpec
from spec_engine.styles.funsuite import FunSuite
from spec_engine.styles.propspec import PropSpec
from spec_engine.styles.wordspec import WordSpec

__all__ = [
    "FeatureSpec",
    "FlatSpec",
    "FunSpec",
    "FunSuite",
    "PropSpec",
    "WordSpec",
]

STYLE_BASES = (FeatureSpec, FlatSpec, FunSpec, FunSuite, PropSpec, WordSpec)
