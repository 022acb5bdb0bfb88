"""
Shape Factory
=============
Registry of named generators producing renderable node trees from options.

Importing this package registers the twelve built-in shape kinds.
"""
from factchart.shapes.nodes import PartStyle, ShapeNode, ShapePart
from factchart.shapes.registry import ShapeKind, ShapeRegistry, ShapeSpec, default_registry

# Importing the generator modules registers the built-in shapes
from factchart.shapes import basic, glyphs, ruled_surfaces  # noqa: F401

__all__ = [
    "PartStyle",
    "ShapeKind",
    "ShapeNode",
    "ShapePart",
    "ShapeRegistry",
    "ShapeSpec",
    "default_registry",
]
