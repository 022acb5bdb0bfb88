"""
Error Taxonomy
==============
Exceptions raised by the chart pipeline.

Only two conditions ever surface as exceptions:

* ``UnknownShapeType`` - an element names a shape that is not registered.
  The scene assembler catches it per element, so it never blanks a scene.
* ``RenderContextFailure`` - the off-screen rendering context could not be
  created or read back. It propagates to whoever started the render.

Missing or malformed shape options are never raised; factories fall back to
their documented defaults. A chart slot without data is not an error either.
"""


class FactChartError(Exception):
    """Base class for all chart errors."""


class UnknownShapeType(FactChartError, KeyError):
    """Raised when a shape type name is not registered in the shape registry."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"No shape registered for type '{self.name}'"


class RenderContextFailure(FactChartError, RuntimeError):
    """Raised when the underlying rendering context is unavailable."""


class ChartDataError(FactChartError, ValueError):
    """Raised when the chart data file cannot be read as a list of entries."""
