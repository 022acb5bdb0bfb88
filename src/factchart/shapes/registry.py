"""
Shape Registry
==============
Maps shape type names to generator functions.

The twelve built-in kinds form a closed enumeration (`ShapeKind`); they are
registered through the `builtin_shape` decorator when their modules are
imported. Additional shapes can be registered on a registry instance at
runtime.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from factchart.errors import UnknownShapeType
from factchart.shapes.nodes import ShapeNode
from factchart.shapes.options import build_options, sniff_vectors

logger = logging.getLogger(__name__)

ShapeFactory = Callable[[Any], ShapeNode]


class ShapeKind(StrEnum):
    LINE = "line"
    DISK = "disk"
    PLANE = "plane"
    PLANE_OF_PARALLEL_LINES = "planeOfParallelLines"
    BOX_OF_PARALLEL_LINES = "boxOfParallelLines"
    HOOP = "hoop"
    SPHERE = "sphere"
    CYLINDROID = "cylindroid"
    HYPERBOLIC_PARABOLOID = "hyperbolicParaboloid"
    HYPERBOLOID = "hyperboloid"
    TRANSLATION = "translation"
    MOMENT = "moment"


# Names used by older chart data files
LEGACY_ALIASES: Dict[str, ShapeKind] = {
    "createLine": ShapeKind.LINE,
    "createDisk": ShapeKind.DISK,
    "createPlane": ShapeKind.PLANE,
    "createPlaneOfParallelLines": ShapeKind.PLANE_OF_PARALLEL_LINES,
    "createBoxOfParallelLines": ShapeKind.BOX_OF_PARALLEL_LINES,
    "createHoop": ShapeKind.HOOP,
    "createSphere": ShapeKind.SPHERE,
    "createCylindroid": ShapeKind.CYLINDROID,
    "createHyperbolicParaboloid": ShapeKind.HYPERBOLIC_PARABOLOID,
    "createHyperboloid": ShapeKind.HYPERBOLOID,
    "createTranslation": ShapeKind.TRANSLATION,
    "createMoment": ShapeKind.MOMENT,
}


@dataclass(frozen=True)
class ShapeSpec:
    """A registered generator and (optionally) the dataclass describing its options."""
    name: str
    factory: ShapeFactory
    options_type: Optional[type] = None

    def build_options(self, raw: Optional[Mapping[str, Any]]) -> Any:
        """Raw JSON options -> the value handed to the factory."""
        if self.options_type is not None:
            return build_options(self.options_type, raw)
        return sniff_vectors(raw)

    def create(self, raw: Optional[Mapping[str, Any]] = None) -> ShapeNode:
        return self.factory(self.build_options(raw))


_BUILTINS: Dict[ShapeKind, ShapeSpec] = {}


def builtin_shape(kind: ShapeKind, options_type: type) -> Callable[[ShapeFactory], ShapeFactory]:
    """Function decorator registering a built-in generator for `kind`."""
    def decorator(func: ShapeFactory) -> ShapeFactory:
        if kind in _BUILTINS:
            raise ValueError(f"Built-in shape '{kind}' registered twice")
        _BUILTINS[kind] = ShapeSpec(name=str(kind), factory=func, options_type=options_type)
        return func
    return decorator


class ShapeRegistry:
    def __init__(self) -> None:
        self._specs: Dict[str, ShapeSpec] = {}

    @classmethod
    def with_builtins(cls, include_aliases: bool = True) -> ShapeRegistry:
        """A registry holding every built-in ShapeKind (and the legacy names)."""
        # The generator modules register themselves on import
        import factchart.shapes  # noqa: F401

        registry = cls()
        for kind in ShapeKind:
            spec = _BUILTINS[kind]
            registry.register(spec.name, spec.factory, spec.options_type)
        if include_aliases:
            for alias, kind in LEGACY_ALIASES.items():
                spec = _BUILTINS[kind]
                registry.register(alias, spec.factory, spec.options_type)
        return registry

    def register(self, name: str, factory: ShapeFactory, options_type: Optional[type] = None) -> None:
        """
        Register (or replace) a generator under `name`.

        Args:
            name: Type name as used in the data file.
            factory: Callable receiving the converted options, returning a ShapeNode.
            options_type: Options dataclass. Without one, the factory receives a
                dict in which top-level 3-number arrays are Vectors.
        """
        if not name:
            raise ValueError("Shape name must not be empty")
        if name in self._specs:
            logger.debug(f"Replacing shape registration '{name}'.")
        self._specs[name] = ShapeSpec(name=name, factory=factory, options_type=options_type)

    def resolve(self, name: str) -> Optional[ShapeSpec]:
        return self._specs.get(name)

    def create(self, name: str, options: Optional[Mapping[str, Any]] = None) -> ShapeNode:
        spec = self.resolve(name)
        if spec is None:
            raise UnknownShapeType(name)
        return spec.create(options)

    def names(self) -> List[str]:
        return list(self._specs.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._specs


_DEFAULT_REGISTRY: Optional[ShapeRegistry] = None


def default_registry() -> ShapeRegistry:
    """Shared registry with the built-in shapes, created on first use."""
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        _DEFAULT_REGISTRY = ShapeRegistry.with_builtins()
    return _DEFAULT_REGISTRY
