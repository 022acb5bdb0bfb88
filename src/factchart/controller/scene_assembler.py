"""
Scene Assembler
===============
Turns an ordered list of chart elements into a populated Scene.

Why is this file needed?
------------------------
1. Decoupling: Shape generation knows nothing about chart entries, and the
   renderers know nothing about shape options. This module is the bridge.
2. Ownership: A Scene is an explicit context object (nodes + lights +
   background) owned by whoever renders it. It is cleared and repopulated in
   place instead of being rebuilt per entry.
3. Isolation: One bad element (unknown type) is reported and skipped; the rest
   of the scene still populates.

Classes:
    Light: One light of the standard rig.
    Scene: The container that is populated and rendered.
    SceneAssembler: Populates scenes from elements using a ShapeRegistry.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
import logging
from typing import Iterable, List, Optional, Tuple

import numpy as np

from factchart import config
from factchart.errors import UnknownShapeType
from factchart.model.entries import Element
from factchart.model.geometry_utils import euler_to_matrix
from factchart.shapes import ShapeNode, ShapeRegistry, default_registry

logger = logging.getLogger(__name__)


class LightKind(StrEnum):
    AMBIENT = "ambient"
    DIRECTIONAL = "directional"


@dataclass(frozen=True)
class Light:
    kind: LightKind
    color: str
    intensity: float
    position: Optional[Tuple[float, float, float]] = None


def standard_lights() -> List[Light]:
    """The fixed rig: one ambient light and one directional light."""
    return [
        Light(LightKind.AMBIENT, config.AMBIENT_LIGHT_COLOR, config.AMBIENT_LIGHT_INTENSITY),
        Light(
            LightKind.DIRECTIONAL,
            config.DIRECTIONAL_LIGHT_COLOR,
            config.DIRECTIONAL_LIGHT_INTENSITY,
            config.DIRECTIONAL_LIGHT_POSITION,
        ),
    ]


@dataclass
class Scene:
    """Shape nodes plus lights; the unit handed to a renderer."""
    name: str = "scene"
    background: Optional[str] = None
    nodes: List[ShapeNode] = field(default_factory=list)
    lights: List[Light] = field(default_factory=list)

    def clear(self) -> None:
        """Removes every node and light (the background is kept)."""
        self.nodes.clear()
        self.lights.clear()

    def add(self, node: ShapeNode) -> None:
        self.nodes.append(node)

    @property
    def children(self) -> list:
        """Lights first, then shape nodes in draw order."""
        return [*self.lights, *self.nodes]


class SceneAssembler:
    def __init__(self, registry: Optional[ShapeRegistry] = None) -> None:
        self.registry: ShapeRegistry = registry or default_registry()

    def build_node(self, element: Element) -> ShapeNode:
        """
        Creates the node for one element, applying its position / rotation
        override.

        Raises:
            UnknownShapeType: If the element's type is not registered.
        """
        spec = self.registry.resolve(element.type)
        if spec is None:
            raise UnknownShapeType(element.type)

        node = spec.factory(spec.build_options(element.options))

        if element.position is not None:
            node.position = np.asarray(element.position, dtype=np.float64)
        if element.rotation is not None:
            # Replaces any orientation set by the factory (e.g. from a `normal` option)
            node.orientation = euler_to_matrix(element.rotation)
        return node

    def populate(self, scene: Scene, elements: Optional[Iterable[Element]]) -> Scene:
        """
        Clears `scene`, restores the standard lights and adds one node per
        element, in order. Unknown element types are logged and skipped.
        """
        scene.clear()
        scene.lights.extend(standard_lights())

        if not elements:
            return scene

        for element in elements:
            try:
                scene.add(self.build_node(element))
            except UnknownShapeType as e:
                logger.warning(f"{e}; skipping element in '{scene.name}'.")

        return scene


def populate_scene(
    scene: Scene,
    elements: Optional[Iterable[Element]],
    registry: Optional[ShapeRegistry] = None
) -> Scene:
    """Functional shortcut for `SceneAssembler(registry).populate(scene, elements)`."""
    return SceneAssembler(registry).populate(scene, elements)
