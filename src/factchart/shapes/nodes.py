"""
Renderable Node Tree
Plain containers for generated geometry. They hold pyvista meshes plus the
display properties needed to draw them; no rendering happens here.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Iterator, List, Optional, Tuple

import numpy as np
import numpy.typing as npt
import pyvista as pv

from factchart.model.geometry_utils import transform_matrix

RGB = Tuple[float, float, float]


class PartStyle(StrEnum):
    SURFACE = "surface"
    LINES = "lines"
    POINTS = "points"


@dataclass
class ShapePart:
    """One mesh with its display properties, in the owning node's local frame."""
    mesh: pv.PolyData
    color: RGB = (0.0, 0.0, 0.0)
    opacity: float = 1.0
    style: PartStyle = PartStyle.SURFACE
    line_width: float = 1.0
    point_size: float = 4.0
    label: Optional[str] = None


@dataclass
class ShapeNode:
    """
    A group of parts and child nodes with a rigid local transform.

    The local transform is `translate(position) @ orientation`; children are
    expressed in the parent frame.
    """
    name: str
    parts: List[ShapePart] = field(default_factory=list)
    children: List[ShapeNode] = field(default_factory=list)
    position: npt.NDArray[np.float64] = field(default_factory=lambda: np.zeros(3))
    orientation: npt.NDArray[np.float64] = field(default_factory=lambda: np.eye(3))

    def add_part(self, part: ShapePart) -> ShapePart:
        self.parts.append(part)
        return part

    def add_child(self, child: ShapeNode) -> ShapeNode:
        self.children.append(child)
        return child

    def local_matrix(self) -> npt.NDArray[np.float64]:
        return transform_matrix(self.position, self.orientation)

    def iter_nodes(self) -> Iterator[ShapeNode]:
        """Depth-first iteration over this node and its descendants."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()

    def world_parts(
        self,
        parent_matrix: Optional[npt.NDArray[np.float64]] = None
    ) -> Iterator[Tuple[ShapePart, npt.NDArray[np.float64]]]:
        """Yields every part of the tree with its accumulated 4x4 world matrix."""
        matrix = self.local_matrix()
        if parent_matrix is not None:
            matrix = parent_matrix @ matrix
        for part in self.parts:
            yield part, matrix
        for child in self.children:
            yield from child.world_parts(matrix)

    def world_points(self) -> npt.NDArray[np.float64]:
        """All mesh points of the tree in world coordinates, stacked (N, 3)."""
        chunks = []
        for part, matrix in self.world_parts():
            pts = np.asarray(part.mesh.points, dtype=np.float64)
            if pts.size == 0:
                continue
            chunks.append(pts @ matrix[:3, :3].T + matrix[:3, 3])
        if not chunks:
            return np.empty((0, 3))
        return np.vstack(chunks)
