"""
Scene Rendering (PyVista)
=========================
Draws a Scene into one renderer (viewport) of a pyvista plotter.

Why is this file needed?
------------------------
Both the thumbnail compositor (off-screen, two viewports in one window) and
the interactive modal viewer (two Qt canvases) draw scenes the same way. This
module holds that shared logic: clear the viewport, apply the light rig, add one
actor per shape part with its accumulated transform.

Classes:
    SceneRenderer: Scene -> actors in the active renderer of a plotter.
    PyVistaRasterBackend: Off-screen raster surface for thumbnail pairs.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import numpy as np
import numpy.typing as npt
import pyvista as pv

from factchart import config
from factchart.controller.scene_assembler import LightKind, Scene
from factchart.errors import RenderContextFailure
from factchart.shapes import PartStyle

logger = logging.getLogger(__name__)


def configure_camera(
    camera: pv.Camera,
    position: Tuple[float, float, float],
    fov: float = config.CAMERA_FOV
) -> None:
    """Perspective camera at `position` looking at the origin, Y up."""
    camera.position = position
    camera.focal_point = config.CAMERA_FOCAL_POINT
    camera.up = config.CAMERA_UP
    camera.view_angle = fov
    camera.clipping_range = (config.CAMERA_NEAR, config.CAMERA_FAR)


class SceneRenderer:
    @staticmethod
    def draw(plotter: pv.Plotter, scene: Scene, subplot: Optional[Tuple[int, int]] = None) -> List[pv.Actor]:
        """
        Replaces everything in the (active or given) viewport with `scene`.

        Args:
            plotter: Target plotter (off-screen or a QtInteractor).
            scene: Populated scene.
            subplot: (row, col) of the viewport; None keeps the active one.

        Returns:
            The created actors.
        """
        if subplot is not None:
            plotter.subplot(*subplot)
        renderer = plotter.renderer

        # 1. Clear previous content
        renderer.clear_actors()
        renderer.remove_all_lights()
        if scene.background:
            renderer.set_background(scene.background)

        # 2. Lights (ambient is applied per actor, VTK has no ambient light source)
        ambient = 0.0
        for light in scene.lights:
            if light.kind == LightKind.AMBIENT:
                ambient += light.intensity
                continue
            renderer.add_light(pv.Light(
                position=light.position,
                focal_point=config.CAMERA_FOCAL_POINT,
                color=light.color,
                intensity=light.intensity,
                light_type="scene light",
            ))

        # 3. Shape parts
        actors: List[pv.Actor] = []
        for node in scene.nodes:
            for part, matrix in node.world_parts():
                if part.mesh.n_points == 0:
                    continue
                actor = SceneRenderer._add_part(plotter, part, min(ambient, 1.0))
                actor.user_matrix = matrix
                actors.append(actor)

        logger.debug(f"Drew scene '{scene.name}' with {len(actors)} actors.")
        return actors

    @staticmethod
    def _add_part(plotter: pv.Plotter, part, ambient: float) -> pv.Actor:
        kwargs = dict(
            color=part.color,
            opacity=part.opacity,
            ambient=ambient,
            pickable=False,
            show_scalar_bar=False,
            reset_camera=False,
        )
        if part.style == PartStyle.LINES:
            return plotter.add_mesh(part.mesh, style="wireframe", line_width=part.line_width, **kwargs)
        if part.style == PartStyle.POINTS:
            return plotter.add_mesh(
                part.mesh,
                style="points",
                point_size=part.point_size,
                render_points_as_spheres=True,
                **kwargs,
            )
        return plotter.add_mesh(part.mesh, style="surface", **kwargs)


class PyVistaRasterBackend:
    """
    One off-screen render window split into two viewports (left: freedom,
    right: constraint) that share a single camera.

    The plotter is created once and reused; every call clears and redraws
    both viewports in place, so calls must not overlap.
    """

    def __init__(
        self,
        width: int = config.THUMB_WIDTH,
        height: int = config.THUMB_HEIGHT,
        background: str = config.THUMB_BACKGROUND
    ) -> None:
        self.width = width
        self.height = height
        self.background = background
        try:
            self.plotter = pv.Plotter(
                off_screen=True,
                shape=(1, 2),
                window_size=(width * 2, height),
                border=False,
            )
        except Exception as e:
            logger.exception(f"Failed to create off-screen plotter: {e}")
            raise RenderContextFailure(f"Off-screen rendering is unavailable: {e}") from e

        # One camera for both viewports
        camera = self.plotter.renderers[0].camera
        configure_camera(camera, config.THUMB_CAMERA_POSITION)
        self.plotter.renderers[1].camera = camera
        self.plotter.set_background(background)

    def render_pair(self, freedom: Scene, constraint: Scene) -> npt.NDArray[np.uint8]:
        """Renders both scenes and returns the (height, 2 * width, 3) raster."""
        SceneRenderer.draw(self.plotter, freedom, subplot=(0, 0))
        SceneRenderer.draw(self.plotter, constraint, subplot=(0, 1))
        try:
            self.plotter.render()
            image = self.plotter.screenshot(return_img=True)
        except Exception as e:
            logger.exception(f"Failed to read back thumbnail raster: {e}")
            raise RenderContextFailure(f"Could not read the rendered image: {e}") from e
        return np.asarray(image, dtype=np.uint8)

    def close(self) -> None:
        self.plotter.close()
