"""
Thumbnail Compositor
====================
Renders the freedom/constraint scene pair of every chart entry into one
side-by-side image and caches it as a PNG data URL, keyed by entry id.

Why is this file needed?
------------------------
1. Speed: The chart shows up to 50 entries. Rendering them once into small
   images is much cheaper than keeping 100 live 3D views.
2. Reuse: The two scenes and the raster backend are created once and
   repopulated per entry.

Entries are processed strictly one after the other: the backend's window,
viewports and camera are shared and mutated in place. `iter_thumbnails` is a
generator so callers can hand control back to their event loop between
entries; `generate` does that every `yield_every` entries through `on_yield`.
"""
from __future__ import annotations

import base64
import io
import logging
from typing import Callable, Dict, Iterable, Iterator, Optional, Protocol, Tuple

import numpy as np
import numpy.typing as npt
from matplotlib import image as mpimg

from factchart import config
from factchart.controller.scene_assembler import Scene, SceneAssembler
from factchart.errors import RenderContextFailure
from factchart.model.entries import ChartEntry
from factchart.shapes import ShapeRegistry

logger = logging.getLogger(__name__)

DATA_URL_PREFIX = "data:image/png;base64,"


class RasterBackend(Protocol):
    def render_pair(self, freedom: Scene, constraint: Scene) -> npt.NDArray[np.uint8]:
        """Left half: freedom scene, right half: constraint scene."""
        ...


def encode_data_url(image: npt.ArrayLike) -> str:
    """Encode an (H, W, 3|4) uint8 raster as a PNG data URL."""
    arr = np.ascontiguousarray(np.asarray(image, dtype=np.uint8))
    if arr.ndim != 3 or arr.shape[2] not in (3, 4):
        raise ValueError(f"Expected an (H, W, 3|4) image, got shape {arr.shape}.")
    buffer = io.BytesIO()
    mpimg.imsave(buffer, arr, format="png")
    return DATA_URL_PREFIX + base64.b64encode(buffer.getvalue()).decode("ascii")


def decode_data_url(url: str) -> bytes:
    """PNG bytes of a data URL produced by `encode_data_url`."""
    if not url.startswith(DATA_URL_PREFIX):
        raise ValueError("Not a PNG data URL.")
    return base64.b64decode(url[len(DATA_URL_PREFIX):])


class ThumbnailCompositor:
    def __init__(
        self,
        registry: Optional[ShapeRegistry] = None,
        backend: Optional[RasterBackend] = None,
        width: int = config.THUMB_WIDTH,
        height: int = config.THUMB_HEIGHT
    ) -> None:
        self.assembler = SceneAssembler(registry)
        self.freedom_scene = Scene(name="freedom")
        self.constraint_scene = Scene(name="constraint")
        self.width = width
        self.height = height
        self._backend: Optional[RasterBackend] = backend

        # Session cache: entry id -> data URL
        self.cache: Dict[str, str] = {}

    @property
    def backend(self) -> RasterBackend:
        """The raster backend, created on first use (may raise RenderContextFailure)."""
        if self._backend is None:
            from factchart.view.scene_renderer import PyVistaRasterBackend
            self._backend = PyVistaRasterBackend(self.width, self.height)
        return self._backend

    def clear_cache(self) -> None:
        self.cache.clear()

    def render_entry(self, entry: ChartEntry) -> str:
        """Renders one entry, stores and returns its data URL."""
        self.assembler.populate(self.freedom_scene, entry.freedom_space)
        self.assembler.populate(self.constraint_scene, entry.constraint_space)

        raster = self.backend.render_pair(self.freedom_scene, self.constraint_scene)

        # Copy out of the shared surface before it is reused for the next entry
        image = np.array(raster, dtype=np.uint8, copy=True)
        url = encode_data_url(image)
        self.cache[entry.id] = url
        return url

    def iter_thumbnails(self, entries: Iterable[ChartEntry]) -> Iterator[Tuple[str, Optional[str]]]:
        """
        Yields (entry id, data URL or None) per entry, in order.

        A failure in one entry is logged and yields None for it; only
        RenderContextFailure stops the run.
        """
        for entry in entries:
            cached = self.cache.get(entry.id)
            if cached is not None:
                yield entry.id, cached
                continue

            try:
                url = self.render_entry(entry)
            except RenderContextFailure:
                raise
            except Exception as e:
                logger.exception(f"Failed to render thumbnail for '{entry.id}': {e}")
                url = None
            yield entry.id, url

    def generate(
        self,
        entries: Iterable[ChartEntry],
        yield_every: int = config.THUMBNAIL_YIELD_EVERY,
        on_yield: Optional[Callable[[], None]] = None
    ) -> Dict[str, str]:
        """
        Renders all entries and returns a copy of the cache.

        Args:
            entries: Entries to render. Already cached ids are not re-rendered.
            yield_every: Call `on_yield` after this many entries (0 disables).
            on_yield: Cooperative hook, e.g. QApplication.processEvents.
        """
        rendered = 0
        for rendered, _ in enumerate(self.iter_thumbnails(entries), start=1):
            if on_yield is not None and yield_every > 0 and rendered % yield_every == 0:
                on_yield()

        logger.info(f"Thumbnails ready: {len(self.cache)} cached after {rendered} entries.")
        return dict(self.cache)
