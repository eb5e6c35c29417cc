"""
Renderer module - the sample accumulation loop.

Implements:
- Jittered multi-sample antialiasing
- Row-band partitioning with one worker and one random stream per band
- Thread or process worker pools
- 8-bit quantization with optional square-root gamma
"""

from __future__ import annotations
import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor, ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np

from .vec3 import Color
from .camera import Camera
from .shapes import Hittable
from .integrator import PathIntegrator
from .sampling import spawn_generators

logger = logging.getLogger(__name__)

EXECUTORS = ('thread', 'process')


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 400
    height: int = 225
    samples_per_pixel: int = 100
    max_depth: int = 50
    num_workers: int = 0  # 0 = auto-detect
    seed: Optional[int] = None
    gamma_correct: bool = True
    executor: str = 'thread'

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image size must be positive, got {self.width}x{self.height}")
        if self.samples_per_pixel <= 0:
            raise ValueError(f"samples_per_pixel must be positive, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must not be negative, got {self.max_depth}")
        if self.executor not in EXECUTORS:
            raise ValueError(f"Unknown executor: {self.executor} (expected one of {', '.join(EXECUTORS)})")
        if self.num_workers < 0:
            raise ValueError(f"num_workers must not be negative, got {self.num_workers}")
        if self.num_workers == 0:
            self.num_workers = os.cpu_count() or 4

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


@dataclass(frozen=True)
class RowBand:
    """A contiguous range of image rows, counted from the top (stop exclusive)."""
    start: int
    stop: int

    def __len__(self) -> int:
        return self.stop - self.start


def partition_rows(height: int, count: int) -> List[RowBand]:
    """Split ``height`` rows into at most ``count`` contiguous bands.

    Band sizes differ by at most one row, larger bands first.
    """
    count = max(1, min(count, height))
    base, extra = divmod(height, count)
    bands = []
    start = 0
    for index in range(count):
        size = base + (1 if index < extra else 0)
        bands.append(RowBand(start, start + size))
        start += size
    return bands


def render_band(
    scene: Hittable,
    camera: Camera,
    band: RowBand,
    width: int,
    height: int,
    samples: int,
    max_depth: int,
    rng: np.random.Generator,
    out: Optional[np.ndarray] = None,
    on_row: Optional[Callable[[int], None]] = None
) -> np.ndarray:
    """Render one band of rows.

    Args:
        scene: The scene to render
        camera: The camera to render from
        band: Rows to render
        width: Full image width
        height: Full image height
        samples: Samples per pixel
        max_depth: Bounce limit
        rng: The band's private random generator
        out: Optional (len(band), width, 3) array to fill in place
        on_row: Optional callback invoked with each image row as it finishes

    Returns:
        Linear color array of shape (len(band), width, 3)
    """
    integrator = PathIntegrator(max_depth)
    if out is None:
        out = np.zeros((len(band), width, 3), dtype=np.float64)

    for row in range(band.start, band.stop):
        # Camera t runs bottom to top, image rows top to bottom
        j = height - 1 - row
        for i in range(width):
            pixel_color = Color(0, 0, 0)
            for _ in range(samples):
                s = (i + rng.random()) / width
                t = (j + rng.random()) / height
                ray = camera.get_ray(s, t, rng)
                pixel_color = pixel_color + integrator.radiance(ray, scene, 0, rng)
            out[row - band.start, i] = pixel_color.to_array() / samples
        if on_row:
            on_row(row)

    return out


def quantize(image: np.ndarray, gamma_correct: bool = True) -> np.ndarray:
    """Convert linear color to 8-bit channels.

    Values are clamped to [0, 1], optionally square-rooted (gamma 2),
    scaled by 255.99 and truncated. Non-finite values become 0.
    """
    linear = np.clip(np.nan_to_num(image, nan=0.0, posinf=1.0, neginf=0.0), 0.0, 1.0)
    if gamma_correct:
        linear = np.sqrt(linear)
    return (linear * 255.99).astype(np.uint8)


class Renderer:
    """Path tracing renderer parallelised over row bands."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def render(self, scene: Hittable, camera: Camera) -> np.ndarray:
        """Render the scene and return the linear color image.

        Args:
            scene: The scene to render (any Hittable)
            camera: The camera to render from

        Returns:
            Image as numpy array of shape (height, width, 3), top row first
        """
        settings = self.settings
        width = settings.width
        height = settings.height

        image = np.zeros((height, width, 3), dtype=np.float64)
        bands = partition_rows(height, settings.num_workers)
        rngs = spawn_generators(settings.seed, len(bands))

        logger.info(
            "Rendering %dx%d, %d spp, depth %d, %d band(s) on %s workers",
            width, height, settings.samples_per_pixel, settings.max_depth,
            len(bands), settings.executor
        )
        start_time = time.time()

        def band_args(band: RowBand, rng: np.random.Generator) -> tuple:
            return (scene, camera, band, width, height,
                    settings.samples_per_pixel, settings.max_depth, rng)

        rows_done = 0
        bands_done = 0
        lock = threading.Lock()

        def rows_traced(count: int) -> None:
            nonlocal rows_done
            with lock:
                rows_done += count
                logger.debug("Traced %d of %d rows", rows_done, height)
                if self._progress_callback:
                    self._progress_callback(rows_done / height)

        def band_done(band: RowBand) -> None:
            nonlocal bands_done
            bands_done += 1
            logger.debug("Band rows %d-%d done (%d/%d)", band.start, band.stop, bands_done, len(bands))

        def row_done(row: int) -> None:
            rows_traced(1)

        if len(bands) == 1:
            render_band(*band_args(bands[0], rngs[0]), out=image, on_row=row_done)
            band_done(bands[0])
        elif settings.executor == 'thread':
            # Bands write straight into disjoint slices of the shared image
            with ThreadPoolExecutor(max_workers=len(bands)) as executor:
                futures = {
                    executor.submit(render_band, *band_args(band, rng),
                                    out=image[band.start:band.stop], on_row=row_done): band
                    for band, rng in zip(bands, rngs)
                }
                for future in as_completed(futures):
                    future.result()
                    band_done(futures[future])
        else:
            with ProcessPoolExecutor(max_workers=len(bands)) as executor:
                futures = {
                    executor.submit(render_band, *band_args(band, rng)): band
                    for band, rng in zip(bands, rngs)
                }
                for future in as_completed(futures):
                    band = futures[future]
                    image[band.start:band.stop] = future.result()
                    # Workers in other processes cannot report single rows
                    rows_traced(len(band))
                    band_done(band)

        logger.info("Render finished in %.2fs", time.time() - start_time)
        return image

    def to_ldr(self, image: np.ndarray) -> np.ndarray:
        """Convert a linear image to 8-bit using the configured gamma setting."""
        return quantize(image, self.settings.gamma_correct)

    def to_bytes(self, image: np.ndarray) -> bytes:
        """Flat row-major RGB bytes, top row first."""
        return self.to_ldr(image).tobytes()

    def save_image(self, image: np.ndarray, filename: str) -> None:
        """Save image to file.

        Args:
            image: Image array (linear float or 8-bit)
            filename: Output filename (extension determines format)
        """
        from PIL import Image as PILImage

        if image.dtype != np.uint8:
            image = self.to_ldr(image)

        PILImage.fromarray(np.ascontiguousarray(image)).save(filename)
        logger.info("Saved %s", filename)
