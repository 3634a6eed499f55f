"""
Parallel band renderer for Mandelbrot frames.

render() is the engine entry point: it allocates a fresh RGBA8 buffer,
splits it into disjoint horizontal bands and fills them concurrently on a
thread pool. Bands never share memory, so the only synchronization is the
join at the end of the pass.

The MandelbrotRenderer class wraps render() for the interactive app:
- Background computation so the UI stays responsive
- Queued view-state snapshots; the newest one wins
- Whole-buffer hand-off of each finished frame
"""

import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import NamedTuple

import numpy as np

from .colormaps import COLOR_MODES, MODE_HSV, get_color_mode
from .compute import check_budget, render_band, warmup_jit
from .geometry import PixelBounds, ViewRectangle


class RenderBand(NamedTuple):
    """A run of whole rows of the pixel buffer and its first row index."""

    row_offset: int
    pixels: np.ndarray


def resolve_mode(mode):
    """Accept a color mode name or id and return the id."""
    if isinstance(mode, str):
        return get_color_mode(mode)
    if mode not in COLOR_MODES.values():
        raise ValueError(f"unknown color mode id {mode!r}")
    return int(mode)


def allocate_buffer(bounds):
    """Allocate a zeroed RGBA8 buffer for `bounds`. MemoryError propagates."""
    return np.zeros(bounds.buffer_size, dtype=np.uint8)


def partition_bands(buffer, bounds, band_rows=1):
    """
    Split `buffer` into bands of `band_rows` rows (the last may be shorter).

    The bands are views into `buffer`, pairwise disjoint, and together
    cover it exactly.
    """
    if isinstance(band_rows, bool) or not isinstance(band_rows, int) or band_rows < 1:
        raise ValueError(f"band_rows must be a positive integer, got {band_rows!r}")
    if buffer.shape != (bounds.buffer_size,):
        raise ValueError(
            f"buffer holds {buffer.size} bytes, expected {bounds.buffer_size}"
        )
    stride = 4 * bounds.width
    bands = []
    for top in range(0, bounds.height, band_rows):
        bottom = min(top + band_rows, bounds.height)
        bands.append(RenderBand(top, buffer[top * stride:bottom * stride]))
    return bands


def render_tile(band, bounds, view, budget, mode=MODE_HSV):
    """Fill every pixel of one band. Touches no memory outside the band."""
    render_band(
        band.pixels, bounds.width, bounds.height, band.row_offset,
        view.upper_left.real, view.upper_left.imag,
        view.lower_right.real, view.lower_right.imag,
        budget, mode
    )


def _check_inputs(bounds, view, budget):
    if not isinstance(bounds, PixelBounds):
        raise ValueError(f"bounds must be PixelBounds, got {bounds!r}")
    if not isinstance(view, ViewRectangle):
        raise ValueError(f"view must be ViewRectangle, got {view!r}")
    check_budget(budget)


def render(bounds, view, budget, mode='hsv', band_rows=1, workers=None,
           parallel=True):
    """
    Render the Mandelbrot set for `view` into a new RGBA8 buffer.

    Args:
        bounds: PixelBounds of the output image
        view: ViewRectangle to render
        budget: iteration budget (positive int)
        mode: color mode name ('hsv', 'alpha') or id
        band_rows: rows per unit of parallel work
        workers: thread pool size (default: CPU count)
        parallel: False runs the same bands one after another

    Returns:
        Flat uint8 numpy array of length 4 * width * height, row-major RGBA.

    Raises:
        ValueError/KeyError on invalid inputs, before anything is allocated
    """
    _check_inputs(bounds, view, budget)
    mode = resolve_mode(mode)
    budget = int(budget)
    if workers is not None and workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")

    buffer = allocate_buffer(bounds)
    bands = partition_bands(buffer, bounds, band_rows)

    if not parallel or len(bands) == 1:
        for band in bands:
            render_tile(band, bounds, view, budget, mode)
        return buffer

    with ThreadPoolExecutor(max_workers=workers or os.cpu_count()) as executor:
        futures = [
            executor.submit(render_tile, band, bounds, view, budget, mode)
            for band in bands
        ]
        for future in futures:
            future.result()
    return buffer


class MandelbrotRenderer:
    """
    Handles background rendering of view states for the interactive app.

    Usage:
        renderer = MandelbrotRenderer(PixelBounds(800, 600))
        renderer.compute_async(controller.state)

        # In your game loop:
        buffer, state = renderer.get_result()
        if buffer is not None:
            display(buffer)

    A pass, once started, runs to completion. States submitted while a
    pass is running are queued; only the newest queued state is rendered
    next.
    """

    def __init__(self, bounds, mode='hsv', band_rows=1, workers=None):
        """
        Initialize the renderer.

        Args:
            bounds: PixelBounds of the display
            mode: color mode name or id (default 'hsv')
            band_rows: rows per band (default 1)
            workers: thread pool size (None = CPU count)
        """
        self.bounds = bounds
        self.mode = resolve_mode(mode)
        self.band_rows = band_rows
        self.workers = workers

        # Async computation state
        self.computing = False
        self.pending_state = None
        self.result = None
        self.result_state = None
        self.lock = threading.Lock()
        self._thread = None

    def warmup(self):
        """Compile the kernels before the first frame."""
        warmup_jit()

    def render_now(self, state):
        """Render `state` synchronously and return the buffer."""
        return render(
            self.bounds, state.view, state.budget,
            mode=self.mode, band_rows=self.band_rows, workers=self.workers
        )

    def compute_async(self, state):
        """
        Queue `state` (a ViewState) for rendering.

        Starts the background thread if it is not already running.
        """
        with self.lock:
            self.pending_state = state
            if not self.computing:
                self.computing = True
                self._thread = threading.Thread(target=self._compute_thread)
                self._thread.daemon = True
                self._thread.start()

    def _compute_thread(self):
        """Background thread: render pending states until none is left."""
        while True:
            with self.lock:
                state = self.pending_state
                self.pending_state = None
                if state is None:
                    self.computing = False
                    break

            try:
                buffer = self.render_now(state)
            except Exception:
                with self.lock:
                    self.computing = False
                raise

            with self.lock:
                self.result = buffer
                self.result_state = state

    def get_result(self):
        """
        Get the latest finished frame, once.

        Returns:
            Tuple of (buffer, state) if a new frame is ready, (None, None) otherwise.
        """
        with self.lock:
            if self.result is None:
                return None, None
            buffer, state = self.result, self.result_state
            self.result = None
            self.result_state = None
            return buffer, state

    def wait(self, timeout=None):
        """Block until the background thread has drained the queue."""
        thread = self._thread
        if thread is not None:
            thread.join(timeout)

    @property
    def busy(self):
        with self.lock:
            return self.computing

    def update_settings(self, mode=None, band_rows=None, workers=None):
        """
        Update rendering settings.

        Returns:
            True if any setting changed, False otherwise
        """
        changed = False
        if mode is not None:
            mode = resolve_mode(mode)
            if mode != self.mode:
                self.mode = mode
                changed = True
        if band_rows is not None and band_rows != self.band_rows:
            self.band_rows = band_rows
            changed = True
        if workers is not None and workers != self.workers:
            self.workers = workers
            changed = True
        return changed
