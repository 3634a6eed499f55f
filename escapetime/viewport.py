"""
Viewport state machine.

The controller owns the view rectangle and the iteration budget. Each
command builds a new immutable ViewState; listeners registered through
`on_change` are told about every transition so the next frame can be
rendered from that snapshot.
"""

from dataclasses import dataclass, replace
from enum import Enum

from .compute import MAX_BUDGET, check_budget
from .geometry import ViewRectangle, pixel_to_point


class Command(Enum):
    """Discrete commands delivered by the input layer."""

    RESET = 'reset'
    ZOOM_IN = 'zoom_in'
    ZOOM_OUT = 'zoom_out'
    INCREASE_BUDGET = 'increase_budget'
    DECREASE_BUDGET = 'decrease_budget'
    PAN = 'pan'


@dataclass(frozen=True)
class ViewState:
    """Everything a render pass needs besides the pixel bounds."""

    view: ViewRectangle
    budget: int

    def __post_init__(self):
        check_budget(self.budget)


class ViewportController:
    """
    Translates viewport commands into new view states.

    Usage:
        controller = ViewportController(PixelBounds(800, 800), on_change=renderer.compute_async)
        controller.zoom_in((400, 300))
        controller.dispatch(Command.INCREASE_BUDGET)
    """

    # Default configuration
    DEFAULT_VIEW = ViewRectangle(complex(-3.0, 2.0), complex(1.0, -2.0))
    DEFAULT_BUDGET = 256
    ZOOM_HALF_EXTENT = 100  # pixels on each side of the zoom center

    def __init__(self, bounds, budget=None, default_view=None, zoom_half_extent=None,
                 on_change=None, view=None):
        """
        Initialize the controller.

        Args:
            bounds: PixelBounds of the display
            budget: starting iteration budget (default 256)
            default_view: view restored by reset (default (-3, 2)..(1, -2))
            zoom_half_extent: half size in pixels of the zoom-in selection (default 100)
            on_change: callable receiving each new ViewState
            view: starting view (default: default_view)
        """
        self.bounds = bounds
        self.default_view = default_view or self.DEFAULT_VIEW
        if zoom_half_extent is None:
            zoom_half_extent = self.ZOOM_HALF_EXTENT
        self.zoom_half_extent = zoom_half_extent
        if self.zoom_half_extent < 1:
            raise ValueError(
                f"zoom_half_extent must be at least 1, got {self.zoom_half_extent}"
            )
        self.on_change = on_change
        self.generation = 0
        if budget is None:
            budget = self.DEFAULT_BUDGET
        self._state = ViewState(view or self.default_view, budget)

    @property
    def state(self):
        return self._state

    @property
    def view(self):
        return self._state.view

    @property
    def budget(self):
        return self._state.budget

    def _transition(self, state):
        self._state = state
        self.generation += 1
        if self.on_change is not None:
            self.on_change(state)
        return state

    def _move_to(self, upper_left, lower_right):
        # Double precision runs out after enough zooming; stay on the current view.
        try:
            view = ViewRectangle(upper_left, lower_right)
        except ValueError:
            print("Zoom limit reached")
            return self._state
        return self._transition(replace(self._state, view=view))

    def reset(self):
        """Restore the default view. The budget is kept."""
        return self._transition(replace(self._state, view=self.default_view))

    def zoom_in(self, center_pixel):
        """
        Zoom into the fixed-size square selection centered at `center_pixel`.

        The selection spans zoom_half_extent pixels on each side of the
        center, whatever the actual drag distance was.
        """
        column, row = center_pixel
        h = self.zoom_half_extent
        view = self._state.view
        upper_left = pixel_to_point(self.bounds, (column - h, row - h), view)
        lower_right = pixel_to_point(self.bounds, (column + h, row + h), view)
        return self._move_to(upper_left, lower_right)

    def zoom_out(self):
        """Push each corner away from the other by the full diagonal."""
        view = self._state.view
        diag = view.upper_left - view.lower_right
        return self._move_to(view.upper_left + diag, view.lower_right - diag)

    def increase_budget(self):
        """Double the budget, capped at MAX_BUDGET."""
        return self._transition(
            replace(self._state, budget=min(MAX_BUDGET, self._state.budget * 2))
        )

    def decrease_budget(self):
        """Halve the budget, never going below 1."""
        return self._transition(
            replace(self._state, budget=max(1, self._state.budget // 2))
        )

    def pan(self, dx, dy):
        """
        Move the view so that the image content shifts by (dx, dy) pixels.

        Positive dx moves the content right (the view moves left); positive
        dy moves the content down (the view moves up).
        """
        view = self._state.view
        delta = complex(-dx * view.width / self.bounds.width,
                        dy * view.height / self.bounds.height)
        return self._move_to(view.upper_left + delta, view.lower_right + delta)

    def dispatch(self, command, pixel=None, delta=None):
        """
        Apply a Command from the input layer.

        Args:
            command: Command member
            pixel: (column, row) center, required for ZOOM_IN
            delta: (dx, dy) in pixels, required for PAN

        Returns:
            The new ViewState
        """
        if command is Command.RESET:
            return self.reset()
        if command is Command.ZOOM_IN:
            if pixel is None:
                raise ValueError("ZOOM_IN needs the selection center pixel")
            return self.zoom_in(pixel)
        if command is Command.ZOOM_OUT:
            return self.zoom_out()
        if command is Command.INCREASE_BUDGET:
            return self.increase_budget()
        if command is Command.DECREASE_BUDGET:
            return self.decrease_budget()
        if command is Command.PAN:
            if delta is None:
                raise ValueError("PAN needs a (dx, dy) pixel delta")
            return self.pan(*delta)
        raise ValueError(f"unknown command {command!r}")
