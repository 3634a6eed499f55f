"""
Interactive explorer for the Mandelbrot renderer.

Contains the MandelbrotApp class which handles:
- Window setup and main loop
- Mapping keyboard/mouse input to viewport commands
- Displaying finished frames and a small HUD
- Saving the current frame as PNG
"""

import pygame

from .export import buffer_to_surface, timestamped_path, write_png
from .renderer import MandelbrotRenderer
from .settings import Settings
from .viewport import Command, ViewportController


# Keyboard bindings; pan deltas are applied as a fraction of the window.
KEY_COMMANDS = {
    pygame.K_r: Command.RESET,
    pygame.K_z: Command.ZOOM_OUT,
    pygame.K_EQUALS: Command.INCREASE_BUDGET,
    pygame.K_PLUS: Command.INCREASE_BUDGET,
    pygame.K_KP_PLUS: Command.INCREASE_BUDGET,
    pygame.K_MINUS: Command.DECREASE_BUDGET,
    pygame.K_KP_MINUS: Command.DECREASE_BUDGET,
    pygame.K_LEFT: Command.PAN,
    pygame.K_RIGHT: Command.PAN,
    pygame.K_UP: Command.PAN,
    pygame.K_DOWN: Command.PAN,
}

PAN_DIRECTIONS = {
    pygame.K_LEFT: (1, 0),
    pygame.K_RIGHT: (-1, 0),
    pygame.K_UP: (0, 1),
    pygame.K_DOWN: (0, -1),
}

PAN_FRACTION = 0.1


def pan_delta(key, bounds):
    """Pixel delta for an arrow key: the content moves a tenth of the window."""
    sx, sy = PAN_DIRECTIONS[key]
    return (sx * max(1, int(bounds.width * PAN_FRACTION)),
            sy * max(1, int(bounds.height * PAN_FRACTION)))


class MandelbrotApp:
    """
    Main application class for the Mandelbrot explorer.

    Handles the pygame window and event loop, forwarding commands to the
    ViewportController and frames from the MandelbrotRenderer to the screen.
    """

    CAPTION = "Mandelbrot Set - click to zoom, Z to zoom out, +/- iterations, R to reset"

    def __init__(self, settings=None, view=None, budget=None):
        """
        Initialize the application.

        Args:
            settings: Settings instance (default: loaded from settings.json)
            view: starting ViewRectangle (default: the configured default view)
            budget: starting iteration budget (default: settings.max_iter)
        """
        self.settings = settings or Settings.load()
        self.bounds = self.settings.bounds

        self.renderer = MandelbrotRenderer(
            self.bounds,
            mode=self.settings.color_mode,
            band_rows=self.settings.band_rows,
            workers=self.settings.workers
        )
        self.controller = ViewportController(
            self.bounds,
            budget=budget if budget is not None else self.settings.max_iter,
            default_view=self.settings.default_view,
            zoom_half_extent=self.settings.zoom_half_extent,
            on_change=self.renderer.compute_async,
            view=view
        )

        # Pygame state (initialized in run())
        self.screen = None
        self.clock = None
        self.font = None

        # Display state
        self.current_buffer = None
        self.current_surface = None
        self.displayed_state = None

        self.running = False

    def run(self):
        """Run the application main loop."""
        self._init_pygame()
        self._warmup_and_initial_render()

        self.running = True
        while self.running:
            self._handle_events()
            self._check_render_result()
            self._draw()
            self.clock.tick(60)

        pygame.quit()

    def _init_pygame(self):
        """Initialize pygame and create window."""
        pygame.init()
        self.screen = pygame.display.set_mode(
            (self.bounds.width, self.bounds.height),
            pygame.DOUBLEBUF
        )
        pygame.display.set_caption(self.CAPTION)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont('Arial', 14)

    def _warmup_and_initial_render(self):
        """Warm up JIT and render the first frame synchronously."""
        pygame.display.set_caption("Compiling (first run only)...")
        self.renderer.warmup()

        state = self.controller.state
        self._show(self.renderer.render_now(state), state)
        pygame.display.set_caption(self.CAPTION)

    def _handle_events(self):
        """Process all pending pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.MOUSEBUTTONDOWN:
                self._handle_mouse_down(event)
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event)

    def _handle_mouse_down(self, event):
        if event.button == 1:
            self.controller.dispatch(Command.ZOOM_IN, pixel=event.pos)
        elif event.button == 3:
            self.controller.dispatch(Command.ZOOM_OUT)

    def _handle_key(self, event):
        """Handle keyboard input."""
        if event.key == pygame.K_ESCAPE:
            self.running = False
        elif event.key == pygame.K_s:
            self._save_image()
        elif event.key in KEY_COMMANDS:
            command = KEY_COMMANDS[event.key]
            if command is Command.PAN:
                self.controller.dispatch(command, delta=pan_delta(event.key, self.bounds))
            else:
                self.controller.dispatch(command)

    def _save_image(self):
        """Save the frame currently on screen as PNG."""
        if self.current_buffer is None:
            return
        filename = write_png(
            timestamped_path(self.settings.save_dir), self.current_buffer, self.bounds
        )
        pygame.display.set_caption(f"Saved: {filename}")
        print(f"Image saved to: {filename}")

    def _show(self, buffer, state):
        self.current_buffer = buffer
        self.current_surface = buffer_to_surface(buffer, self.bounds)
        self.displayed_state = state

    def _check_render_result(self):
        """Pick up a finished frame from the background renderer."""
        buffer, state = self.renderer.get_result()
        if buffer is not None:
            self._show(buffer, state)

    def _draw(self):
        """Draw the current frame and the HUD."""
        self.screen.fill((0, 0, 0))
        if self.current_surface is not None:
            self.screen.blit(self.current_surface, (0, 0))
        self._draw_hud()
        pygame.display.flip()

    def _draw_hud(self):
        state = self.displayed_state
        if state is None:
            return
        lines = [
            f"Iterations: {state.budget}",
            f"Upper left: {state.view.upper_left.real:.6g}, {state.view.upper_left.imag:.6g}",
            f"Lower right: {state.view.lower_right.real:.6g}, {state.view.lower_right.imag:.6g}",
        ]
        if state != self.controller.state or self.renderer.busy:
            lines.append("Computing...")

        width = max(self.font.size(line)[0] for line in lines) + 16
        height = 8 + 18 * len(lines)
        panel = pygame.Surface((width, height), pygame.SRCALPHA)
        panel.fill((40, 40, 40, 180))
        self.screen.blit(panel, (10, 10))
        y = 14
        for line in lines:
            text = self.font.render(line, True, (220, 220, 220))
            self.screen.blit(text, (18, y))
            y += 18


def run(settings=None, view=None, budget=None):
    """
    Run the Mandelbrot explorer.

    Args:
        settings: Settings instance (default: loaded from settings.json)
        view: starting ViewRectangle (default: configured default view)
        budget: starting iteration budget (default: configured max_iter)
    """
    app = MandelbrotApp(settings, view, budget)
    try:
        app.run()
    except KeyboardInterrupt:
        pygame.quit()
