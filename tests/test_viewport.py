import pytest

from escapetime.compute import MAX_BUDGET
from escapetime.geometry import PixelBounds, ViewRectangle
from escapetime.viewport import Command, ViewportController, ViewState


@pytest.fixture
def controller():
    return ViewportController(PixelBounds(600, 600))


def assert_view_close(view, upper_left, lower_right):
    assert view.upper_left.real == pytest.approx(upper_left.real)
    assert view.upper_left.imag == pytest.approx(upper_left.imag)
    assert view.lower_right.real == pytest.approx(lower_right.real)
    assert view.lower_right.imag == pytest.approx(lower_right.imag)


def test_initial_state(controller):
    assert controller.view == ViewRectangle(complex(-3, 2), complex(1, -2))
    assert controller.budget == 256
    assert controller.generation == 0


def test_zoom_in_uses_fixed_selection_square(controller):
    controller.zoom_in((300, 300))
    assert_view_close(controller.view, complex(-3 + 4 / 3, 2 - 4 / 3),
                      complex(-3 + 8 / 3, 2 - 8 / 3))


def test_zoom_out_after_zoom_in_restores_extent(controller):
    original = controller.view
    controller.zoom_in((300, 300))
    controller.zoom_out()
    assert_view_close(controller.view, original.upper_left, original.lower_right)


def test_zoom_out_grows_about_the_center(controller):
    center = controller.view.center
    controller.zoom_out()
    assert controller.view.center == center
    assert controller.view.width == pytest.approx(12.0)
    assert controller.view.height == pytest.approx(12.0)


def test_reset_restores_default_view_and_keeps_budget(controller):
    controller.zoom_in((120, 450))
    controller.increase_budget()
    controller.reset()
    assert controller.view == ViewportController.DEFAULT_VIEW
    assert controller.budget == 512


def test_budget_doubles_and_halves(controller):
    controller.increase_budget()
    assert controller.budget == 512
    controller.decrease_budget()
    controller.decrease_budget()
    assert controller.budget == 128


def test_decrease_budget_floors_at_one(controller):
    for _ in range(20):
        controller.decrease_budget()
        assert controller.budget >= 1
    assert controller.budget == 1
    controller.decrease_budget()
    assert controller.budget == 1


def test_odd_budget_halves_down():
    controller = ViewportController(PixelBounds(10, 10), budget=3)
    controller.decrease_budget()
    assert controller.budget == 1


def test_pan_moves_content_by_pixels(controller):
    controller.pan(60, 0)
    assert_view_close(controller.view, complex(-3.4, 2), complex(0.6, -2))
    controller.pan(0, -150)
    assert_view_close(controller.view, complex(-3.4, 1), complex(0.6, -3))


def test_transitions_replace_state_and_notify():
    seen = []
    controller = ViewportController(PixelBounds(600, 600), on_change=seen.append)
    before = controller.state
    controller.zoom_in((100, 100))
    controller.increase_budget()

    assert len(seen) == 2
    assert seen[-1] is controller.state
    assert controller.generation == 2
    assert before.view == ViewRectangle(complex(-3, 2), complex(1, -2))
    assert before.budget == 256
    assert isinstance(seen[0], ViewState)


def test_dispatch_routes_commands(controller):
    controller.dispatch(Command.ZOOM_IN, pixel=(300, 300))
    controller.dispatch(Command.ZOOM_OUT)
    controller.dispatch(Command.INCREASE_BUDGET)
    controller.dispatch(Command.DECREASE_BUDGET)
    controller.dispatch(Command.DECREASE_BUDGET)
    controller.dispatch(Command.PAN, delta=(0, 0))
    controller.dispatch(Command.RESET)
    assert controller.budget == 128
    assert controller.view == ViewportController.DEFAULT_VIEW
    assert controller.generation == 7


def test_dispatch_requires_arguments(controller):
    with pytest.raises(ValueError):
        controller.dispatch(Command.ZOOM_IN)
    with pytest.raises(ValueError):
        controller.dispatch(Command.PAN)
    with pytest.raises(ValueError):
        controller.dispatch("zoom_in", pixel=(1, 1))


def test_custom_defaults():
    view = ViewRectangle(complex(-1.2, 0.35), complex(-1.0, 0.2))
    controller = ViewportController(PixelBounds(80, 60), budget=64, view=view,
                                    zoom_half_extent=10)
    assert controller.view == view
    controller.reset()
    assert controller.view == ViewportController.DEFAULT_VIEW


@pytest.mark.parametrize("budget", [0, -4])
def test_rejects_non_positive_budget(budget):
    with pytest.raises(ValueError):
        ViewportController(PixelBounds(10, 10), budget=budget)


def assert_valid_view(view):
    assert isinstance(view, ViewRectangle)
    assert view.upper_left.real < view.lower_right.real
    assert view.upper_left.imag > view.lower_right.imag


def test_repeated_zoom_in_stops_at_precision_limit(capsys):
    seen = []
    controller = ViewportController(PixelBounds(800, 600), on_change=seen.append)
    for _ in range(200):
        controller.zoom_in((400, 300))

    assert_valid_view(controller.view)
    assert controller.generation < 200
    assert controller.generation == len(seen)
    assert seen[-1] is controller.state
    assert "Zoom limit reached" in capsys.readouterr().out


def test_repeated_zoom_out_stops_before_overflow(controller, capsys):
    for _ in range(1000):
        controller.zoom_out()

    assert_valid_view(controller.view)
    assert controller.generation < 1000
    assert "Zoom limit reached" in capsys.readouterr().out


def test_command_at_limit_keeps_state_and_skips_listener():
    seen = []
    controller = ViewportController(PixelBounds(600, 600), on_change=seen.append)
    for _ in range(1000):
        before = controller.state
        generation = controller.generation
        if controller.zoom_out() is before:
            break
    assert controller.state is before
    assert controller.generation == generation
    assert len(seen) == generation

    # other commands still work afterwards
    controller.reset()
    assert controller.view == ViewportController.DEFAULT_VIEW
    assert len(seen) == generation + 1


def test_increase_budget_is_capped(controller):
    for _ in range(40):
        controller.increase_budget()
    assert controller.budget == MAX_BUDGET
    controller.decrease_budget()
    assert controller.budget == MAX_BUDGET // 2
