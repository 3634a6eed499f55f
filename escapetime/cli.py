"""
Command line entry point.

    escapetime FILE PIXELS UPPERLEFT LOWERRIGHT [options]
    escapetime mandel.png 1000x750 -1.20,0.35 -1,0.20

Renders the view to a PNG file. With no positional arguments the
interactive explorer is opened instead.
"""

import re
import sys
from argparse import ArgumentParser
from dataclasses import replace

from .colormaps import list_color_mode_names
from .compute import MAX_BUDGET
from .geometry import PixelBounds, ViewRectangle
from .renderer import render
from .settings import Settings

# Pairs such as "-1.20,0.35" look like option flags to argparse.
_NEGATIVE_PAIR = re.compile(r'^-[\d.]')


def parse_pair(s, separator, kind=float):
    """
    Parse `s` as "<left><separator><right>", like "400x600" or "1.0,0.5".

    Returns:
        (left, right) converted with `kind`, or None if `s` does not parse.
    """
    left, sep, right = s.partition(separator)
    if not sep:
        return None
    try:
        return kind(left), kind(right)
    except ValueError:
        return None


def parse_complex(s):
    """Parse a comma separated pair of floats as a complex number, or None."""
    pair = parse_pair(s, ',')
    if pair is None:
        return None
    return complex(*pair)


def build_parser():
    parser = ArgumentParser(
        prog='escapetime',
        description='Render a region of the Mandelbrot set to a PNG file, '
                    'or explore it interactively when no region is given.'
    )

    parser.add_argument('output', nargs='?', metavar='FILE',
                        help='PNG file to write')
    parser.add_argument('pixels', nargs='?', metavar='PIXELS',
                        help='image size as WIDTHxHEIGHT, e.g. 1000x750')
    parser.add_argument('upper_left', nargs='?', metavar='UPPERLEFT',
                        help='upper left corner as RE,IM, e.g. -1.20,0.35')
    parser.add_argument('lower_right', nargs='?', metavar='LOWERRIGHT',
                        help='lower right corner as RE,IM, e.g. -1,0.20')

    parser.add_argument('--budget', type=int, dest='budget', metavar='N', default=None,
                        help='iteration budget (default: 255 for export, settings for interactive)')
    parser.add_argument('--mode', choices=list_color_mode_names(), default=None,
                        help='color mode: "alpha" grayscale export (default for files) or "hsv" gradient')
    parser.add_argument('--band-rows', type=int, dest='band_rows', metavar='N', default=None,
                        help='pixel rows per unit of parallel work')
    parser.add_argument('--workers', type=int, metavar='N', default=None,
                        help='number of render threads (default: CPU count)')
    parser.add_argument('--settings', dest='settings_path', metavar='PATH', default=None,
                        help='settings.json to load instead of the packaged one')
    parser.add_argument('--show', action='store_true',
                        help='open the interactive explorer on the rendered view afterwards')

    return parser


def _protect_negative_pairs(argv):
    # argparse treats any argument containing a space as positional.
    return [' ' + arg if _NEGATIVE_PAIR.match(arg) else arg for arg in argv]


def _unprotect(value):
    if value is not None and value.startswith(' ') and _NEGATIVE_PAIR.match(value[1:]):
        return value[1:]
    return value


def parse_args(argv=None):
    """
    Parse and validate command line arguments.

    Malformed arguments end the program through parser.error() before
    anything is rendered.
    """
    parser = build_parser()
    args = parser.parse_args(_protect_negative_pairs(sys.argv[1:] if argv is None else argv))
    args.output = _unprotect(args.output)
    args.settings_path = _unprotect(args.settings_path)

    positionals = [args.output, args.pixels, args.upper_left, args.lower_right]
    given = [p for p in positionals if p is not None]
    if given and len(given) != len(positionals):
        parser.error("FILE, PIXELS, UPPERLEFT and LOWERRIGHT must be given together")

    for name in ('budget', 'band_rows', 'workers'):
        value = getattr(args, name)
        if value is not None and value < 1:
            parser.error(f"--{name.replace('_', '-')} must be at least 1")
    if args.budget is not None and args.budget > MAX_BUDGET:
        parser.error(f"--budget must be at most {MAX_BUDGET}")

    try:
        args.settings = Settings.load(args.settings_path)
    except ValueError as e:
        parser.error(str(e))

    args.bounds = None
    args.view = None
    if given:
        size = parse_pair(args.pixels.strip(), 'x', int)
        if size is None:
            parser.error(f"error parsing image dimensions: {args.pixels!r}")
        upper_left = parse_complex(args.upper_left.strip())
        if upper_left is None:
            parser.error(f"error parsing upper left corner point: {args.upper_left.strip()!r}")
        lower_right = parse_complex(args.lower_right.strip())
        if lower_right is None:
            parser.error(f"error parsing lower right corner point: {args.lower_right.strip()!r}")
        try:
            args.bounds = PixelBounds(*size)
            args.view = ViewRectangle(upper_left, lower_right)
        except ValueError as e:
            parser.error(str(e))
    return args


def main(argv=None):
    args = parse_args(argv)
    settings = args.settings
    if args.band_rows is not None:
        settings = replace(settings, band_rows=args.band_rows)
    if args.workers is not None:
        settings = replace(settings, workers=args.workers)

    if args.bounds is None:
        if args.mode is not None:
            settings = replace(settings, color_mode=args.mode)
        from .app import run
        run(settings, budget=args.budget)
        return 0

    budget = args.budget if args.budget is not None else 255
    pixels = render(
        args.bounds, args.view, budget,
        mode=args.mode or 'alpha',
        band_rows=settings.band_rows,
        workers=settings.workers
    )

    from .export import write_png
    write_png(args.output, pixels, args.bounds)
    print(f"Wrote {args.bounds.width}x{args.bounds.height} image to {args.output}")

    if args.show:
        settings = replace(
            settings,
            width=args.bounds.width,
            height=args.bounds.height,
            color_mode=args.mode or settings.color_mode
        )
        from .app import run
        run(settings, view=args.view, budget=budget)
    return 0
