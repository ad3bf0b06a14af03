import os
import sys
import warnings
from argparse import ArgumentParser
from dataclasses import dataclass
from pathlib import Path

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, file=sys.stderr, **kwargs)


import tensorflow as tf

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")
    for handler in tf.get_logger().handlers:
        handler.setLevel("ERROR")

from fractal_explorer import (
    EXPORT_HEIGHT,
    EXPORT_WIDTH,
    ExplorerSession,
    ExportError,
    FractalKind,
    FrameRenderer,
    Palette,
    SnapshotExporter,
    ViewState,
    record_animation,
)

log("TensorFlow version: %s" % tf.__version__)

# the escape-time kernel counts iterations in int32
MAX_ITERATIONS_LIMIT = 2 ** 31 - 1


@dataclass(frozen=True)
class ExplorerConfig:
    view: ViewState
    output_dir: Path
    output: Path | None
    image_format: str
    export_width: int
    export_height: int
    animate: bool
    export_only: bool
    gif_frames: int
    gif_width: int
    gif_height: int


def build_parser():
    parser = ArgumentParser(description="Explore the Mandelbrot and Julia sets in the terminal.")

    parser.add_argument('--center-x', type=float,
                        dest='center_x', help='real part of the initial view center',
                        metavar='CENTER_X', default=-0.5)

    parser.add_argument('--center-y', type=float,
                        dest='center_y', help='imaginary part of the initial view center',
                        metavar='CENTER_Y', default=0.0)

    parser.add_argument('--scale', type=float,
                        dest='scale', help='initial zoom; 1.0 shows 3.5 plane units across',
                        metavar='SCALE', default=1.0)

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='iteration bound of the escape-time loop',
                        metavar='MAX_ITERATIONS', default=100)

    parser.add_argument('--fractal', choices=[kind.value for kind in FractalKind],
                        default=FractalKind.MANDELBROT.value, help='fractal family to start with')

    parser.add_argument('--julia-real', type=float, dest='julia_real',
                        help='real part of the Julia constant', metavar='REAL', default=-0.5251993)

    parser.add_argument('--julia-imag', type=float, dest='julia_imag',
                        help='imaginary part of the Julia constant', metavar='IMAG', default=-0.5251993)

    parser.add_argument('--palette', choices=[palette.label for palette in Palette],
                        default=Palette.DEFAULT.label, help='initial color palette')

    parser.add_argument('--no-animate', dest='animate', action='store_false',
                        help='Keep the Julia constant fixed instead of rotating it every frame.')

    parser.add_argument('--output-dir', type=str, dest='output_dir', default='.',
                        help='Directory in which snapshots are written.')

    parser.add_argument('--output', type=str, dest='output',
                        help='File path for --export-only or --record-gif. Defaults to a timestamped name.')

    parser.add_argument('--format', type=str, dest='format', metavar='FORMAT', default='png',
                        help='file format for snapshots. Can be any extension supported by Pillow. Default: "png".')

    parser.add_argument('--export-width', type=int, dest='export_width', default=EXPORT_WIDTH,
                        help='snapshot width in pixels')

    parser.add_argument('--export-height', type=int, dest='export_height', default=EXPORT_HEIGHT,
                        help='snapshot height in pixels')

    parser.add_argument('--export-only', dest='export_only', action='store_true',
                        help='Render a single snapshot of the initial view and exit.')

    parser.add_argument('--record-gif', type=int, dest='gif_frames', metavar='FRAMES', default=0,
                        help='Record FRAMES of the Julia animation to a GIF and exit.')

    parser.add_argument('--gif-width', type=int, dest='gif_width', default=640, help='GIF width in pixels')
    parser.add_argument('--gif-height', type=int, dest='gif_height', default=360, help='GIF height in pixels')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow diagnostics.')

    return parser


def resolve_config(opt, parser: ArgumentParser) -> ExplorerConfig:
    if opt.scale <= 0:
        parser.error("--scale must be positive.")
    if opt.max_iterations < 0:
        parser.error("--max-iterations must not be negative.")
    if opt.max_iterations > MAX_ITERATIONS_LIMIT:
        parser.error(f"--max-iterations must not exceed {MAX_ITERATIONS_LIMIT}.")
    for name in ("export_width", "export_height", "gif_width", "gif_height"):
        if getattr(opt, name) <= 0:
            parser.error(f"--{name.replace('_', '-')} must be positive.")
    if opt.gif_frames < 0:
        parser.error("--record-gif must not be negative.")
    if opt.export_only and opt.gif_frames:
        parser.error("--export-only cannot be combined with --record-gif.")
    if opt.output and not (opt.export_only or opt.gif_frames):
        parser.error("--output is only valid with --export-only or --record-gif.")

    image_format = (opt.format or "png").lower().lstrip(".") or "png"

    output = Path(opt.output).expanduser() if opt.output else None
    if output is not None:
        expected_suffix = ".gif" if opt.gif_frames else f".{image_format}"
        if output.suffix:
            if output.suffix.lower() != expected_suffix:
                parser.error(f"--output extension {output.suffix} does not match {expected_suffix}.")
        else:
            output = output.with_suffix(expected_suffix)

    view = ViewState(
        center=(opt.center_x, opt.center_y),
        scale=opt.scale,
        max_iterations=opt.max_iterations,
        kind=FractalKind(opt.fractal),
        julia_constant=(opt.julia_real, opt.julia_imag),
        palette=Palette[opt.palette.upper()],
    )

    return ExplorerConfig(
        view=view,
        output_dir=Path(opt.output_dir).expanduser(),
        output=output,
        image_format=image_format,
        export_width=opt.export_width,
        export_height=opt.export_height,
        animate=bool(opt.animate),
        export_only=bool(opt.export_only),
        gif_frames=opt.gif_frames,
        gif_width=opt.gif_width,
        gif_height=opt.gif_height,
    )


def run_headless(config: ExplorerConfig, exporter: SnapshotExporter) -> int:
    try:
        if config.gif_frames:
            output = config.output or config.output_dir / "julia.gif"
            log(f"Recording {config.gif_frames} frames at {config.gif_width}x{config.gif_height}")
            path = record_animation(
                config.view, output, config.gif_frames, config.gif_width, config.gif_height
            )
        else:
            request = exporter.request(config.view, config.output)
            log(f"Rendering {request.width}x{request.height} snapshot of {config.view}")
            path = exporter.submit_request(request).result()
    except ExportError as exc:
        print(f"Export failed: {exc}", file=sys.stderr)
        return 1
    print(path)
    return 0


def main():
    parser = build_parser()
    opt = parser.parse_args()

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    config = resolve_config(opt, parser)
    log(f"Starting with {config.view}")

    with SnapshotExporter(
        config.output_dir,
        config.image_format,
        config.export_width,
        config.export_height,
    ) as exporter:
        if config.export_only or config.gif_frames:
            return run_headless(config, exporter)

        from fractal_explorer.app import ExplorerApp

        session = ExplorerSession(
            config.view,
            FrameRenderer(),
            exporter,
            animating=config.animate,
        )
        ExplorerApp(session).run()
        log("Waiting for pending snapshots")
    return 0


if __name__ == '__main__':
    sys.exit(main())
