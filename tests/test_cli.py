from pathlib import Path

import pytest

import explore
from fractal_explorer.iteration import FractalKind
from fractal_explorer.palettes import Palette


def _resolve(*args):
    parser = explore.build_parser()
    return explore.resolve_config(parser.parse_args(list(args)), parser)


def test_defaults_match_initial_view():
    config = _resolve()

    assert config.view.center == (-0.5, 0.0)
    assert config.view.scale == 1.0
    assert config.view.max_iterations == 100
    assert config.view.kind is FractalKind.MANDELBROT
    assert config.view.palette is Palette.DEFAULT
    assert config.animate
    assert (config.export_width, config.export_height) == (3840, 2160)


def test_view_options():
    config = _resolve(
        "--fractal", "julia", "--palette", "ocean", "--julia-real", "0.285",
        "--julia-imag", "0.01", "--scale", "2.5", "--no-animate",
    )

    assert config.view.kind is FractalKind.JULIA
    assert config.view.palette is Palette.OCEAN
    assert config.view.julia_constant == (0.285, 0.01)
    assert config.view.scale == 2.5
    assert not config.animate


def test_largest_iteration_bound_is_accepted():
    config = _resolve("--max-iterations", str(explore.MAX_ITERATIONS_LIMIT))
    assert config.view.max_iterations == 2 ** 31 - 1


def test_output_suffix_is_added():
    config = _resolve("--export-only", "--output", "shots/final", "--format", "JPG")
    assert config.output == Path("shots/final.jpg")
    assert config.image_format == "jpg"


@pytest.mark.parametrize(
    "args",
    [
        ["--scale", "0"],
        ["--max-iterations", "-1"],
        ["--max-iterations", str(2 ** 31)],
        ["--export-width", "0"],
        ["--output", "x.png"],
        ["--export-only", "--record-gif", "3"],
        ["--export-only", "--output", "x.jpg"],
        ["--record-gif", "4", "--output", "movie.png"],
    ],
)
def test_invalid_options_exit(args):
    with pytest.raises(SystemExit):
        _resolve(*args)


def test_headless_export_writes_file(tmp_path, capsys):
    config = _resolve(
        "--export-only", "--export-width", "16", "--export-height", "9",
        "--output", str(tmp_path / "still.png"),
    )
    with explore.SnapshotExporter(
        config.output_dir, config.image_format, config.export_width, config.export_height
    ) as exporter:
        assert explore.run_headless(config, exporter) == 0

    assert (tmp_path / "still.png").exists()
    assert str(tmp_path / "still.png") in capsys.readouterr().out
