import asyncio

import pytest

from fractal_explorer.app import ExplorerApp, FractalView
from fractal_explorer.export import SnapshotExporter
from fractal_explorer.iteration import FractalKind
from fractal_explorer.session import ExplorerSession

SIZE = (24, 8)


def test_unknown_key_keeps_cached_frame(default_view):
    session = ExplorerSession(default_view, animating=False)
    app = ExplorerApp(session)

    async def scenario():
        async with app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            generation = session.renderer.generation
            assert generation >= 1

            await pilot.press("x")
            await pilot.pause()

            assert not session.renderer.cache.dirty
            assert session.renderer.generation == generation
            assert session.view == default_view

    asyncio.run(scenario())


def test_widget_strips_fill_the_view(default_view):
    session = ExplorerSession(default_view, animating=False)
    app = ExplorerApp(session)

    async def scenario():
        async with app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            view = app.query_one(FractalView)
            width, height = view.size
            cells = session.cells(height, width)

            assert len(view._strips) == height
            assert [segment.text for segment in view._strips[0]] == [cell.glyph for cell in cells[0]]

    asyncio.run(scenario())


@pytest.mark.parametrize("key", ["plus", "equals_sign", "minus", "r", "left", "d", "up", "s", "space", "enter"])
def test_bound_keys_change_the_view(default_view, key):
    session = ExplorerSession(default_view, animating=False)
    app = ExplorerApp(session)

    async def scenario():
        async with app.run_test(size=SIZE) as pilot:
            await pilot.pause()
            generation = session.renderer.generation

            await pilot.press(key)
            await pilot.pause()

            assert session.view != default_view
            assert session.renderer.generation > generation

    asyncio.run(scenario())


def test_enter_switches_to_julia(default_view):
    session = ExplorerSession(default_view, animating=False)
    app = ExplorerApp(session)

    async def scenario():
        async with app.run_test(size=SIZE) as pilot:
            await pilot.press("enter")
            assert session.view.kind is FractalKind.JULIA
            await pilot.press("enter")
            assert session.view == default_view

    asyncio.run(scenario())


def test_export_key_writes_snapshot(default_view, tmp_path):
    with SnapshotExporter(tmp_path, width=16, height=9) as exporter:
        session = ExplorerSession(default_view, exporter=exporter, animating=False)
        app = ExplorerApp(session)

        async def scenario():
            async with app.run_test(size=SIZE) as pilot:
                await pilot.press("g")
                for _ in range(600):
                    if list(tmp_path.glob("fractal_*.png")):
                        break
                    await pilot.pause(0.05)
                # export must leave the interactive view alone
                assert session.view == default_view

        asyncio.run(scenario())

    assert len(list(tmp_path.glob("fractal_*.png"))) == 1


def test_quit_key_exits(default_view):
    session = ExplorerSession(default_view, animating=False)
    app = ExplorerApp(session)

    async def scenario():
        async with app.run_test(size=SIZE) as pilot:
            await pilot.press("q")
            await pilot.pause()

    asyncio.run(scenario())

    assert not session.running
    assert app.return_code == 0
