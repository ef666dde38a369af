"""
Integration test for watch mode with libsass and a real filesystem watcher.

Editing a partial must rewrite the CSS of the entry unit that imports it.
"""

import asyncio

import pytest

from sasswatch.cli import run_build
from sasswatch.cli_utils import EXIT_SUCCESS
from sasswatch.config import BuildConfig, RootMapping


async def wait_for(predicate, timeout=10.0):
    """Poll until predicate() is true."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            return False
        await asyncio.sleep(0.1)
    return True


@pytest.mark.integration
class TestWatchScenario:
    """styles:dist with app.scss importing _base.scss."""

    def test_partial_edit_recompiles_dependent(self, tmp_path):
        styles = tmp_path / "styles"
        styles.mkdir()
        base = styles / "_base.scss"
        base.write_text("$accent: red;\n")
        (styles / "app.scss").write_text('@import "base";\na { color: $accent; }\n')
        css = tmp_path / "dist" / "app.css"
        config = BuildConfig(context=tmp_path, dirs=(RootMapping("styles", "dist"),), watch=True)

        async def main():
            shutdown = asyncio.Event()
            build = asyncio.create_task(run_build(config, shutdown=shutdown))
            try:
                assert await wait_for(css.exists)
                # Let the observers start
                await asyncio.sleep(0.5)
                base.write_text("$accent: blue;\n")
                updated = await wait_for(lambda: "blue" in css.read_text())
            finally:
                shutdown.set()
            return updated, await asyncio.wait_for(build, timeout=10)

        updated, code = asyncio.run(main())

        assert updated
        assert code == EXIT_SUCCESS
        assert not (tmp_path / "dist" / "_base.css").exists()
