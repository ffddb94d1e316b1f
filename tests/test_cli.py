# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Tests for non-interactive CLI runs (cli.py)."""
from __future__ import annotations

import pytest

from garagesim.cli import run_simulator
from garagesim.scripting import ScriptRunner


@pytest.fixture
def bad_script(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("""
name: Bad Wait
steps:
  - action: wait
    seconds: soon
""")
    return path


@pytest.fixture
def good_script(tmp_path):
    path = tmp_path / "good.yaml"
    path.write_text("""
name: Good
steps:
  - action: assert
    condition: door_shut
""")
    return path


# ============================================================================
# Oneshot Script Tests
# ============================================================================

class TestOneshotScripts:
    """Tests for run_simulator() with startup scripts."""

    @pytest.mark.asyncio
    async def test_passing_script(self, good_script, capsys):
        result = await run_simulator(scripts=[str(good_script)], oneshot=True)
        assert result is True
        assert ">>> All scripts PASSED" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_malformed_script_fails(self, bad_script, capsys):
        result = await run_simulator(scripts=[str(bad_script)], oneshot=True)
        assert result is False
        out = capsys.readouterr().out
        assert ">>> Script FAILED: Bad Wait" in out
        assert ">>> All scripts FAILED" in out

    @pytest.mark.asyncio
    async def test_unknown_script_fails(self, capsys):
        result = await run_simulator(scripts=["no_such_script"], oneshot=True)
        assert result is False
        assert "Error loading script 'no_such_script'" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_runner_exception_fails(self, good_script, monkeypatch, capsys):
        async def explode(self, script, verbose=True):
            raise RuntimeError("runner exploded")

        monkeypatch.setattr(ScriptRunner, "run", explode)
        result = await run_simulator(scripts=[str(good_script)], oneshot=True)
        assert result is False
        assert ">>> All scripts FAILED" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_later_scripts_still_run(self, bad_script, good_script, capsys):
        result = await run_simulator(
            scripts=[str(bad_script), str(good_script)], oneshot=True
        )
        assert result is False
        assert ">>> Script PASSED: Good" in capsys.readouterr().out
