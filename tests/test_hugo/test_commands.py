"""Tests for hugobros hugo commands."""

from __future__ import annotations

import functools
import json
from types import SimpleNamespace

import pytest

from hugobros.cli import main
from hugobros.hugo import runner as runner_module


@pytest.fixture
def fake_hugo(monkeypatch):
    """Replace subprocess.run inside the runner and record calls."""
    calls = []
    result = SimpleNamespace(returncode=0, stdout="ok\n", stderr="")

    def fake_run(cmd, **kwargs):
        calls.append(cmd)
        return result

    monkeypatch.setattr(runner_module.subprocess, "run", fake_run)
    return SimpleNamespace(calls=calls, result=result)


def test_run_passes_args_through(runner, site_root, fake_hugo):
    result = runner.invoke(main, ["--root", str(site_root), "hugo", "run", "version", "--minify"])
    assert result.exit_code == 0
    assert fake_hugo.calls == [["hugo", "version", "--minify"]]
    assert "ok" in result.output


def test_run_json(runner, site_root, fake_hugo):
    result = runner.invoke(main, ["--root", str(site_root), "hugo", "run", "--json", "env"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "success": True,
        "stdout": "ok\n",
        "stderr": "",
        "exit_code": 0,
    }


def test_build_with_drafts(runner, site_root, fake_hugo):
    result = runner.invoke(main, ["--root", str(site_root), "hugo", "build", "--drafts"])
    assert result.exit_code == 0
    assert fake_hugo.calls == [["hugo", "--buildDrafts"]]
    assert "Build finished" in result.output


def test_build_failure_exit_code(runner, site_root, fake_hugo):
    fake_hugo.result.returncode = 2
    fake_hugo.result.stderr = "Error: broken template\n"
    result = runner.invoke(main, ["--root", str(site_root), "hugo", "build"])
    assert result.exit_code == 2


def test_missing_executable(runner, site_root, monkeypatch):
    def fake_run(cmd, **kwargs):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(runner_module.subprocess, "run", fake_run)
    result = runner.invoke(main, ["--root", str(site_root), "hugo", "build"])
    assert result.exit_code == 1
    assert "Failed to execute hugo" in result.output


def test_serve_stops_server_on_exit(runner, site_root, monkeypatch):
    from hugobros.hugo import commands as hugo_commands

    class Process:
        pid = 1
        terminated = False

        def wait(self, timeout=None):
            return 0

        def terminate(self):
            self.terminated = True

        def kill(self):
            pass

    process = Process()
    calls = []

    def fake_popen(cmd, **kwargs):
        calls.append((cmd, kwargs))
        return process

    monkeypatch.setattr(
        hugo_commands,
        "HugoRunner",
        functools.partial(runner_module.HugoRunner, popen=fake_popen),
    )

    result = runner.invoke(main, ["--root", str(site_root), "hugo", "serve"])
    assert result.exit_code == 0
    assert "Serving" in result.output
    assert process.terminated
    assert len(hugo_commands.servers) == 0

    # hugo writes straight to the terminal
    cmd, kwargs = calls[0]
    assert cmd == ["hugo", "server"]
    assert kwargs["stdout"] is None
    assert kwargs["stderr"] is None
