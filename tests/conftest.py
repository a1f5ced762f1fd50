"""
Top-level pytest conftest.py -- shared fixtures for flowstate tests.

Provides:
    dead_pid     - pid of a process that has already exited
    live_holder  - factory that starts a sleeping subprocess and returns its pid
    spawn_python - start a Python snippet in a fresh interpreter with flowstate importable
"""

import os
import subprocess
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parent.parent


def _child_env():
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(
        p for p in (str(REPO_ROOT), env.get("PYTHONPATH", "")) if p
    )
    return env


@pytest.fixture
def dead_pid():
    """Return the pid of a child that has exited and been reaped."""
    proc = subprocess.Popen([sys.executable, "-c", "pass"])
    proc.wait()
    return proc.pid


@pytest.fixture
def live_holder():
    """Start sleeping subprocesses on demand; all are killed at teardown.

    Usage::

        pid = live_holder()
    """
    procs = []

    def _start():
        proc = subprocess.Popen([sys.executable, "-c", "import time; time.sleep(60)"])
        procs.append(proc)
        return proc.pid

    yield _start

    for proc in procs:
        proc.kill()
        proc.wait()


@pytest.fixture
def spawn_python():
    """Start code snippets in separate interpreters with stdout piped.

    Children still running at teardown are killed.

    Usage::

        proc = spawn_python(code, "arg1")
        line = proc.stdout.readline()
    """
    procs = []

    def _spawn(code, *args):
        proc = subprocess.Popen(
            [sys.executable, "-c", code, *args],
            stdout=subprocess.PIPE,
            text=True,
            env=_child_env(),
        )
        procs.append(proc)
        return proc

    yield _spawn

    for proc in procs:
        if proc.poll() is None:
            proc.kill()
        proc.wait()
        if proc.stdout is not None:
            proc.stdout.close()
