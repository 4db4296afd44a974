#!/usr/bin/env python3
"""
Shared fixtures for git engine tests.
"""

import os
import shutil
import stat
import subprocess
from pathlib import Path
from typing import Callable, List, Union

import pytest
from loguru import logger

from git_engine.models import CommandSpec, OperationContext, RawProcessResult

HASH_A = "a" * 40
HASH_B = "b" * 40
HASH_C = "c" * 40


def raw(exit_code: int = 0, stdout: str = "", stderr: str = "") -> RawProcessResult:
    """Build a captured process result for a fake executor."""
    return RawProcessResult(exit_code=exit_code, stdout=stdout, stderr=stderr, duration_ms=1.0)


class FakeExecutor:
    """Executor double that replays queued results and records every command."""

    def __init__(self, *responses: Union[RawProcessResult, BaseException]):
        self.responses = list(responses)
        self.calls: List[CommandSpec] = []

    async def execute(self, spec: CommandSpec, context: OperationContext) -> RawProcessResult:
        self.calls.append(spec)
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return RawProcessResult(
            exit_code=response.exit_code,
            stdout=response.stdout,
            stderr=response.stderr,
            duration_ms=response.duration_ms,
            argv=("git", *spec.argv),
        )


@pytest.fixture
def log_messages():
    """Collect loguru messages of WARNING and above."""
    messages: List[str] = []
    handler_id = logger.add(lambda message: messages.append(str(message)), level="WARNING", format="{message}")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def context(tmp_path: Path) -> OperationContext:
    return OperationContext(working_directory=tmp_path, request_id="test-request")


@pytest.fixture
def fake_git(tmp_path: Path) -> Callable[[str], Path]:
    """Factory writing an executable shell script that stands in for git."""
    if os.name == "nt":
        pytest.skip("Fake git scripts require a POSIX shell")

    def _write(body: str, name: str = "fake-git") -> Path:
        script = tmp_path / name
        script.write_text(f"#!/bin/sh\n{body}\n")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _write


def _git(repo: Path, *args: str) -> str:
    completed = subprocess.run(
        ["git", "-C", str(repo), *args], check=True, capture_output=True, text=True
    )
    return completed.stdout


@pytest.fixture
def git_repo(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A fresh repository on branch ``main`` isolated from user and system config."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    global_config = tmp_path / "gitconfig"
    global_config.write_text("")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(global_config))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")

    repo = tmp_path / "repo"
    repo.mkdir()
    _git(repo, "init", "-q")
    _git(repo, "symbolic-ref", "HEAD", "refs/heads/main")
    _git(repo, "config", "user.name", "Test User")
    _git(repo, "config", "user.email", "test@example.com")
    _git(repo, "config", "commit.gpgsign", "false")
    _git(repo, "config", "tag.gpgsign", "false")
    return repo


@pytest.fixture
def run_git() -> Callable[..., str]:
    """Run plain git for test setup, outside the engine."""
    return _git
