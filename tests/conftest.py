"""Shared pytest fixtures for the create-rsk-dapp test suite.

Provides reusable fixtures for:
- Temporary working directories
- A renderer, materializer and quiet phase reporter
- Fully generated projects for both stacks
- Mock subprocess helpers
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from rich.console import Console

from create_rsk_dapp.config import AppConfig
from create_rsk_dapp.scaffolder import TemplateMaterializer, TemplateRenderer
from create_rsk_dapp.utils import PhaseReporter


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Empty directory that plays the role of the user's cwd."""
    path = tmp_path / "workspace"
    path.mkdir()
    return path


# ---------------------------------------------------------------------------
# Scaffolding collaborators
# ---------------------------------------------------------------------------

@pytest.fixture
def app_config() -> AppConfig:
    """Defaults, with the pre-packaged template path disabled."""
    return AppConfig(prebuilt_templates_dir=None, command_timeout=30)


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


@pytest.fixture
def materializer(app_config: AppConfig, renderer: TemplateRenderer) -> TemplateMaterializer:
    return TemplateMaterializer(app_config, renderer)


@pytest.fixture
def console_buffer() -> io.StringIO:
    """Captures everything a ``quiet_reporter`` prints."""
    return io.StringIO()


@pytest.fixture
def quiet_reporter(console_buffer: io.StringIO) -> PhaseReporter:
    """PhaseReporter writing to an in-memory, non-interactive console."""
    return PhaseReporter(Console(file=console_buffer, force_terminal=False, width=120))


# ---------------------------------------------------------------------------
# Generated projects
# ---------------------------------------------------------------------------

@pytest.fixture
async def hardhat_project(workspace: Path, materializer: TemplateMaterializer) -> Path:
    """A freshly materialised ``hardhat-react`` tree."""
    root = workspace / "hardhat-dapp"
    root.mkdir()
    await materializer.materialize("hardhat-react", root)
    return root


@pytest.fixture
async def foundry_project(workspace: Path, materializer: TemplateMaterializer) -> Path:
    """A freshly materialised ``foundry-vite`` tree."""
    root = workspace / "foundry-dapp"
    root.mkdir()
    await materializer.materialize("foundry-vite", root)
    return root


# ---------------------------------------------------------------------------
# Subprocess mocks
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory


class CommandRecorder:
    """Stand-in for ``run_checked`` that records calls and replays outputs.

    ``outputs`` maps the first word of a command (``git``, ``npm``,
    ``npx``, ``forge``) to the text it "prints".  ``failures`` maps the same
    keys to an exception to raise instead.
    """

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.outputs: dict[str, str] = {}
        self.failures: dict[str, Exception] = {}

    async def __call__(self, cmd, cwd=None, timeout=None, env=None) -> str:
        argv = cmd if isinstance(cmd, list) else cmd.split()
        self.calls.append({"cmd": list(argv), "cwd": cwd, "timeout": timeout, "env": env})
        if argv[0] in self.failures:
            raise self.failures[argv[0]]
        return self.outputs.get(argv[0], "")

    @property
    def commands(self) -> list[list[str]]:
        return [call["cmd"] for call in self.calls]


@pytest.fixture
def command_recorder() -> CommandRecorder:
    return CommandRecorder()
