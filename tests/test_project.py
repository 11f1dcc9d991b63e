"""Tests for the project orchestrator (create_rsk_dapp.project).

Covers:
- DirectoryExists precondition (no filesystem changes)
- Full creation with git/install stubbed
- Rollback when a fatal step fails
- Git and install failures downgraded to warnings
- skip_git / skip_install
"""

from __future__ import annotations

import io
import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from create_rsk_dapp.config import AppConfig, PackageManager, ProjectSpec
from create_rsk_dapp.errors import (
    DirectoryExists,
    EnvIOError,
    ManifestIOError,
    OptionalStepFailed,
    SubprocessFailure,
    TemplateIOError,
)
from create_rsk_dapp.project import ProjectOrchestrator
from create_rsk_dapp.scaffolder import TemplateMaterializer
from create_rsk_dapp.utils import PhaseReporter

pytestmark = pytest.mark.unit


def _spec(workspace: Path, **overrides) -> ProjectSpec:
    fields = {
        "name": "my-dapp",
        "template": "hardhat-react",
        "target_path": workspace / "my-dapp",
    }
    fields.update(overrides)
    return ProjectSpec(**fields)


def _failure(command: str) -> SubprocessFailure:
    return SubprocessFailure(
        f"Command failed (exit 1): {command}", command=command, returncode=1, stderr="boom"
    )


@pytest.fixture
def orchestrator(
    app_config: AppConfig, materializer: TemplateMaterializer, quiet_reporter: PhaseReporter
) -> ProjectOrchestrator:
    return ProjectOrchestrator(app_config, materializer, quiet_reporter)


# ---------------------------------------------------------------------------
# Precondition
# ---------------------------------------------------------------------------


class TestPrecondition:
    @pytest.mark.asyncio
    async def test_existing_directory(self, orchestrator: ProjectOrchestrator, workspace: Path):
        existing = workspace / "my-dapp"
        existing.mkdir()
        (existing / "keep.txt").write_text("mine")
        before = sorted(p.relative_to(workspace) for p in workspace.rglob("*"))

        with patch("create_rsk_dapp.project.run_checked", new=AsyncMock()) as run:
            with pytest.raises(DirectoryExists) as exc_info:
                await orchestrator.create_project(_spec(workspace))

        assert sorted(p.relative_to(workspace) for p in workspace.rglob("*")) == before
        assert (existing / "keep.txt").read_text() == "mine"
        assert "my-dapp already exists" in str(exc_info.value)
        run.assert_not_called()

    @pytest.mark.asyncio
    async def test_existing_file(self, orchestrator: ProjectOrchestrator, workspace: Path):
        (workspace / "my-dapp").write_text("file")
        with pytest.raises(DirectoryExists):
            await orchestrator.create_project(_spec(workspace))
        assert (workspace / "my-dapp").read_text() == "file"


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------


class TestCreateProject:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("template", ["hardhat-react", "foundry-vite"])
    async def test_full_tree(
        self, orchestrator: ProjectOrchestrator, workspace: Path, command_recorder, template: str
    ):
        spec = _spec(workspace, template=template)
        with patch("create_rsk_dapp.project.run_checked", new=command_recorder):
            result = await orchestrator.create_project(spec)

        root = spec.target_path
        assert result.path == root
        assert result.git_initialized and result.dependencies_installed
        assert result.warnings == []
        for name in ("package.json", ".env", ".env.example", ".gitignore", "README.md"):
            assert (root / name).is_file(), name

        manifest = json.loads((root / "package.json").read_text(encoding="utf-8"))
        assert manifest["name"] == "my-dapp"
        assert manifest["version"] == "0.1.0"
        assert manifest["private"] is True
        assert "deploy" in manifest["scripts"]

    @pytest.mark.asyncio
    async def test_git_then_install_commands(
        self, orchestrator: ProjectOrchestrator, workspace: Path, command_recorder
    ):
        spec = _spec(workspace, package_manager="pnpm")
        with patch("create_rsk_dapp.project.run_checked", new=command_recorder):
            await orchestrator.create_project(spec)

        assert command_recorder.commands == [
            ["git", "init"],
            ["git", "add", "-A"],
            ["git", "commit", "-m", "Initial commit from create-rsk-dapp"],
            ["pnpm", "install"],
        ]
        assert all(call["cwd"] == spec.target_path for call in command_recorder.calls)
        assert all(call["timeout"] == 30 for call in command_recorder.calls)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "manager, expected",
        [(PackageManager.NPM, ["npm", "install"]), (PackageManager.YARN, ["yarn"])],
    )
    async def test_install_command_per_manager(
        self, orchestrator: ProjectOrchestrator, workspace: Path, command_recorder, manager, expected
    ):
        spec = _spec(workspace, package_manager=manager, skip_git=True)
        with patch("create_rsk_dapp.project.run_checked", new=command_recorder):
            await orchestrator.create_project(spec)
        assert command_recorder.commands == [expected]

    @pytest.mark.asyncio
    async def test_skip_flags(self, orchestrator: ProjectOrchestrator, workspace: Path, command_recorder):
        spec = _spec(workspace, skip_git=True, skip_install=True)
        with patch("create_rsk_dapp.project.run_checked", new=command_recorder):
            result = await orchestrator.create_project(spec)
        assert command_recorder.calls == []
        assert not result.git_initialized
        assert not result.dependencies_installed
        assert spec.target_path.is_dir()

    @pytest.mark.asyncio
    async def test_phases_reported(
        self, orchestrator: ProjectOrchestrator, workspace: Path, console_buffer: io.StringIO
    ):
        await orchestrator.create_project(_spec(workspace, skip_git=True, skip_install=True))
        output = console_buffer.getvalue()
        for label in (
            "Project directory created",
            "Template files copied",
            "Package.json configured",
            "Environment files created",
            "Git configuration created",
        ):
            assert f"✔ {label}" in output


# ---------------------------------------------------------------------------
# Rollback
# ---------------------------------------------------------------------------


class TestRollback:
    @pytest.mark.asyncio
    async def test_materializer_failure_removes_directory(
        self, app_config: AppConfig, quiet_reporter: PhaseReporter, workspace: Path,
        console_buffer: io.StringIO,
    ):
        materializer = TemplateMaterializer(app_config)

        async def half_written(template, target):
            (Path(target) / "contracts").mkdir()
            (Path(target) / "contracts" / "partial.sol").write_text("//")
            raise TemplateIOError("disk full", target)

        materializer.materialize = half_written
        orchestrator = ProjectOrchestrator(app_config, materializer, quiet_reporter)
        spec = _spec(workspace)

        with pytest.raises(TemplateIOError, match="disk full"):
            await orchestrator.create_project(spec)

        assert not spec.target_path.exists()
        assert list(workspace.iterdir()) == []
        assert "✖ Project creation failed" in console_buffer.getvalue()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "target, error",
        [
            ("create_rsk_dapp.project.merge_manifest", ManifestIOError("bad manifest")),
            ("create_rsk_dapp.project.write_env_files", EnvIOError("bad env")),
            ("create_rsk_dapp.project.write_gitignore", TemplateIOError("bad gitignore")),
        ],
    )
    async def test_later_step_failure_removes_directory(
        self, orchestrator: ProjectOrchestrator, workspace: Path, target: str, error: Exception
    ):
        spec = _spec(workspace)
        with patch(target, new=AsyncMock(side_effect=error)):
            with patch("create_rsk_dapp.project.run_checked", new=AsyncMock()) as run:
                with pytest.raises(type(error)):
                    await orchestrator.create_project(spec)
        assert not spec.target_path.exists()
        run.assert_not_called()

    @pytest.mark.asyncio
    async def test_unexpected_error_also_rolls_back(
        self, orchestrator: ProjectOrchestrator, workspace: Path
    ):
        spec = _spec(workspace)
        with patch(
            "create_rsk_dapp.project.merge_manifest", new=AsyncMock(side_effect=RuntimeError("bug"))
        ):
            with pytest.raises(RuntimeError):
                await orchestrator.create_project(spec)
        assert not spec.target_path.exists()


# ---------------------------------------------------------------------------
# Best-effort steps
# ---------------------------------------------------------------------------


class TestOptionalSteps:
    @pytest.mark.asyncio
    async def test_git_failure_is_a_warning(
        self, orchestrator: ProjectOrchestrator, workspace: Path, command_recorder,
        console_buffer: io.StringIO,
    ):
        command_recorder.failures["git"] = _failure("git init")
        spec = _spec(workspace)
        with patch("create_rsk_dapp.project.run_checked", new=command_recorder):
            result = await orchestrator.create_project(spec)

        assert spec.target_path.is_dir()
        assert not result.git_initialized
        assert result.dependencies_installed
        assert len(result.warnings) == 1
        assert "⚠ Git repository initialization skipped" in console_buffer.getvalue()
        assert command_recorder.commands[-1] == ["npm", "install"]

    @pytest.mark.asyncio
    async def test_install_failure_is_a_warning(
        self, orchestrator: ProjectOrchestrator, workspace: Path, command_recorder,
        console_buffer: io.StringIO,
    ):
        command_recorder.failures["npm"] = _failure("npm install")
        spec = _spec(workspace)
        with patch("create_rsk_dapp.project.run_checked", new=command_recorder):
            result = await orchestrator.create_project(spec)

        assert spec.target_path.is_dir()
        assert result.git_initialized
        assert not result.dependencies_installed
        assert (
            "⚠ Failed to install dependencies. Please run install manually."
            in console_buffer.getvalue()
        )

    @pytest.mark.asyncio
    async def test_init_git_wraps_failure(self, orchestrator: ProjectOrchestrator, tmp_path: Path):
        failure = _failure("git commit")
        with patch("create_rsk_dapp.project.run_checked", new=AsyncMock(side_effect=failure)):
            with pytest.raises(OptionalStepFailed) as exc_info:
                await orchestrator.init_git(tmp_path)
        assert exc_info.value.cause is failure
        assert exc_info.value.__cause__ is failure

    @pytest.mark.asyncio
    async def test_commit_message_from_config(
        self, materializer: TemplateMaterializer, quiet_reporter: PhaseReporter, tmp_path: Path,
        command_recorder,
    ):
        config = AppConfig(commit_message="chore: scaffold")
        orchestrator = ProjectOrchestrator(config, materializer, quiet_reporter)
        with patch("create_rsk_dapp.project.run_checked", new=command_recorder):
            await orchestrator.init_git(tmp_path)
        assert command_recorder.commands[-1] == ["git", "commit", "-m", "chore: scaffold"]

    @pytest.mark.asyncio
    async def test_unstartable_tools_are_warnings(
        self, orchestrator: ProjectOrchestrator, workspace: Path, console_buffer: io.StringIO
    ):
        spec = _spec(workspace)
        with patch(
            "asyncio.create_subprocess_exec",
            side_effect=PermissionError(13, "Permission denied"),
        ):
            result = await orchestrator.create_project(spec)

        assert (spec.target_path / "package.json").is_file()
        assert not result.git_initialized
        assert not result.dependencies_installed
        assert len(result.warnings) == 2
        assert all("(exit 126)" in warning for warning in result.warnings)
        assert "Git repository initialization skipped" in console_buffer.getvalue()

    @pytest.mark.asyncio
    async def test_no_command_timeout_by_default(
        self, materializer: TemplateMaterializer, quiet_reporter: PhaseReporter, workspace: Path,
        command_recorder,
    ):
        orchestrator = ProjectOrchestrator(AppConfig(), materializer, quiet_reporter)
        with patch("create_rsk_dapp.project.run_checked", new=command_recorder):
            await orchestrator.create_project(_spec(workspace))
        assert command_recorder.calls
        assert all(call["timeout"] is None for call in command_recorder.calls)
