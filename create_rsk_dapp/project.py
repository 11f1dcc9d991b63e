"""Project creation orchestrator.

Sequences one ``init`` run::

    Idle -> DirectoryCreated -> TemplateCopied -> ManifestUpdated
         -> EnvWritten -> GitReady? -> DepsReady? -> Done

Any failure before git initialisation removes the project directory before
the error propagates, so a failed run leaves nothing behind.  Git
initialisation and dependency installation are best-effort: their failures
arrive as ``OptionalStepFailed`` and are reported as warnings.
"""

from __future__ import annotations

import asyncio
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from .config import AppConfig, PackageManager, ProjectSpec
from .errors import (
    DirectoryExists,
    OptionalStepFailed,
    ScaffoldIOError,
    SubprocessFailure,
)
from .scaffolder import (
    TemplateMaterializer,
    merge_manifest,
    write_env_files,
    write_gitignore,
)
from .utils import PhaseReporter, run_checked


@dataclass
class ProjectResult:
    """Outcome of a successful ``create_project`` call."""

    path: Path
    git_initialized: bool = False
    dependencies_installed: bool = False
    warnings: list[str] = field(default_factory=list)


class ProjectOrchestrator:
    """Creates a project directory from a ``ProjectSpec``.

    Attributes:
        config: Process-wide settings (pre-packaged templates, commit
            message, command timeout).
        materializer: Produces the template tree.
        reporter: Receives one labelled phase per step.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        materializer: TemplateMaterializer | None = None,
        reporter: PhaseReporter | None = None,
    ) -> None:
        self.config = config or AppConfig()
        self.materializer = materializer or TemplateMaterializer(self.config)
        self.reporter = reporter or PhaseReporter()

    async def create_project(self, spec: ProjectSpec) -> ProjectResult:
        """Create the project described by *spec*.

        Raises:
            DirectoryExists: If ``spec.target_path`` already exists.  Nothing
                is touched in that case.
            ScaffoldIOError: If any file-producing step fails.  The target
                directory has been removed by the time this propagates.
        """
        target = spec.target_path
        if target.exists():
            raise DirectoryExists(target)

        result = ProjectResult(path=target)

        try:
            await self._scaffold(spec)
        except BaseException:
            # Including KeyboardInterrupt: never leave a half-written tree.
            self.reporter.fail("Project creation failed")
            await self._rollback(target)
            raise

        if not spec.skip_git:
            try:
                with self.reporter.phase(
                    "Initializing Git repository...",
                    "Git repository initialized",
                    warning="Git repository initialization skipped",
                ):
                    await self.init_git(target)
                result.git_initialized = True
            except OptionalStepFailed as exc:
                result.warnings.append(str(exc))

        if not spec.skip_install:
            manager = spec.package_manager
            try:
                with self.reporter.phase(
                    f"Installing dependencies with {manager.value}...",
                    "Dependencies installed",
                    warning="Failed to install dependencies. Please run install manually.",
                ):
                    await self.install_dependencies(target, manager)
                result.dependencies_installed = True
            except OptionalStepFailed as exc:
                result.warnings.append(str(exc))

        return result

    # ------------------------------------------------------------------
    # Fatal steps
    # ------------------------------------------------------------------

    async def _scaffold(self, spec: ProjectSpec) -> None:
        target = spec.target_path
        template = spec.template

        with self.reporter.phase("Creating project directory...", "Project directory created"):
            try:
                await asyncio.to_thread(target.mkdir, parents=True)
            except OSError as exc:
                raise ScaffoldIOError(f"Cannot create {target}: {exc}", target) from exc

        with self.reporter.phase(f"Setting up {template.value} template...", "Template files copied"):
            await self.materializer.materialize(template, target)

        with self.reporter.phase("Configuring package.json...", "Package.json configured"):
            await merge_manifest(target, spec.name)

        with self.reporter.phase("Creating environment configuration...", "Environment files created"):
            await write_env_files(target, template, self.materializer.renderer)

        with self.reporter.phase("Setting up Git configuration...", "Git configuration created"):
            await write_gitignore(target)

    async def _rollback(self, target: Path) -> None:
        if not target.exists():
            return
        try:
            await asyncio.to_thread(shutil.rmtree, target)
        except OSError as exc:
            self.reporter.warn(f"Could not remove {target}: {exc}")

    # ------------------------------------------------------------------
    # Best-effort steps
    # ------------------------------------------------------------------

    async def init_git(self, target: Path) -> None:
        """``git init``, stage everything, and commit.

        Raises:
            OptionalStepFailed: If any git command fails.
        """
        commands = (
            ["git", "init"],
            ["git", "add", "-A"],
            ["git", "commit", "-m", self.config.commit_message],
        )
        try:
            for cmd in commands:
                await run_checked(cmd, cwd=target, timeout=self.config.command_timeout)
        except SubprocessFailure as exc:
            raise OptionalStepFailed("Git initialization", exc) from exc

    async def install_dependencies(self, target: Path, manager: PackageManager) -> None:
        """Run *manager*'s install command in *target*.

        Raises:
            OptionalStepFailed: If the installer fails or is missing.
        """
        try:
            await run_checked(
                manager.install_command, cwd=target, timeout=self.config.command_timeout
            )
        except SubprocessFailure as exc:
            raise OptionalStepFailed("Dependency installation", exc) from exc
