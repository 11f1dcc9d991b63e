"""Exception hierarchy for create-rsk-dapp.

Every error the tool raises on purpose derives from ``RskDappError``; the CLI
reports those with a one-line message and exit code 1.  Anything else is an
unexpected failure and is reported with its full traceback.

``OptionalStepFailed`` is the only error the project orchestrator is allowed
to catch and downgrade to a warning (git initialisation and dependency
installation).
"""

from __future__ import annotations

from pathlib import Path


class RskDappError(Exception):
    """Base class for all expected create-rsk-dapp failures."""


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------


class InvalidName(RskDappError):
    """Raised when a project name violates the naming rules."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__(", ".join(self.errors) or "invalid project name")


class InvalidPrivateKey(RskDappError):
    """Raised when a signing key is not 64 hex digits (optionally ``0x``-prefixed)."""


class UnknownNetwork(RskDappError):
    """Raised when a network identifier is not registered."""

    def __init__(self, identifier: str, known: list[str] | None = None) -> None:
        self.identifier = identifier
        self.known = known or []
        hint = f" (expected one of: {', '.join(self.known)})" if self.known else ""
        super().__init__(f"Unknown network '{identifier}'{hint}")


class UnknownTemplate(RskDappError):
    """Raised when a template identifier does not name a supported stack."""

    def __init__(self, identifier: str, known: list[str] | None = None) -> None:
        self.identifier = identifier
        self.known = known or []
        hint = f" (expected one of: {', '.join(self.known)})" if self.known else ""
        super().__init__(f"Unknown template '{identifier}'{hint}")


# ---------------------------------------------------------------------------
# Project creation
# ---------------------------------------------------------------------------


class DirectoryExists(RskDappError):
    """Raised when the target project directory is already present."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(
            f"Directory {self.path.name} already exists. Please choose a different name."
        )


class ScaffoldIOError(RskDappError):
    """A filesystem error while writing part of a new project.

    Always fatal during ``init``: the orchestrator rolls the project
    directory back before re-raising.
    """

    step = "scaffold"

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        super().__init__(message)


class TemplateIOError(ScaffoldIOError):
    step = "template"


class ManifestIOError(ScaffoldIOError):
    step = "manifest"


class EnvIOError(ScaffoldIOError):
    step = "env"


# ---------------------------------------------------------------------------
# Deployment preconditions
# ---------------------------------------------------------------------------


class NotAProject(RskDappError):
    """Raised when ``deploy`` runs outside a generated project."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(
            "No package.json found. Make sure you are in a Rootstock dApp project directory."
        )


class NoToolchainDetected(RskDappError):
    """Raised when neither (or both) toolchain markers are present."""

    def __init__(self, path: str | Path, found: list[str] | None = None) -> None:
        self.path = Path(path)
        self.found = found or []
        if self.found:
            message = (
                "Both Hardhat and Foundry configurations found "
                f"({', '.join(self.found)}); cannot tell which toolchain to deploy with."
            )
        else:
            message = (
                "No Hardhat or Foundry configuration found. "
                "Make sure you are in a valid project."
            )
        super().__init__(message)


# ---------------------------------------------------------------------------
# External commands
# ---------------------------------------------------------------------------


class SubprocessFailure(RskDappError):
    """Raised when an external command exits non-zero (or cannot start)."""

    def __init__(
        self,
        message: str,
        command: str = "",
        returncode: int | None = None,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(message)

    @property
    def output(self) -> str:
        """Combined captured output (stdout first)."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)


class OptionalStepFailed(RskDappError):
    """A best-effort step (git init, dependency install) failed.

    Carries the underlying ``SubprocessFailure`` as ``cause``.
    """

    def __init__(self, step: str, cause: SubprocessFailure) -> None:
        self.step = step
        self.cause = cause
        super().__init__(f"{step} failed: {cause}")
