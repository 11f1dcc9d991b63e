"""create-rsk-dapp configuration.

Typed inputs for the two commands plus process-wide settings.  All models use
Pydantic v2 so they are validated once, at the CLI boundary, and passed
through the rest of the system unchanged.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .errors import InvalidName, UnknownTemplate
from .networks import DEFAULT_NETWORK
from .validation import validate_project_name


class Stack(str, Enum):
    """Supported project templates (contract toolchain + frontend)."""

    HARDHAT_REACT = "hardhat-react"
    FOUNDRY_VITE = "foundry-vite"

    @property
    def label(self) -> str:
        """Human-readable description used in the template prompt."""
        return _STACK_LABELS[self]

    @classmethod
    def parse(cls, identifier: str | Stack) -> Stack:
        """Resolve a template identifier, raising ``UnknownTemplate`` if unsupported."""
        if isinstance(identifier, cls):
            return identifier
        try:
            return cls(identifier)
        except ValueError:
            raise UnknownTemplate(str(identifier), known=[s.value for s in cls]) from None


_STACK_LABELS: dict[Stack, str] = {
    Stack.HARDHAT_REACT: "Hardhat + React - Full-featured development environment with React frontend",
    Stack.FOUNDRY_VITE: "Foundry + Vite - Fast, modern tooling with Vite frontend",
}


class PackageManager(str, Enum):
    """Node package managers the generated project can be installed with."""

    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"

    @property
    def install_command(self) -> list[str]:
        """Argument list that installs the project's dependencies."""
        return {
            PackageManager.NPM: ["npm", "install"],
            PackageManager.YARN: ["yarn"],
            PackageManager.PNPM: ["pnpm", "install"],
        }[self]

    def run(self, script: str) -> str:
        """Command line that runs a manifest *script* (``npm run dev``, ``yarn dev``)."""
        if self is PackageManager.NPM:
            return f"npm run {script}"
        return f"{self.value} {script}"


class ProjectSpec(BaseModel):
    """Everything ``init`` needs to create one project."""

    name: str
    template: Stack
    target_path: Path
    package_manager: PackageManager = PackageManager.NPM
    skip_install: bool = False
    skip_git: bool = False

    @field_validator("name")
    @classmethod
    def _valid_name(cls, value: str) -> str:
        result = validate_project_name(value)
        if not result.valid:
            raise InvalidName(result.errors)
        return value

    @field_validator("template", mode="before")
    @classmethod
    def _known_template(cls, value: Any) -> Stack:
        return Stack.parse(value)

    @field_validator("target_path")
    @classmethod
    def _absolute_path(cls, value: Path) -> Path:
        return value.expanduser().absolute()


class DeployOptions(BaseModel):
    """Inputs for ``deploy``."""

    network: str = DEFAULT_NETWORK
    contract: str | None = None
    cwd: Path = Field(default_factory=Path.cwd)


class AppConfig(BaseModel):
    """Process-wide settings.

    Defaults suit interactive use; ``from_env`` lets CI and tests override
    them without touching the command line.
    """

    prebuilt_templates_dir: Path | None = Field(
        default=None,
        description="Directory holding pre-packaged template trees named after the stack id",
    )
    commit_message: str = Field(default="Initial commit from create-rsk-dapp")
    command_timeout: int | None = Field(
        default=None,
        ge=10,
        description="Optional ceiling in seconds for external commands; None never times out",
    )

    def prebuilt_template(self, stack: Stack) -> Path | None:
        """Path of the pre-packaged tree for *stack*, if one exists on disk."""
        if self.prebuilt_templates_dir is None:
            return None
        candidate = self.prebuilt_templates_dir / stack.value
        return candidate if candidate.is_dir() else None

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build an ``AppConfig`` from environment variables.

        Recognised variables (all optional):
            RSK_DAPP_TEMPLATES_DIR, RSK_DAPP_COMMIT_MESSAGE,
            RSK_DAPP_COMMAND_TIMEOUT.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("RSK_DAPP_TEMPLATES_DIR"):
            kwargs["prebuilt_templates_dir"] = Path(os.environ["RSK_DAPP_TEMPLATES_DIR"])
        if os.environ.get("RSK_DAPP_COMMIT_MESSAGE"):
            kwargs["commit_message"] = os.environ["RSK_DAPP_COMMIT_MESSAGE"]
        if os.environ.get("RSK_DAPP_COMMAND_TIMEOUT"):
            kwargs["command_timeout"] = int(os.environ["RSK_DAPP_COMMAND_TIMEOUT"])
        return cls(**kwargs)
