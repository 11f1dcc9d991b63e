"""Shared shape of a stack generator.

A stack generator owns the contract-toolchain half of a template (directory
layout, toolchain config, contract, tests, deploy script, root manifest) and
delegates the frontend half to ``FrontendGenerator``.  The layout it declares
is also what ``TemplateMaterializer`` checks a finished tree against.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar

from ..config import Stack
from ..utils import save_json
from .frontend_gen import FrontendGenerator
from .templates import TemplateRenderer

CONTRACT_NAME = "RootstockGreeter"
SOLC_VERSION = "0.8.19"
OPTIMIZER_RUNS = 200
CONTRACTS_OUTPUT_DIR = "frontend/src/contracts"

FRONTEND_DIRECTORIES = (
    "frontend/src/components",
    "frontend/src/hooks",
    "frontend/src/utils",
    CONTRACTS_OUTPUT_DIR,
    "frontend/public",
)


@dataclass(frozen=True)
class Theme:
    """Cosmetic values that differ between the two frontends."""

    gradient_start: str
    gradient_end: str
    button: str
    button_hover: str
    heading: str


@dataclass(frozen=True)
class StackLayout:
    """Paths a generated tree of one stack must contain (relative to the root)."""

    marker: str
    contract_source: str
    deploy_script: str
    directories: tuple[str, ...]
    required_files: tuple[str, ...] = field(default=())
    # Directory the manifest's toolchain commands run in.
    script_cwd: str = ""

    def all_required(self) -> tuple[str, ...]:
        return (
            "package.json",
            self.marker,
            self.contract_source,
            self.deploy_script,
            *self.required_files,
        )


class StackGenerator:
    """Base class for the Hardhat and Foundry generators."""

    stack: ClassVar[Stack]
    toolchain: ClassVar[str]
    layout: ClassVar[StackLayout]
    theme: ClassVar[Theme]
    template_prefix: ClassVar[str]

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer
        self.frontend_gen = FrontendGenerator(renderer)

    async def generate(self, root: Path, context: dict[str, Any]) -> list[Path]:
        """Write the whole tree for this stack under *root*.

        Returns:
            Every file written, in write order.
        """
        await self._create_directories(root)

        written: list[Path] = []
        written.append(await self._write_root_manifest(root, context))
        written.extend(
            await self.renderer.render_tree(self.template_prefix, root, context)
        )
        written.append(
            await self.renderer.render_to_file(
                "common/RootstockGreeter.sol.j2",
                root / self.layout.contract_source,
                context,
            )
        )
        written.extend(await self.frontend_gen.generate(root / "frontend", context))
        written.append(
            await self.renderer.render_to_file("README.md.j2", root / "README.md", context)
        )
        return written

    def root_manifest(self, context: dict[str, Any]) -> dict[str, Any]:
        """The root ``package.json`` contents for this stack."""
        raise NotImplementedError

    def readme_layout(self) -> list[tuple[str, str]]:
        """``(path, description)`` rows for the generated README."""
        raise NotImplementedError

    async def _create_directories(self, root: Path) -> None:
        for directory in (*self.layout.directories, *FRONTEND_DIRECTORIES):
            await asyncio.to_thread((root / directory).mkdir, parents=True, exist_ok=True)

    async def _write_root_manifest(self, root: Path, context: dict[str, Any]) -> Path:
        path = root / "package.json"
        await save_json(self.root_manifest(context), path)
        return path
