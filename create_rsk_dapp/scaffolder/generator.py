"""Template materialisation.

``TemplateMaterializer`` turns a stack identifier and an empty target
directory into a complete project tree.  Two mutually exclusive paths exist
per call:

* a pre-packaged template tree on disk (``AppConfig.prebuilt_templates_dir /
  <stack id>``) is copied verbatim, minus dependency caches, VCS metadata,
  build output and OS litter;
* otherwise the stack's generator renders the tree from the bundled Jinja2
  templates.

Either way the result is checked against the stack's layout before returning:
every file the toolchain config and manifest point at must exist.
"""

from __future__ import annotations

import asyncio
import re
import shutil
from pathlib import Path
from typing import Any

from jinja2 import TemplateError

from ..config import AppConfig, Stack
from ..errors import TemplateIOError
from ..networks import lookup
from ..utils import load_json
from .foundry_gen import FoundryGenerator
from .hardhat_gen import HardhatGenerator
from .stack_base import (
    CONTRACT_NAME,
    CONTRACTS_OUTPUT_DIR,
    OPTIMIZER_RUNS,
    SOLC_VERSION,
    StackGenerator,
)
from .templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Stack dispatch
# ---------------------------------------------------------------------------

STACK_GENERATORS: dict[Stack, type[StackGenerator]] = {
    Stack.HARDHAT_REACT: HardhatGenerator,
    Stack.FOUNDRY_VITE: FoundryGenerator,
}

# Entries whose name contains any of these are never copied from a
# pre-packaged template.
IGNORED_NAME_FRAGMENTS: tuple[str, ...] = ("node_modules", ".git", "dist", ".DS_Store")

FRONTEND_REQUIRED_FILES: tuple[str, ...] = (
    "frontend/package.json",
    "frontend/index.html",
    "frontend/vite.config.js",
    "frontend/src/main.jsx",
    "frontend/src/App.jsx",
    f"{CONTRACTS_OUTPUT_DIR}/{CONTRACT_NAME}.json",
)

_SCRIPT_REFERENCE = re.compile(r"[\w./-]+\.(?:js|sol)\b")


class TemplateMaterializer:
    """Produces the file tree for one stack inside an existing directory."""

    def __init__(
        self,
        config: AppConfig | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config = config or AppConfig()
        self.renderer = renderer or TemplateRenderer()

    def generator_for(self, stack: Stack) -> StackGenerator:
        return STACK_GENERATORS[stack](self.renderer)

    async def materialize(self, template: Stack | str, target_dir: str | Path) -> list[Path]:
        """Populate *target_dir* with the *template* stack.

        Args:
            template: Stack identifier (``hardhat-react`` or ``foundry-vite``).
            target_dir: Project root; must already exist (and be empty).

        Returns:
            Paths of every file written.

        Raises:
            UnknownTemplate: If *template* is not a supported stack.
            TemplateIOError: If writing fails or the finished tree is
                missing a file its configuration refers to.
        """
        stack = Stack.parse(template)
        root = Path(target_dir)
        generator = self.generator_for(stack)
        prebuilt = self.config.prebuilt_template(stack)

        try:
            if prebuilt is not None:
                written = await copy_template(prebuilt, root)
            else:
                context = build_context(generator, root.name)
                written = await generator.generate(root, context)
        except (OSError, TemplateError) as exc:
            raise TemplateIOError(
                f"Failed to set up {stack.value} template: {exc}", root
            ) from exc

        verify_tree(root, generator)
        return written


# ---------------------------------------------------------------------------
# Context building
# ---------------------------------------------------------------------------


def build_context(generator: StackGenerator, project_name: str) -> dict[str, Any]:
    """Build the Jinja2 template context for *generator*'s stack."""
    return {
        "project_name": project_name,
        "stack": generator.stack.value,
        "stack_label": generator.stack.label,
        "toolchain": generator.toolchain,
        "networks": {"testnet": lookup("testnet"), "mainnet": lookup("mainnet")},
        "contract_name": CONTRACT_NAME,
        "solc_version": SOLC_VERSION,
        "optimizer_runs": OPTIMIZER_RUNS,
        "initial_greeting": "Hello from Rootstock!",
        "test_greeting": "Hello, Rootstock!",
        "owner_revert_message": "Only owner can perform this action",
        "contracts_output_dir": CONTRACTS_OUTPUT_DIR,
        "deploy_command": "npm run deploy",
        "theme": generator.theme,
        "layout": generator.readme_layout(),
    }


# ---------------------------------------------------------------------------
# Pre-packaged template copy
# ---------------------------------------------------------------------------


def _ignore_unwanted(directory: str, names: list[str]) -> set[str]:
    return {
        name for name in names
        if any(fragment in name for fragment in IGNORED_NAME_FRAGMENTS)
    }


async def copy_template(source: Path, target: Path) -> list[Path]:
    """Copy the *source* template tree into *target* (which may already exist).

    Returns:
        Sorted list of copied files.
    """
    await asyncio.to_thread(
        shutil.copytree, source, target, ignore=_ignore_unwanted, dirs_exist_ok=True
    )
    return sorted(p for p in target.rglob("*") if p.is_file())


# ---------------------------------------------------------------------------
# Consistency check
# ---------------------------------------------------------------------------


def verify_tree(root: Path, generator: StackGenerator) -> None:
    """Check that every path the stack's config relies on exists under *root*.

    Raises:
        TemplateIOError: Listing each missing path.
    """
    layout = generator.layout
    missing = [
        rel for rel in (*layout.all_required(), *FRONTEND_REQUIRED_FILES)
        if not (root / rel).is_file()
    ]
    missing.extend(
        rel for rel in (*layout.directories, CONTRACTS_OUTPUT_DIR)
        if not (root / rel).is_dir()
    )

    manifest_path = root / "package.json"
    if manifest_path.is_file():
        try:
            scripts = load_json(manifest_path).get("scripts", {})
        except ValueError as exc:
            raise TemplateIOError(f"Unreadable manifest {manifest_path}: {exc}", root) from exc
        for name in ("deploy", "deploy:mainnet"):
            for ref in _SCRIPT_REFERENCE.findall(scripts.get(name, "")):
                if not (root / layout.script_cwd / ref).is_file():
                    missing.append(f"{layout.script_cwd}/{ref}".lstrip("/"))

    if missing:
        raise TemplateIOError(
            f"{generator.stack.value} tree is incomplete; missing: {', '.join(sorted(set(missing)))}",
            root,
        )
