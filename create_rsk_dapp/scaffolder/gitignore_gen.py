"""``.gitignore`` generation covering both contract toolchains."""

from __future__ import annotations

import asyncio
from pathlib import Path

from ..errors import TemplateIOError
from ..utils import write_text

GITIGNORE_SECTIONS: dict[str, tuple[str, ...]] = {
    "Dependencies": ("node_modules/", ".pnp", ".pnp.js"),
    "Testing": ("coverage/", "*.lcov"),
    "Production": ("build/", "dist/", "out/"),
    "Environment files": (
        ".env",
        ".env.local",
        ".env.development.local",
        ".env.test.local",
        ".env.production.local",
    ),
    "Debug": (
        "npm-debug.log*",
        "yarn-debug.log*",
        "yarn-error.log*",
        "pnpm-debug.log*",
        "lerna-debug.log*",
    ),
    "Editor directories and files": (
        ".vscode/*",
        "!.vscode/extensions.json",
        ".idea",
        ".DS_Store",
        "*.suo",
        "*.ntvs*",
        "*.njsproj",
        "*.sln",
        "*.sw?",
    ),
    "Hardhat files": ("cache/", "artifacts/", "typechain/", "typechain-types/"),
    "Foundry files": (
        "cache_forge/",
        "out_forge/",
        "contracts/out/",
        "contracts/cache/",
        "broadcast/",
    ),
    "Deployment files": ("deployments/", ".openzeppelin/"),
    "Misc": ("*.log", ".cache"),
}


def render_gitignore() -> str:
    blocks = [
        "\n".join([f"# {title}", *patterns])
        for title, patterns in GITIGNORE_SECTIONS.items()
    ]
    return "\n\n".join(blocks) + "\n"


async def write_gitignore(project_dir: str | Path) -> Path:
    """Write ``<project_dir>/.gitignore``.

    Raises:
        TemplateIOError: If the file cannot be written.
    """
    path = Path(project_dir) / ".gitignore"
    try:
        await asyncio.to_thread(write_text, path, render_gitignore())
    except OSError as exc:
        raise TemplateIOError(f"Cannot write {path}: {exc}", path) from exc
    return path
