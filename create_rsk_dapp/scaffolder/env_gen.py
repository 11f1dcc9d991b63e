"""Secrets file (``.env``) generation and maintenance.

``write_env_files`` writes a fresh project's ``.env`` (signing-key
placeholder, both networks' RPC URLs, explorers, chain ids, and an empty
contract address) and its redacted ``.env.example`` sibling.  The remaining
helpers read and patch an existing ``.env`` for the ``deploy`` command.
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path

from dotenv import dotenv_values, set_key
from jinja2 import TemplateError

from ..config import Stack
from ..errors import EnvIOError
from ..networks import lookup
from ..utils import write_text
from .templates import TemplateRenderer

ENV_FILENAME = ".env"
ENV_EXAMPLE_FILENAME = ".env.example"
CONTRACT_ADDRESS_KEY = "VITE_CONTRACT_ADDRESS"

_ASSIGNMENT_VALUE = re.compile(r"=.*")


def redact(content: str) -> str:
    """Erase every value: ``KEY=value`` becomes ``KEY=``."""
    return _ASSIGNMENT_VALUE.sub("=", content)


def render_env(template: Stack | str, renderer: TemplateRenderer | None = None) -> str:
    """Return the ``.env`` content for a new *template* project."""
    stack = Stack.parse(template)
    renderer = renderer or TemplateRenderer()
    return renderer.render(
        "env.j2",
        {
            "stack": stack.value,
            "networks": {"testnet": lookup("testnet"), "mainnet": lookup("mainnet")},
            "contract_address_key": CONTRACT_ADDRESS_KEY,
        },
    )


async def write_env_files(
    project_dir: str | Path,
    template: Stack | str,
    renderer: TemplateRenderer | None = None,
) -> tuple[Path, Path]:
    """Write ``.env`` and ``.env.example`` into *project_dir*, overwriting both.

    Returns:
        ``(env_path, example_path)``.

    Raises:
        EnvIOError: If rendering or writing fails.
    """
    root = Path(project_dir)
    env_path = root / ENV_FILENAME
    example_path = root / ENV_EXAMPLE_FILENAME

    try:
        content = render_env(template, renderer)
        await asyncio.to_thread(write_text, env_path, content)
        await asyncio.to_thread(write_text, example_path, redact(content))
    except (OSError, TemplateError) as exc:
        raise EnvIOError(f"Cannot write environment files in {root}: {exc}", root) from exc

    return env_path, example_path


# ---------------------------------------------------------------------------
# Existing .env helpers (deploy)
# ---------------------------------------------------------------------------


def read_env(path: str | Path) -> dict[str, str]:
    """Parse an env file the way ``dotenv`` loaders do; ``{}`` if it does not exist.

    Comments (including inline ``# ...`` after unquoted values), ``export``
    prefixes and surrounding quotes are handled by python-dotenv.  Keys
    without a value and malformed lines are skipped.
    """
    env_path = Path(path)
    if not env_path.exists():
        return {}
    try:
        values = dotenv_values(env_path, interpolate=False, encoding="utf-8")
    except OSError as exc:
        raise EnvIOError(f"Cannot read {env_path}: {exc}", env_path) from exc
    return {key: value for key, value in values.items() if value is not None}


def _set_env_value(env_path: Path, key: str, value: str) -> None:
    if not env_path.exists():
        write_text(env_path, "")
    set_key(env_path, key, value, quote_mode="never", encoding="utf-8")


async def save_env_value(path: str | Path, key: str, value: str) -> None:
    """Set *key* to *value* in the env file at *path*.

    Every existing assignment of *key* (``export`` form included) is
    rewritten in place; if there is none, ``KEY=value`` is appended on its
    own line.  The file is created when missing.

    Raises:
        EnvIOError: If the file cannot be read or written.
    """
    env_path = Path(path)
    try:
        await asyncio.to_thread(_set_env_value, env_path, key, value)
    except OSError as exc:
        raise EnvIOError(f"Cannot update {env_path}: {exc}", env_path) from exc


async def write_minimal_env(path: str | Path, private_key: str) -> Path:
    """Write the minimal ``.env`` ``deploy`` needs when a project has none.

    *private_key* must already be normalised (no ``0x`` prefix).
    """
    env_path = Path(path)
    lines = [f"PRIVATE_KEY={private_key}"]
    lines.extend(
        f"{lookup(network_id).env_prefix}_RPC_URL={lookup(network_id).rpc_url}"
        for network_id in ("testnet", "mainnet")
    )
    try:
        await asyncio.to_thread(write_text, env_path, "\n".join(lines) + "\n")
    except OSError as exc:
        raise EnvIOError(f"Cannot write {env_path}: {exc}", env_path) from exc
    return env_path
