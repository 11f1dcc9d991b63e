"""Root manifest (``package.json``) identity merge.

Stamps the project's name onto whatever manifest the template produced,
resets its version, marks it private, and overlays extra dependencies.  All
other fields (scripts, engines, devDependencies, ...) and their key order are
left as the template author wrote them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ..errors import ManifestIOError
from ..utils import load_json, save_json

MANIFEST_FILENAME = "package.json"
INITIAL_VERSION = "0.1.0"


async def merge_manifest(
    project_dir: str | Path,
    project_name: str,
    extra_dependencies: dict[str, str] | None = None,
) -> dict[str, Any] | None:
    """Merge project identity into ``<project_dir>/package.json``.

    A missing manifest is not an error: nothing is written and ``None`` is
    returned.  Otherwise the merged manifest is written back and returned.

    Args:
        project_dir: Project root.
        project_name: Value for the ``name`` field.
        extra_dependencies: Entries shallow-merged into ``dependencies``;
            they win over existing entries with the same key.

    Raises:
        ManifestIOError: If the manifest cannot be read, parsed or written.
    """
    path = Path(project_dir) / MANIFEST_FILENAME
    if not path.exists():
        return None

    try:
        manifest = load_json(path)
    except (OSError, ValueError) as exc:
        raise ManifestIOError(f"Cannot read {path}: {exc}", path) from exc

    manifest["name"] = project_name
    manifest["version"] = INITIAL_VERSION
    manifest["private"] = True

    if extra_dependencies:
        manifest["dependencies"] = {
            **manifest.get("dependencies", {}),
            **extra_dependencies,
        }

    try:
        await save_json(manifest, path)
    except (OSError, TypeError) as exc:
        raise ManifestIOError(f"Cannot write {path}: {exc}", path) from exc

    return manifest

