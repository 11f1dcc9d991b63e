"""create-rsk-dapp scaffolder -- produces the file tree of a new project.

Renders one of the two Rootstock stacks (Hardhat + React, Foundry + Vite)
from the bundled Jinja2 templates, or copies a pre-packaged template tree,
then stamps the manifest and writes the secrets and ignore-list files.

Quick usage::

    from create_rsk_dapp.scaffolder import TemplateMaterializer, merge_manifest

    materializer = TemplateMaterializer()
    await materializer.materialize("hardhat-react", "/tmp/my-dapp")
    await merge_manifest("/tmp/my-dapp", "my-dapp")
"""

from create_rsk_dapp.scaffolder.env_gen import write_env_files
from create_rsk_dapp.scaffolder.generator import TemplateMaterializer
from create_rsk_dapp.scaffolder.gitignore_gen import write_gitignore
from create_rsk_dapp.scaffolder.manifest import merge_manifest
from create_rsk_dapp.scaffolder.templates import TemplateRenderer

__all__ = [
    "TemplateMaterializer",
    "TemplateRenderer",
    "merge_manifest",
    "write_env_files",
    "write_gitignore",
]
