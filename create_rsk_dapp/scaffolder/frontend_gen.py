"""React + Vite frontend generation, shared by both stacks.

Renders the ``frontend/`` template tree (Vite config, HTML entry point, React
app, styles, logo), writes the frontend manifest, and seeds
``src/contracts/`` with the greeter's ABI so the app's ABI import resolves
before the first deployment overwrites it with the compiled artefact.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ..utils import save_json
from .templates import TemplateRenderer

FRONTEND_DEPENDENCIES: dict[str, str] = {
    "react": "^18.2.0",
    "react-dom": "^18.2.0",
    "ethers": "^6.10.0",
    "@tanstack/react-query": "^5.17.9",
    "wagmi": "^2.5.7",
    "viem": "^2.7.6",
    "@rainbow-me/rainbowkit": "^2.0.0",
}

FRONTEND_DEV_DEPENDENCIES: dict[str, str] = {
    "@types/react": "^18.2.48",
    "@types/react-dom": "^18.2.18",
    "@vitejs/plugin-react": "^4.2.1",
    "vite": "^5.0.11",
    "autoprefixer": "^10.4.16",
    "postcss": "^8.4.33",
    "tailwindcss": "^3.4.1",
}


def _string_param(name: str) -> dict[str, str]:
    return {"internalType": "string", "name": name, "type": "string"}


GREETER_ABI: list[dict[str, Any]] = [
    {
        "inputs": [_string_param("_greeting")],
        "stateMutability": "nonpayable",
        "type": "constructor",
    },
    {
        "anonymous": False,
        "inputs": [
            {**_string_param("newGreeting"), "indexed": False},
            {
                "indexed": True,
                "internalType": "address",
                "name": "changer",
                "type": "address",
            },
        ],
        "name": "GreetingChanged",
        "type": "event",
    },
    {
        "inputs": [],
        "name": "greet",
        "outputs": [_string_param("")],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "owner",
        "outputs": [{"internalType": "address", "name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [_string_param("_greeting")],
        "name": "setGreeting",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [_string_param("_greeting")],
        "name": "setRestrictedGreeting",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]


class FrontendGenerator:
    """Generates the React/Vite frontend under ``<project>/frontend``."""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    async def generate(self, output_dir: Path, context: dict[str, Any]) -> list[Path]:
        """Generate every frontend file.

        Args:
            output_dir: The ``frontend/`` directory inside the project root.
            context: Template rendering context; must carry ``theme``,
                ``networks``, ``contract_name`` and ``deploy_command``.

        Returns:
            List of written file paths.
        """
        written: list[Path] = []

        manifest_path = output_dir / "package.json"
        await save_json(self.manifest(context), manifest_path)
        written.append(manifest_path)

        written.extend(await self.renderer.render_tree("frontend", output_dir, context))

        abi_path = output_dir / "src" / "contracts" / f"{context['contract_name']}.json"
        await save_json(
            {"contractName": context["contract_name"], "abi": GREETER_ABI}, abi_path
        )
        written.append(abi_path)

        return written

    @staticmethod
    def manifest(context: dict[str, Any]) -> dict[str, Any]:
        """The frontend ``package.json`` contents."""
        return {
            "name": f"{context['project_name']}-frontend",
            "version": "0.1.0",
            "private": True,
            "type": "module",
            "scripts": {
                "dev": "vite",
                "build": "vite build",
                "preview": "vite preview",
            },
            "dependencies": dict(FRONTEND_DEPENDENCIES),
            "devDependencies": dict(FRONTEND_DEV_DEPENDENCIES),
        }
