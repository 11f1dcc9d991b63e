"""Hardhat + React stack generation.

Renders the ``hardhat-react/`` template tree: ``hardhat.config.js`` wired to
both Rootstock networks, ``scripts/deploy.js`` (writes the address and
artefact into the frontend), and a Mocha/Chai test suite for the greeter.
"""

from __future__ import annotations

from typing import Any

from ..config import Stack
from .stack_base import CONTRACT_NAME, StackGenerator, StackLayout, Theme


class HardhatGenerator(StackGenerator):
    """Generates the ``hardhat-react`` template."""

    stack = Stack.HARDHAT_REACT
    toolchain = "Hardhat"
    template_prefix = "hardhat-react"
    layout = StackLayout(
        marker="hardhat.config.js",
        contract_source=f"contracts/{CONTRACT_NAME}.sol",
        deploy_script="scripts/deploy.js",
        directories=("contracts", "scripts", "test"),
        required_files=(f"test/{CONTRACT_NAME}.test.js",),
    )
    theme = Theme(
        gradient_start="#667eea",
        gradient_end="#764ba2",
        button="#4CAF50",
        button_hover="#45a049",
        heading="🚀 Rootstock dApp",
    )

    DEV_DEPENDENCIES: dict[str, str] = {
        "@nomicfoundation/hardhat-toolbox": "^4.0.0",
        "@nomicfoundation/hardhat-ethers": "^3.0.5",
        "@nomicfoundation/hardhat-verify": "^2.0.3",
        "hardhat": "^2.19.4",
        "ethers": "^6.10.0",
        "dotenv": "^16.3.1",
        "concurrently": "^8.2.2",
    }

    def root_manifest(self, context: dict[str, Any]) -> dict[str, Any]:
        networks = context["networks"]
        script = self.layout.deploy_script
        return {
            "name": "rsk-dapp",
            "version": "0.1.0",
            "private": True,
            "scripts": {
                "dev": 'concurrently "npm run dev:hardhat" "npm run dev:frontend"',
                "dev:hardhat": "hardhat node",
                "dev:frontend": "cd frontend && npm run dev",
                "build": "npm run compile && cd frontend && npm run build",
                "compile": "hardhat compile",
                "test": "hardhat test",
                "deploy": f"hardhat run {script} --network {networks['testnet'].hardhat_network}",
                "deploy:mainnet": f"hardhat run {script} --network {networks['mainnet'].hardhat_network}",
            },
            "devDependencies": dict(self.DEV_DEPENDENCIES),
        }

    def readme_layout(self) -> list[tuple[str, str]]:
        return [
            ("contracts/", "Solidity sources"),
            ("test/", "Hardhat (Mocha + Chai) tests"),
            ("scripts/deploy.js", "Deployment script; copies address and ABI to the frontend"),
            ("hardhat.config.js", "Compiler settings and Rootstock network profiles"),
            ("frontend/", "React + Vite application"),
        ]
