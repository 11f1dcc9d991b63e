"""Foundry + Vite stack generation.

Renders the ``foundry-vite/`` template tree under ``contracts/``:
``foundry.toml`` with RPC aliases for both Rootstock networks, a
``forge-std`` test contract, and a broadcast deployment script.
"""

from __future__ import annotations

from typing import Any

from ..config import Stack
from .stack_base import CONTRACTS_OUTPUT_DIR, CONTRACT_NAME, StackGenerator, StackLayout, Theme


class FoundryGenerator(StackGenerator):
    """Generates the ``foundry-vite`` template."""

    stack = Stack.FOUNDRY_VITE
    toolchain = "Foundry"
    template_prefix = "foundry-vite"
    layout = StackLayout(
        marker="contracts/foundry.toml",
        contract_source=f"contracts/src/{CONTRACT_NAME}.sol",
        deploy_script="contracts/script/Deploy.s.sol",
        directories=("contracts/src", "contracts/test", "contracts/script"),
        required_files=(f"contracts/test/{CONTRACT_NAME}.t.sol",),
        script_cwd="contracts",
    )
    theme = Theme(
        gradient_start="#f093fb",
        gradient_end="#f5576c",
        button="#ff6b6b",
        button_hover="#ff5252",
        heading="🚀 Rootstock dApp (Foundry + Vite)",
    )

    DEV_DEPENDENCIES: dict[str, str] = {
        "concurrently": "^8.2.2",
    }

    def root_manifest(self, context: dict[str, Any]) -> dict[str, Any]:
        networks = context["networks"]
        # Paths inside the manifest are relative to contracts/, where forge runs.
        script = self.layout.deploy_script.removeprefix("contracts/")
        artefact = f"contracts/out/{CONTRACT_NAME}.sol/{CONTRACT_NAME}.json"
        return {
            "name": "rsk-dapp",
            "version": "0.1.0",
            "private": True,
            "scripts": {
                "dev": 'concurrently "npm run dev:anvil" "npm run dev:frontend"',
                "dev:anvil": f"anvil --fork-url {networks['testnet'].rpc_url}",
                "dev:frontend": "cd frontend && npm run dev",
                "build": "npm run build:contracts && npm run sync:abi && cd frontend && npm run build",
                "build:contracts": "cd contracts && forge build",
                "sync:abi": f"cp {artefact} {CONTRACTS_OUTPUT_DIR}/",
                "compile": "cd contracts && forge build",
                "contracts:install": "cd contracts && forge install foundry-rs/forge-std",
                "test": "cd contracts && forge test",
                "deploy": f"cd contracts && forge script {script} --rpc-url {networks['testnet'].hardhat_network} --broadcast",
                "deploy:mainnet": f"cd contracts && forge script {script} --rpc-url {networks['mainnet'].hardhat_network} --broadcast",
            },
            "devDependencies": dict(self.DEV_DEPENDENCIES),
        }

    def readme_layout(self) -> list[tuple[str, str]]:
        return [
            ("contracts/src/", "Solidity sources"),
            ("contracts/test/", "Forge tests (forge-std)"),
            ("contracts/script/Deploy.s.sol", "Broadcast deployment script"),
            ("contracts/foundry.toml", "Compiler settings and Rootstock RPC aliases"),
            ("frontend/", "React + Vite application"),
        ]
