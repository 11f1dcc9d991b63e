"""Contract deployment for a generated project.

``DeploymentRunner.deploy`` checks that it runs inside a project, creates a
minimal ``.env`` if the project has none (prompting for the signing key),
detects the contract toolchain from its marker file, and runs the
toolchain's compile/deploy commands against the chosen Rootstock network.

The contract address is recovered by scanning the command output for
``deployed to <address>`` / ``deployed at: <address>``.  This is a
best-effort scan: a run whose output does not match still succeeds, it just
carries no address.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from rich.markup import escape

from .config import AppConfig, DeployOptions
from .errors import NoToolchainDetected, NotAProject
from .networks import NetworkConfig, lookup
from .scaffolder.stack_base import CONTRACT_NAME
from .scaffolder.env_gen import (
    CONTRACT_ADDRESS_KEY,
    ENV_FILENAME,
    read_env,
    save_env_value,
    write_minimal_env,
)
from .utils import PhaseReporter, console, print_success, print_warning, run_checked
from .validation import normalize_private_key

_DEPLOYED_ADDRESS = re.compile(r"deployed (?:to|at):?\s*(0x[a-fA-F0-9]{40})", re.IGNORECASE)


class Toolchain(str, Enum):
    """Contract toolchains ``deploy`` knows how to drive."""

    HARDHAT = "hardhat"
    FOUNDRY = "foundry"

    @property
    def marker(self) -> str:
        """Project-relative file whose presence identifies the toolchain."""
        return _MARKERS[self]


_MARKERS: dict[Toolchain, str] = {
    Toolchain.HARDHAT: "hardhat.config.js",
    Toolchain.FOUNDRY: "contracts/foundry.toml",
}


@dataclass
class DeploymentResult:
    """Outcome of one ``deploy`` run."""

    contract_address: str | None
    raw_output: str
    network: NetworkConfig
    explorer_url: str | None = None


@dataclass(frozen=True)
class DeployStep:
    """One external command of a deployment, run in ``cwd`` (project-relative)."""

    command: list[str]
    cwd: str = ""


def extract_contract_address(output: str) -> str | None:
    """Return the first deployed-contract address found in *output*, casing kept."""
    match = _DEPLOYED_ADDRESS.search(output)
    return match.group(1) if match else None


def detect_toolchain(project_dir: str | Path) -> Toolchain:
    """Identify the project's contract toolchain from its marker file.

    Raises:
        NoToolchainDetected: If no marker, or more than one, is present.
    """
    root = Path(project_dir)
    found = [tc for tc in Toolchain if (root / tc.marker).is_file()]
    if len(found) != 1:
        raise NoToolchainDetected(root, found=[tc.marker for tc in found])
    return found[0]


def deploy_steps(toolchain: Toolchain, network: NetworkConfig) -> list[DeployStep]:
    """Commands that compile and deploy with *toolchain* to *network*."""
    if toolchain is Toolchain.HARDHAT:
        return [
            DeployStep(["npx", "hardhat", "compile"]),
            DeployStep(
                [
                    "npx", "hardhat", "run", "scripts/deploy.js",
                    "--network", network.hardhat_network,
                ]
            ),
        ]

    command = [
        "forge", "script", "script/Deploy.s.sol",
        "--rpc-url", network.rpc_url,
        "--broadcast", "-vvv",
    ]
    return [DeployStep(command, cwd="contracts")]


def deploy_env(
    toolchain: Toolchain,
    network: NetworkConfig,
    dotenv: dict[str, str],
    contract: str | None = None,
) -> dict[str, str]:
    """Environment overlay for the deploy commands.

    The project's ``.env`` values are passed through; the network's RPC URL
    is supplied when ``.env`` does not set one.
    """
    env = {f"{network.env_prefix}_RPC_URL": network.rpc_url, **dotenv}

    if toolchain is Toolchain.HARDHAT:
        if contract:
            env["CONTRACT_NAME"] = contract
    else:
        # vm.envUint only parses 0x-prefixed hex.
        key = env.get("PRIVATE_KEY", "")
        if key and not key.startswith("0x"):
            env["PRIVATE_KEY"] = f"0x{key}"
    return env


class DeploymentRunner:
    """Runs ``deploy`` in a project directory.

    Args:
        config: Supplies the optional command timeout.
        prompt_private_key: Called (with no arguments) to obtain a signing key
            when the project has no ``.env``.  Its answer is validated with
            ``normalize_private_key``.
        reporter: Receives the deployment phase.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        prompt_private_key: Callable[[], str] | None = None,
        reporter: PhaseReporter | None = None,
    ) -> None:
        self.config = config or AppConfig()
        self.prompt_private_key = prompt_private_key
        self.reporter = reporter or PhaseReporter()

    async def deploy(self, options: DeployOptions) -> DeploymentResult:
        """Compile and deploy the project in ``options.cwd``.

        Raises:
            UnknownNetwork: If ``options.network`` is not registered.
            NotAProject: If there is no ``package.json``.
            InvalidPrivateKey: If a signing key is needed and the answer is
                missing or malformed.
            NoToolchainDetected: If the toolchain cannot be determined.
            SubprocessFailure: If a compile or deploy command fails.
        """
        network = lookup(options.network)
        root = Path(options.cwd)

        if not (root / "package.json").is_file():
            raise NotAProject(root)

        env_path = root / ENV_FILENAME
        if not env_path.exists():
            await self._create_env(env_path)

        toolchain = detect_toolchain(root)
        if options.contract and toolchain is Toolchain.FOUNDRY:
            print_warning(
                "--contract is not supported for Foundry projects; "
                f"script/Deploy.s.sol deploys {CONTRACT_NAME}."
            )
        env = deploy_env(toolchain, network, read_env(env_path), options.contract)

        outputs: list[str] = []
        with self.reporter.phase(
            f"Deploying to Rootstock {network.identifier}...",
            "Contract deployed successfully!",
        ):
            for step in deploy_steps(toolchain, network):
                outputs.append(
                    await run_checked(
                        step.command,
                        cwd=root / step.cwd,
                        timeout=self.config.command_timeout,
                        env=env,
                    )
                )

        raw_output = "\n".join(outputs)
        address = extract_contract_address(raw_output)
        result = DeploymentResult(
            contract_address=address,
            raw_output=raw_output,
            network=network,
            explorer_url=network.address_url(address) if address else None,
        )
        if address:
            await save_env_value(env_path, CONTRACT_ADDRESS_KEY, address)
        return result

    async def _create_env(self, env_path: Path) -> None:
        print_warning("No .env file found. Creating one...")
        answer = self.prompt_private_key() if self.prompt_private_key else ""
        await write_minimal_env(env_path, normalize_private_key(answer))
        print_success(".env file created")


def print_deployment_summary(result: DeploymentResult, run_dev: str = "npm run dev") -> None:
    """Print the address, explorer link and next steps for *result*."""
    if result.contract_address:
        console.print(f"\n[bold green]✅ Contract Address:[/bold green] {result.contract_address}")
        console.print(f"[cyan]🔍 View on Explorer:[/cyan] {result.explorer_url}")
        print_success(f"Contract address saved to .env ({CONTRACT_ADDRESS_KEY})")
    else:
        print_warning("No contract address found in the deployment output.")

    console.print(
        "\n[bold green]🎉 Deployment successful![/bold green]\n\n"
        "Next steps:\n"
        f"  1. [cyan]{escape(run_dev)}[/cyan] - Start the development server\n"
        f"  2. Connect your wallet to {result.network.display_name}\n"
        "  3. Interact with your deployed contract"
    )
