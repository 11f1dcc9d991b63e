"""Command-line interface: ``create-rsk-dapp init`` and ``create-rsk-dapp deploy``.

Usage::

    create-rsk-dapp init my-dapp --template hardhat-react
    create-rsk-dapp init                      # prompts for everything
    create-rsk-dapp deploy --network testnet
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from rich.markup import escape
from rich.prompt import Prompt

from . import __version__
from .config import AppConfig, DeployOptions, PackageManager, ProjectSpec, Stack
from .deploy import DeploymentRunner, print_deployment_summary
from .errors import InvalidName, InvalidPrivateKey, RskDappError
from .networks import DEFAULT_NETWORK
from .project import ProjectOrchestrator, ProjectResult
from .utils import console, print_banner, print_error
from .validation import normalize_private_key, validate_project_name

DEFAULT_PROJECT_NAME = "my-rsk-dapp"

_STACK_ICONS = {Stack.HARDHAT_REACT: "⚡", Stack.FOUNDRY_VITE: "🔥"}


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------


def prompt_project_name() -> str:
    """Ask for a project name until it passes validation."""
    while True:
        name = Prompt.ask("What is your project named?", default=DEFAULT_PROJECT_NAME)
        result = validate_project_name(name)
        if result.valid:
            return name
        print_error(escape(", ".join(result.errors)))


def prompt_template() -> Stack:
    """Numbered choice between the supported stacks."""
    stacks = list(Stack)
    console.print("Which project template would you like to use?")
    for index, stack in enumerate(stacks, start=1):
        console.print(f"  {index}. {_STACK_ICONS[stack]} {stack.label}")
    choice = Prompt.ask(
        "Template",
        choices=[str(i) for i in range(1, len(stacks) + 1)],
        default="1",
    )
    return stacks[int(choice) - 1]


def prompt_package_manager() -> PackageManager:
    choice = Prompt.ask(
        "Which package manager would you like to use?",
        choices=[pm.value for pm in PackageManager],
        default=PackageManager.NPM.value,
    )
    return PackageManager(choice)


def prompt_private_key() -> str:
    """Ask (hidden input) for a signing key until it has a valid format."""
    while True:
        answer = Prompt.ask(
            "Enter your private key (will be saved in .env)", password=True
        )
        try:
            normalize_private_key(answer)
        except InvalidPrivateKey as exc:
            print_error(escape(str(exc)))
            continue
        return answer


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def build_project_spec(args: argparse.Namespace, cwd: Path | None = None) -> ProjectSpec:
    """Turn ``init`` arguments into a ``ProjectSpec``, prompting for what is missing.

    Raises:
        InvalidName: If a name given on the command line is invalid.
        UnknownTemplate: If ``--template`` names an unsupported stack.
    """
    name = args.name
    if name is None:
        name = prompt_project_name()
    else:
        result = validate_project_name(name)
        if not result.valid:
            raise InvalidName(result.errors)

    template = Stack.parse(args.template) if args.template else prompt_template()

    if args.package_manager in {pm.value for pm in PackageManager}:
        package_manager = PackageManager(args.package_manager)
    else:
        package_manager = prompt_package_manager()

    return ProjectSpec(
        name=name,
        template=template,
        target_path=(cwd or Path.cwd()) / name,
        package_manager=package_manager,
        skip_install=args.skip_install,
        skip_git=args.skip_git,
    )


def print_init_summary(spec: ProjectSpec, result: ProjectResult) -> None:
    pm = spec.package_manager
    lines = [
        "",
        f"[bold green]✨ Success! Created {escape(spec.name)} at {escape(str(result.path))}[/bold green]",
        "",
        "Inside that directory, you can run several commands:",
        "",
        f"  [cyan]{pm.run('dev')}[/cyan]",
        "    Starts the development server.",
        "",
        f"  [cyan]{pm.run('build')}[/cyan]",
        "    Builds the app for production.",
        "",
        f"  [cyan]{pm.run('deploy')}[/cyan]",
        "    Deploys your contracts to Rootstock testnet.",
        "",
        "We suggest that you begin by typing:",
        "",
        f"  [cyan]cd {escape(spec.name)}[/cyan]",
    ]
    if not result.dependencies_installed:
        lines.append(f"  [cyan]{' '.join(pm.install_command)}[/cyan]")
    lines.extend([f"  [cyan]{pm.run('dev')}[/cyan]", "", "Happy building on Rootstock! 🚀"])
    console.print("\n".join(lines))


async def cmd_init(args: argparse.Namespace, config: AppConfig) -> None:
    spec = build_project_spec(args)
    orchestrator = ProjectOrchestrator(config)
    result = await orchestrator.create_project(spec)
    print_init_summary(spec, result)


async def cmd_deploy(args: argparse.Namespace, config: AppConfig) -> None:
    options = DeployOptions(network=args.network, contract=args.contract)
    runner = DeploymentRunner(config, prompt_private_key=prompt_private_key)
    result = await runner.deploy(options)
    print_deployment_summary(result)


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-rsk-dapp",
        description="Create a full-stack dApp on Rootstock blockchain",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  create-rsk-dapp init my-dapp --template hardhat-react\n"
            "  create-rsk-dapp init my-dapp -t foundry-vite -p pnpm --skip-git\n"
            "  create-rsk-dapp deploy --network mainnet\n"
        ),
    )
    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    subparsers = parser.add_subparsers(dest="command")

    init = subparsers.add_parser("init", help="Initialize a new Rootstock dApp project")
    init.add_argument("name", nargs="?", default=None, metavar="project-name")
    init.add_argument(
        "--template", "-t",
        default=None,
        help=f"Project template ({' or '.join(s.value for s in Stack)})",
    )
    init.add_argument(
        "--package-manager", "-p",
        default=PackageManager.NPM.value,
        help="Package manager to use (npm, yarn, or pnpm)",
    )
    init.add_argument("--skip-install", action="store_true", help="Skip dependency installation")
    init.add_argument("--skip-git", action="store_true", help="Skip git initialization")

    deploy = subparsers.add_parser("deploy", help="Deploy contracts to Rootstock network")
    deploy.add_argument(
        "--network", "-n",
        default=DEFAULT_NETWORK,
        help="Network to deploy to (testnet or mainnet)",
    )
    deploy.add_argument(
        "--contract", "-c",
        default=None,
        help="Specific contract to deploy (Hardhat projects)",
    )

    return parser


COMMANDS = {"init": cmd_init, "deploy": cmd_deploy}


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``create-rsk-dapp`` and ``python -m create_rsk_dapp``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    print_banner(__version__)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    try:
        config = AppConfig.from_env()
        asyncio.run(COMMANDS[args.command](args, config))
    except KeyboardInterrupt:
        print_error("\nAborted.")
        sys.exit(130)
    except InvalidName as exc:
        print_error(f"Invalid project name: {escape(str(exc))}")
        sys.exit(1)
    except RskDappError as exc:
        print_error(f"Error: {escape(str(exc))}")
        sys.exit(1)
    except Exception:
        print_error("Unexpected error:")
        console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
