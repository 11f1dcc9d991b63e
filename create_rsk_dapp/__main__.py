"""Entry point for ``python -m create_rsk_dapp``."""

from create_rsk_dapp.cli import main

if __name__ == "__main__":
    main()
