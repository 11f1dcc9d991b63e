"""create-rsk-dapp -- scaffold full-stack dApps for the Rootstock network.

Two stacks are offered:

* ``hardhat-react`` -- Hardhat contracts, tests and deploy script + React/Vite frontend.
* ``foundry-vite``  -- Foundry contracts, tests and broadcast script + React/Vite frontend.

The ``init`` command materialises a project; ``deploy`` compiles and deploys
the generated contract and records its address in the project's ``.env``.
"""

__version__ = "1.0.0"
