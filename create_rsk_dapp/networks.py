"""Rootstock network registry.

A read-only table of the two supported networks, built once at import time.
Lookups of unregistered identifiers raise ``UnknownNetwork``.
"""

from __future__ import annotations

from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field

from .errors import UnknownNetwork


class NativeCurrency(BaseModel):
    """Native currency descriptor, in the shape wallets expect."""

    model_config = ConfigDict(frozen=True)

    name: str
    symbol: str
    decimals: int = Field(default=18, ge=0)


class NetworkConfig(BaseModel):
    """Immutable parameters for one Rootstock network."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    display_name: str
    chain_id: int = Field(..., gt=0)
    rpc_url: str
    explorer_url: str
    native_currency: NativeCurrency

    @property
    def chain_id_hex(self) -> str:
        """Chain id as the ``0x``-prefixed hex string used by EIP-3085 requests."""
        return hex(self.chain_id)

    @property
    def env_prefix(self) -> str:
        """Prefix of this network's keys in the secrets file (``RSK_TESTNET``)."""
        return f"RSK_{self.identifier.upper()}"

    @property
    def hardhat_network(self) -> str:
        """Name of the matching network profile in ``hardhat.config.js``."""
        return f"rsk{self.identifier}"

    def address_url(self, address: str) -> str:
        """Explorer page for *address* on this network."""
        return f"{self.explorer_url.rstrip('/')}/address/{address}"


_NETWORKS: dict[str, NetworkConfig] = {
    "mainnet": NetworkConfig(
        identifier="mainnet",
        display_name="Rootstock Mainnet",
        chain_id=30,
        rpc_url="https://public-node.rsk.co",
        explorer_url="https://explorer.rsk.co",
        native_currency=NativeCurrency(name="Smart Bitcoin", symbol="RBTC", decimals=18),
    ),
    "testnet": NetworkConfig(
        identifier="testnet",
        display_name="Rootstock Testnet",
        chain_id=31,
        rpc_url="https://public-node.testnet.rsk.co",
        explorer_url="https://explorer.testnet.rsk.co",
        native_currency=NativeCurrency(
            name="Test Smart Bitcoin", symbol="tRBTC", decimals=18
        ),
    ),
}

ROOTSTOCK_NETWORKS = MappingProxyType(_NETWORKS)

DEFAULT_NETWORK = "testnet"


def lookup(identifier: str) -> NetworkConfig:
    """Return the ``NetworkConfig`` registered under *identifier*.

    Raises:
        UnknownNetwork: If *identifier* is not ``testnet`` or ``mainnet``.
    """
    try:
        return ROOTSTOCK_NETWORKS[identifier]
    except KeyError:
        raise UnknownNetwork(identifier, known=network_ids()) from None


def network_ids() -> list[str]:
    """Registered network identifiers, sorted."""
    return sorted(ROOTSTOCK_NETWORKS)
