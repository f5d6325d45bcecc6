from __future__ import annotations

from enum import Enum
from typing import Tuple


class Network(str, Enum):
    TESTNET = "testnet"
    DEVNET = "devnet"
    MAINNET_BETA = "mainnet-beta"

    @property
    def moniker(self) -> str:
        """`solana` CLI url moniker for this cluster."""
        return _MONIKERS[self]

    @property
    def filename(self) -> str:
        return f"{self.value}.json"


_MONIKERS = {
    Network.TESTNET: "-ut",
    Network.DEVNET: "-ud",
    Network.MAINNET_BETA: "-um",
}

# Highest first. Features roll out testnet -> devnet -> mainnet-beta.
PRIORITY: Tuple[Network, ...] = (Network.MAINNET_BETA, Network.DEVNET, Network.TESTNET)
