"""
Chain normalization helpers.
"""

from typing import Dict, Optional


DEFAULT_CHAINS = ("ethereum", "bsc", "arbitrum", "base", "solana")

CHAIN_ALIASES: Dict[str, str] = {
    "ETH": "ethereum",
    "ERC20": "ethereum",
    "BINANCE SMART CHAIN": "bsc",
    "BNB": "bsc",
    "BEP20": "bsc",
    "SOL": "solana",
    "ARB": "arbitrum",
    "ARBITRUM ONE": "arbitrum",
}

# Bitquery V2 `evm_network` 인자값
BITQUERY_NETWORKS: Dict[str, str] = {
    "ethereum": "eth",
    "bsc": "bsc",
    "arbitrum": "arbitrum",
    "base": "base",
}


def normalize_chain(chain: str) -> str:
    if not chain:
        return ""
    s = chain.strip()
    return CHAIN_ALIASES.get(s.upper(), s.lower())


def bitquery_network(chain: str) -> Optional[str]:
    return BITQUERY_NETWORKS.get(normalize_chain(chain))


def display_chain(chain: str) -> str:
    """"ethereum" → "Ethereum"."""
    return chain[:1].upper() + chain[1:]
