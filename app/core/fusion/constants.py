"""Constants for Fusion+ order construction and signing."""

from typing import Dict, List

DOMAIN_NAME = "1inch Fusion+"
DOMAIN_VERSION = "1"

DEFAULT_PRESET = "fast"
DEFAULT_SECRETS_COUNT = 5

EMPTY_EXTENSION = "0x"

# Field order is part of the signed struct hash; do not reorder.
ORDER_TYPE: List[Dict[str, str]] = [
    {"name": "salt", "type": "uint256"},
    {"name": "maker", "type": "address"},
    {"name": "receiver", "type": "address"},
    {"name": "makerAsset", "type": "address"},
    {"name": "takerAsset", "type": "address"},
    {"name": "makingAmount", "type": "uint256"},
    {"name": "takingAmount", "type": "uint256"},
    {"name": "makerTraits", "type": "uint256"},
]

EIP712_DOMAIN_TYPE: List[Dict[str, str]] = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]

# Wire name → model attribute for the limit-order struct.
ORDER_FIELD_MAP: Dict[str, str] = {
    "salt": "salt",
    "maker": "maker",
    "receiver": "receiver",
    "makerAsset": "maker_asset",
    "takerAsset": "taker_asset",
    "makingAmount": "making_amount",
    "takingAmount": "taking_amount",
    "makerTraits": "maker_traits",
}

TOKEN_NOT_SUPPORTED_DESCRIPTION = "token not supported"
VALIDATE_TOKENS_SUGGESTION = (
    "Use the /api/validate-tokens endpoint to check token support before requesting quotes"
)

CHAIN_NAMES: Dict[int, str] = {
    1: "Ethereum",
    137: "Polygon",
    8453: "Base",
    42161: "Arbitrum",
}

COMMON_TOKENS: Dict[str, Dict[str, str]] = {
    "1": {
        "WETH": "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2",
        "USDC": "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48",
        "USDT": "0xdac17f958d2ee523a2206206994597c13d831ec7",
        "DAI": "0x6b175474e89094c44da98b954eedeac495271d0f",
    },
    "137": {
        "WMATIC": "0x0d500b1d8e8ef31e21c99d1db9a6444d3adf1270",
        "USDC": "0x2791bca1f2de4661ed88a30c99a7a9449aa84174",
        "USDT": "0xc2132d05d31c914a87c6611c10748aeb04b58e8f",
        "DAI": "0x8f3cf7ad23cd3cadbd9735aff958023239c6a063",
    },
    "8453": {
        "WETH": "0x4200000000000000000000000000000000000006",
        "USDC": "0x833589fcd6edb6e08f4c7c32d4f71b54bda02913",
        "DAI": "0x50c5725949a6f0c72e6c4a641f24049a917db0cb",
    },
    "42161": {
        "WETH": "0x82af49447d8a07e3bd95bd0d56f35241523fbab1",
        "USDC": "0xaf88d065e77c8cc2239327c5edb3a432268e5831",
        "USDT": "0xfd086bc7cd5c481dcc9c85ebe478a1c0b69fcbb9",
        "DAI": "0xda10009cbd5d07dd0cecc66161fc93d7c9000da1",
    },
}
