"""Quoting constants."""

# Token id used for the chain's native token; it sorts before every ERC20
NATIVE_TOKEN_ADDRESS = 0

__all__ = ["NATIVE_TOKEN_ADDRESS"]
