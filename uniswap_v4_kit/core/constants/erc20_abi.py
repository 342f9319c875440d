# ERC20 decimals read; symbol() and name() are fetched as raw eth_call data
# because some tokens return bytes32 instead of string.

ERC20_ABI = [
    {
        "constant": True,
        "inputs": [],
        "name": "decimals",
        "outputs": [{"name": "", "type": "uint8"}],
        "stateMutability": "view",
        "type": "function",
    },
]
