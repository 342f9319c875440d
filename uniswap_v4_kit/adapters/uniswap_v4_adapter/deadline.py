from __future__ import annotations

from uniswap_v4_kit.core.constants import DEFAULT_DEADLINE_SECONDS
from uniswap_v4_kit.core.registry import Instance


async def latest_block_timestamp(instance: Instance) -> int:
    block = await instance.web3.eth.get_block("latest")
    return int(block["timestamp"])


async def get_default_deadline(
    instance: Instance, *, offset_seconds: int = DEFAULT_DEADLINE_SECONDS
) -> int:
    """Latest block timestamp plus `offset_seconds`."""
    return await latest_block_timestamp(instance) + int(offset_seconds)
