from __future__ import annotations

from eth_abi import decode as abi_decode

from uniswap_v4_kit.core.constants import MSG_SENDER, OPEN_DELTA
from uniswap_v4_kit.core.utils.planner import (
    PERMIT_SINGLE_ABI_TYPE,
    Actions,
    Commands,
    RoutePlanner,
    V4Planner,
)
from uniswap_v4_kit.core.utils.uniswap_v4 import POOL_KEY_ABI_TYPE, PoolKey
from uniswap_v4_kit.testing.calldata import decode_actions, decode_call

USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
OWNER = "0xaAaAaAaaAaAaAaaAaAAAAAAAAaaaAaAaAaaAaaAa"

KEY = PoolKey.build(currency_a=USDC, currency_b=WETH, fee=3000, tick_spacing=60)


def _swap_planner() -> V4Planner:
    return (
        V4Planner()
        .add_swap_exact_in_single(
            pool_key=KEY,
            zero_for_one=True,
            amount_in=1_000,
            amount_out_minimum=990,
        )
        .add_settle_all(USDC, 1_000)
        .add_take(WETH, OWNER, OPEN_DELTA)
    )


def test_action_codes():
    assert Actions.DECREASE_LIQUIDITY == 0x01
    assert Actions.MINT_POSITION == 0x02
    assert Actions.SWAP_EXACT_IN_SINGLE == 0x06
    assert Actions.SETTLE_PAIR == 0x0D
    assert Actions.TAKE_PAIR == 0x11
    assert Actions.SWEEP == 0x14
    assert Commands.PERMIT2_PERMIT == 0x0A
    assert Commands.V4_SWAP == 0x10


def test_v4_planner_keeps_opcodes_and_params_aligned():
    planner = _swap_planner()
    assert len(planner) == 3
    assert len(planner.opcodes) == len(planner.params) == 3

    actions, params = decode_actions(planner.finalize())
    assert actions == bytes([0x06, 0x0C, 0x0E])
    assert len(params) == 3


def test_swap_exact_in_single_params():
    _, params = decode_actions(_swap_planner().finalize())
    ((key, zero_for_one, amount_in, amount_out_min, hook_data),) = abi_decode(
        [f"({POOL_KEY_ABI_TYPE},bool,uint128,uint128,bytes)"], params[0]
    )
    assert key[0].lower() == USDC.lower()
    assert key[2:4] == (3000, 60)
    assert zero_for_one is True
    assert (amount_in, amount_out_min) == (1_000, 990)
    assert hook_data == b""


def test_liquidity_actions():
    planner = (
        V4Planner()
        .add_mint(
            pool_key=KEY,
            tick_lower=-60,
            tick_upper=60,
            liquidity=10**18,
            amount0_max=5,
            amount1_max=6,
            owner=OWNER,
        )
        .add_settle_pair(USDC, WETH)
        .add_sweep(WETH, MSG_SENDER)
    )
    actions, params = decode_actions(planner.finalize())
    assert actions == bytes([0x02, 0x0D, 0x14])
    mint = abi_decode(
        [POOL_KEY_ABI_TYPE, "int24", "int24", "uint256", "uint128", "uint128", "address", "bytes"],
        params[0],
    )
    assert mint[1:6] == (-60, 60, 10**18, 5, 6)
    assert mint[6].lower() == OWNER.lower()


def test_route_planner_execute():
    route = RoutePlanner()
    permit = ((USDC, 2**160 - 1, 0, 3), OWNER, 1_700_003_600)
    route.add_permit2_permit(permit, b"\x01" * 65)
    route.add_v4_swap(_swap_planner())
    assert len(route) == 2

    commands, inputs, deadline = decode_call(
        route.encode_execute(1_700_000_300),
        "execute(bytes,bytes[],uint256)",
        ["bytes", "bytes[]", "uint256"],
    )
    assert commands == bytes([0x0A, 0x10])
    assert len(inputs) == 2
    assert deadline == 1_700_000_300

    decoded_permit, signature = abi_decode([PERMIT_SINGLE_ABI_TYPE, "bytes"], inputs[0])
    assert decoded_permit[0][3] == 3
    assert decoded_permit[2] == 1_700_003_600
    assert signature == b"\x01" * 65

    actions, _ = decode_actions(inputs[1])
    assert actions == bytes([0x06, 0x0C, 0x0E])
