"""Permit2 AllowanceTransfer payloads for the PositionManager and UniversalRouter.

The preparers read the current (amount, expiration, nonce) for each token,
build the EIP-712 typed data the owner must sign, and hand back a pure
`with_signature` to pair the unsigned permit with the signature.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from eth_utils import to_checksum_address
from loguru import logger

from uniswap_v4_kit.adapters.uniswap_v4_adapter.deadline import latest_block_timestamp
from uniswap_v4_kit.adapters.uniswap_v4_adapter.models import (
    Permit2BatchData,
    Permit2Data,
    PermitBatch,
    PermitDetails,
    PermitSingle,
    TypedData,
)
from uniswap_v4_kit.core.constants import MAX_UINT160, PERMIT2_SIG_DEADLINE_SECONDS
from uniswap_v4_kit.core.constants.contracts import ContractName
from uniswap_v4_kit.core.errors import ValidationError
from uniswap_v4_kit.core.registry import Instance
from uniswap_v4_kit.core.utils.uniswap_v4 import is_native_currency
from uniswap_v4_kit.core.utils.web3_batch import batch_contract_reads

PERMIT2_DOMAIN_NAME = "Permit2"

PERMIT_DETAILS_TYPE = [
    {"name": "token", "type": "address"},
    {"name": "amount", "type": "uint160"},
    {"name": "expiration", "type": "uint48"},
    {"name": "nonce", "type": "uint48"},
]

PERMIT_SINGLE_TYPES = {
    "PermitSingle": [
        {"name": "details", "type": "PermitDetails"},
        {"name": "spender", "type": "address"},
        {"name": "sigDeadline", "type": "uint256"},
    ],
    "PermitDetails": PERMIT_DETAILS_TYPE,
}

PERMIT_BATCH_TYPES = {
    "PermitBatch": [
        {"name": "details", "type": "PermitDetails[]"},
        {"name": "spender", "type": "address"},
        {"name": "sigDeadline", "type": "uint256"},
    ],
    "PermitDetails": PERMIT_DETAILS_TYPE,
}


def permit2_domain(chain_id: int, permit2_address: str) -> dict[str, Any]:
    return {
        "name": PERMIT2_DOMAIN_NAME,
        "chainId": int(chain_id),
        "verifyingContract": to_checksum_address(permit2_address),
    }


def _details_from_allowance(token: str, allowance: Any) -> PermitDetails:
    # allowance() returns (amount, expiration, nonce); only the last two are reused
    _amount, expiration, nonce = allowance
    return PermitDetails(
        token=token,
        amount=MAX_UINT160,
        expiration=int(expiration),
        nonce=int(nonce),
    )


async def _resolve_sig_deadline(instance: Instance, sig_deadline: int | None) -> int:
    if sig_deadline:
        return int(sig_deadline)
    return await latest_block_timestamp(instance) + PERMIT2_SIG_DEADLINE_SECONDS


async def prepare_permit2_data(
    token: str,
    spender: str,
    owner: str,
    instance: Instance,
    *,
    sig_deadline: int | None = None,
) -> Permit2Data:
    if is_native_currency(token):
        raise ValidationError("Native tokens are not supported for permit2")

    token = to_checksum_address(token)
    spender = to_checksum_address(spender)
    owner = to_checksum_address(owner)

    permit2 = instance.contract(ContractName.PERMIT2)
    allowance = await permit2.functions.allowance(owner, token, spender).call(
        block_identifier="latest"
    )
    deadline = await _resolve_sig_deadline(instance, sig_deadline)

    permit = PermitSingle(
        details=_details_from_allowance(token, allowance),
        spender=spender,
        sig_deadline=deadline,
    )
    to_sign = TypedData(
        domain=permit2_domain(
            instance.chain_id, instance.get_contract_address(ContractName.PERMIT2)
        ),
        types=PERMIT_SINGLE_TYPES,
        primary_type="PermitSingle",
        message=permit.to_message(),
    )
    logger.debug(
        f"Prepared permit2 for {token} spender={spender} nonce={permit.details.nonce}"
    )
    return Permit2Data(owner=owner, permit=permit, to_sign=to_sign)


async def prepare_permit2_batch_data(
    tokens: Sequence[str],
    spender: str,
    owner: str,
    instance: Instance,
    *,
    sig_deadline: int | None = None,
) -> Permit2BatchData:
    """Batch variant; native-currency entries are dropped from `tokens`.

    An all-native input yields an empty `details` tuple.
    """
    spender = to_checksum_address(spender)
    owner = to_checksum_address(owner)
    erc20_tokens = [to_checksum_address(t) for t in tokens if not is_native_currency(t)]

    permit2 = instance.contract(ContractName.PERMIT2)

    allowances = await batch_contract_reads(
        instance.web3,
        *(permit2.functions.allowance(owner, token, spender) for token in erc20_tokens),
    )
    deadline = await _resolve_sig_deadline(instance, sig_deadline)

    permit_batch = PermitBatch(
        details=tuple(
            _details_from_allowance(token, allowance)
            for token, allowance in zip(erc20_tokens, allowances, strict=True)
        ),
        spender=spender,
        sig_deadline=deadline,
    )
    to_sign = TypedData(
        domain=permit2_domain(
            instance.chain_id, instance.get_contract_address(ContractName.PERMIT2)
        ),
        types=PERMIT_BATCH_TYPES,
        primary_type="PermitBatch",
        message=permit_batch.to_message(),
    )
    if not permit_batch.details:
        logger.warning("Permit2 batch has no ERC20 tokens to authorize")
    return Permit2BatchData(owner=owner, permit_batch=permit_batch, to_sign=to_sign)
