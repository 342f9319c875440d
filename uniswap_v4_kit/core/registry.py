from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from loguru import logger
from web3 import AsyncWeb3

from uniswap_v4_kit.core.config import get_contract_overrides
from uniswap_v4_kit.core.constants.chains import CHAINS, ChainInfo
from uniswap_v4_kit.core.constants.contracts import (
    UNISWAP_V4_DEPLOYMENTS,
    ChainContracts,
    ContractName,
)
from uniswap_v4_kit.core.constants.uniswap_v4_abi import CONTRACT_ABIS
from uniswap_v4_kit.core.errors import ConfigurationError
from uniswap_v4_kit.core.utils.web3 import get_web3, resolve_rpc_url


def get_chain_by_id(chain_id: int) -> ChainInfo:
    chain = CHAINS.get(int(chain_id))
    if chain is None:
        raise ConfigurationError(f"Chain with id {chain_id} not supported")
    return chain


def get_contract_abi(name: ContractName | str) -> list[dict]:
    return CONTRACT_ABIS[ContractName(name)]


@dataclass(frozen=True)
class Instance:
    """Read client, chain metadata and contract set for one chain."""

    web3: AsyncWeb3
    chain: ChainInfo
    contracts: ChainContracts

    @property
    def chain_id(self) -> int:
        return self.chain.chain_id

    def get_contract_address(self, name: ContractName | str) -> str:
        address = self.contracts.address_of(name)
        if not address:
            raise ConfigurationError(
                f"Contract address for {name} not found for chain {self.chain_id}"
            )
        return address

    def contract(self, name: ContractName | str):
        return self.web3.eth.contract(
            address=self.get_contract_address(name),
            abi=get_contract_abi(name),
        )


def _resolve_contracts(
    chain_id: int, contracts: ChainContracts | dict[str, Any] | None
) -> ChainContracts:
    if isinstance(contracts, ChainContracts):
        return contracts
    if contracts:
        return ChainContracts.from_mapping(contracts)
    overrides = get_contract_overrides(chain_id)
    if overrides:
        return ChainContracts.from_mapping(overrides)
    deployment = UNISWAP_V4_DEPLOYMENTS.get(chain_id)
    if deployment is None:
        raise ConfigurationError(
            f"No Uniswap v4 contracts configured for chain {chain_id}"
        )
    return deployment


class InstanceRegistry:
    """Keyed store of configured instances, one per chain id.

    First writer wins: configuring a chain id twice returns the existing
    instance and ignores the new arguments.
    """

    def __init__(self) -> None:
        self._instances: dict[int, Instance] = {}

    def configure(
        self,
        chain_id: int,
        rpc_url: str | None = None,
        contracts: ChainContracts | dict[str, Any] | None = None,
        *,
        web3: AsyncWeb3 | None = None,
    ) -> Instance:
        chain_id = int(chain_id)
        existing = self._instances.get(chain_id)
        if existing is not None:
            logger.warning(
                f"Instance for chain {chain_id} already configured; reusing existing instance"
            )
            return existing

        chain = get_chain_by_id(chain_id)
        resolved_contracts = _resolve_contracts(chain_id, contracts)
        if web3 is None:
            web3 = get_web3(resolve_rpc_url(chain_id, rpc_url), chain_id)

        instance = Instance(web3=web3, chain=chain, contracts=resolved_contracts)
        self._instances[chain_id] = instance
        logger.debug(f"Configured Uniswap v4 instance for chain {chain_id}")
        return instance

    def lookup(self, chain_id: int | None = None) -> Instance:
        if chain_id is None:
            if len(self._instances) == 1:
                return next(iter(self._instances.values()))
            if not self._instances:
                raise ConfigurationError("No instance found: none initialized")
            raise ConfigurationError(
                "Multiple instances found. Please specify a chain ID. "
                f"Available chains: {', '.join(str(c) for c in self._instances)}"
            )

        instance = self._instances.get(int(chain_id))
        if instance is None:
            raise ConfigurationError(
                f"No instance found for chain ID {chain_id}: not initialized. "
                "Call configure() first."
            )
        return instance

    def remove(self, chain_id: int) -> None:
        self._instances.pop(int(chain_id), None)

    def reset(self) -> None:
        self._instances.clear()

    def list_chain_ids(self) -> list[int]:
        return list(self._instances)

    def __contains__(self, chain_id: object) -> bool:
        return chain_id in self._instances

    def __len__(self) -> int:
        return len(self._instances)


default_registry = InstanceRegistry()
