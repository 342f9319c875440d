from __future__ import annotations

from abc import ABC
from typing import Any

from loguru import logger

from uniswap_v4_kit.core.constants.contracts import ContractName
from uniswap_v4_kit.core.errors import ConfigurationError
from uniswap_v4_kit.core.registry import (
    Instance,
    InstanceRegistry,
    default_registry,
    get_contract_abi,
)


class BaseAdapter(ABC):
    """Adapter bound to a single chain `Instance`.

    Pass `instance` directly, or a config with `chain_id` (plus optional
    `rpc_url` and `contracts`) to have one configured on `registry`.
    """

    adapter_type: str | None = None

    def __init__(
        self,
        name: str,
        config: dict[str, Any] | None = None,
        *,
        registry: InstanceRegistry | None = None,
        instance: Instance | None = None,
    ):
        self.name = name
        self.config = config or {}
        self.registry = registry or default_registry
        self.logger = logger.bind(adapter=self.__class__.__name__)
        self.instance = instance or self._configure_instance()

    def _configure_instance(self) -> Instance:
        chain_id = self.config.get("chain_id")
        if chain_id is None:
            raise ConfigurationError("chain_id is required in adapter config")
        return self.registry.configure(
            int(chain_id),
            self.config.get("rpc_url"),
            self.config.get("contracts"),
        )

    @property
    def chain_id(self) -> int:
        return self.instance.chain_id

    def get_contract_address(self, name: ContractName | str) -> str:
        return self.instance.get_contract_address(name)

    def get_contract_abi(self, name: ContractName | str) -> list[dict]:
        return get_contract_abi(name)
