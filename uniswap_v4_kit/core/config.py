"""Process-wide kit configuration.

`config.json` carries two optional per-chain maps, keyed by chain id (string
or int):

    {
      "rpc_urls": {"8453": "https://mainnet.base.org"},
      "contracts": {"10": {"pool_manager": "0x...", "quoter": "0x..."}}
    }

The file is looked up from `UNISWAP_V4_KIT_CONFIG_PATH` (or
`UNISWAP_V4_KIT_CONFIG`), then `config.json` at the project root.
"""

import json
import os
from pathlib import Path
from typing import Any

from loguru import logger

from uniswap_v4_kit.core.errors import ConfigurationError

_CONFIG_ENV_KEYS = ("UNISWAP_V4_KIT_CONFIG_PATH", "UNISWAP_V4_KIT_CONFIG")
_DEFAULT_CONFIG_FILENAME = "config.json"
_CHAIN_MAP_KEYS = ("rpc_urls", "contracts")


def _project_root() -> Path | None:
    for start in (Path.cwd(), Path(__file__).parent):
        for parent in [start.resolve(), *start.resolve().parents]:
            if (parent / "pyproject.toml").exists():
                return parent
    return None


def _env_config_path() -> str:
    for key in _CONFIG_ENV_KEYS:
        value = os.getenv(key, "").strip()
        if value:
            return value
    return ""


def resolve_config_path(path: str | Path | None = None) -> Path:
    """Explicit path, then the env override, then `<project root>/config.json`.

    A relative env path is taken relative to the project root.
    """
    if path is not None:
        return Path(path).expanduser()

    root = _project_root()
    env_path = _env_config_path()
    if env_path:
        p = Path(env_path).expanduser()
        if p.is_absolute() or root is None:
            return p
        return root / p

    return (root / _DEFAULT_CONFIG_FILENAME) if root else Path(_DEFAULT_CONFIG_FILENAME)


def validate_config(config: Any) -> dict[str, Any]:
    if not isinstance(config, dict):
        raise ConfigurationError(
            f"Config must be a JSON object, got {type(config).__name__}"
        )
    for key in _CHAIN_MAP_KEYS:
        section = config.get(key)
        if section is not None and not isinstance(section, dict):
            raise ConfigurationError(f"Config '{key}' must map chain ids to values")
    return config


def load_config_json(
    path: str | Path | None = None, *, require_exists: bool = False
) -> dict[str, Any]:
    cfg_path = resolve_config_path(path)
    if not cfg_path.exists():
        if require_exists:
            raise ConfigurationError(f"Config file not found: {cfg_path}")
        return {}
    try:
        raw = json.loads(cfg_path.read_text())
    except (OSError, ValueError) as exc:
        raise ConfigurationError(f"Invalid config file {cfg_path}: {exc}") from exc
    return validate_config(raw)


def _load_default_config() -> dict[str, Any]:
    try:
        return load_config_json()
    except ConfigurationError as exc:
        logger.warning(f"Ignoring unreadable default config: {exc}")
        return {}


CONFIG: dict[str, Any] = _load_default_config()


def set_config(config: dict[str, Any]) -> None:
    """Replace the global CONFIG dict in-place.

    Modules that imported CONFIG directly see the new contents.
    """
    validate_config(config)
    CONFIG.clear()
    CONFIG.update(config)


def load_config(
    path: str | Path | None = None, *, require_exists: bool = False
) -> None:
    set_config(load_config_json(path, require_exists=require_exists))


def _lookup_chain_key(mapping: dict[Any, Any], chain_id: int) -> Any:
    value = mapping.get(str(chain_id))
    if value is None:
        value = mapping.get(chain_id)  # allow int keys
    return value


def set_rpc_urls(rpc_urls: dict[str, Any]) -> None:
    CONFIG["rpc_urls"] = rpc_urls


def get_rpc_urls() -> dict[str, Any]:
    return CONFIG.get("rpc_urls", {})


def get_rpc_url(chain_id: int) -> str | None:
    """First configured RPC for `chain_id`; a chain may list several."""
    rpcs = _lookup_chain_key(get_rpc_urls(), chain_id)
    if not rpcs:
        return None
    if isinstance(rpcs, str):
        return rpcs
    return str(rpcs[0])


def get_contract_overrides(chain_id: int) -> dict[str, str] | None:
    overrides = _lookup_chain_key(CONFIG.get("contracts", {}), chain_id)
    if not overrides:
        return None
    return dict(overrides)
