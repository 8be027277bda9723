from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

DEFAULT_EXTERNAL_LIST_URL = 'https://tokens.coingecko.com/uniswap/all.json'
DEFAULT_LOGO_BASE_URL = 'https://raw.githubusercontent.com/SpecularL2/specular-tokenlist/main/data'


def _env_int(name: str, default: int, minimum: int = 0) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return max(minimum, parsed)


@dataclass(frozen=True)
class Settings:
    data_dir: str
    privileged_chain: str
    native_asset: str
    external_list_url: str
    external_list_label: str
    external_list_timeout_seconds: int
    rpc_timeout_seconds: int
    max_workers: int
    list_name: str
    logo_base_url: str
    log_level: str


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(
        data_dir=os.getenv('TOKENLIST_DATA_DIR', 'data'),
        privileged_chain=os.getenv('TOKENLIST_PRIVILEGED_CHAIN', 'ethereum').strip().lower(),
        native_asset=os.getenv('TOKENLIST_NATIVE_ASSET', 'ETH').strip(),
        external_list_url=os.getenv('TOKENLIST_EXTERNAL_LIST_URL', DEFAULT_EXTERNAL_LIST_URL),
        external_list_label=os.getenv('TOKENLIST_EXTERNAL_LIST_LABEL', 'CoinGecko'),
        external_list_timeout_seconds=_env_int('TOKENLIST_EXTERNAL_LIST_TIMEOUT', 30, minimum=1),
        rpc_timeout_seconds=_env_int('TOKENLIST_RPC_TIMEOUT', 15, minimum=1),
        max_workers=_env_int('TOKENLIST_MAX_WORKERS', 8, minimum=1),
        list_name=os.getenv('TOKENLIST_NAME', 'Specular'),
        logo_base_url=os.getenv('TOKENLIST_LOGO_BASE_URL', DEFAULT_LOGO_BASE_URL).rstrip('/'),
        log_level=os.getenv('LOG_LEVEL', 'INFO').upper()
    )
