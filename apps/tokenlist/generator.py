from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from .chain_registry import (
    L1_STANDARD_BRIDGE_ADDRESSES,
    L2_STANDARD_BRIDGE_ADDRESSES,
    ChainId,
    ChainRegistry,
)
from .config import Settings, get_settings
from .entries import DATA_FILE, discover_folders

TOKEN_LIST_VERSION = {'major': 1, 'minor': 0, 'patch': 0}
TOKEN_LIST_KEYWORDS = ['scaling', 'layer2', 'infrastructure']

Generator = Callable[[Path], dict[str, Any]]


def _logo_uri(base_url: str, datadir: Path, folder: str) -> str | None:
    for ext in ('png', 'svg'):
        if (datadir / folder / f'logo.{ext}').is_file():
            return f'{base_url}/{folder}/logo.{ext}'
    return None


def _bridge_extensions(chain: ChainId, layer: int, token: dict[str, Any]) -> dict[str, str]:
    overrides = token.get('overrides') if isinstance(token.get('overrides'), dict) else {}
    if layer == 2:
        bridge = overrides.get('bridge') or L2_STANDARD_BRIDGE_ADDRESSES.get(chain)
        return {f'{chain.value}BridgeAddress': bridge} if bridge else {}

    extensions: dict[str, str] = {}
    for l2_chain, bridge in L1_STANDARD_BRIDGE_ADDRESSES.get(chain, ()):
        extensions[f'{l2_chain.value}BridgeAddress'] = overrides.get('bridge') or bridge
    return extensions


def _token_info(
    folder: str,
    data: dict[str, Any],
    chain: ChainId,
    token: dict[str, Any],
    registry: ChainRegistry,
    datadir: Path,
    settings: Settings
) -> dict[str, Any]:
    network = registry.network(chain)
    overrides = token.get('overrides') if isinstance(token.get('overrides'), dict) else {}
    info: dict[str, Any] = {
        'chainId': network.id,
        'address': token.get('address'),
        'name': overrides.get('name', data.get('name')),
        'symbol': overrides.get('symbol', data.get('symbol')),
        'decimals': overrides.get('decimals', data.get('decimals'))
    }

    logo_uri = _logo_uri(settings.logo_base_url, datadir, folder)
    if logo_uri:
        info['logoURI'] = logo_uri

    if not data.get('nobridge'):
        extensions = _bridge_extensions(chain, network.layer, token)
        if extensions:
            info['extensions'] = extensions
    return info


def build_token_list(
    datadir: str | Path,
    registry: ChainRegistry,
    settings: Settings | None = None
) -> dict[str, Any]:
    """Compile every data folder into one list in the published token list format."""
    settings = settings or get_settings()
    root = Path(datadir)

    tokens: list[dict[str, Any]] = []
    for folder in discover_folders(root):
        data = json.loads((root / folder / DATA_FILE).read_text(encoding='utf-8'))
        for chain_key, token in data.get('tokens', {}).items():
            tokens.append(_token_info(folder, data, ChainId.parse(chain_key), token, registry, root, settings))

    tokens.sort(key=lambda item: (item['chainId'], str(item['symbol']).lower()))

    return {
        'name': settings.list_name,
        'logoURI': f'{settings.logo_base_url}/ETH/logo.svg',
        'keywords': list(TOKEN_LIST_KEYWORDS),
        'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        'tokens': tokens,
        'version': dict(TOKEN_LIST_VERSION)
    }


def token_list_generator(registry: ChainRegistry, settings: Settings | None = None) -> Generator:
    def generate(datadir: Path) -> dict[str, Any]:
        return build_token_list(datadir, registry, settings)

    return generate
