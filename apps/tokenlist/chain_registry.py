from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Callable, Iterator, Mapping

from .config import Settings, get_settings
from .onchain import TokenReader, Web3TokenReader

LOGGER = logging.getLogger('tokenlist.chain_registry')


class TokenListError(Exception):
    pass


class UnknownChainError(TokenListError):
    """A chain key is not part of the supported set.

    This signals drift between the entry schema and the registry, so it aborts
    the run instead of becoming a per-token diagnostic.
    """

    def __init__(self, chain: str) -> None:
        super().__init__(f'unknown chain: {chain}')
        self.chain = chain


class ChainId(str, Enum):
    ETHEREUM = 'ethereum'
    SEPOLIA = 'sepolia'
    SPECULAR = 'specular'

    @classmethod
    def parse(cls, key: str | ChainId) -> ChainId:
        if isinstance(key, ChainId):
            return key
        try:
            return cls(str(key))
        except ValueError as exc:
            raise UnknownChainError(str(key)) from exc


@dataclass(frozen=True)
class ChainSpec:
    chain: ChainId
    chain_id: int
    name: str
    layer: int
    rpc_env_key: str
    default_rpc_url: str


CHAIN_SPECS: tuple[ChainSpec, ...] = (
    ChainSpec(
        chain=ChainId.ETHEREUM,
        chain_id=1,
        name='Ethereum',
        layer=1,
        rpc_env_key='ETHEREUM_RPC_URL',
        default_rpc_url='https://ethereum-rpc.publicnode.com'
    ),
    ChainSpec(
        chain=ChainId.SEPOLIA,
        chain_id=11155111,
        name='Sepolia',
        layer=1,
        rpc_env_key='SEPOLIA_RPC_URL',
        default_rpc_url='https://ethereum-sepolia-rpc.publicnode.com'
    ),
    ChainSpec(
        chain=ChainId.SPECULAR,
        chain_id=93481,
        name='Specular',
        layer=2,
        rpc_env_key='SPECULAR_RPC_URL',
        default_rpc_url='https://devnet.specular.network/'
    ),
)

L2_STANDARD_BRIDGE_ADDRESSES: Mapping[ChainId, str] = MappingProxyType(
    {
        ChainId.SPECULAR: '0x4200000000000000000000000000000000000010'
    }
)

L2_TO_L1_PAIR: Mapping[ChainId, ChainId] = MappingProxyType(
    {
        ChainId.SPECULAR: ChainId.ETHEREUM
    }
)

# (L2 chain, L1 standard bridge address) pairs per L1 chain.
L1_STANDARD_BRIDGE_ADDRESSES: Mapping[ChainId, tuple[tuple[ChainId, str], ...]] = MappingProxyType(
    {
        ChainId.ETHEREUM: ((ChainId.SPECULAR, '0x99C9fc46f92E8a1c0deC1b1747d010903E884bE1'),),
        ChainId.SEPOLIA: ()
    }
)


@dataclass(frozen=True)
class Network:
    chain: ChainId
    id: int
    name: str
    rpc_url: str
    layer: int
    client: TokenReader


ReaderFactory = Callable[[ChainSpec, str, Settings], TokenReader]


def web3_reader_factory(spec: ChainSpec, rpc_url: str, settings: Settings) -> TokenReader:
    return Web3TokenReader(rpc_url, spec.chain_id, settings.rpc_timeout_seconds)


class ChainRegistry:
    """Immutable chain -> network mapping, built once per process."""

    def __init__(self, networks: Mapping[ChainId, Network]) -> None:
        self._networks: Mapping[ChainId, Network] = MappingProxyType(dict(networks))

    def network(self, chain: str | ChainId) -> Network:
        chain_id = ChainId.parse(chain)
        network = self._networks.get(chain_id)
        if network is None:
            raise UnknownChainError(chain_id.value)
        return network

    def __contains__(self, chain: object) -> bool:
        try:
            return ChainId.parse(chain) in self._networks  # type: ignore[arg-type]
        except UnknownChainError:
            return False

    def __iter__(self) -> Iterator[ChainId]:
        return iter(chain for chain in ChainId if chain in self._networks)


def _resolve_rpc_url(spec: ChainSpec) -> str:
    return os.getenv(spec.rpc_env_key, '').strip() or spec.default_rpc_url


def build_chain_registry(
    settings: Settings | None = None,
    reader_factory: ReaderFactory = web3_reader_factory
) -> ChainRegistry:
    settings = settings or get_settings()
    # Fail fast when the privileged chain is misconfigured.
    ChainId.parse(settings.privileged_chain)

    networks: dict[ChainId, Network] = {}
    for spec in CHAIN_SPECS:
        rpc_url = _resolve_rpc_url(spec)
        networks[spec.chain] = Network(
            chain=spec.chain,
            id=spec.chain_id,
            name=spec.name,
            rpc_url=rpc_url,
            layer=spec.layer,
            client=reader_factory(spec, rpc_url, settings)
        )
        LOGGER.debug('registered chain=%s chain_id=%s rpc_url=%s', spec.chain.value, spec.chain_id, rpc_url)
    return ChainRegistry(networks)
