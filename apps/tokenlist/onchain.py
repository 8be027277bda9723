from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Generic, Literal, Protocol, TypeVar

from web3 import Web3

LOGGER = logging.getLogger('tokenlist.onchain')

TokenField = Literal['decimals', 'symbol', 'name']

# Order in which declared fields are verified against the chain.
VERIFIED_FIELDS: tuple[TokenField, ...] = ('decimals', 'symbol', 'name')

ERC20_META_ABI = [
    {
        'inputs': [],
        'name': 'name',
        'outputs': [{'internalType': 'string', 'name': '', 'type': 'string'}],
        'stateMutability': 'view',
        'type': 'function'
    },
    {
        'inputs': [],
        'name': 'symbol',
        'outputs': [{'internalType': 'string', 'name': '', 'type': 'string'}],
        'stateMutability': 'view',
        'type': 'function'
    },
    {
        'inputs': [],
        'name': 'decimals',
        'outputs': [{'internalType': 'uint8', 'name': '', 'type': 'uint8'}],
        'stateMutability': 'view',
        'type': 'function'
    }
]

T = TypeVar('T')


@dataclass(frozen=True)
class ChainRead(Generic[T]):
    """Outcome of a single chain query: either a value or the reason it failed."""

    value: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> ChainRead[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> ChainRead[T]:
        return cls(error=error or 'unknown error')


class TokenReader(Protocol):
    def get_code(self, address: str) -> ChainRead[bytes]:
        ...

    def read(self, address: str, field: TokenField) -> ChainRead[Any]:
        ...


class Web3TokenReader:
    """Blocking ERC-20 metadata reader bound to one JSON-RPC endpoint.

    Every call is bounded by the HTTP provider timeout, so a stalled node costs
    at most ``timeout_seconds`` per query instead of hanging the run.
    """

    def __init__(self, rpc_url: str, chain_id: int, timeout_seconds: int) -> None:
        self.rpc_url = rpc_url
        self.chain_id = chain_id
        self.web3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={'timeout': timeout_seconds}))

    def get_code(self, address: str) -> ChainRead[bytes]:
        try:
            code = self.web3.eth.get_code(Web3.to_checksum_address(address))
        except Exception as exc:  # noqa: BLE001
            LOGGER.warning('get_code failed chain_id=%s address=%s: %s', self.chain_id, address, exc)
            return ChainRead.failure(str(exc))
        return ChainRead.success(bytes(code))

    def read(self, address: str, field: TokenField) -> ChainRead[Any]:
        if field not in VERIFIED_FIELDS:
            raise ValueError(f'unsupported token field: {field}')

        try:
            token = self.web3.eth.contract(address=Web3.to_checksum_address(address), abi=ERC20_META_ABI)
            value = getattr(token.functions, field)().call()
        except Exception as exc:  # noqa: BLE001
            LOGGER.warning(
                'eth_call %s failed chain_id=%s address=%s: %s',
                field,
                self.chain_id,
                address,
                exc
            )
            return ChainRead.failure(str(exc))

        if field == 'decimals':
            return ChainRead.success(int(value))
        return ChainRead.success(str(value))
