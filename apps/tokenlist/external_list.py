from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from .chain_registry import ChainId
from .diagnostics import Diagnostic, warning
from .entries import ChainToken

LOGGER = logging.getLogger('tokenlist.external_list')


@dataclass(frozen=True)
class ExternalTokenList:
    """Read-only snapshot of a third-party token list, keyed by lowercase address."""

    addresses: frozenset[str]

    @classmethod
    def from_payload(cls, payload: Any) -> ExternalTokenList:
        if not isinstance(payload, dict) or not isinstance(payload.get('tokens'), list):
            raise ValueError('external token list has no tokens array')
        return cls.from_tokens(payload['tokens'])

    @classmethod
    def from_tokens(cls, tokens: Iterable[Any]) -> ExternalTokenList:
        addresses = {
            str(token.get('address', '')).strip().lower()
            for token in tokens
            if isinstance(token, dict) and str(token.get('address', '')).strip()
        }
        return cls(addresses=frozenset(addresses))

    def contains(self, address: str) -> bool:
        return address.strip().lower() in self.addresses

    def __len__(self) -> int:
        return len(self.addresses)


ListFetcher = Callable[[], ExternalTokenList]


def http_get(url: str, timeout_seconds: int) -> Any:
    req = urllib.request.Request(url=url, method='GET', headers={'Accept': 'application/json'})
    with urllib.request.urlopen(req, timeout=timeout_seconds) as resp:
        return json.loads(resp.read().decode('utf-8'))


def fetch_external_list(url: str, timeout_seconds: int) -> ExternalTokenList:
    return ExternalTokenList.from_payload(http_get(url, timeout_seconds))


def load_external_list(fetch: ListFetcher) -> ExternalTokenList | None:
    """Run the fetcher once; ``None`` means the list is unavailable for this run."""
    try:
        snapshot = fetch()
    except (urllib.error.URLError, http.client.HTTPException, TimeoutError, OSError, ValueError) as exc:
        LOGGER.warning('fetch for external token list failed: %s', exc)
        return None
    LOGGER.info('external token list loaded with %s addresses', len(snapshot))
    return snapshot


class ExternalListChecker:
    def __init__(self, snapshot: ExternalTokenList | None, privileged_chain: str | ChainId, label: str) -> None:
        self.snapshot = snapshot
        self.privileged_chain = ChainId.parse(privileged_chain)
        self.label = label

    @property
    def available(self) -> bool:
        return self.snapshot is not None

    def run_diagnostics(self) -> list[Diagnostic]:
        if self.available:
            return []
        return [warning(f'fetch for {self.label} token list failed')]

    def applies_to(self, chain: str | ChainId) -> bool:
        return self.available and ChainId.parse(chain) is self.privileged_chain

    def check(self, folder: str, chain: str | ChainId, token: ChainToken) -> list[Diagnostic]:
        if not self.applies_to(chain):
            return []
        assert self.snapshot is not None
        if self.snapshot.contains(token.address):
            return []
        return [
            warning(
                f'{folder} on chain {ChainId.parse(chain).value} token {token.address} '
                f'not found on {self.label} token list'
            )
        ]
