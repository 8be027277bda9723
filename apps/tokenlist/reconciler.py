"""Reconciles declared token metadata with what each chain reports.

For every (entry, chain) pair the reconciler checks that the contract exists,
then verifies decimals, symbol and name. A field with a declared override is
not queried and produces a review warning instead. A symbol or name mismatch
is accepted silently when the entry's expected mismatch for that field equals
the declared value. Decimals have no such escape.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Sequence

from .chain_registry import ChainId, ChainRegistry, Network
from .diagnostics import Diagnostic, error, warning
from .entries import ChainToken, Entry, ExpectedMismatches, LoadResult
from .external_list import ExternalListChecker
from .onchain import VERIFIED_FIELDS, TokenField

LOGGER = logging.getLogger('tokenlist.reconciler')


@dataclass(frozen=True)
class TokenTask:
    folder: str
    entry: Entry
    expected_mismatches: ExpectedMismatches
    chain: ChainId
    token: ChainToken


class Reconciler:
    def __init__(
        self,
        registry: ChainRegistry,
        checker: ExternalListChecker,
        native_asset: str,
        max_workers: int = 1
    ) -> None:
        self.registry = registry
        self.checker = checker
        self.native_asset = native_asset
        self.max_workers = max(1, max_workers)

    def is_exempt(self, folder: str, entry: Entry) -> bool:
        return folder == self.native_asset or entry.nonstandard

    def tasks_for(self, loaded: LoadResult) -> list[TokenTask]:
        if loaded.entry is None or self.is_exempt(loaded.folder, loaded.entry):
            return []
        return [
            TokenTask(
                folder=loaded.folder,
                entry=loaded.entry,
                expected_mismatches=loaded.expected_mismatches,
                chain=ChainId.parse(chain),
                token=token
            )
            for chain, token in loaded.entry.tokens.items()
        ]

    def reconcile_entry(self, loaded: LoadResult) -> list[Diagnostic]:
        diagnostics: list[Diagnostic] = []
        for task in self.tasks_for(loaded):
            diagnostics.extend(self.reconcile_token(task))
        return diagnostics

    def reconcile_all(self, entries: Sequence[LoadResult]) -> list[list[Diagnostic]]:
        """Chain diagnostics per entry, in the order the entries were given.

        Tasks fan out over a thread pool, but results are gathered in
        submission order so the report does not depend on completion order.
        """
        plans = [self.tasks_for(loaded) for loaded in entries]
        if self.max_workers <= 1:
            return [[item for task in plan for item in self.reconcile_token(task)] for plan in plans]

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = [[pool.submit(self.reconcile_token, task) for task in plan] for plan in plans]
            return [[item for future in group for item in future.result()] for group in futures]

    def reconcile_token(self, task: TokenTask) -> list[Diagnostic]:
        network = self.registry.network(task.chain)
        prefix = f'{task.folder} on chain {task.chain.value} token {task.token.address}'
        diagnostics: list[Diagnostic] = []

        code = network.client.get_code(task.token.address)
        if not code.ok:
            diagnostics.append(error(f'{prefix} failed to get code'))
        elif not code.value:
            diagnostics.append(error(f'{prefix} does not exist'))

        for field in VERIFIED_FIELDS:
            diagnostics.extend(self._verify_field(network, task, field, prefix))

        diagnostics.extend(self.checker.check(task.folder, task.chain, task.token))
        return diagnostics

    def _verify_field(self, network: Network, task: TokenTask, field: TokenField, prefix: str) -> list[Diagnostic]:
        if getattr(task.token.overrides, field) is not None:
            return [warning(f'{prefix} has overridden {field}')]

        result = network.client.read(task.token.address, field)
        if not result.ok:
            return [error(f'{prefix} failed to get {field}')]

        declared: Any = getattr(task.entry, field)
        if result.value == declared:
            return []

        if field != 'decimals' and getattr(task.expected_mismatches, field) == declared:
            LOGGER.debug('%s %s mismatch accepted: on-chain=%r declared=%r', prefix, field, result.value, declared)
            return []

        return [error(f'{prefix} has incorrect {field}')]
