from __future__ import annotations

import logging
from functools import partial
from pathlib import Path
from typing import Iterable

from .aggregator import validate_compiled_list
from .chain_registry import ChainRegistry, build_chain_registry
from .config import Settings, get_settings
from .diagnostics import Diagnostic, count_by_kind
from .entries import load_datadir
from .external_list import ExternalListChecker, ListFetcher, fetch_external_list, load_external_list
from .generator import Generator, token_list_generator
from .reconciler import Reconciler

LOGGER = logging.getLogger('tokenlist.validate')


def validate(
    datadir: str | Path,
    tokens: Iterable[str] | None = None,
    *,
    settings: Settings | None = None,
    registry: ChainRegistry | None = None,
    fetch_list: ListFetcher | None = None,
    generate: Generator | None = None
) -> list[Diagnostic]:
    """Validate a token registry data folder and return every diagnostic found.

    The external list is fetched once before any entry is processed. Results
    are grouped per folder in case-insensitive folder order, followed by the
    verdict on the compiled list. Only ``UnknownChainError`` escapes.
    """
    settings = settings or get_settings()
    registry = registry or build_chain_registry(settings)
    fetch_list = fetch_list or partial(
        fetch_external_list,
        settings.external_list_url,
        settings.external_list_timeout_seconds
    )
    generate = generate or token_list_generator(registry, settings)

    checker = ExternalListChecker(
        load_external_list(fetch_list),
        settings.privileged_chain,
        settings.external_list_label
    )
    results: list[Diagnostic] = checker.run_diagnostics()

    loaded = load_datadir(datadir, tokens)
    reconciler = Reconciler(registry, checker, settings.native_asset, settings.max_workers)
    for item, chain_diagnostics in zip(loaded, reconciler.reconcile_all(loaded)):
        results.extend(item.diagnostics)
        results.extend(chain_diagnostics)

    results.extend(validate_compiled_list(datadir, generate))

    counts = count_by_kind(results)
    LOGGER.info(
        'validated %s folders: errors=%s warnings=%s',
        len(loaded),
        counts['error'],
        counts['warning']
    )
    return results
