from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from jsonschema import Draft7Validator, FormatChecker
from jsonschema.exceptions import ValidationError
from pydantic import BaseModel, ConfigDict, Field

from .diagnostics import Diagnostic, error
from .schemas import EXPECTED_MISMATCHES_SCHEMA, TOKEN_DATA_SCHEMA

LOGGER = logging.getLogger('tokenlist.entries')

DATA_FILE = 'data.json'
EXPECTED_MISMATCHES_FILE = 'expectedMismatches.json'
LOGO_FILES = ('logo.png', 'logo.svg')

_DATA_VALIDATOR = Draft7Validator(TOKEN_DATA_SCHEMA, format_checker=FormatChecker())
_MISMATCHES_VALIDATOR = Draft7Validator(EXPECTED_MISMATCHES_SCHEMA)


class TokenOverrides(BaseModel):
    model_config = ConfigDict(extra='forbid', frozen=True)

    name: str | None = None
    symbol: str | None = None
    decimals: int | None = None
    bridge: str | None = None


class ChainToken(BaseModel):
    model_config = ConfigDict(extra='forbid', frozen=True)

    address: str
    overrides: TokenOverrides = Field(default_factory=TokenOverrides)


class Entry(BaseModel):
    model_config = ConfigDict(extra='forbid', frozen=True)

    name: str
    symbol: str
    decimals: int
    description: str | None = None
    website: str | None = None
    twitter: str | None = None
    nonstandard: bool = False
    nobridge: bool = False
    tokens: dict[str, ChainToken]


class ExpectedMismatches(BaseModel):
    # Only symbol and name can be excused; anything else in the file is ignored.
    model_config = ConfigDict(extra='ignore', frozen=True)

    symbol: str | None = None
    name: str | None = None


@dataclass(frozen=True)
class LoadResult:
    folder: str
    entry: Entry | None = None
    expected_mismatches: ExpectedMismatches = field(default_factory=ExpectedMismatches)
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def ok(self) -> bool:
        return self.entry is not None


def _property_path(err: ValidationError) -> str:
    parts = ['instance']
    for item in err.absolute_path:
        if isinstance(item, int):
            parts.append(f'[{item}]')
        else:
            parts.append(f'.{item}')
    return ''.join(parts)


def schema_errors(validator: Draft7Validator, instance: Any) -> list[tuple[str, str]]:
    """Every violation of ``instance`` as (property path, message), in a stable order."""
    found = [(_property_path(err), err.message) for err in validator.iter_errors(instance)]
    return sorted(found)


def load_entry(folder: str, raw: Any, expected_raw: Any = None) -> LoadResult:
    diagnostics: list[Diagnostic] = [
        error(f'{folder}: {path}: {message}')
        for path, message in schema_errors(_DATA_VALIDATOR, raw)
    ]

    if expected_raw is not None:
        diagnostics.extend(
            error(f'{folder}: {EXPECTED_MISMATCHES_FILE}: {path}: {message}')
            for path, message in schema_errors(_MISMATCHES_VALIDATOR, expected_raw)
        )

    if diagnostics:
        return LoadResult(folder=folder, diagnostics=tuple(diagnostics))

    mismatches = ExpectedMismatches.model_validate(expected_raw or {})
    if isinstance(expected_raw, dict):
        ignored = sorted(set(expected_raw) - {'symbol', 'name'})
        if ignored:
            LOGGER.warning('%s: ignoring unsupported expected mismatch fields %s', folder, ', '.join(ignored))

    return LoadResult(
        folder=folder,
        entry=Entry.model_validate(raw),
        expected_mismatches=mismatches
    )


def discover_folders(datadir: str | Path, tokens: Iterable[str] | None = None) -> list[str]:
    root = Path(datadir)
    wanted = set(tokens) if tokens else None
    folders = [path.name for path in root.iterdir() if path.is_dir()]
    folders.sort(key=lambda name: (name.lower(), name))
    if wanted is None:
        return folders
    return [folder for folder in folders if folder in wanted]


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding='utf-8'))


def load_folder(datadir: str | Path, folder: str) -> LoadResult:
    base = Path(datadir) / folder
    datafile = base / DATA_FILE
    if not datafile.exists():
        return LoadResult(folder=folder, diagnostics=(error(f'data file {datafile} does not exist'),))

    try:
        raw = _read_json(datafile)
    except (OSError, ValueError) as exc:
        return LoadResult(folder=folder, diagnostics=(error(f'{folder}: data file {datafile} is not valid JSON: {exc}'),))

    diagnostics: list[Diagnostic] = []

    logo_count = sum(1 for name in LOGO_FILES if (base / name).is_file())
    if logo_count != 1:
        diagnostics.append(
            error(
                f'{folder} has {logo_count} logo files, make sure your logo is either logo.png OR logo.svg'
            )
        )

    expected_raw: Any = None
    expected_path = base / EXPECTED_MISMATCHES_FILE
    if expected_path.exists():
        try:
            expected_raw = _read_json(expected_path)
        except (OSError, ValueError) as exc:
            diagnostics.append(error(f'{folder}: {EXPECTED_MISMATCHES_FILE} is not valid JSON: {exc}'))
            return LoadResult(folder=folder, diagnostics=tuple(diagnostics))

    result = load_entry(folder, raw, expected_raw)
    return LoadResult(
        folder=folder,
        entry=result.entry,
        expected_mismatches=result.expected_mismatches,
        diagnostics=tuple(diagnostics) + result.diagnostics
    )


def load_datadir(datadir: str | Path, tokens: Iterable[str] | None = None) -> list[LoadResult]:
    results = [load_folder(datadir, folder) for folder in discover_folders(datadir, tokens)]
    LOGGER.info(
        'loaded %s folders from %s (%s rejected)',
        len(results),
        datadir,
        sum(1 for item in results if not item.ok)
    )
    return results
