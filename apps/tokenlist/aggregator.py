from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from jsonschema import Draft7Validator, FormatChecker

from .diagnostics import Diagnostic, error
from .generator import Generator
from .schemas import TOKEN_LIST_SCHEMA

LOGGER = logging.getLogger('tokenlist.aggregator')

_LIST_VALIDATOR = Draft7Validator(TOKEN_LIST_SCHEMA, format_checker=FormatChecker())


def token_list_errors(token_list: Any) -> list[dict[str, Any]]:
    found = []
    for err in _LIST_VALIDATOR.iter_errors(token_list):
        found.append(
            {
                'instancePath': '/' + '/'.join(str(part) for part in err.absolute_path),
                'schemaPath': '#/' + '/'.join(str(part) for part in err.absolute_schema_path),
                'validator': err.validator,
                'message': err.message
            }
        )
    return sorted(found, key=lambda item: (item['instancePath'], item['schemaPath'], item['message']))


def validate_token_list(token_list: Any) -> list[Diagnostic]:
    errors = token_list_errors(token_list)
    if not errors:
        return []
    LOGGER.warning('final token list has %s schema violations', len(errors))
    return [error(f'final token list is invalid: {json.dumps(errors, indent=2)}')]


def validate_compiled_list(datadir: str | Path, generate: Generator) -> list[Diagnostic]:
    try:
        token_list = generate(Path(datadir))
    except Exception as exc:  # noqa: BLE001
        LOGGER.exception('token list generation failed')
        return [error(f'failed to generate final token list: {exc}')]
    return validate_token_list(token_list)
