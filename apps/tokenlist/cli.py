from __future__ import annotations

import argparse
import json
import logging
from typing import Sequence

from .config import get_settings
from .diagnostics import count_by_kind, has_errors
from .validate import validate


def _csv(raw: str | None) -> list[str] | None:
    if not raw:
        return None
    return [item.strip() for item in raw.split(',') if item.strip()] or None


def main(argv: Sequence[str] | None = None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description='Validate token registry entries against chain data')
    parser.add_argument('--datadir', default=settings.data_dir, help='Directory holding one folder per token')
    parser.add_argument('--tokens', default=None, help='Comma-separated folder names to validate (default: all)')
    parser.add_argument('--json', action='store_true', help='Print diagnostics as a JSON array')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )

    results = validate(args.datadir, _csv(args.tokens), settings=settings)

    if args.json:
        print(json.dumps([item.as_dict() for item in results], indent=2))
        return 1 if has_errors(results) else 0

    for item in results:
        print(f'[{item.kind}] {item.message}')

    counts = count_by_kind(results)
    if has_errors(results):
        print(f'validation failed: {counts["error"]} errors, {counts["warning"]} warnings')
        return 1
    if counts['warning']:
        print(f'validation passed with {counts["warning"]} warnings; manual review required')
    else:
        print('validation passed')
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
