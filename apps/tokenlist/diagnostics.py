from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Iterable, Literal

DiagnosticKind = Literal['error', 'warning']


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    message: str

    def as_dict(self) -> dict[str, str]:
        # Serialized as {type, message}.
        payload = asdict(self)
        return {'type': payload['kind'], 'message': payload['message']}


def error(message: str) -> Diagnostic:
    return Diagnostic(kind='error', message=message)


def warning(message: str) -> Diagnostic:
    return Diagnostic(kind='warning', message=message)


def has_errors(diagnostics: Iterable[Diagnostic]) -> bool:
    return any(item.kind == 'error' for item in diagnostics)


def count_by_kind(diagnostics: Iterable[Diagnostic]) -> dict[str, int]:
    counts = {'error': 0, 'warning': 0}
    for item in diagnostics:
        counts[item.kind] += 1
    return counts
