# mcstore/domain/results.py
from dataclasses import dataclass
from typing import Any, Callable

from mcstore.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReadResult:
    """
    Wynik odczytu: ok=False znaczy ze odczyt sie nie udal i data to wartosc domyslna,
    ok=True z pusta data znaczy ze naprawde nic nie ma.
    """

    data: Any
    ok: bool = True
    error: str | None = None


def safe_read(label: str, fn: Callable[[], Any], default: Any) -> ReadResult:
    try:
        return ReadResult(data=fn())
    except Exception as e:
        logger.error(f"{label} failed: {e}")
        return ReadResult(data=default, ok=False, error=str(e))
