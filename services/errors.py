# -*- coding: utf-8 -*-
"""services/errors.py

Problems reported to the UI (no PyQt dependency).

The diagram controller turns engine exceptions and validation findings into
:class:`Issue` values; the screen decides how to show them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional


class Level(str, Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


@dataclass(frozen=True)
class Issue:
    level: Level
    code: str
    message: str
    block_id: Optional[int] = None
    hint: Optional[str] = None

    @staticmethod
    def from_exception(code: str, exc: BaseException, *, block_id: Optional[int] = None) -> "Issue":
        return Issue(Level.ERROR, code, str(exc) or type(exc).__name__, block_id=block_id)


def has_errors(issues: Iterable[Issue]) -> bool:
    return any(it.level == Level.ERROR for it in issues)
