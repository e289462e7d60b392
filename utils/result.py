"""Minimal result type for operations whose failures are expected outcomes."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Ok:
    value: Any


@dataclass(frozen=True)
class Err:
    reason: str


Result = Union[Ok, Err]
