"""
Identifiers -- typed UUID wrappers for accounts, entries and transactions.

Each identifier kind is its own frozen dataclass, so an AccountId never
compares equal to a TransactionId even when both wrap the same UUID.

New identifiers come from an IdentifierSource. RandomIdentifierSource
(uuid4) is the production default; SequentialIdentifierSource yields a
reproducible series for tests.
"""

from __future__ import annotations

import threading
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, TypeVar
from uuid import UUID

from ledger_kernel.exceptions import MalformedIdentifierError

_IdT = TypeVar("_IdT", bound="_Identifier")


class IdentifierSource(ABC):
    """Supplies fresh 128-bit identifiers."""

    @abstractmethod
    def next_uuid(self) -> UUID:
        ...


class RandomIdentifierSource(IdentifierSource):
    """Uniform random version-4 UUIDs."""

    def next_uuid(self) -> UUID:
        return uuid.uuid4()


class SequentialIdentifierSource(IdentifierSource):
    """Deterministic UUIDs built from an incrementing counter."""

    def __init__(self, start: int = 1):
        self._next = start
        self._lock = threading.Lock()

    def next_uuid(self) -> UUID:
        with self._lock:
            value = self._next
            self._next += 1
        return UUID(int=value, version=4)


_DEFAULT_SOURCE: IdentifierSource = RandomIdentifierSource()


@dataclass(frozen=True, slots=True)
class _Identifier:
    value: UUID

    KIND: ClassVar[str] = "identifier"

    def __post_init__(self) -> None:
        if not isinstance(self.value, UUID):
            raise MalformedIdentifierError(self.KIND, self.value)

    @classmethod
    def new_id(cls: type[_IdT], source: IdentifierSource | None = None) -> _IdT:
        return cls((source or _DEFAULT_SOURCE).next_uuid())

    @classmethod
    def from_string(cls: type[_IdT], value: str) -> _IdT:
        """Parse the canonical hyphenated UUID form (case-insensitive).

        Raises:
            MalformedIdentifierError: for anything else, including braces,
                URN prefixes and unhyphenated hex.
        """
        if not isinstance(value, str):
            raise MalformedIdentifierError(cls.KIND, value)
        try:
            parsed = UUID(value)
        except ValueError:
            raise MalformedIdentifierError(cls.KIND, value) from None
        if str(parsed) != value.lower():
            raise MalformedIdentifierError(cls.KIND, value)
        return cls(parsed)

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self.value}')"


@dataclass(frozen=True, slots=True, repr=False)
class AccountId(_Identifier):
    KIND: ClassVar[str] = "AccountId"


@dataclass(frozen=True, slots=True, repr=False)
class LedgerEntryId(_Identifier):
    KIND: ClassVar[str] = "LedgerEntryId"


@dataclass(frozen=True, slots=True, repr=False)
class TransactionId(_Identifier):
    KIND: ClassVar[str] = "TransactionId"
