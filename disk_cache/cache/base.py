"""Common interface for caches keyed by string."""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")

GetCompletion = Callable[[Optional[Any]], None]
Completion = Callable[[], None]


class Cache(ABC, Generic[T]):
    """
    A string-keyed cache whose operations complete asynchronously.

    Every operation returns an asyncio.Future and accepts an optional
    completion callback. The callback fires exactly once, after the
    operation's work is done, whether or not that work succeeded.
    """

    @abstractmethod
    def get(
            self,
            key: str,
            completion: Optional[GetCompletion] = None,
    ) -> "asyncio.Future[Optional[T]]":
        """Look up a value. Resolves to None when there is no usable entry."""

    @abstractmethod
    def set(
            self,
            key: str,
            value: T,
            completion: Optional[Completion] = None,
    ) -> "asyncio.Future[None]":
        """Store a value, replacing any previous one."""

    @abstractmethod
    def remove(
            self,
            key: str,
            completion: Optional[Completion] = None,
    ) -> "asyncio.Future[None]":
        """Delete one entry if present."""

    @abstractmethod
    def remove_all(
            self,
            completion: Optional[Completion] = None,
    ) -> "asyncio.Future[None]":
        """Delete every entry."""
