"""Route table - static binding of (verb, path pattern) to access, rules and handler.

The table is filled during application startup and then frozen. After
``freeze()`` it is read-only, so concurrent requests can share it without
locking.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from starlette.convertors import Convertor
from starlette.routing import compile_path

from ..access import AccessRequirement
from ..validation import Rule

if TYPE_CHECKING:
    from .dispatch import ValidatedRequest

logger = logging.getLogger(__name__)

Handler = Callable[["ValidatedRequest"], Awaitable[Any]]

HTTP_METHODS = {"GET", "POST", "PUT", "PATCH", "DELETE"}


@dataclass(frozen=True)
class RouteEntry:
    """One registered route. Immutable once created."""

    method: str
    pattern: str
    access: AccessRequirement
    rules: tuple[Rule, ...]
    handler: Handler
    name: str = ""

    def __str__(self) -> str:
        return f"{self.method} {self.pattern}"


@dataclass(frozen=True)
class RouteMatch:
    """A matched route plus the path parameters extracted from the URL."""

    entry: RouteEntry
    path_params: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class _CompiledRoute:
    entry: RouteEntry
    regex: re.Pattern[str]
    convertors: dict[str, Convertor[Any]]


def normalize_path(path: str) -> str:
    """Collapse a trailing slash so ``/reviews/`` and ``/reviews`` match alike."""
    if len(path) > 1 and path.endswith("/"):
        return path.rstrip("/") or "/"
    return path or "/"


class RouteTable:
    """Ordered collection of route entries with first-match lookup"""

    def __init__(self) -> None:
        self._routes: list[_CompiledRoute] = []
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def entries(self) -> tuple[RouteEntry, ...]:
        return tuple(route.entry for route in self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def register(
        self,
        method: str,
        pattern: str,
        access: AccessRequirement,
        rules: Iterable[Rule],
        handler: Handler,
        name: str = "",
    ) -> RouteEntry:
        """Register a route. Only allowed before the table is frozen.

        Raises:
            RuntimeError: If the table has been frozen
            ValueError: If the verb is unsupported or the route is a duplicate
        """
        if self._frozen:
            raise RuntimeError(f"Route table is frozen; cannot register {method} {pattern}")

        method = method.upper()
        if method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        pattern = normalize_path(pattern)
        if any(route.entry.method == method and route.entry.pattern == pattern for route in self._routes):
            raise ValueError(f"Duplicate route: {method} {pattern}")

        entry = RouteEntry(
            method=method,
            pattern=pattern,
            access=access,
            rules=tuple(rules),
            handler=handler,
            name=name or getattr(handler, "__name__", ""),
        )
        regex, _, convertors = compile_path(pattern)
        self._routes.append(_CompiledRoute(entry=entry, regex=regex, convertors=convertors))
        logger.debug(f"Registered route {entry} ({entry.access}, {len(entry.rules)} rules)")
        return entry

    def freeze(self) -> RouteTable:
        """End the startup phase; the table is read-only afterwards."""
        self._frozen = True
        logger.info(f"Route table frozen with {len(self._routes)} routes")
        return self

    def match(self, method: str, path: str) -> RouteMatch | None:
        """Find the first route registered for ``method`` whose pattern matches ``path``."""
        method = method.upper()
        path = normalize_path(path)
        for route in self._routes:
            if route.entry.method != method:
                continue
            found = route.regex.match(path)
            if found is None:
                continue
            params = {key: route.convertors[key].convert(value) for key, value in found.groupdict().items()}
            return RouteMatch(entry=route.entry, path_params=params)
        return None
