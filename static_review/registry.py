"""Identifier-keyed registry for reviews and their collaborators.

Each identifier is bound once to a factory and a :class:`ComponentKind`.
Instances are built lazily on first :meth:`Registry.resolve` and cached, so
every later resolve of the same identifier returns the same object.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Tuple

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

Factory = Callable[["Registry"], Any]


class ComponentKind(str, Enum):
    """Capability kinds a binding may provide."""

    REVIEW = "review"
    COLLABORATOR = "collaborator"


@dataclass(frozen=True)
class Binding:
    identifier: str
    factory: Factory
    kind: ComponentKind


class Registry:
    """Resolve identifiers to singleton instances built from bound factories.

    Builds are serialised by one registry-wide reentrant lock, so a factory
    may resolve other identifiers on its own thread while other threads wait.
    Cycles are detected on the building thread's resolution stack.
    """

    def __init__(self) -> None:
        self._bindings: Dict[str, Binding] = {}
        self._instances: Dict[str, Any] = {}
        self._build_lock = threading.RLock()
        self._guard = threading.Lock()
        self._local = threading.local()

    def bind(self, identifier: str, factory: Factory, kind: ComponentKind = ComponentKind.REVIEW) -> None:
        with self._guard:
            if identifier in self._bindings:
                raise ConfigurationError.duplicate(identifier)
            self._bindings[identifier] = Binding(identifier, factory, kind)

    def resolve(self, identifier: str) -> Any:
        binding = self._binding(identifier)
        if identifier in self._instances:
            return self._instances[identifier]

        stack = self._resolution_stack()
        if identifier in stack:
            chain = stack[stack.index(identifier):] + [identifier]
            raise ConfigurationError.cycle(chain)

        with self._build_lock:
            if identifier in self._instances:
                return self._instances[identifier]
            stack.append(identifier)
            try:
                instance = binding.factory(self)
            except ConfigurationError:
                raise
            except Exception as exc:
                raise ConfigurationError(
                    f"cannot build {identifier}: {type(exc).__name__}: {exc}", identifier
                ) from exc
            finally:
                stack.pop()
            logger.debug("Built %s %s as %s", binding.kind.value, identifier, type(instance).__name__)
            self._instances[identifier] = instance
            return instance

    def resolve_review(self, identifier: str) -> Any:
        """Resolve ``identifier`` and require a review-shaped instance."""

        if self.kind_of(identifier) is not ComponentKind.REVIEW:
            raise ConfigurationError(f"identifier is not a review: {identifier}", identifier)
        instance = self.resolve(identifier)
        if not isinstance(getattr(instance, "identifier", None), str):
            raise ConfigurationError(f"review {identifier} has no string identifier", identifier)
        for method in ("applies", "evaluate"):
            if not callable(getattr(instance, method, None)):
                raise ConfigurationError(f"review {identifier} does not implement {method}()", identifier)
        return instance

    def is_bound(self, identifier: str) -> bool:
        with self._guard:
            return identifier in self._bindings

    def identifiers(self, kind: ComponentKind | None = None) -> Tuple[str, ...]:
        with self._guard:
            return tuple(
                identifier
                for identifier, binding in self._bindings.items()
                if kind is None or binding.kind is kind
            )

    def kind_of(self, identifier: str) -> ComponentKind:
        return self._binding(identifier).kind

    def variant(self, identifier: str) -> str:
        """Return the concrete class name of the resolved instance."""

        return type(self.resolve(identifier)).__name__

    def _binding(self, identifier: str) -> Binding:
        with self._guard:
            binding = self._bindings.get(identifier)
        if binding is None:
            raise ConfigurationError.unknown(identifier)
        return binding

    def _resolution_stack(self) -> List[str]:
        stack = getattr(self._local, "stack", None)
        if stack is None:
            stack = []
            self._local.stack = stack
        return stack
