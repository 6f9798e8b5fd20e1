"""Bind the bundled reviews into a registry."""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional, Type

from static_review.registry import ComponentKind, Registry

from . import BaseReview
from .line_endings import LineEndingsReview
from .line_length import LineLengthReview
from .no_commit_tag import NoCommitTagReview
from .trailing_whitespace import TrailingWhitespaceReview

OPTIONS_IDENTIFIER = "review-options"

BUILTIN_REVIEWS: Dict[str, Type[BaseReview]] = {
    "line-length": LineLengthReview,
    "trailing-whitespace": TrailingWhitespaceReview,
    "no-commit-tag": NoCommitTagReview,
    "line-endings": LineEndingsReview,
}


def _review_factory(identifier: str, review_cls: Type[BaseReview]) -> Callable[[Registry], BaseReview]:
    def build(registry: Registry) -> BaseReview:
        options = registry.resolve(OPTIONS_IDENTIFIER)
        return review_cls(identifier, options.get(identifier, {}))

    return build


def builtin_registry(options: Optional[Mapping[str, Mapping[str, Any]]] = None) -> Registry:
    """Return a fresh registry with every bundled review bound.

    ``options`` maps review identifiers to their option mappings and is bound
    as the ``review-options`` collaborator.
    """

    frozen_options = {key: dict(value) for key, value in (options or {}).items()}
    registry = Registry()
    registry.bind(OPTIONS_IDENTIFIER, lambda _registry: frozen_options, ComponentKind.COLLABORATOR)
    for identifier, review_cls in BUILTIN_REVIEWS.items():
        registry.bind(identifier, _review_factory(identifier, review_cls), ComponentKind.REVIEW)
    return registry
