"""Tag-to-provider registry shared by question types and strategies.

Registries are filled once at startup and only read afterwards. Writes are
not locked: callers that register late must make sure nothing is reading
at the same time.
"""

from collections.abc import Iterator
from typing import Generic, TypeVar

from loguru import logger

from errors import InvalidArgumentError

P = TypeVar("P")


class Registry(Generic[P]):
    """Maps a type tag to a provider.

    Registering the same tag twice replaces the provider but keeps the
    tag's original position in ``list_tags()``.
    """

    def __init__(self, kind: str = "provider"):
        self.kind = kind
        self._providers: dict[str, P] = {}

    def register(self, tag: str, provider: P) -> None:
        if not isinstance(tag, str) or not tag.strip():
            raise InvalidArgumentError(f"{self.kind} tag must be a non-empty string")
        if provider is None:
            raise InvalidArgumentError(f"{self.kind} for '{tag}' must not be None")
        tag = tag.strip()
        if tag in self._providers:
            logger.debug(f"Replacing {self.kind} for '{tag}'")
        else:
            logger.debug(f"Registered {self.kind} '{tag}'")
        self._providers[tag] = provider

    def lookup(self, tag: str | None) -> P | None:
        """Return the provider for ``tag``, or None when nothing is registered."""
        if tag is None:
            return None
        if not isinstance(tag, str):
            raise InvalidArgumentError(
                f"{self.kind} tag must be a string, got {type(tag).__name__}"
            )
        return self._providers.get(tag.strip())

    def list_tags(self) -> list[str]:
        return list(self._providers)

    def items(self) -> list[tuple[str, P]]:
        return list(self._providers.items())

    def __contains__(self, tag: object) -> bool:
        return isinstance(tag, str) and tag.strip() in self._providers

    def __iter__(self) -> Iterator[str]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)
