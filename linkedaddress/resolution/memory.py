"""
In-memory registry and resolver.

Mirrors the read/write surface of the ENS registry and public resolver
closely enough to stand in for them in tests and in the CLI. Writes exist
only here; the validator never calls them.
"""

from __future__ import annotations

from typing import Optional

from ..domain import ZERO_ADDRESS, Address


class InMemoryResolver:
    """A resolver holding addr, name and text records per node."""

    def __init__(self, label: str = "resolver"):
        self.label = label
        self._addrs: dict[bytes, Address] = {}
        self._names: dict[bytes, str] = {}
        self._texts: dict[bytes, dict[str, str]] = {}

    def __repr__(self) -> str:
        return f"InMemoryResolver({self.label!r})"

    # Reads

    def addr(self, node: bytes) -> Address:
        return self._addrs.get(node, ZERO_ADDRESS)

    def name(self, node: bytes) -> str:
        return self._names.get(node, "")

    def text(self, node: bytes, key: str) -> str:
        return self._texts.get(node, {}).get(key, "")

    # Writes

    def set_addr(self, node: bytes, address: Address) -> None:
        self._addrs[node] = address

    def set_name(self, node: bytes, name: str) -> None:
        self._names[node] = name

    def set_text(self, node: bytes, key: str, value: str) -> None:
        self._texts.setdefault(node, {})[key] = value

    def clear_text(self, node: bytes, key: str) -> None:
        """Unset a text record; subsequent reads return ""."""
        self._texts.get(node, {}).pop(key, None)


class InMemoryRegistry:
    """A registry mapping NodeIds to resolvers."""

    def __init__(self):
        self._resolvers: dict[bytes, InMemoryResolver] = {}

    def resolver(self, node: bytes) -> Optional[InMemoryResolver]:
        return self._resolvers.get(node)

    def set_resolver(self, node: bytes, resolver: Optional[InMemoryResolver]) -> None:
        if resolver is None:
            self._resolvers.pop(node, None)
        else:
            self._resolvers[node] = resolver

    def __len__(self) -> int:
        return len(self._resolvers)
