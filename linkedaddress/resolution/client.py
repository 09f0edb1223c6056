"""
Resolution Client for the linked-address validator.

The registry and its resolvers are external. This module fixes the
interface they are reached through and wraps the three read queries the
validator needs.

Trust boundary: everything returned here is untrusted. Absence and mismatch
are the expected failure paths, and the caller decides what each one means.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from ..domain import ZERO_ADDRESS, Address, Check, LinkageError
from ..namehash import node_hex


logger = logging.getLogger(__name__)


# =============================================================================
# RESOLUTION LAYER CONTRACT
# =============================================================================

class Resolver(Protocol):
    """Read side of an ENS resolver."""

    def addr(self, node: bytes) -> Address:
        """Forward address, or ZERO_ADDRESS when unset."""
        ...

    def name(self, node: bytes) -> str:
        """Reverse-lookup name, or "" when unset."""
        ...

    def text(self, node: bytes, key: str) -> str:
        """Text record, or "" when unset."""
        ...


class Registry(Protocol):
    """Read side of an ENS registry."""

    def resolver(self, node: bytes) -> Optional[Resolver]:
        ...


class ResolutionQueryError(Exception):
    """Raised when the resolution layer itself fails a query."""

    def __init__(self, query: str, node: bytes, cause: Exception):
        self.query = query
        self.node = node
        self.cause = cause
        super().__init__(f"{query}({node_hex(node)}) failed: {cause}")


# =============================================================================
# CLIENT
# =============================================================================

class ResolutionClient:
    """
    Thin query wrapper over a Registry.

    Holds no state besides the registry handle. Nothing is cached, so every
    call observes the layer's current records.
    """

    def __init__(self, registry: Registry):
        self.registry = registry

    def resolver_for(self, node: bytes, missing: Check) -> Resolver:
        """
        Look up the resolver for ``node``.

        Raises:
            LinkageError: with check ``missing`` if no resolver is set
            ResolutionQueryError: if the registry raises
        """
        try:
            resolver = self.registry.resolver(node)
        except Exception as e:
            logger.error(f"Registry lookup failed for {node_hex(node)}: {e}")
            raise ResolutionQueryError("resolver", node, e) from e

        logger.debug(f"resolver({node_hex(node)}) -> {resolver!r}")
        if resolver is None:
            raise LinkageError(
                missing,
                f"No resolver registered for node {node_hex(node)}",
            )
        return resolver

    def addr(self, resolver: Resolver, node: bytes) -> Address:
        value = self._query("addr", node, lambda: resolver.addr(node))
        return value if value is not None else ZERO_ADDRESS

    def name(self, resolver: Resolver, node: bytes) -> str:
        value = self._query("name", node, lambda: resolver.name(node))
        return value or ""

    def text(self, resolver: Resolver, node: bytes, key: str) -> str:
        value = self._query(f"text[{key}]", node, lambda: resolver.text(node, key))
        return value or ""

    def _query(self, query: str, node: bytes, call):
        try:
            value = call()
        except Exception as e:
            logger.error(f"{query} query failed for {node_hex(node)}: {e}")
            raise ResolutionQueryError(query, node, e) from e
        logger.debug(f"{query}({node_hex(node)}) -> {value!r}")
        return value
