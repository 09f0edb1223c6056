"""
Records files: a YAML or JSON snapshot of resolver state.

Lets the CLI validate against a fixed set of records without a node
connection. Layout:

    names:
      wilkins.eth:
        addr: "0x1111..."
        text:
          "eip5131:auth1": "0x2222..."
      auth.wilkins.eth:
        resolver: shared          # optional; default is one resolver per name
        addr: "0x2222..."
        text:
          "eip5131:vault": "auth1:0x1111..."
    reverse:
      "0x1111...": wilkins.eth

A malformed document is rejected as a whole. Nothing is partially loaded.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Union

import yaml

from ..domain import Address, DomainName
from ..encoding import AddressFormatError
from ..namehash import reverse_node
from .memory import InMemoryRegistry, InMemoryResolver


logger = logging.getLogger(__name__)


class RecordsFormatError(Exception):
    """Raised when a records document does not have the expected shape."""
    pass


def load_registry(path: Union[str, Path]) -> InMemoryRegistry:
    """Load a ``.yaml``/``.yml`` or ``.json`` records file."""
    path = Path(path)
    with open(path, "r", encoding="utf-8-sig") as f:
        try:
            if path.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise RecordsFormatError(f"Cannot parse {path}: {e}") from e

    registry = registry_from_mapping(data or {})
    logger.info(f"Loaded {len(registry)} nodes from {path}")
    return registry


def registry_from_mapping(data: dict[str, Any]) -> InMemoryRegistry:
    """Build an InMemoryRegistry from an already-parsed records document."""
    if not isinstance(data, dict):
        raise RecordsFormatError("Records document must be a mapping")

    unknown = set(data) - {"names", "reverse"}
    if unknown:
        raise RecordsFormatError(f"Unknown top-level keys: {sorted(unknown)}")

    registry = InMemoryRegistry()
    shared: dict[str, InMemoryResolver] = {}

    names = data.get("names") or {}
    if not isinstance(names, dict):
        raise RecordsFormatError("'names' must be a mapping of name -> records")

    for name, entry in names.items():
        entry = entry or {}
        if not isinstance(entry, dict):
            raise RecordsFormatError(f"Records for {name!r} must be a mapping")

        try:
            node = DomainName.parse(str(name)).node
        except ValueError as e:
            raise RecordsFormatError(str(e)) from e
        resolver = _resolver_for(entry, str(name), shared)
        registry.set_resolver(node, resolver)

        if entry.get("addr"):
            resolver.set_addr(node, _parse_address(entry["addr"], name))

        text = entry.get("text") or {}
        if not isinstance(text, dict):
            raise RecordsFormatError(f"'text' for {name!r} must be a mapping")
        for key, value in text.items():
            resolver.set_text(node, str(key), str(value))

    reverse = data.get("reverse") or {}
    if not isinstance(reverse, dict):
        raise RecordsFormatError("'reverse' must be a mapping of address -> name")

    for address_text, name in reverse.items():
        address = _parse_address(address_text, "reverse")
        node = reverse_node(address)
        resolver = registry.resolver(node) or InMemoryResolver(f"reverse:{address}")
        registry.set_resolver(node, resolver)
        resolver.set_name(node, str(name))

    return registry


def _resolver_for(
    entry: dict[str, Any],
    name: str,
    shared: dict[str, InMemoryResolver],
) -> InMemoryResolver:
    label = entry.get("resolver")
    if label is None:
        return InMemoryResolver(name)
    label = str(label)
    if label not in shared:
        shared[label] = InMemoryResolver(label)
    return shared[label]


def _parse_address(value: Any, where: str) -> Address:
    # Unquoted hex in YAML 1.1 loads as an int.
    if isinstance(value, int) and not isinstance(value, bool):
        value = f"{value:040x}"
    try:
        return Address.from_hex(str(value))
    except AddressFormatError as e:
        raise RecordsFormatError(f"Invalid address for {where!r}: {e}") from e
