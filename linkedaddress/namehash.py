"""
Name-hash Engine — ENS namehash over ordered label sequences.

A domain name is hashed from the root end backward:

    node = 0x00 * 32
    for label in reversed(labels):
        node = keccak256(node + keccak256(label))

Keccak-256 here is the original Keccak padding used by Ethereum, which is
not the same function as ``hashlib.sha3_256``.

Reverse lookups live under ``<hex address>.addr.reverse``. The node for
``addr.reverse`` never changes, so it is kept as a constant and only the
address label is hashed per lookup.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Union

from Crypto.Hash import keccak

from .encoding import to_hex_string

if TYPE_CHECKING:
    from .domain import Address


NODE_LENGTH = 32
ZERO_NODE = bytes(NODE_LENGTH)

# namehash(["addr", "reverse"])
ADDR_REVERSE_NODE = bytes.fromhex(
    "91d1777781884d03a6757a803996e38de2a42967fb37eeaca72729271025a9e2"
)


def keccak256(data: bytes) -> bytes:
    """Keccak-256 digest of ``data``."""
    return keccak.new(data=data, digest_bits=256).digest()


def label_hash(label: str) -> bytes:
    return keccak256(label.encode("utf-8"))


def subnode(parent: bytes, label: str) -> bytes:
    """NodeId of ``label`` directly beneath ``parent``."""
    return keccak256(parent + label_hash(label))


def namehash(labels: Iterable[str]) -> bytes:
    """
    Compute the NodeId of a label sequence, most-specific label first.

    An empty sequence yields the zero node.
    """
    node = ZERO_NODE
    for label in reversed(tuple(labels)):
        node = subnode(node, label)
    return node


def namehash_name(name: str) -> bytes:
    """NodeId of a dotted name. The empty string is the root."""
    if not name:
        return ZERO_NODE
    return namehash(name.split("."))


def reverse_node(address: Union[bytes, Address]) -> bytes:
    """NodeId of ``<lowercase hex, no prefix>.addr.reverse``."""
    raw = getattr(address, "raw", address)
    return subnode(ADDR_REVERSE_NODE, to_hex_string(raw, with_prefix=False))


def node_hex(node: bytes) -> str:
    return "0x" + node.hex()
