"""
Core Domain Objects for the linked-address validator.

Every value that crosses a check is one of these types. Addresses are raw
bytes, never text; text only appears at the edges and inside resolver
records.

Domain Objects:
    Address         — A fixed 20-byte party identifier
    DomainName      — An ordered label sequence, most-specific label first
    PrecomputedNode — A caller-supplied NodeId, trusted as-is
    LinkageError    — A refused check with auditable reason
    LinkageFailure  — The recorded form of a refusal
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from .encoding import AddressFormatError, from_hex_string, to_hex_string
from .namehash import NODE_LENGTH, namehash


# =============================================================================
# FAILURE TAXONOMY
# =============================================================================

class FailureKind(Enum):
    """
    The five ways a linkage can be refused.

    All of them are terminal. There is no distinction between malformed
    input and a genuinely unauthorized claim: both are refusals.
    """
    UNREGISTERED_NAME = "unregistered_name"
    ADDRESS_MISMATCH = "address_mismatch"
    DECLARATION_MISMATCH = "declaration_mismatch"
    REVERSE_MISMATCH = "reverse_mismatch"
    INVALID_LABEL_FORMAT = "invalid_label_format"


class Check(Enum):
    """
    The individual check that failed.

    Values are the names the deployed contracts revert with, so a refusal
    can be matched against on-chain behaviour.
    """
    MAIN_ENS_UNREGISTERED = "MainENSUnregistered"
    MAIN_ADDRESS_MISMATCH = "MainAddressMismatch"
    INVALID_AUTH_DECLARATION = "InvalidAuthDeclaration"
    AUTH_ENS_UNREGISTERED = "AuthENSUnregistered"
    AUTH_ADDRESS_MISMATCH = "AuthAddressMismatch"
    INVALID_VAULT_DECLARATION = "InvalidVaultDeclaration"
    REVERSE_UNREGISTERED = "ReverseUnregistered"
    MAIN_ENS_MISMATCH = "MainENSMismatch"
    AUTH_ENS_MISMATCH = "AuthENSMismatch"
    AUTH_NAME_MISMATCH = "AuthNameMismatch"
    NOT_AUTHENTICATED = "NotAuthenticated"
    INVALID_PREFIX = "InvalidPrefix"
    INVALID_CHARACTER = "InvalidCharacter"

    @property
    def kind(self) -> FailureKind:
        return CHECK_KINDS[self]


CHECK_KINDS = {
    Check.MAIN_ENS_UNREGISTERED: FailureKind.UNREGISTERED_NAME,
    Check.AUTH_ENS_UNREGISTERED: FailureKind.UNREGISTERED_NAME,
    Check.REVERSE_UNREGISTERED: FailureKind.UNREGISTERED_NAME,
    Check.MAIN_ADDRESS_MISMATCH: FailureKind.ADDRESS_MISMATCH,
    Check.AUTH_ADDRESS_MISMATCH: FailureKind.ADDRESS_MISMATCH,
    Check.NOT_AUTHENTICATED: FailureKind.ADDRESS_MISMATCH,
    Check.INVALID_AUTH_DECLARATION: FailureKind.DECLARATION_MISMATCH,
    Check.INVALID_VAULT_DECLARATION: FailureKind.DECLARATION_MISMATCH,
    Check.MAIN_ENS_MISMATCH: FailureKind.REVERSE_MISMATCH,
    Check.AUTH_ENS_MISMATCH: FailureKind.REVERSE_MISMATCH,
    Check.AUTH_NAME_MISMATCH: FailureKind.REVERSE_MISMATCH,
    Check.INVALID_PREFIX: FailureKind.INVALID_LABEL_FORMAT,
    Check.INVALID_CHARACTER: FailureKind.INVALID_LABEL_FORMAT,
}


class LinkageError(Exception):
    """Raised when a linkage check fails and the claim must be refused."""

    def __init__(self, check: Check, reason: str):
        self.check = check
        self.kind = check.kind
        self.reason = reason
        super().__init__(f"[{check.value}] {reason}")


@dataclass(frozen=True)
class LinkageFailure:
    """
    An explicit refusal with auditable reason.

    Nothing is persisted. The failure exists only as the outcome of one
    evaluation.
    """
    check: Check
    kind: FailureKind
    reason: str

    @classmethod
    def from_error(cls, error: LinkageError) -> LinkageFailure:
        """Create a LinkageFailure from a LinkageError."""
        return cls(check=error.check, kind=error.kind, reason=error.reason)


# =============================================================================
# ADDRESS
# =============================================================================

ADDRESS_LENGTH = 20


@dataclass(frozen=True)
class Address:
    """
    A 20-byte party identifier.

    Equality is on the raw bytes, so two addresses written with different
    case or prefix compare equal once parsed.
    """
    raw: bytes

    def __post_init__(self):
        if not isinstance(self.raw, bytes) or len(self.raw) != ADDRESS_LENGTH:
            raise AddressFormatError(
                f"Address must be exactly {ADDRESS_LENGTH} bytes"
            )

    @classmethod
    def from_hex(cls, value: str) -> Address:
        return cls(from_hex_string(value))

    def hex(self, with_prefix: bool = True) -> str:
        return to_hex_string(self.raw, with_prefix)

    def is_zero(self) -> bool:
        return self.raw == bytes(ADDRESS_LENGTH)

    def __str__(self) -> str:
        return self.hex()


ZERO_ADDRESS = Address(bytes(ADDRESS_LENGTH))


# =============================================================================
# DOMAIN INPUTS
# =============================================================================

@dataclass(frozen=True)
class DomainName:
    """
    A domain name as an ordered label sequence.

    The NodeId is always derived from the labels; it cannot be supplied.
    """
    labels: tuple[str, ...]

    def __post_init__(self):
        # Accept any sequence but store a tuple so the name stays hashable.
        object.__setattr__(self, "labels", tuple(self.labels))
        if any(not label for label in self.labels):
            raise ValueError(f"Empty label in domain name {self.name!r}")

    @classmethod
    def parse(cls, name: str) -> DomainName:
        """Split a dotted name such as ``wilkins.eth`` into labels."""
        if not name:
            return cls(())
        return cls(tuple(name.split(".")))

    @property
    def name(self) -> str:
        return ".".join(self.labels)

    @property
    def node(self) -> bytes:
        return namehash(self.labels)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class PrecomputedNode:
    """
    A NodeId supplied directly by the caller.

    Trust boundary: the caller is trusted to have derived it correctly.
    It is never re-derived or re-checked.
    """
    node: bytes

    def __post_init__(self):
        if not isinstance(self.node, bytes) or len(self.node) != NODE_LENGTH:
            raise ValueError(f"NodeId must be exactly {NODE_LENGTH} bytes")

    @classmethod
    def from_hex(cls, value: str) -> PrecomputedNode:
        text = value[2:] if value[:2].lower() == "0x" else value
        try:
            return cls(bytes.fromhex(text))
        except ValueError as e:
            raise ValueError(f"Invalid NodeId hex: {value!r}") from e


DomainInput = Union[DomainName, PrecomputedNode]


def node_of(domain: DomainInput) -> bytes:
    """Return the NodeId for either kind of domain input."""
    if isinstance(domain, PrecomputedNode):
        return domain.node
    if isinstance(domain, DomainName):
        return domain.node
    raise TypeError(
        f"Expected DomainName or PrecomputedNode, got {type(domain).__name__}"
    )


def describe(domain: DomainInput) -> str:
    """Human-readable form of a domain input, for reasons and logs."""
    if isinstance(domain, DomainName):
        return domain.name
    return "0x" + domain.node.hex()


def coerce_address(value: Union[Address, bytes, str]) -> Address:
    """Accept an Address, 20 raw bytes, or hex text at an input edge."""
    if isinstance(value, Address):
        return value
    if isinstance(value, bytes):
        return Address(value)
    if isinstance(value, str):
        return Address.from_hex(value)
    raise TypeError(f"Cannot interpret {type(value).__name__} as an address")


def coerce_domain(value: Union[DomainInput, str, list, tuple]) -> DomainInput:
    """Accept a DomainInput, a dotted name, or a label sequence."""
    if isinstance(value, (DomainName, PrecomputedNode)):
        return value
    if isinstance(value, str):
        return DomainName.parse(value)
    if isinstance(value, (list, tuple)):
        return DomainName(tuple(value))
    raise TypeError(f"Cannot interpret {type(value).__name__} as a domain")
