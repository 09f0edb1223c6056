"""
Linkage Validator — bidirectional proof that two addresses are linked.

A main identity links an auth identity when BOTH sides have declared it
through the resolution layer. A one-sided declaration is never enough.

Strategies (tagged by Variant, chosen at deployment time):

    TEXT_RECORD     — main publishes an auth declaration text record, auth
                      publishes a vault declaration naming main back
    REVERSE_NAMING  — auth owns an ``auth[0-9]*`` subdomain of main, and
                      main's reverse record names main's domain
    COMPOUND_NAME   — auth's reverse record names an untrusted compound
                      ``authN.<main domain>`` string that
                      also forward-resolves to auth

Every check is a hard precondition. The first one that fails refuses the
whole claim. Nothing is cached between calls, so each evaluation reflects
the records as they are at that moment.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

from ..domain import (
    Address,
    Check,
    DomainInput,
    DomainName,
    LinkageError,
    LinkageFailure,
    PrecomputedNode,
    coerce_address,
    coerce_domain,
    describe,
    node_of,
)
from ..namehash import reverse_node, subnode
from ..resolution.client import Registry, ResolutionClient, Resolver
from ..validation import check_auth_label, split_auth_name


logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================

NAMESPACE = "eip5131"
VAULT_KEY = "vault"
SEPARATOR = ":"


class RecordConvention(Enum):
    """
    Where the ``eip5131`` namespace token goes.

    The two conventions are not cross-compatible. A deployment picks one;
    a validation call never tries both.

    KEY_NAMESPACED:
        auth key    eip5131:<authKey>      value  0x<auth>
        vault key   eip5131:vault          value  <authKey>:0x<main>
    VALUE_NAMESPACED:
        auth key    <authKey>              value  0x<auth>
        vault key   vault                  value  eip5131:<authKey>:0x<main>
    """
    KEY_NAMESPACED = "key"
    VALUE_NAMESPACED = "value"

    def auth_record_key(self, auth_key: str) -> str:
        if self is RecordConvention.KEY_NAMESPACED:
            return NAMESPACE + SEPARATOR + auth_key
        return auth_key

    def vault_record_key(self) -> str:
        if self is RecordConvention.KEY_NAMESPACED:
            return NAMESPACE + SEPARATOR + VAULT_KEY
        return VAULT_KEY

    def vault_record_value(self, auth_key: str, main_address: Address) -> str:
        value = auth_key + SEPARATOR + main_address.hex(with_prefix=True)
        if self is RecordConvention.VALUE_NAMESPACED:
            return NAMESPACE + SEPARATOR + value
        return value


DEFAULT_CONVENTION = RecordConvention.KEY_NAMESPACED


class Variant(Enum):
    """The linkage scheme a deployment validates against."""
    TEXT_RECORD = "text_record"
    REVERSE_NAMING = "reverse_naming"
    COMPOUND_NAME = "compound_name"


# =============================================================================
# CLAIMS
# =============================================================================

AddressLike = Union[Address, bytes, str]
DomainLike = Union[DomainInput, str, list, tuple]


def _coerce_fields(claim, addresses: tuple[str, ...], domains: tuple[str, ...]) -> None:
    for field_name in addresses:
        object.__setattr__(claim, field_name, coerce_address(getattr(claim, field_name)))
    for field_name in domains:
        object.__setattr__(claim, field_name, coerce_domain(getattr(claim, field_name)))


def _require_domain_name(domain: DomainInput, field_name: str) -> None:
    if isinstance(domain, PrecomputedNode):
        raise TypeError(
            f"{field_name} must be a DomainName; the dotted name is compared "
            "against a reverse record and cannot be recovered from a NodeId"
        )


@dataclass(frozen=True)
class TextRecordClaim:
    """Inputs of one text-record validation."""
    main_address: Address
    main_domain: DomainInput
    auth_key: str
    auth_address: Address
    auth_domain: DomainInput

    def __post_init__(self):
        _coerce_fields(self, ("main_address", "auth_address"), ("main_domain", "auth_domain"))


@dataclass(frozen=True)
class ReverseNamingClaim:
    """Inputs of one reverse-naming validation."""
    main_address: Address
    main_domain: DomainName
    auth_label: str
    auth_address: Address

    def __post_init__(self):
        _coerce_fields(self, ("main_address", "auth_address"), ("main_domain",))
        _require_domain_name(self.main_domain, "main_domain")


@dataclass(frozen=True)
class CompoundNameClaim:
    """
    Inputs of one compound-name validation.

    ``auth_name`` is untrusted caller input such as ``auth.wilkins.eth``.
    """
    main_address: Address
    main_domain: DomainName
    auth_name: str
    auth_address: Address

    def __post_init__(self):
        _coerce_fields(self, ("main_address", "auth_address"), ("main_domain",))
        _require_domain_name(self.main_domain, "main_domain")


Claim = Union[TextRecordClaim, ReverseNamingClaim, CompoundNameClaim]


@dataclass
class LinkageResult:
    """Result of one validation. Truthy only on success."""
    success: bool
    variant: Variant
    failure: Optional[LinkageFailure] = None

    def __bool__(self) -> bool:
        return self.success


# =============================================================================
# SHARED CHECKS
# =============================================================================

def _check_forward_address(
    client: ResolutionClient,
    node: bytes,
    expected: Address,
    unregistered: Check,
    mismatch: Check,
    label: str,
) -> Resolver:
    """Resolve ``node`` and require its addr record to be ``expected``."""
    resolver = client.resolver_for(node, unregistered)
    resolved = client.addr(resolver, node)
    # An unset addr reads as zero and must never match.
    if resolved.is_zero() or resolved != expected:
        raise LinkageError(
            mismatch,
            f"{label} resolves to {resolved.hex()}, expected {expected.hex()}",
        )
    return resolver


# =============================================================================
# VARIANT A: TEXT RECORDS
# =============================================================================

def _check_text_record(
    client: ResolutionClient,
    claim: TextRecordClaim,
    convention: RecordConvention,
) -> None:
    main_node = node_of(claim.main_domain)
    auth_node = node_of(claim.auth_domain)
    main_label = describe(claim.main_domain)
    auth_label = describe(claim.auth_domain)

    # Forward: main resolves to main and declares auth
    main_resolver = _check_forward_address(
        client,
        main_node,
        claim.main_address,
        Check.MAIN_ENS_UNREGISTERED,
        Check.MAIN_ADDRESS_MISMATCH,
        main_label,
    )

    auth_record_key = convention.auth_record_key(claim.auth_key)
    declared = client.text(main_resolver, main_node, auth_record_key)
    expected = claim.auth_address.hex(with_prefix=True)
    if declared != expected:
        raise LinkageError(
            Check.INVALID_AUTH_DECLARATION,
            f"{main_label} record {auth_record_key!r} is {declared!r}, expected {expected!r}",
        )

    # Backward: auth resolves to auth and names main in its vault record
    auth_resolver = _check_forward_address(
        client,
        auth_node,
        claim.auth_address,
        Check.AUTH_ENS_UNREGISTERED,
        Check.AUTH_ADDRESS_MISMATCH,
        auth_label,
    )

    vault_key = convention.vault_record_key()
    vault = client.text(auth_resolver, auth_node, vault_key)
    expected = convention.vault_record_value(claim.auth_key, claim.main_address)
    if vault != expected:
        raise LinkageError(
            Check.INVALID_VAULT_DECLARATION,
            f"{auth_label} record {vault_key!r} is {vault!r}, expected {expected!r}",
        )


# =============================================================================
# VARIANT B: REVERSE NAMING
# =============================================================================

def _check_reverse_naming(
    client: ResolutionClient,
    claim: ReverseNamingClaim,
) -> None:
    main_node = claim.main_domain.node
    main_name = claim.main_domain.name

    _check_forward_address(
        client,
        main_node,
        claim.main_address,
        Check.MAIN_ENS_UNREGISTERED,
        Check.MAIN_ADDRESS_MISMATCH,
        main_name,
    )

    # Main's own reverse record must name the main domain. Forward
    # resolution alone can be pointed at any address by a third party.
    node = reverse_node(claim.main_address)
    resolver = client.resolver_for(node, Check.REVERSE_UNREGISTERED)
    claimed = client.name(resolver, node)
    if claimed != main_name:
        raise LinkageError(
            Check.MAIN_ENS_MISMATCH,
            f"Reverse record of {claim.main_address.hex()} is {claimed!r}, expected {main_name!r}",
        )

    auth_node = subnode(main_node, claim.auth_label)
    _check_forward_address(
        client,
        auth_node,
        claim.auth_address,
        Check.AUTH_ENS_UNREGISTERED,
        Check.NOT_AUTHENTICATED,
        f"{claim.auth_label}.{main_name}",
    )

    check_auth_label(claim.auth_label)


def _check_compound_name(
    client: ResolutionClient,
    claim: CompoundNameClaim,
) -> None:
    main_name = claim.main_domain.name

    _check_forward_address(
        client,
        claim.main_domain.node,
        claim.main_address,
        Check.MAIN_ENS_UNREGISTERED,
        Check.MAIN_ADDRESS_MISMATCH,
        main_name,
    )

    node = reverse_node(claim.auth_address)
    resolver = client.resolver_for(node, Check.REVERSE_UNREGISTERED)
    claimed = client.name(resolver, node)
    if claimed != claim.auth_name:
        raise LinkageError(
            Check.AUTH_ENS_MISMATCH,
            f"Reverse record of {claim.auth_address.hex()} is {claimed!r}, expected {claim.auth_name!r}",
        )

    leaf = split_auth_name(claim.auth_name, main_name)

    # Anyone can set their own reverse record to any string, so the
    # compound name must also forward-resolve to the auth address.
    _check_forward_address(
        client,
        subnode(claim.main_domain.node, leaf),
        claim.auth_address,
        Check.AUTH_ENS_UNREGISTERED,
        Check.NOT_AUTHENTICATED,
        claim.auth_name,
    )

    check_auth_label(leaf)


# =============================================================================
# STRATEGY DISPATCH
# =============================================================================

# Only the text-record strategy reads the record convention.
_STRATEGIES: dict[Variant, tuple[type, Callable, bool]] = {
    Variant.TEXT_RECORD: (TextRecordClaim, _check_text_record, True),
    Variant.REVERSE_NAMING: (ReverseNamingClaim, _check_reverse_naming, False),
    Variant.COMPOUND_NAME: (CompoundNameClaim, _check_compound_name, False),
}


def check_linkage(
    registry: Registry,
    variant: Variant,
    claim: Claim,
    convention: RecordConvention = DEFAULT_CONVENTION,
) -> None:
    """
    Run one strategy against the resolution layer.

    Raises:
        LinkageError: on the first failed check
        ResolutionQueryError: if the resolution layer itself fails
        TypeError: if the claim does not belong to the variant
    """
    claim_type, strategy, uses_convention = _STRATEGIES[variant]
    if not isinstance(claim, claim_type):
        raise TypeError(
            f"{variant.name} expects {claim_type.__name__}, got {type(claim).__name__}"
        )
    client = ResolutionClient(registry)
    if uses_convention:
        strategy(client, claim, convention)
    else:
        strategy(client, claim)


def validate_linkage(
    registry: Registry,
    variant: Variant,
    claim: Claim,
    convention: RecordConvention = DEFAULT_CONVENTION,
) -> LinkageResult:
    """
    Validate a claim and report the outcome.

    This is the binary accept/refuse gate. A refusal carries the failed
    check; there is no partial credit.
    """
    try:
        check_linkage(registry, variant, claim, convention)
    except LinkageError as e:
        logger.warning(f"Linkage refused ({variant.value}): {e}")
        return LinkageResult(
            success=False,
            variant=variant,
            failure=LinkageFailure.from_error(e),
        )

    logger.info(
        f"Linkage valid ({variant.value}): {claim.main_address} <-> {claim.auth_address}"
    )
    return LinkageResult(success=True, variant=variant)


# =============================================================================
# ENTRY POINTS
# =============================================================================

def validate(
    registry: Registry,
    main_address: AddressLike,
    main_domain: DomainLike,
    auth_key: str,
    auth_address: AddressLike,
    auth_domain: DomainLike,
    convention: RecordConvention = DEFAULT_CONVENTION,
) -> LinkageResult:
    """Text-record validation with both parties given explicitly."""
    claim = TextRecordClaim(
        main_address=main_address,
        main_domain=main_domain,
        auth_key=auth_key,
        auth_address=auth_address,
        auth_domain=auth_domain,
    )
    return validate_linkage(registry, Variant.TEXT_RECORD, claim, convention)


def validate_caller(
    registry: Registry,
    main_address: AddressLike,
    main_domain: DomainLike,
    auth_key: str,
    auth_domain: DomainLike,
    *,
    caller: AddressLike,
    convention: RecordConvention = DEFAULT_CONVENTION,
) -> LinkageResult:
    """
    Text-record validation with the auth party bound to ``caller``.

    The caller is whatever identity the surrounding environment has already
    authenticated for this call. It is passed in, never looked up.
    """
    return validate(
        registry,
        main_address,
        main_domain,
        auth_key,
        caller,
        auth_domain,
        convention=convention,
    )


def validate_reverse_naming(
    registry: Registry,
    main_address: AddressLike,
    main_domain: Union[DomainName, str, list, tuple],
    auth_label: str,
    auth_address: AddressLike,
) -> LinkageResult:
    claim = ReverseNamingClaim(
        main_address=main_address,
        main_domain=main_domain,
        auth_label=auth_label,
        auth_address=auth_address,
    )
    return validate_linkage(registry, Variant.REVERSE_NAMING, claim)


def validate_compound_name(
    registry: Registry,
    main_address: AddressLike,
    main_domain: Union[DomainName, str, list, tuple],
    auth_name: str,
    auth_address: AddressLike,
) -> LinkageResult:
    claim = CompoundNameClaim(
        main_address=main_address,
        main_domain=main_domain,
        auth_name=auth_name,
        auth_address=auth_address,
    )
    return validate_linkage(registry, Variant.COMPOUND_NAME, claim)
