"""
Label-Format Validation for the reverse-naming linkage scheme.

An auth subdomain label is the literal prefix ``auth`` followed by zero or
more ASCII digits:

    auth      valid
    auth0     valid
    auth12    valid
    author    invalid (non-digit after prefix)
    Auth1     invalid (prefix is case-sensitive)

The predicate never raises. The ``check_*`` functions raise LinkageError
and are what the validator calls.
"""

from __future__ import annotations

from .domain import Check, LinkageError


# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================

AUTH_LABEL_PREFIX = "auth"
DIGITS = frozenset("0123456789")


# =============================================================================
# AUTH LABEL VALIDATION
# =============================================================================

def is_valid_auth_label(label: str) -> bool:
    """Check a label against the ``auth[0-9]*`` convention."""
    if not isinstance(label, str) or not label.startswith(AUTH_LABEL_PREFIX):
        return False
    return all(ch in DIGITS for ch in label[len(AUTH_LABEL_PREFIX):])


def check_auth_label(label: str) -> None:
    """
    Validate an auth label, naming the first violation.

    Raises:
        LinkageError: INVALID_PREFIX if the label does not start with
            ``auth``, INVALID_CHARACTER if a non-digit follows it
    """
    if not isinstance(label, str) or not label.startswith(AUTH_LABEL_PREFIX):
        raise LinkageError(
            Check.INVALID_PREFIX,
            f"Label {label!r} does not start with {AUTH_LABEL_PREFIX!r}",
        )

    for position, ch in enumerate(label[len(AUTH_LABEL_PREFIX):], start=len(AUTH_LABEL_PREFIX)):
        if ch not in DIGITS:
            raise LinkageError(
                Check.INVALID_CHARACTER,
                f"Label {label!r} has non-digit {ch!r} at position {position}",
            )


# =============================================================================
# COMPOUND AUTH NAME
# =============================================================================

def split_auth_name(auth_name: str, main_name: str) -> str:
    """
    Return the leaf label of an untrusted compound auth name.

    ``auth1.wilkins.eth`` under ``wilkins.eth`` yields ``auth1``. The whole
    suffix ``.wilkins.eth`` must match, and the leaf must be exactly one
    non-empty label.

    Raises:
        LinkageError: AUTH_NAME_MISMATCH if auth_name is not directly under
            main_name, INVALID_PREFIX if the leaf is empty or dotted
    """
    suffix = "." + main_name
    if not main_name or not auth_name.endswith(suffix):
        raise LinkageError(
            Check.AUTH_NAME_MISMATCH,
            f"Auth name {auth_name!r} is not a subdomain of {main_name!r}",
        )

    leaf = auth_name[:-len(suffix)]
    if not leaf or "." in leaf:
        raise LinkageError(
            Check.INVALID_PREFIX,
            f"Auth name {auth_name!r} must add exactly one label to {main_name!r}",
        )
    return leaf
