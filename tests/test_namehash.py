"""
Tests for the Name-hash Engine.

These tests verify:
1. Published ENS namehash vectors
2. The precomputed addr.reverse node
3. Determinism and distinctness over the names used in the suite
4. DomainName / PrecomputedNode inputs
"""

import pytest

from linkedaddress.domain import (
    Address,
    DomainName,
    PrecomputedNode,
    describe,
    node_of,
)
from linkedaddress.namehash import (
    ADDR_REVERSE_NODE,
    ZERO_NODE,
    keccak256,
    namehash,
    namehash_name,
    node_hex,
    reverse_node,
    subnode,
)


ETH_NODE = "0x93cdeb708b7545dc668eb9280176169d1c33cfd8ed6f04690a0bcc88a93fc4ae"
FOO_ETH_NODE = "0xde9b09fd7c5f901e23a3f19fecc54828e9c848539801e86591bd9801b019f84f"


# =============================================================================
# HASH FUNCTION
# =============================================================================

class TestKeccak:
    """Keccak-256 must be the Ethereum variant, not SHA3-256."""

    def test_empty_input(self):
        assert keccak256(b"").hex() == (
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )

    def test_differs_from_sha3(self):
        import hashlib
        assert keccak256(b"eth") != hashlib.sha3_256(b"eth").digest()


# =============================================================================
# NAMEHASH
# =============================================================================

class TestNamehash:
    """Test namehash construction."""

    def test_empty_sequence_is_zero_node(self):
        assert namehash([]) == ZERO_NODE
        assert namehash_name("") == ZERO_NODE

    def test_eth(self):
        assert node_hex(namehash(["eth"])) == ETH_NODE

    def test_foo_eth(self):
        assert node_hex(namehash(["foo", "eth"])) == FOO_ETH_NODE
        assert node_hex(namehash_name("foo.eth")) == FOO_ETH_NODE

    def test_processed_from_root_backward(self):
        """namehash(a.b) == subnode(namehash(b), a)."""
        assert namehash(["wilkins", "eth"]) == subnode(namehash(["eth"]), "wilkins")

    def test_deterministic(self):
        assert namehash(["wilkins", "eth"]) == namehash(("wilkins", "eth"))

    def test_distinct_names_do_not_collide(self):
        names = [
            "eth", "wilkins.eth", "auth.wilkins.eth", "auth1.wilkins.eth",
            "hijacker.eth", "auth.hijacker.eth", "eth.wilkins", "addr.reverse",
        ]
        nodes = {namehash_name(name) for name in names}
        assert len(nodes) == len(names)

    def test_node_is_32_bytes(self):
        assert len(namehash_name("auth.wilkins.eth")) == 32


class TestReverseNode:
    """Test reverse-lookup node computation."""

    def test_precomputed_constant_matches_namehash(self):
        assert ADDR_REVERSE_NODE == namehash(["addr", "reverse"])

    def test_reverse_node_matches_full_namehash(self):
        address = Address(bytes.fromhex("AB" * 20))
        expected = namehash([address.hex(with_prefix=False), "addr", "reverse"])
        assert reverse_node(address) == expected

    def test_reverse_node_accepts_raw_bytes(self):
        raw = bytes(range(20))
        assert reverse_node(raw) == reverse_node(Address(raw))

    def test_reverse_label_is_lowercase(self):
        address = Address.from_hex("0x" + "AB" * 20)
        expected = namehash_name(("ab" * 20) + ".addr.reverse")
        assert reverse_node(address) == expected


# =============================================================================
# DOMAIN INPUTS
# =============================================================================

class TestDomainInputs:
    """DomainName derives its node; PrecomputedNode is taken as-is."""

    def test_parse_and_name(self):
        domain = DomainName.parse("auth.wilkins.eth")
        assert domain.labels == ("auth", "wilkins", "eth")
        assert domain.name == "auth.wilkins.eth"

    def test_list_labels_stored_as_tuple(self):
        domain = DomainName(["wilkins", "eth"])
        assert domain.labels == ("wilkins", "eth")
        assert hash(domain) == hash(DomainName(("wilkins", "eth")))

    @pytest.mark.parametrize("name", ["wilkins..eth", "wilkins.eth.", ".eth"])
    def test_parse_rejects_empty_label(self, name):
        with pytest.raises(ValueError):
            DomainName.parse(name)

    def test_label_sequence_rejects_empty_label(self):
        with pytest.raises(ValueError):
            DomainName(["wilkins", "", "eth"])

    def test_empty_name_is_root(self):
        assert DomainName.parse("").labels == ()

    def test_domain_name_node(self):
        assert DomainName.parse("foo.eth").node == namehash_name("foo.eth")

    def test_precomputed_node_is_not_rederived(self):
        arbitrary = bytes([7]) * 32
        assert node_of(PrecomputedNode(arbitrary)) == arbitrary

    def test_precomputed_node_from_hex(self):
        assert PrecomputedNode.from_hex(FOO_ETH_NODE).node == namehash_name("foo.eth")

    def test_precomputed_node_wrong_length_rejected(self):
        with pytest.raises(ValueError):
            PrecomputedNode(b"\x00" * 31)

    def test_node_of_rejects_plain_string(self):
        with pytest.raises(TypeError):
            node_of("wilkins.eth")

    def test_describe(self):
        assert describe(DomainName.parse("wilkins.eth")) == "wilkins.eth"
        assert describe(PrecomputedNode.from_hex(ETH_NODE)) == ETH_NODE
