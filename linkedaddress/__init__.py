# linked-address
# Bidirectional ENS address linkage validation

"""
Core invariant: a main address and an auth address are linked only when
both sides have declared the link through the resolution layer. Neither
side can forge the other's declaration.

This package verifies declarations; it never issues or stores them.
"""

__version__ = "0.1.0"
