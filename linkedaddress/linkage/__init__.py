# Linkage package for the linked-address validator
"""
Bidirectional linkage validation.

Proves that a main identity and an auth identity have each declared the
other through the resolution layer.
"""
