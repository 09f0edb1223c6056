# Resolution package for the linked-address validator
"""
Resolution layer access.

The registry and resolvers are external. This package fixes the interface
they are reached through and provides an in-memory stand-in.
"""
