# CLI package for the linked-address validator
"""
Read-only CLI interface for running linkage checks locally.

Commands:
    linkedaddress namehash          — Print a NodeId
    linkedaddress reverse-node      — Print a reverse NodeId
    linkedaddress check-label       — Check an auth label
    linkedaddress validate          — Text-record linkage check
    linkedaddress validate-reverse  — Reverse-naming linkage check
"""
