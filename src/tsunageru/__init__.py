"""tsunageru: offline reconciliation of incident notices with a staff directory.

This package turns free-text incident messages and scanned code payloads into
structured incident fields, matches the person they name against a small
in-memory directory, resolves locations from a zone/place site map, and
merges everything into one record for the responding crew.
"""
