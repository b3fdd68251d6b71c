"""Reconciliation of extracted incident fields with a matched person.

``models`` holds the incident report shared with the extractors; ``session``
holds the mutable state presented to the operator.
"""
