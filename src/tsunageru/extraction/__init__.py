"""Extraction package for tsunageru.

Rule-based extraction of structured incident fields from free-text notices
and decoding of scanned person/location code payloads.
"""
