"""Normalization helpers for tsunageru.

Text folding applied before directory comparisons so that searches are
insensitive to the phonetic script an operator happened to type in.
"""
