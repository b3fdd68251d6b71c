"""Command line entry points for tsunageru."""
