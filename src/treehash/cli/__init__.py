"""Command line interface for treehash."""
