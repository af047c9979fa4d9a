"""Command line interface for ptask."""
