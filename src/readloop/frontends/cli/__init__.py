"""Command line interface for readloop."""
