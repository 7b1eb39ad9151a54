"""Command-line interface for ambilink."""
