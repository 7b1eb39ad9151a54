"""Main entry point for ambilink."""

from ambilink.cli.main import cli

if __name__ == "__main__":
    cli()
