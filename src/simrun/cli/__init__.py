"""
simrun CLI

Command-line interface for installing apps on iOS simulators.
"""

from .main import cli

__all__ = ["cli", "main"]


def main() -> None:
    """Main CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
