"""Main function for sadehpy."""

from sadehpy.core import cli


def run_main() -> None:
    """Main entry point to sadehpy."""
    cli.app()


if __name__ == "__main__":
    cli.app()
