"""Main function for thermorhythm."""

from thermorhythm.core import cli


def run_main() -> None:
    """Main entry point to thermorhythm."""
    cli.app()


if __name__ == "__main__":
    cli.app()
