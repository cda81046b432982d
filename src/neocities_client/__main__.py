"""Entry point for running the client as a module."""

import sys


def main():
    """Main entry point for the NeoCities CLI."""
    from neocities_client.cli import main as cli_main

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
