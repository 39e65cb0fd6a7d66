"""
Entry point for running sparkcli as a module.

This allows users to run the CLI using:
    python -m sparkcli [command] [options]
"""

from sparkcli.cli.app import main

if __name__ == "__main__":
    main()
