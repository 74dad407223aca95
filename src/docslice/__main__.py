"""Entry point for running docslice as a module.

Usage:
    python -m docslice [command] [options]
"""

from docslice.cli.main import app

if __name__ == "__main__":
    app()
