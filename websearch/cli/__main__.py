"""CLI entry point.

Allows running the CLI as a module: python -m websearch.cli
"""

from websearch.cli import app

if __name__ == "__main__":
    app()
