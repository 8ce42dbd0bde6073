"""
Convenience entry point for running roomfinder as a module.

Usage: python -m roomfinder [command] [options]
"""

from roomfinder.cli.app import app

if __name__ == "__main__":
    app()
