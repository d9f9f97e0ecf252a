"""CLI package for the Amazon Q gateway

Runs the server and manages the stored Amazon Q credentials.
"""

from cli.main import main

__all__ = [
    "main",
]
