"""
Klase CLI Module
"""

from klase.cli.main import app, main

__all__ = ["app", "main"]
