"""Command line interface entry points for finseries."""

from .main import app, create_app, run

__all__ = ["app", "create_app", "run"]
