"""Command-line entry points for quizbank."""

from .main import main

__all__ = ["main"]
