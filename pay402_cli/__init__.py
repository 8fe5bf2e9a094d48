"""
Command-line interface for the pay402 SDK.
"""
from .main import main

__all__ = ["main"]
