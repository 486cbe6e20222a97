"""
Zephyr SDK CLI - command-line access to the Zephyr Scale toolkit.

Lists the available tools, runs a single tool with JSON arguments and
checks the configured connection, using credentials from a .env file.
"""

from .cli import cli

__all__ = ['cli']
