"""
Zephyr SDK - Zephyr Scale test management exposed as langchain tools.

This package contains three main modules:
- tools: the Zephyr Scale toolkit (test cases, test runs, folders, executions)
- configurations: connection settings for the toolkit
- cli: command line access to the tools
"""

__version__ = "0.1.0"

__all__ = ["tools", "configurations", "cli"]

import importlib

def __getattr__(name):
    if name in __all__:
        module = importlib.import_module(f".{name}", __name__)
        globals()[name] = module
        return module
    raise AttributeError(f"module {__name__} has no attribute {name}")
