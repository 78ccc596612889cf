"""
pagerunner: run scripted headless-browser actions from the command line.

Package Structure:
- core: configuration, logging, errors, results
- prompts: parameter specs and interactive collection
- browser: automation handle, factory and sequential scripts (requires playwright)
- actions: the action units and their registry
- cli: the dispatcher
"""

__version__ = "0.1.0"
