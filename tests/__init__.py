"""
pagerunner Test Suite

Structure:
- unit/: Fast, isolated unit tests driven by fake Playwright objects
- conftest.py: shared fakes and fixtures
"""
