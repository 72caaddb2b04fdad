# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

import os

# Keep test runs from writing JSON log files
# This must happen before blogcms is imported anywhere
os.environ["LOG_TO_FILE"] = "false"
os.environ["DEBUG"] = "false"
