"""
Pytest configuration for http-exercise-server tests.

This file ensures that the src directory is in the Python path
so that tests can import from http_exercise_server, and relaxes the
login rate limit so repeated logins across tests are not throttled.
"""
import sys
import os
from pathlib import Path

# Must be set before Config is imported
os.environ.setdefault("LOGIN_RATE_LIMIT", "1000/minute")

# Add src directory to Python path
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))
