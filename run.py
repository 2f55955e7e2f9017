#!/usr/bin/env python3
"""
Run the HTTP Exercise Server.

Usage:
    python run.py              # uvicorn on SERVER_HOST:SERVER_PORT (.env)

    # or with venv
    .venv/Scripts/python run.py
"""
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))


if __name__ == "__main__":
    from http_exercise_server.cli import main
    main(["serve"])
