#!/usr/bin/env python3
"""
HTTP Exercise Server CLI

Usage:
    python -m http_exercise_server.cli serve    # Start the server (uvicorn)
    python -m http_exercise_server.cli status   # Probe a running server
"""

import asyncio
import argparse
import sys

import httpx

from .core import Config

# Fix Windows console encoding for Unicode
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding='utf-8', errors='replace')
    sys.stderr.reconfigure(encoding='utf-8', errors='replace')


def cmd_serve(host: str, port: int):
    """Run with uvicorn"""
    import uvicorn

    print(f"Starting HTTP Exercise Server on http://{host}:{port}")
    uvicorn.run(
        "http_exercise_server.main:app",
        host=host,
        port=port,
        log_level=Config.LOG_LEVEL.lower(),
        http="h11",
    )


async def cmd_status(base_url: str) -> bool:
    """Check that a server answers on base_url and list its endpoints"""
    print("=" * 60)
    print("HTTP Exercise Server Status")
    print("=" * 60)
    print(f"Server URL: {base_url}")
    print()

    async with httpx.AsyncClient(timeout=10.0) as client:
        try:
            response = await client.get(f"{base_url}/")
        except httpx.HTTPError as e:
            print(f"Server: ✗ Cannot connect ({e})")
            return False

        if response.status_code != 200:
            print(f"Server: ✗ Not responding ({response.status_code})")
            return False

        info = response.json()
        print(f"Server: ✓ {info.get('message', 'up')}")
        print()
        print("Endpoints:")
        for route, description in info.get("endpoints", {}).items():
            print(f"  {route:<22} {description}")
        return True


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="HTTP Exercise Server CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m http_exercise_server.cli serve --port 3000
  python -m http_exercise_server.cli status
        """
    )
    parser.add_argument(
        "command",
        choices=["serve", "status"],
        help="Command to run"
    )
    parser.add_argument("--host", default=Config.SERVER_HOST, help="Bind/probe host")
    parser.add_argument("--port", type=int, default=Config.SERVER_PORT, help="Bind/probe port")

    args = parser.parse_args(argv)

    if args.command == "serve":
        cmd_serve(args.host, args.port)
    elif args.command == "status":
        ok = asyncio.run(cmd_status(f"http://{args.host}:{args.port}"))
        sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
