#!/usr/bin/env python3
"""
Interactive Test Client for Shard

A simple command-line client for manually testing the Shard server.

Usage:
    python scripts/client.py                                 # http://localhost:8080
    python scripts/client.py --url http://1.2.3.4:8080       # Specific server

Commands:
    PUT <key> <value>   - Store a key-value pair
    GET <key>           - Retrieve a value
    HEALTH              - Show the health payload
    METRICS             - Show the metrics
    help                - Show this help
    exit                - Exit client
"""

import argparse
import sys

import httpx

from shard.client import ShardClient, ShardError

# Enable command history with arrow keys (works on Unix systems)
try:
    import readline  # noqa: F401
except ImportError:
    pass  # readline not available on Windows by default


def print_help():
    """Print help message."""
    print("""
Shard Commands:
---------------
  PUT <key> <value>   Store a key-value pair (value may contain spaces)
  GET <key>           Retrieve the value for a key
  HEALTH              Show service status, uptime and key count
  METRICS             Show the metrics exposition

Client Commands:
----------------
  help                Show this help message
  exit                Exit the client

Examples:
---------
  PUT color red       Store "red" under "color"
  GET color           Get value for "color"
""")


def run_command(client: ShardClient, line: str) -> str:
    """Execute one REPL line and return the text to print."""
    parts = line.split(" ", 2)
    command = parts[0].upper()

    if command == "PUT" and len(parts) == 3:
        client.put(parts[1], parts[2])
        return "OK"
    if command == "GET" and len(parts) == 2:
        value = client.get(parts[1])
        return value if value is not None else "(not found)"
    if command == "HEALTH" and len(parts) == 1:
        return str(client.health())
    if command == "METRICS" and len(parts) == 1:
        return "\n".join(f"{name} {value}" for name, value in client.metrics().items())
    return "ERROR: invalid command (type 'help')"


def main():
    parser = argparse.ArgumentParser(
        description="Interactive test client for Shard"
    )
    parser.add_argument(
        "--url",
        type=str,
        default="http://localhost:8080",
        help="Server base URL (default: http://localhost:8080)"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=5.0,
        help="Request timeout in seconds (default: 5.0)"
    )

    args = parser.parse_args()

    print("Shard Client")
    print("============")
    print(f"Server: {args.url}")

    with ShardClient(args.url, timeout=args.timeout) as client:
        try:
            client.health()
        except httpx.HTTPError as e:
            print(f"Failed to reach server: {e}")
            print("  Try: python -m shard.server")
            sys.exit(1)

        print("Connected! Type 'help' for commands.\n")

        try:
            while True:
                try:
                    line = input(">>> ").strip()
                except EOFError:
                    print("\nGoodbye!")
                    break

                if not line:
                    continue

                lower_cmd = line.lower()
                if lower_cmd == "help":
                    print_help()
                    continue
                if lower_cmd in ("exit", "quit"):
                    print("Goodbye!")
                    break

                try:
                    print(run_command(client, line))
                except (ShardError, ValueError) as e:
                    print(f"ERROR: {e}")
                except httpx.HTTPError as e:
                    print(f"ERROR: {e}")

        except KeyboardInterrupt:
            print("\n\nInterrupted. Goodbye!")


if __name__ == "__main__":
    main()
