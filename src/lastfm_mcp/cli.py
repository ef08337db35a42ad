"""Command-line interface for Last.fm MCP server setup."""

import argparse
import os
import sys

from .client import Lastfm
from .config import (
    API_KEY_ENV,
    get_api_key,
    get_config_dir,
    get_default_username,
    load_config,
    save_config,
)
from .exceptions import LastfmError


def cmd_init(args):
    """Write config.json with the API key and default username."""
    config_file = get_config_dir() / "config.json"

    if config_file.exists() and not args.force:
        print(f"Config already exists: {config_file}")
        print("Use --force to overwrite")
        return 1

    save_config(args.api_key, username=args.username)

    print(f"Created config file: {config_file}")
    print()
    print("Next steps:")
    print("1. Run: lastfm-mcp status")
    print("2. Run: lastfm-mcp serve")
    return 0


def cmd_status(args):
    """Check configuration and API access."""
    config_dir = get_config_dir()

    print("Last.fm MCP Status")
    print("=" * 40)
    print(f"Config directory: {config_dir}")
    print()

    config_file = config_dir / "config.json"
    if config_file.exists():
        print("✓ Config file exists")
        try:
            config = load_config()
            print(f"  Username: {config.get('username', 'NOT SET')}")
        except ValueError as e:
            print(f"  Error reading config: {e}")
    else:
        print("✗ Config file missing")

    if os.environ.get(API_KEY_ENV):
        print(f"✓ API key set via {API_KEY_ENV}")

    print()

    try:
        api_key = get_api_key()
    except (FileNotFoundError, ValueError):
        print("✗ Cannot test API (missing API key)")
        return 1

    try:
        username = get_default_username()
    except ValueError as e:
        print(f"✗ Cannot test API (unreadable config: {e})")
        return 1
    if not username:
        print("✗ Cannot test API (no default username)")
        return 1

    try:
        user = Lastfm(api_key).user_info(username).get()
        print(f"✓ API connection successful ({user.get('playcount', 0)} scrobbles for {username})")
    except LastfmError as e:
        print(f"✗ API error: {e}")
        return 1

    return 0


def cmd_serve(args):
    """Start the MCP server."""
    from .server import main
    main()


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Last.fm MCP Server - Listening statistics via API"
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # init
    init_parser = subparsers.add_parser("init", help="Initialize configuration")
    init_parser.add_argument("--api-key", required=True, help="Last.fm API key")
    init_parser.add_argument("--username", help="Default Last.fm username")
    init_parser.add_argument("--force", action="store_true", help="Overwrite existing config")

    # status
    subparsers.add_parser("status", help="Check configuration and API access")

    # serve
    subparsers.add_parser("serve", help="Start MCP server")

    args = parser.parse_args()

    if args.command == "init":
        sys.exit(cmd_init(args))
    elif args.command == "status":
        sys.exit(cmd_status(args))
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(0)


if __name__ == "__main__":
    main()
