#!/usr/bin/env python3
"""
SessionGate -- command-line client.

Usage:
  python main.py signup you@example.com
  python main.py signin you@example.com
  python main.py me
  python main.py dashboard
  python main.py logout
  python main.py --api-url http://localhost:3000 dashboard

Passwords are prompted for (never echoed) unless --password is given.

Environment variables:
  SESSIONGATE_API_URL      Base URL of the API. Default http://localhost:3000.
  SESSIONGATE_STATE_PATH   Where the session token is stored.
                           Default ~/.sessiongate/session.json.
"""

import argparse
import getpass
import sys
from typing import Optional

from client.api import AuthClient, AuthClientError
from client.session import SessionFile
from core.config import get_client_settings

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_UNAUTHENTICATED = 2


def _read_password(args: argparse.Namespace) -> str:
    if args.password is not None:
        return args.password
    return getpass.getpass("Password: ")


def _print_user(user: Optional[dict]) -> None:
    if not isinstance(user, dict) or not user:
        print("  (no profile data)")
        return
    print(f"  Email:    {user.get('email', 'N/A')}")
    print(f"  User ID:  {user.get('id', 'N/A')}")
    created = user.get("createdAt") or "N/A"
    # ISO timestamp -> date only, like the dashboard card
    print(f"  Joined:   {created[:10]}")


def cmd_signup(client: AuthClient, args: argparse.Namespace) -> int:
    result = client.signup(args.email, _read_password(args))
    print(result.message)
    if result.success:
        _print_user(result.data.get("user") if isinstance(result.data, dict) else None)
        return EXIT_OK
    return EXIT_FAILED


def cmd_signin(client: AuthClient, args: argparse.Namespace) -> int:
    result = client.signin(args.email, _read_password(args))
    print(result.message)
    if result.success:
        _print_user(result.data.get("user") if isinstance(result.data, dict) else None)
        return EXIT_OK
    return EXIT_FAILED


def cmd_logout(client: AuthClient, args: argparse.Namespace) -> int:
    if not client.is_authenticated():
        print("Not signed in.")
        return EXIT_OK
    result = client.logout()
    print(result.message if result is not None else "Server unreachable; local session cleared.")
    return EXIT_OK


def cmd_me(client: AuthClient, args: argparse.Namespace) -> int:
    if not client.is_authenticated():
        print("Not signed in. Run: main.py signin <email>")
        return EXIT_UNAUTHENTICATED
    result = client.me()
    print(result.message)
    if result.success:
        _print_user(result.data)
        return EXIT_OK
    return EXIT_UNAUTHENTICATED if result.status_code == 401 else EXIT_FAILED


def cmd_dashboard(client: AuthClient, args: argparse.Namespace) -> int:
    """Show the dashboard only for a session the server still accepts."""
    user = client.restore()
    if user is None:
        print("Please sign in to view the dashboard. Run: main.py signin <email>")
        return EXIT_UNAUTHENTICATED
    print("=" * 48)
    print("  SessionGate Dashboard")
    print("=" * 48)
    print("  You have successfully authenticated with the SessionGate API.")
    print()
    print("  Your Profile")
    _print_user(user)
    print()
    print(f"  API docs: {client.base_url}/api-docs")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SessionGate command-line client")
    parser.add_argument("--api-url", help="API base URL (overrides SESSIONGATE_API_URL)")
    parser.add_argument("--state-path", help="Session file path (overrides SESSIONGATE_STATE_PATH)")
    sub = parser.add_subparsers(dest="command", required=True)

    for name, handler, help_text in (
        ("signup", cmd_signup, "Create an account and sign in"),
        ("signin", cmd_signin, "Sign in to an existing account"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("email")
        p.add_argument("--password", help="Password (prompted for if omitted)")
        p.set_defaults(handler=handler)

    sub.add_parser("logout", help="Sign out and discard the stored token").set_defaults(handler=cmd_logout)
    sub.add_parser("me", help="Show the signed-in account").set_defaults(handler=cmd_me)
    sub.add_parser("dashboard", help="Show the dashboard (requires sign-in)").set_defaults(handler=cmd_dashboard)
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_client_settings()
    client = AuthClient(
        args.api_url or settings.api_url,
        SessionFile(args.state_path or settings.state_path),
        timeout=settings.timeout_seconds,
    )
    try:
        return args.handler(client, args)
    except AuthClientError as e:
        print(f"  [!] {e}", file=sys.stderr)
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
