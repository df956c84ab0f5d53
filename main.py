#!/usr/bin/env python3
"""
Time Bank Portal - operator CLI

Administrative chores that are easier from a terminal than from the
portal: creating the first administrator, checking the hour totals and
printing a direct leader's report.

Usage:
    python main.py seed-admin --username admin --full-name "Super Administrador"
    python main.py summary
    python main.py leader-report "Maria Souza"
    python main.py serve --port 8000
"""

import argparse
import getpass
import logging
import sys
from typing import Optional

from models.data_models import ADMIN_PERMISSIONS
from storage.supabase_client import DuplicateRecordError, SupabaseClient
from timebank.ledger import summarize_balances
from utils.config_loader import load_config
from utils.logger import setup_logger
from utils.passwords import hash_password

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_FULL_NAME = "Super Administrador"


def _format_hours(hours) -> str:
    return f"{float(hours or 0):+.2f}h"


def seed_admin(
    username: str,
    password: str,
    full_name: str,
    supabase: Optional[SupabaseClient] = None
) -> bool:
    """
    Create an administrator holding every permission.

    Nothing is written if the username already exists, so the command can
    run on every deploy.

    Args:
        username: Login name
        password: Plain password (stored as a bcrypt hash)
        full_name: Display name
        supabase: SupabaseClient instance (optional, will create if not provided)

    Returns:
        bool: True if the administrator exists afterwards, False otherwise
    """
    if not username or not password:
        logger.error("Username and password are required")
        return False

    if supabase is None:
        config = load_config()
        supabase = SupabaseClient(
            config.credentials.supabase_url,
            config.credentials.supabase_key
        )

    try:
        if supabase.get_administrator_by_username(username):
            logger.info(f"Administrator '{username}' already exists - nothing to do")
            return True

        record = {
            "full_name": full_name,
            "username": username,
            "password_hash": hash_password(password),
        }
        for permission in ADMIN_PERMISSIONS:
            record[permission] = True

        admin = supabase.create_administrator(record)
    except DuplicateRecordError:
        logger.info(f"Administrator '{username}' was created concurrently - nothing to do")
        return True
    except Exception as e:
        logger.error(f"Failed to create administrator '{username}': {e}")
        return False

    logger.info(f"✓ Created administrator '{username}' (id={admin.get('id')}) with all permissions")
    return True


def print_summary(supabase: SupabaseClient) -> bool:
    """
    Log the dashboard summary: hour totals and the top balances.

    Returns:
        bool: True if successful, False otherwise
    """
    try:
        totals = supabase.get_balance_totals()
        positive = supabase.get_top_balances(positive=True)
        negative = supabase.get_top_balances(positive=False)
    except Exception as e:
        logger.error(f"Failed to load dashboard summary: {e}")
        return False

    logger.info("=" * 80)
    logger.info("TIME BANK SUMMARY")
    logger.info("=" * 80)
    logger.info(f"Total positive hours: {_format_hours(totals['total_positive_hours'])}")
    logger.info(f"Total negative hours: {_format_hours(totals['total_negative_hours'])}")

    logger.info("\nTop positive balances:")
    for collaborator in positive:
        logger.info(f"  {collaborator['full_name']}: {_format_hours(collaborator['balance_hours'])}")
    if not positive:
        logger.info("  (none)")

    logger.info("\nTop negative balances:")
    for collaborator in negative:
        logger.info(f"  {collaborator['full_name']}: {_format_hours(collaborator['balance_hours'])}")
    if not negative:
        logger.info("  (none)")

    return True


def print_leader_report(leader_name: str, supabase: SupabaseClient) -> bool:
    """
    Log every collaborator reporting to a direct leader, with totals.

    Returns:
        bool: True if successful, False otherwise
    """
    try:
        collaborators = supabase.list_collaborators_by_leader(leader_name)
    except Exception as e:
        logger.error(f"Failed to load collaborators of '{leader_name}': {e}")
        return False

    totals = summarize_balances(collaborators)

    logger.info("=" * 80)
    logger.info(f"LEADER REPORT: {leader_name}")
    logger.info("=" * 80)

    if not collaborators:
        logger.warning(f"No collaborators found for leader '{leader_name}'")
        return True

    for collaborator in collaborators:
        logger.info(
            f"  [{collaborator.get('badge_number')}] {collaborator.get('full_name')}: "
            f"{_format_hours(collaborator.get('balance_hours'))}"
        )

    logger.info("-" * 80)
    logger.info(f"Collaborators: {len(collaborators)}")
    logger.info(f"Total positive hours: {_format_hours(totals['total_positive_hours'])}")
    logger.info(f"Total negative hours: {_format_hours(totals['total_negative_hours'])}")
    return True


def main():
    """Main CLI entrypoint."""
    parser = argparse.ArgumentParser(
        description="Time Bank Portal - operator commands",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create the first administrator (prompts for the password)
  python main.py seed-admin --username admin

  # Hour totals and top balances
  python main.py summary

  # Balances of one leader's team
  python main.py leader-report "Maria Souza"

  # Start the API server
  python main.py serve --port 8000
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    seed_parser = subparsers.add_parser(
        "seed-admin",
        help="Create an administrator with every permission"
    )
    seed_parser.add_argument(
        "--username",
        default=DEFAULT_ADMIN_USERNAME,
        help=f"Login name (default: {DEFAULT_ADMIN_USERNAME})"
    )
    seed_parser.add_argument(
        "--password",
        default=None,
        help="Password (prompted for when omitted)"
    )
    seed_parser.add_argument(
        "--full-name",
        default=DEFAULT_ADMIN_FULL_NAME,
        help=f"Display name (default: {DEFAULT_ADMIN_FULL_NAME})"
    )

    subparsers.add_parser(
        "summary",
        help="Show total positive/negative hours and the top balances"
    )

    report_parser = subparsers.add_parser(
        "leader-report",
        help="Show the balances of a direct leader's collaborators"
    )
    report_parser.add_argument(
        "leader",
        help="Direct leader name, exactly as stored on the collaborators"
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Start the API server"
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to run the API server on (default: 8000)"
    )
    serve_parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to bind the server to (default: 127.0.0.1)"
    )

    args = parser.parse_args()

    # Show help if no command provided
    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "serve":
        from backend.server import run_server
        setup_logger()
        run_server(args.host, args.port)
        sys.exit(0)

    config = load_config()
    setup_logger(config.log_level)

    try:
        supabase = SupabaseClient(
            config.credentials.supabase_url,
            config.credentials.supabase_key
        )
    except Exception as e:
        logger.error(f"Failed to initialize Supabase client: {e}")
        sys.exit(1)

    if args.command == "seed-admin":
        password = args.password or getpass.getpass("Password: ")
        success = seed_admin(args.username, password, args.full_name, supabase=supabase)
    elif args.command == "summary":
        success = print_summary(supabase)
    else:
        success = print_leader_report(args.leader, supabase)

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
