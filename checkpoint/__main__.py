"""
Woodlands Checkpoint CLI entry point.

Runs the bot and provides offline helpers for checking the data files.
"""

import argparse
import asyncio
import sys
from pathlib import Path

from checkpoint import __version__
from checkpoint.config.logging import get_logger, setup_logging
from checkpoint.config.settings import Settings, load_settings
from checkpoint.guilds import GuildRegistry, RegistryFormatError
from checkpoint.roster import IdentityClaim, InvalidClaimError, RosterFormatError, load_roster


def create_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        prog="checkpoint",
        description="Discord bot that verifies students against a school roster",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Woodlands Checkpoint {__version__}",
    )

    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to .env file (default: .env in current directory)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override logging level from config",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("run", help="Run the Discord bot")
    subparsers.add_parser("config", help="Show current configuration")

    # Check command
    check_parser = subparsers.add_parser(
        "check",
        help="Check a student's details against the roster file, as /verify would",
    )
    check_parser.add_argument("first_name", help="Student's first name")
    check_parser.add_argument("last_name", help="Student's last name")
    check_parser.add_argument("grade", type=int, help="Student's grade (7-12)")
    check_parser.add_argument("teacher_name", help='Homeroom teacher, e.g. "Miller" or "Mr. Miller"')
    check_parser.add_argument(
        "student_number",
        nargs="?",
        type=int,
        default=0,
        help="Student number (accepted for parity with /verify; not compared)",
    )
    check_parser.add_argument(
        "--roster",
        type=Path,
        default=None,
        help="Roster file to check against (default: DATA__ROSTER_PATH from config)",
    )

    # Guilds command
    guilds_parser = subparsers.add_parser(
        "guilds",
        help="List the guilds configured in the guild file",
    )
    guilds_parser.add_argument(
        "--file",
        type=Path,
        default=None,
        help="Guild file to read (default: DATA__GUILDS_PATH from config)",
    )

    return parser


def cmd_config(settings: Settings) -> int:
    """Show current configuration."""
    logger = get_logger(__name__)

    logger.info("\n=== Woodlands Checkpoint Configuration ===\n")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Log Level: {settings.log_level}")
    logger.info(f"Log File: {settings.log_file or 'None (console only)'}")
    logger.info(f"\nBot Name: {settings.bot.name}")
    logger.info(f"Bot Token: {'Set' if settings.bot.token else 'Not set'}")
    logger.info(f"Dev Guild: {settings.bot.dev_guild_id or 'None (global command sync)'}")
    logger.info(f"Status: Listening to {settings.bot.status_text}")
    logger.info(f"Max Pronouns Per Member: {settings.bot.pronoun_max_values}")
    logger.info(f"\nRoster File: {settings.data.roster_path}")
    logger.info(f"Guild File: {settings.data.guilds_path}")

    return 0


def cmd_run(settings: Settings) -> int:
    """Start the Discord bot."""
    logger = get_logger(__name__)

    if not settings.bot.token:
        logger.error(
            "Discord bot token not set. Add BOT__TOKEN=<your-token> to your .env file."
        )
        return 1

    from checkpoint.bot import CheckpointBot

    bot = CheckpointBot(settings)
    logger.info(f"Starting {settings.bot.name}...")
    try:
        # log_handler=None: disable discord.py's default logging setup and use ours
        bot.run(settings.bot.token, log_handler=None)
    except (FileNotFoundError, ValueError):
        # Already logged by setup_hook
        return 1
    return 0


async def cmd_check(args, settings: Settings) -> int:
    """
    Check a claim against the roster file without connecting to Discord.

    Exit code 0 means /verify would accept these details, 1 means it would not.
    """
    logger = get_logger(__name__)
    roster_path = args.roster or settings.data.roster_path

    try:
        roster = await load_roster(roster_path)
    except (FileNotFoundError, RosterFormatError) as e:
        logger.error(f"Could not load roster: {e}")
        return 1

    try:
        claim = IdentityClaim.from_names(
            args.first_name, args.last_name, args.grade, args.teacher_name, args.student_number
        )
        matched = roster.verify(claim)
    except InvalidClaimError as e:
        print(f"Invalid input: {e}")
        return 1

    initials = f"{claim.first_initial}{claim.last_initial}"
    if matched:
        print(f"Match: {initials}, grade {claim.grade}, teacher {claim.teacher_initial}")
        return 0
    print(f"No match: {initials}, grade {claim.grade}, teacher {claim.teacher_initial}")
    return 1


async def cmd_guilds(args, settings: Settings) -> int:
    """Print every configured guild and its roles."""
    logger = get_logger(__name__)
    guilds_path = args.file or settings.data.guilds_path

    try:
        registry = await GuildRegistry.load(guilds_path)
    except RegistryFormatError as e:
        logger.error(f"Could not read guild file: {e}")
        return 1

    if not len(registry):
        print(f"No guilds configured in {guilds_path}.")
        return 0

    for guild in registry:
        print(f"\nGuild {guild.guild_id}")
        print(f"  Verified role: {guild.verified_role}")
        for grade, role_id in enumerate(guild.grade_roles, start=7):
            print(f"  Grade {grade}: {role_id}")
        if guild.pronoun_roles:
            pronouns = ", ".join(f"{p.label} ({p.role_id})" for p in guild.pronoun_roles)
            print(f"  Pronouns: {pronouns}")
    return 0


def main() -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    # Load settings
    try:
        settings = load_settings(env_file=args.env_file)
    except Exception as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    # Override log level if specified
    if args.log_level:
        settings.log_level = args.log_level

    setup_logging(settings)

    # Execute command
    if args.command == "config":
        return cmd_config(settings)
    elif args.command == "run":
        return cmd_run(settings)
    elif args.command == "check":
        return asyncio.run(cmd_check(args, settings))
    elif args.command == "guilds":
        return asyncio.run(cmd_guilds(args, settings))
    else:
        # Default: show help
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
