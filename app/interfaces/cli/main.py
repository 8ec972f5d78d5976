#!/usr/bin/env python3
"""
Management CLI entry point
"""

import argparse
import sys
from typing import Dict, List, Optional, Type

from app.core.logging import setup_logging

from .commands import COMMANDS
from .commands.base import BaseCommand


class CLIManager:
    def __init__(self, commands: Optional[Dict[str, Type[BaseCommand]]] = None):
        self.available_commands = dict(commands or COMMANDS)

    def list_commands(self):
        """Print every available command"""
        print("Available commands:")
        print("=" * 40)
        for name, command_class in self.available_commands.items():
            print(f"  {name:<20} {command_class.description}")

    def run_command(self, command_name: str, args: List[str]) -> int:
        if command_name not in self.available_commands:
            print(f"Unknown command: {command_name}")
            print("Use 'python -m app.interfaces.cli help' to see available commands.")
            return 1

        return self.available_commands[command_name]().run(args)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="RetailHub management CLI",
        add_help=False
    )
    parser.add_argument('command', nargs='?', help='Command to run')
    parser.add_argument('args', nargs=argparse.REMAINDER, help='Arguments for the command')

    args = parser.parse_args(argv)
    cli_manager = CLIManager()

    if not args.command or args.command in ('help', '-h', '--help'):
        if args.args and args.args[0] in cli_manager.available_commands:
            cli_manager.available_commands[args.args[0]]().help()
        else:
            cli_manager.list_commands()
        return 0

    setup_logging()
    return cli_manager.run_command(args.command, args.args)


if __name__ == "__main__":
    sys.exit(main())
