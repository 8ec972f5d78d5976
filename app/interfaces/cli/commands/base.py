"""
Base class for CLI commands
"""

from abc import ABC, abstractmethod
from typing import List
import argparse


class BaseCommand(ABC):
    """Base class for every command"""

    name = ""
    description = "No description provided"

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog=f"python -m app.interfaces.cli {self.name}",
            description=self.description,
        )
        self.add_arguments(parser)
        return parser

    def add_arguments(self, parser: argparse.ArgumentParser):
        """Override to add command arguments"""
        pass

    @abstractmethod
    def handle(self, **kwargs) -> int:
        """Run the command; returns the process exit code"""

    def run(self, args: List[str]) -> int:
        parsed_args = self.parser.parse_args(args)
        return self.handle(**vars(parsed_args))

    def help(self):
        self.parser.print_help()

    def print_success(self, message: str):
        print(f"\033[92m✓ {message}\033[0m")

    def print_error(self, message: str):
        print(f"\033[91m✗ {message}\033[0m")

    def print_warning(self, message: str):
        print(f"\033[93m⚠ {message}\033[0m")

    def print_info(self, message: str):
        print(f"\033[94mℹ {message}\033[0m")
