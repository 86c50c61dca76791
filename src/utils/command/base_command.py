from abc import ABC, abstractmethod
from argparse import ArgumentParser, Namespace


class BaseCommand(ABC):
    """Abstract base class for CLI commands discovered under src/domains."""

    @staticmethod
    @abstractmethod
    def get_name() -> str:
        """Returns the command name used on the command line (e.g. "summarize-activities")."""

    @staticmethod
    def get_description() -> str:
        return "No description provided."

    @staticmethod
    def get_help() -> str:
        return "No help available."

    @classmethod
    def register_command(cls, subparsers):
        """Registers the command in the subparsers of its domain.

        Args:
            subparsers (_SubParsersAction): Subparsers of the parent domain parser.
        """
        parser = subparsers.add_parser(
            cls.get_name(),
            description=cls.get_description(),
            help=cls.get_help(),
        )
        cls.get_arguments(parser)
        parser.set_defaults(func=cls.main)

    @staticmethod
    @abstractmethod
    def get_arguments(parser: ArgumentParser):
        """Adds the command arguments to its parser."""

    @staticmethod
    @abstractmethod
    def main(args: Namespace):
        """Executes the command with the parsed arguments."""
