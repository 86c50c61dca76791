import importlib
import inspect
import os
import pkgutil
from argparse import ArgumentParser, _SubParsersAction
from types import ModuleType

from utils.command.base_command import BaseCommand
from utils.logging.logging_manager import LogManager

from .error import (
    CommandLoadError,
    CommandManagerError,
    HierarchyConflictError,
    ModuleImportError,
)


class CommandManager:
    """Discovers BaseCommand subclasses under a package directory and builds the CLI parser.

    A command defined in ``<package>/<domain>/<module>.py`` is exposed as
    ``<domain> <command-name>``; deeper packages add one parser level each.
    """

    def __init__(self, base_path: str, package: str | None = None):
        self.base_path = os.path.abspath(base_path)
        self.package = package or os.path.basename(self.base_path)
        self.hierarchy: dict[str, dict] = {}
        self._logger = LogManager.get_instance().get_logger("CommandManager")

    def load_commands(self) -> None:
        """Imports every module of every package below base_path and registers its commands."""
        self._logger.debug(f"Starting to load commands from base path: {self.base_path}")

        for root, _, _ in os.walk(self.base_path):
            if not os.path.isfile(os.path.join(root, "__init__.py")):
                self._logger.debug(f"Skipping non-package directory: {root}")
                continue

            for _, module_name, is_package in pkgutil.iter_modules([root]):
                if is_package:
                    continue
                try:
                    self._logger.debug(f"Processing module: {module_name} in {root}")
                    module = self._import_module(root, module_name)
                    self._process_module(module)
                except CommandManagerError as e:
                    self._logger.error(str(e), exc_info=True)

        self._logger.debug("Finished loading commands.")

    def _module_path_from_root(self, root: str, module_name: str) -> str:
        """Relative dotted path of a module, suitable for importlib with self.package as anchor."""
        relative_path = os.path.relpath(root, self.base_path)
        if relative_path == ".":
            return f".{module_name}"
        return f".{relative_path.replace(os.sep, '.')}.{module_name}"

    def _import_module(self, root: str, module_name: str) -> ModuleType:
        relative_path = self._module_path_from_root(root, module_name)
        self._logger.debug(f"Importing module {relative_path}")
        try:
            return importlib.import_module(relative_path, package=self.package)
        except Exception as e:
            raise ModuleImportError(module_path=relative_path, error=e) from e

    def _process_module(self, module: ModuleType):
        """Registers the BaseCommand subclasses defined in the module itself."""
        self._logger.debug(f"Inspecting module: {module.__name__}")
        for name, obj in inspect.getmembers(module, inspect.isclass):
            if not issubclass(obj, BaseCommand) or obj is BaseCommand or obj.__module__ != module.__name__:
                continue
            if inspect.isabstract(obj):
                self._logger.debug(
                    f"Command {name} is missing required methods: {sorted(obj.__abstractmethods__)} "
                    "and will be skipped."
                )
                continue

            self._logger.debug(f"Found command class: {name}")
            self._add_to_hierarchy(obj)

    def _add_to_hierarchy(self, command: type[BaseCommand]):
        """Adds a command under its domain path (module path without the package and module name)."""
        name_parts = command.__module__.split(".")[1:-1]
        command_name = command.get_name()

        current_level = self.hierarchy
        try:
            for part in name_parts:
                current_level = current_level.setdefault(part, {})
        except AttributeError as e:
            raise CommandLoadError(module_name=command.__module__, error=e) from e

        if command_name in current_level:
            raise HierarchyConflictError(command_name=command_name)

        current_level[command_name] = {
            "name": command_name,
            "description": command.get_description(),
            "help": command.get_help(),
            "class": command,
        }
        self._logger.debug(f"Command {command_name} added successfully.")

    def build_parser(self) -> ArgumentParser:
        """Builds the ArgumentParser hierarchy from the loaded commands."""
        self._logger.debug("Building argument parser hierarchy")
        parser = ArgumentParser(
            prog="activity-insights",
            description="activity-insights CLI - activity metrics and executive summaries",
        )
        subparsers = parser.add_subparsers(dest="domain", help="Available domains")

        for domain_name, substructure in self.hierarchy.items():
            self._logger.debug(f"Adding domain to parser: {domain_name}")
            self._add_subparser(subparsers, domain_name, substructure)

        return parser

    def _add_subparser(self, subparsers: _SubParsersAction, name: str, substructure: dict):
        """Recursively adds subparsers for domains, subdomains and commands."""
        if "class" in substructure:
            self._logger.debug(f"Registering command: {substructure['name']}")
            substructure["class"].register_command(subparsers)
            return

        parser = subparsers.add_parser(name, help=f"{name} commands")
        parser_subparsers = parser.add_subparsers(dest="subdomain_or_command", help=f"{name} subcommands")
        for key, value in substructure.items():
            self._add_subparser(parser_subparsers, key, value)
