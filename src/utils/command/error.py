from utils.error.base_custom_error import BaseCustomError, ErrorCode


class CommandManagerError(BaseCustomError):
    """Base class for all CommandManager errors."""

    default_code = ErrorCode.INTERNAL_ERROR


class CommandLoadError(CommandManagerError):
    """Raised when the commands of a module cannot be registered."""

    def __init__(self, module_name: str, error: Exception):
        super().__init__(
            f"Failed to load command from module '{module_name}'",
            cause=error,
            module_name=module_name,
        )


class HierarchyConflictError(CommandManagerError):
    """Raised when two commands register the same name."""

    default_code = ErrorCode.CONFIG_INVALID

    def __init__(self, command_name: str):
        super().__init__(f"Duplicate command detected: '{command_name}'", command_name=command_name)


class ModuleImportError(CommandManagerError):
    """Raised when a domain module fails to import."""

    def __init__(self, module_path: str, error: Exception):
        super().__init__(
            f"Failed to import module '{module_path}'",
            cause=error,
            module_path=module_path,
        )
