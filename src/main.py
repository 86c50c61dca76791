import os

from config import Config
from log_config import LogManager
from utils.command.command_manager import CommandManager
from utils.error.error_manager import handle_generic_exception
from utils.output_manager import OutputManager

logger = LogManager.get_instance().get_logger("CLI")


def main():
    """Entry point for the CLI application. Loads commands dynamically and executes
    the requested command.
    """
    OutputManager.configure(Config.OUTPUT_DIR)

    command_manager = CommandManager(os.path.join(os.path.dirname(__file__), "domains"))
    command_manager.load_commands()
    parser = command_manager.build_parser()

    args = parser.parse_args()

    # If no command is provided, show general help
    if getattr(args, "func", None) is None:
        parser.print_help()
        return

    logger.debug(f"Running command {args.domain} {getattr(args, 'subdomain_or_command', '')}".rstrip())
    try:
        args.func(args)
    except Exception as e:
        handle_generic_exception(e, "An error occurred during execution.")


if __name__ == "__main__":
    main()
