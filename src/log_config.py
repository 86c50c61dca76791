from config import Config
from utils.logging.logging_manager import LogLevel, LogManager

# Instantiate the LogManager singleton using validated environment variables
log_manager = LogManager.initialize(
    log_dir=Config.LOG_DIR,
    log_file=Config.LOG_FILE,
    log_retention_hours=Config.LOG_RETENTION_HOURS,
    default_level=LogLevel.from_name(Config.LOG_LEVEL),
    use_filter=Config.USE_FILTER == "true",
    log_output=Config.LOG_OUTPUT,
)
