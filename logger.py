"""
Logging utilities
"""
import logging
import logging.config
from pathlib import Path
import yaml
from config import settings


def setup_logging(config_path: str | None = None) -> None:
    """
    Initialise logging from a YAML dictConfig file, falling back to basicConfig

    Args:
        config_path: path to the logging config, defaults to settings.log_config_path
    """
    config_file = Path(config_path or settings.log_config_path)

    if config_file.exists():
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
            logging.config.dictConfig(config)
    else:
        logging.basicConfig(
            level=getattr(logging, settings.log_level.upper(), logging.INFO),
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
