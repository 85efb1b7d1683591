import logging

PACKAGE_LOGGER = "jdx_converter"


def setup_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """Set up a logger with the specified name and logging level."""
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Warnings and progress share stderr so stdout stays clean for summaries
    ch = logging.StreamHandler()
    ch.setLevel(logging.NOTSET)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    ch.setFormatter(formatter)

    if not logger.hasHandlers():
        logger.addHandler(ch)

    return logger


def set_package_level(level: str) -> None:
    """Apply a level name such as "DEBUG" to every logger in the package."""
    numeric = logging.getLevelName(level.upper())
    for name, logger in logging.root.manager.loggerDict.items():
        if isinstance(logger, logging.Logger) and (
            name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + ".")
        ):
            logger.setLevel(numeric)
