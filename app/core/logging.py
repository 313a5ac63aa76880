import logging
from colorlog import ColoredFormatter


def setup_logger(level=logging.DEBUG):
    # Configure the root logger so every module logger inherits the handler
    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid duplicate handlers on reload
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = ColoredFormatter(
        "%(log_color)s%(levelname)-8s%(reset)s | "
        "%(blue)s%(asctime)s%(reset)s | "
        "%(green)s%(name)s:%(lineno)d%(reset)s | "
        "%(white)s%(message)s",
        datefmt="%d-%m-%Y %H:%M:%S",
        log_colors={
            "DEBUG": "cyan",
            "INFO": "white",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold_red,bg_white",
        },
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)

    # urllib3 logs every connection to the processor at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return logger
