from __future__ import annotations

import logging

import colorlog

_HANDLER_NAME = "docassembler"


def configure_logging(level: str = "INFO", include_time_stamp: bool = True) -> None:
    """Attach a coloured stream handler to the package logger.

    Streamlit re-executes the app script on every interaction, so this is
    called repeatedly; the handler is only installed once per process.
    """
    logger = logging.getLogger("docassembler")
    logger.setLevel(level)
    if any(handler.get_name() == _HANDLER_NAME for handler in logger.handlers):
        return

    msg_format = (
        "%(log_color)s[%(module)s] %(asctime)s %(levelname)s: %(message)s"
        if include_time_stamp
        else "%(log_color)s[%(module)s] %(levelname)s: %(message)s"
    )
    handler = colorlog.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        colorlog.ColoredFormatter(
            msg_format,
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "red",
            },
        )
    )
    logger.addHandler(handler)
