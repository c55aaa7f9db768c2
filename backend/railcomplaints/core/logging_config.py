import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Install the process-wide log format and set the package log level.

    basicConfig is a no-op when the root logger already has handlers
    (uvicorn, pytest), so calling this more than once is harmless.
    """
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    logging.getLogger("railcomplaints").setLevel(level.upper())
