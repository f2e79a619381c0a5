import logging
import sys


class Log:
    """Process-wide logger for the extraction service.

    Keyword arguments are appended to the message as ``key=value`` pairs so
    failures can be traced to a file and pipeline stage.
    """

    _logger: logging.Logger = logging.getLogger("creative_extractor")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Set the level and attach a stdout handler once."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] [%(threadName)s] %(message)s")
            )
            cls._logger.addHandler(handler)

    @staticmethod
    def render(message: str, context: dict[str, object]) -> str:
        if not context:
            return message
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{message} | {pairs}"

    @classmethod
    def info(cls, message: str, **context: object) -> None:
        cls._logger.info(cls.render(message, context))

    @classmethod
    def error(cls, message: str, **context: object) -> None:
        cls._logger.error(cls.render(message, context))

    @classmethod
    def warning(cls, message: str, **context: object) -> None:
        cls._logger.warning(cls.render(message, context))

    @classmethod
    def debug(cls, message: str, **context: object) -> None:
        cls._logger.debug(cls.render(message, context))
