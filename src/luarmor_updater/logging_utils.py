"""Logging setup for CLI runs."""

import logging

LOG_FORMAT = "%(levelname)s: %(message)s"


class TokenRedactionFilter(logging.Filter):
    """Logging filter that replaces a raw token with ``***REDACTED***``."""

    def __init__(self, token: str) -> None:
        super().__init__()
        self._token = token

    def _redact(self, value: object) -> object:
        if self._token and self._token in str(value):
            return str(value).replace(self._token, "***REDACTED***")
        return value

    def filter(self, record: logging.LogRecord) -> bool:
        if self._token and self._token in str(record.msg):
            record.msg = str(record.msg).replace(self._token, "***REDACTED***")
        if record.args:
            args = record.args
            if isinstance(args, tuple):
                record.args = tuple(self._redact(a) for a in args)
            elif isinstance(args, dict):
                record.args = {k: self._redact(v) for k, v in args.items()}
        return True


def setup_logging(verbose: bool = False, token: str = "") -> None:
    """Configure root logging; the API key is scrubbed from every record."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)

    # httpx logs full request URLs at INFO, and the details URL carries the key
    if not verbose:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)

    if token:
        for handler in logging.getLogger().handlers:
            handler.addFilter(TokenRedactionFilter(token))
