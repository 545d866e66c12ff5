"""Logging formatters for disposal records."""

import logging


class DisposalFormatter(logging.Formatter):
    """Logging formatter that prepends the disposer kind from the extra parameter."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with disposer kind prefix if present.

        Parameters
        ----------
        record : logging.LogRecord
            Log record to format

        Returns
        -------
        str
            Formatted log message with optional disposer kind prefix
        """
        msg = super().format(record)
        disposer_kind = getattr(record, "disposer_kind", None)

        if disposer_kind:
            return f"[{disposer_kind}] {msg}"

        return msg
