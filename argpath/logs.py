"""
Log output for argpath's stdlib loggers.

argpath modules log through logging.getLogger(__name__) and stay silent
unless the host opts in. Command-line hosts call configure_logging() once at
startup; it only touches the "argpath" logger hierarchy, so the host's own
logging setup (root handlers included) is left alone:

- human (default): structlog console lines on stderr,
- JSON (log_json=True): one JSON object per line on stderr.

Example
    >>> configure_logging(verbose=True, quiet=("argpath.registry",))
"""
import logging
import sys

import structlog

LOGGER = "argpath"

# marks the handler installed by configure_logging(), replaced on every call
_HANDLER = "argpath.logs"


def configure_logging(*, verbose=False, log_json=False, quiet=()):
    """
    Send argpath log records to stderr through a structlog formatter.

    Parameters
    - verbose: DEBUG level for argpath loggers; WARNING otherwise.
    - log_json: JSON lines instead of the console renderer.
    - quiet: argpath submodule loggers kept at WARNING even when verbose
      (e.g. "argpath.registry" hides decoder registrations).

    Records stop at the "argpath" logger (no propagation to the root logger).
    """
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER)
    handler.setFormatter(formatter)

    logger = logging.getLogger(LOGGER)
    for installed in [installed for installed in logger.handlers if installed.get_name() == _HANDLER]:
        logger.removeHandler(installed)
    logger.addHandler(handler)
    logger.propagate = False
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    for name in quiet:
        if name != LOGGER and not name.startswith(LOGGER + "."):
            raise ValueError("configure_logging() quiet loggers must be argpath submodules, not %r" % name)
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = (
    "configure_logging",
)
