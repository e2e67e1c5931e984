import logging
import sys

from . import config

# Base logger for the layout engine (off by default)
logger = logging.getLogger("bitfield_layout")
logger.addHandler(logging.NullHandler())

# Dedicated analysis logger for gesture tracing (isolated, opt-in)
ANALYSIS = 25
if logging.getLevelName(ANALYSIS) != "ANALYSIS":
    logging.addLevelName(ANALYSIS, "ANALYSIS")


def _analysis(self, message, *args, **kws):
    if self.isEnabledFor(ANALYSIS):
        self._log(ANALYSIS, message, args, **kws)


if not hasattr(logging.Logger, "analysis"):
    logging.Logger.analysis = _analysis  # type: ignore[attr-defined]

analysis_logger = logging.getLogger("bitfield_layout.analysis")
analysis_logger.propagate = False
if not analysis_logger.handlers:
    _h = logging.StreamHandler(stream=sys.stdout)
    _fmt = logging.Formatter("[%(levelname)s] %(message)s")
    _h.setFormatter(_fmt)
    analysis_logger.addHandler(_h)


def set_analysis(enabled=True):
    """Turn gesture analysis output on or off."""
    analysis_logger.setLevel(ANALYSIS if enabled else logging.CRITICAL + 1)


set_analysis(config.ANALYSIS_ENABLED)
