"""Console logging for the walkthrough (script runs and notebook re-runs alike)."""
import logging, sys
from typing import Optional

from traffic_fatalities import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s :: %(message)s"

def setup_logging(level: str = settings.LOG_LEVEL, logger: Optional[logging.Logger] = None) -> logging.Logger:
    logger = logger or logging.getLogger()
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    # re-running a notebook cell must not stack handlers
    if not any(getattr(h, "_walkthrough", False) for h in logger.handlers):
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(logging.Formatter(LOG_FORMAT))
        h._walkthrough = True
        logger.addHandler(h)
    # font-cache chatter at DEBUG
    logging.getLogger("matplotlib").setLevel(logging.WARNING)
    return logger
