"""
Configuration centralisée des logs.

- Format unique: horodatage, niveau, PID, logger, message
- Sortie console (stdout), compatible Docker/Render
- Verbosité réduite pour les bibliothèques externes (httpx, stripe)
"""
import logging
import sys

from storefront.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(levelname)s - [PID:%(process)d] - %(name)s - %(message)s"

_configured = False

def setup_logging(level: str | None = None) -> None:
    """
    Configure le logger racine une seule fois (appels suivants ignorés).
    - level: niveau explicite, sinon LOG_LEVEL (INFO par défaut)
    """
    global _configured
    if _configured:
        return
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for noisy in ("httpx", "hpack", "stripe"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
    _configured = True
