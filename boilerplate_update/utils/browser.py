"""Browser opener for compare-only mode."""

import logging
import webbrowser

logger = logging.getLogger(__name__)


class BrowserOpener:
    """Opens URLs in the user's default browser."""

    def open(self, url: str) -> bool:
        """Open a URL, returning whether a browser accepted it."""
        logger.debug("Opening %s", url)
        return webbrowser.open(url)
