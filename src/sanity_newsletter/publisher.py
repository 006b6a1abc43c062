"""File publisher for the generated RSS feed."""

import logging
import os
import tempfile
from pathlib import Path

from sanity_newsletter.exceptions import FeedWriteError

logger = logging.getLogger(__name__)


class FeedWriter:
    """Writes a feed document to a fixed path on disk."""

    def __init__(self, output_path: str | Path) -> None:
        """Initialize the writer with its output path.

        Args:
            output_path: Where the feed is written, e.g. ``docs/newsletter/rss.xml``.

        Raises:
            ValueError: If output_path is empty or whitespace.
        """
        if not str(output_path).strip():
            raise ValueError("Output path must not be empty or whitespace")

        self.output_path = Path(output_path)

    def write(self, document: str) -> Path:
        """Write the document, replacing any previous file in one step.

        The content goes to a temporary file in the target directory first,
        so readers never see a half-written feed.

        Args:
            document: The XML text to write.

        Returns:
            The path that was written.

        Raises:
            FeedWriteError: If the directory or file cannot be written.
        """
        tmp_name = None
        try:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.output_path.parent,
                prefix=f".{self.output_path.name}.",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(document)
            os.replace(tmp_name, self.output_path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise FeedWriteError(
                f"Failed to write feed to '{self.output_path}': {e}",
                original_error=e,
            ) from e

        logger.info("Wrote feed to %s", self.output_path)
        return self.output_path
