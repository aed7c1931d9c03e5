import logging
from pathlib import Path
from typing import Protocol, Union

from securescan.reporting.pdf import RenderedDocument

logger = logging.getLogger(__name__)


class DocumentSink(Protocol):
    def save(self, document: RenderedDocument) -> str:
        ...


class DirectorySink:
    """Writes rendered documents under a directory, overwriting same-named files."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def save(self, document: RenderedDocument) -> str:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / document.filename
        path.write_bytes(document.content)
        logger.info("saved %s (%d bytes)", path, len(document.content))
        return str(path)
