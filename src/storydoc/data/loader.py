"""Entry points that turn story source text or files into StoryData."""
from __future__ import annotations

import logging
from pathlib import Path

from storydoc.core.config import DEFAULT_CONFIG, ParserConfig
from storydoc.data.errors import StoryLoadError
from storydoc.data.story_parser import StoryDocumentParser
from storydoc.domain.defs import StoryData

logger = logging.getLogger(__name__)


def parse(text: str, *, config: ParserConfig | None = None) -> StoryData:
    """Parse story source text; raises a ``ParseError`` subclass on the first error."""
    return StoryDocumentParser(text, config or DEFAULT_CONFIG).parse()


def read_story_text(path: Path | str) -> str:
    """Read a story file and raise StoryLoadError on failure."""
    file_path = Path(path)
    try:
        return file_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise StoryLoadError(f"Story file not found: {file_path}") from exc
    except UnicodeDecodeError as exc:
        raise StoryLoadError(f"Story file is not valid UTF-8: {file_path}") from exc
    except OSError as exc:
        raise StoryLoadError(f"Unable to read story file: {file_path}") from exc


def parse_file(path: Path | str, *, config: ParserConfig | None = None) -> StoryData:
    """Read ``path`` and parse it; I/O failures raise StoryLoadError."""
    text = read_story_text(path)
    logger.info("Loaded story file %s (%d characters)", path, len(text))
    return parse(text, config=config)
