"""Naming imported subtitles after the movie file and their language."""

from __future__ import annotations

import logging
import re
from typing import Mapping, Optional, Pattern, Union

logger = logging.getLogger(__name__)

SUBTITLE_FILE_EXTENSIONS = ("srt", "ass")


def compile_language_map(
    raw: Mapping[str, Union[str, Pattern[str]]],
) -> dict[str, Pattern[str]]:
    """Compile a mapping of language code to pattern; bad patterns raise ``ValueError``."""
    compiled = {}
    for language, pattern in raw.items():
        if isinstance(pattern, re.Pattern):
            compiled[language] = pattern
            continue
        try:
            compiled[language] = re.compile(pattern)
        except (re.error, TypeError) as error:
            raise ValueError(f"invalid pattern for {language!r}: {error}") from error
    return compiled


def parse_subtitle_language(
    subtitle_name: str,
    subtitle_ext: str,
    target_base: str,
    language_map: Mapping[str, Pattern[str]],
) -> Optional[str]:
    """File name for a subtitle next to the movie ``target_base``.

    The first language whose pattern matches the lower-cased subtitle name is
    put between the base and the extension. Without a language, a subtitle
    whose name starts with the movie's base name keeps just the extension;
    any other subtitle is skipped and ``None`` returned.
    """
    name = subtitle_name.lower()
    language = next(
        (code for code, pattern in language_map.items() if pattern.search(name)), None
    )

    if not language:
        if name.startswith(target_base.lower()):
            logger.debug(
                "Subtitle %s has the same base name as target file %s", name, target_base
            )
            return f"{target_base}.{subtitle_ext}"
        return None

    return f"{target_base}.{language}.{subtitle_ext}"