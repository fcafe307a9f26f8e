"""Runtime settings read from the environment (and an optional ``.env``)."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

LOGGER = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en-US"


@dataclass(frozen=True)
class LanguageCheckSettings:
    """Settings shared by the CLI and ``CodeLanguageCore``."""

    server_url: Optional[str] = None
    language: str = DEFAULT_LANGUAGE
    dictionary_path: Optional[Path] = None
    max_workers: Optional[int] = None


def _parse_workers(value: str | None) -> Optional[int]:
    if not value:
        return None
    try:
        workers = int(value)
    except ValueError:
        LOGGER.warning("Ignoring invalid CODE_LANG_CHECK_MAX_WORKERS=%r", value)
        return None
    return workers if workers > 0 else None


def settings_from_env(env: Mapping[str, str]) -> LanguageCheckSettings:
    dictionary = env.get("CODE_LANG_CHECK_DICTIONARY", "").strip()
    return LanguageCheckSettings(
        server_url=env.get("LANGUAGETOOL_URL", "").strip() or None,
        language=env.get("LANGUAGETOOL_LANGUAGE", "").strip() or DEFAULT_LANGUAGE,
        dictionary_path=Path(dictionary).expanduser() if dictionary else None,
        max_workers=_parse_workers(env.get("CODE_LANG_CHECK_MAX_WORKERS")),
    )


def load_settings(dotenv_path: str | Path | None = None) -> LanguageCheckSettings:
    """Load ``.env`` (if any) into the environment and build the settings."""

    if dotenv_path is not None:
        load_dotenv(dotenv_path=Path(dotenv_path), override=True)
    else:
        load_dotenv()
    return settings_from_env(os.environ)
