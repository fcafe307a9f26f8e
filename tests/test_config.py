from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from code_lang_check.config import DEFAULT_LANGUAGE, load_settings, settings_from_env


def test_defaults_when_environment_is_empty() -> None:
    settings = settings_from_env({})

    assert settings.server_url is None
    assert settings.language == DEFAULT_LANGUAGE
    assert settings.dictionary_path is None
    assert settings.max_workers is None


def test_values_are_read_from_environment() -> None:
    settings = settings_from_env(
        {
            "LANGUAGETOOL_URL": " http://localhost:8081 ",
            "LANGUAGETOOL_LANGUAGE": "en-GB",
            "CODE_LANG_CHECK_DICTIONARY": "/tmp/words.txt",
            "CODE_LANG_CHECK_MAX_WORKERS": "4",
        }
    )

    assert settings.server_url == "http://localhost:8081"
    assert settings.language == "en-GB"
    assert settings.dictionary_path == Path("/tmp/words.txt")
    assert settings.max_workers == 4


def test_invalid_worker_count_is_ignored(caplog) -> None:
    assert settings_from_env({"CODE_LANG_CHECK_MAX_WORKERS": "many"}).max_workers is None
    assert "CODE_LANG_CHECK_MAX_WORKERS" in caplog.text
    assert settings_from_env({"CODE_LANG_CHECK_MAX_WORKERS": "0"}).max_workers is None


def test_load_settings_reads_dotenv(tmp_path: Path, monkeypatch) -> None:
    # load_dotenv writes into os.environ; setenv first so monkeypatch restores it.
    for name in ("LANGUAGETOOL_URL", "LANGUAGETOOL_LANGUAGE", "CODE_LANG_CHECK_DICTIONARY"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    env_file = tmp_path / ".env"
    env_file.write_text(
        "LANGUAGETOOL_URL=http://lt.example:8010\nLANGUAGETOOL_LANGUAGE=en-GB\n",
        encoding="utf-8",
    )

    settings = load_settings(env_file)

    assert settings.server_url == "http://lt.example:8010"
    assert settings.language == "en-GB"
