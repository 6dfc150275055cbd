"""
End to end tests for the langman command line.
"""

import argparse
import json
from unittest.mock import patch

import pytest

from langman.main import main, parse_language_value
from langman.translations import DocumentCodec


@pytest.fixture(autouse=True)
def in_temp_dir(monkeypatch, temp_dir):
    """Run every command from the temporary directory without LANGMAN_* settings."""
    for name in ("LANGMAN_LANG_PATH", "LANGMAN_SYNC_PATHS", "LANGMAN_KEY_FUNCTIONS",
                 "LANGMAN_EXTENSION", "LANGMAN_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(temp_dir)


def run(lang_path, *args):
    return main(["--path", str(lang_path), *args])


class TestCommands:

    def test_languages(self, lang_path, capsys):
        assert run(lang_path, "languages") == 0
        assert capsys.readouterr().out.splitlines() == ["en", "fr", "nl"]

    def test_topics(self, lang_path, capsys):
        assert run(lang_path, "topics") == 0
        assert capsys.readouterr().out.splitlines() == ["user: en, nl"]

    def test_make(self, lang_path, capsys):
        assert run(lang_path, "make", "auth") == 0
        assert (lang_path / "fr" / "auth.php").exists()

        assert run(lang_path, "make", "auth") == 0
        assert "already exists" in capsys.readouterr().out

    def test_trans(self, lang_path):
        assert run(lang_path, "trans", "user.form.reset", "en=Reset", "nl=Herstel") == 0

        codec = DocumentCodec()
        assert codec.parse(lang_path / "en" / "user.php")["form"] == {
            "submit": "Send",
            "reset": "Reset",
        }
        assert codec.parse(lang_path / "nl" / "user.php")["form"] == {"reset": "Herstel"}

    def test_trans_value_with_equals_sign(self, lang_path):
        assert run(lang_path, "trans", "user.formula", "en=a=b") == 0
        assert DocumentCodec().parse(lang_path / "en" / "user.php")["formula"] == "a=b"

    def test_trans_rejects_bad_value(self, lang_path):
        with pytest.raises(SystemExit) as exc_info:
            run(lang_path, "trans", "user.name", "Name")
        assert exc_info.value.code == 2

    def test_trans_rejects_key_without_topic(self, lang_path, capsys):
        assert run(lang_path, "trans", "name", "en=Name") == 1
        assert "Not a translation key reference" in capsys.readouterr().err

    def test_remove_missing_document(self, lang_path, capsys):
        assert run(lang_path, "remove", "user.name") == 1
        assert "File not found" in capsys.readouterr().err
        assert not (lang_path / "fr" / "user.php").exists()

    def test_remove(self, lang_path, write_file, capsys):
        write_file("lang/fr/user.php", "<?php return ['name' => 'Nom'];")

        assert run(lang_path, "remove", "user.name") == 0
        assert "name" not in DocumentCodec().parse(lang_path / "nl" / "user.php")
        assert "Removed user.name" in capsys.readouterr().out

    def test_missing(self, lang_path, capsys):
        assert run(lang_path, "missing") == 1
        assert capsys.readouterr().out.splitlines() == [
            "user.name: fr",
            "user.form.submit: fr, nl",
        ]

    def test_missing_when_complete(self, lang_path, capsys):
        assert run(lang_path, "missing", "other") == 0
        assert "All keys synchronized" in capsys.readouterr().out

    def test_sync_with_config_file(self, lang_path, temp_dir, write_file, capsys):
        write_file("views/home.blade.php", "@lang('nav.home')")
        config_file = write_file("langman.json", json.dumps({
            "lang_path": str(lang_path),
            "sync_paths": [str(temp_dir / "views")],
        }))

        assert main(["--config-file", str(config_file), "sync"]) == 0

        out = capsys.readouterr().out.splitlines()
        assert "Added nav.home" in out
        assert "Added user.form.submit" in out
        assert DocumentCodec().parse(lang_path / "fr" / "nav.php") == {"home": ""}

    def test_vendor(self, lang_path, write_file, capsys):
        write_file("lang/vendor/courier/en/mail.php", "<?php return ['subject' => 'Hi'];")

        assert run(lang_path, "--vendor", "courier", "topics") == 0
        assert capsys.readouterr().out.splitlines() == ["courier::mail: en"]

    def test_bad_config_file(self, temp_dir, capsys):
        assert main(["--config-file", str(temp_dir / "nope.json"), "languages"]) == 1
        assert "Cannot load configuration file" in capsys.readouterr().err


class TestParseLanguageValue:

    def test_splits_on_first_equals_sign(self):
        assert parse_language_value("en=Name") == ("en", "Name")
        assert parse_language_value("en=a=b") == ("en", "a=b")
        assert parse_language_value("fr=") == ("fr", "")

    @pytest.mark.parametrize("item", ["Name", "=Name"])
    def test_rejects_item_without_language(self, item):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_language_value(item)

    def test_trans_parses_each_value_once(self, lang_path):
        with patch("langman.main.parse_language_value", wraps=parse_language_value) as parse:
            assert run(lang_path, "trans", "user.name", "en=Name", "nl=Naam") == 0

        assert parse.call_count == 2
