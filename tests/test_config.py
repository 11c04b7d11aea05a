"""Tests for configuration loading."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from litparse.config import AppConfig, WorkConfig, load_config

PROJECT_CONFIG = Path(__file__).parent.parent / "config.yaml"


class TestAppConfigDefaults:
    """Test that AppConfig provides sensible defaults."""

    def test_default_config_creates_successfully(self) -> None:
        config = AppConfig()
        assert config.app.name == "Literature Parser"
        assert config.works == {}

    def test_default_storage_config(self) -> None:
        config = AppConfig()
        assert config.storage.literature_dir == "./public/literature"

    def test_default_output_config(self) -> None:
        config = AppConfig()
        assert config.output.indent == 2
        assert config.output.words_per_minute == 200

    def test_zero_reading_speed_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AppConfig(output={"words_per_minute": 0})


class TestWorkConfig:
    def test_rule_defaults(self) -> None:
        work = WorkConfig(title="Test", sources=["test.txt"], output="test.json")
        assert work.rules.min_sections == 5
        assert work.rules.min_content_length == 100
        assert work.rules.start == []
        assert work.include_statistics is False

    def test_paths_resolve_against_base_dir(self, tmp_path: Path) -> None:
        work = WorkConfig(title="Test", sources=["a.txt", "b.txt"], output="out.json")
        assert work.source_paths(tmp_path) == [tmp_path / "a.txt", tmp_path / "b.txt"]
        assert work.output_path(tmp_path) == tmp_path / "out.json"

    def test_absolute_paths_are_kept(self, tmp_path: Path) -> None:
        source = tmp_path / "elsewhere" / "a.txt"
        work = WorkConfig(title="Test", sources=[str(source)], output=str(tmp_path / "o.json"))
        assert work.source_paths("/srv/literature") == [source]
        assert work.output_path("/srv/literature") == tmp_path / "o.json"

    def test_sources_required(self) -> None:
        with pytest.raises(ValidationError, match="at least one source"):
            WorkConfig(title="Test", sources=[], output="test.json")


class TestLoadConfig:
    """Test loading config from YAML files."""

    def test_load_from_yaml(self, tmp_path: Path) -> None:
        yaml_data = {
            "app": {"name": "Test App", "version": "0.1.0"},
            "works": {
                "sample": {
                    "title": "Sample",
                    "sources": ["sample.txt"],
                    "output": "sample.json",
                    "rules": {
                        "headings": [{"kind": "chapter", "pattern": "^CHAPTER "}],
                        "min_sections": 2,
                    },
                }
            },
        }
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.dump(yaml_data))

        config = load_config(config_file)
        assert config.app.name == "Test App"
        assert config.app.version == "0.1.0"
        rules = config.works["sample"].rules
        assert rules.min_sections == 2
        assert rules.headings[0].matches("CHAPTER I")
        # Other fields keep defaults
        assert config.output.indent == 2

    def test_load_missing_yaml_uses_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path / "nonexistent.yaml")
        assert config.app.name == "Literature Parser"

    def test_env_var_sets_literature_dir(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("{}")

        monkeypatch.setenv("LITERATURE_DIR", "/srv/literature")

        config = load_config(config_file)
        assert config.storage.literature_dir == "/srv/literature"

    def test_invalid_rule_rejected(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            yaml.dump(
                {
                    "works": {
                        "bad": {
                            "title": "Bad",
                            "sources": ["bad.txt"],
                            "output": "bad.json",
                            "rules": {"headings": [{"kind": "chapter", "pattern": "(["}]},
                        }
                    }
                }
            )
        )
        with pytest.raises(ValidationError):
            load_config(config_file)


class TestProjectConfig:
    """Test loading the actual project config.yaml."""

    @pytest.fixture
    def config(self, monkeypatch: pytest.MonkeyPatch) -> AppConfig:
        monkeypatch.delenv("LITERATURE_DIR", raising=False)
        return load_config(PROJECT_CONFIG)

    def test_all_works_configured(self, config: AppConfig) -> None:
        assert set(config.works) == {
            "bondage_of_the_will",
            "bondage_of_the_will_preface",
            "imitation_of_christ",
            "institutes",
            "pilgrims_progress",
        }
        assert config.storage.literature_dir == "./public/literature"

    def test_institutes_reads_both_volumes(self, config: AppConfig) -> None:
        assert config.works["institutes"].sources == [
            "institutes_vol1.txt",
            "institutes_vol2.txt",
        ]
        assert config.works["institutes"].rules.groups_books

    def test_bondage_rules(self, config: AppConfig) -> None:
        rules = config.works["bondage_of_the_will"].rules
        assert rules.match_start("PART I.") is not None
        assert rules.end is not None
        assert rules.end.matches("*** END OF THE PROJECT GUTENBERG EBOOK ***")
        assert rules.end.matches("END OF THIS Project Gutenberg EBOOK")
        assert not rules.groups_books
        assert rules.fallback_headings

    def test_preface_start_markers(self, config: AppConfig) -> None:
        rules = config.works["bondage_of_the_will_preface"].rules
        preface = rules.match_start("PREFACE")
        assert preface is not None
        assert preface.title == "Preface"
        dedication = rules.match_start("TO THE VENERABLE MISTER ERASMUS")
        assert dedication is not None
        assert dedication.keep_line is False
        assert dedication.title is None
        assert not any(rule.matches("ERASMUS'S PREFACE REVIEWED") for rule in rules.headings)

    def test_preface_noise_patterns(self, config: AppConfig) -> None:
        rules = config.works["bondage_of_the_will_preface"].rules
        assert rules.is_noise("42")
        assert rules.is_noise("xiv")
        assert rules.is_noise("* * *")
        assert rules.is_noise("^ % >")
        assert not rules.is_noise("Of Free-will")

    def test_pilgrims_numbered_sections(self, config: AppConfig) -> None:
        rules = config.works["pilgrims_progress"].rules
        numbered = rules.headings[1]
        assert numbered.title == "Section {n}"
        assert numbered.keep_line
        assert numbered.matches("{12} Then I saw in my dream")
