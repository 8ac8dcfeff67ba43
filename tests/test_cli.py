"""Tests for the command-line interface."""

import io
import json
import logging
import sys

import pytest

from metapull.cli import create_parser, load_config, main
from metapull.doctor import check_dependency, check_parser, run_doctor
from metapull.errors import ConfigError
from metapull.logging_config import setup_logging
from metapull.models import ProfileName, Syntax

HTML = """
<html><head>
    <title>CLI Page</title>
    <link rel="canonical" href="/page">
    <script type="application/ld+json">{"@type": "WebPage", "name": "CLI"}</script>
</head><body>
    <div itemscope itemtype="https://schema.org/Thing"><span itemprop="name">Widget</span></div>
</body></html>
"""


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop handlers bound to captured streams between tests."""
    yield
    logger = logging.getLogger("metapull")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


@pytest.fixture
def html_file(tmp_path):
    path = tmp_path / "page.html"
    path.write_text(HTML, encoding="utf-8")
    return path


class TestCreateParser:
    """Tests for argument parsing."""

    def test_defaults(self):
        """Test that input defaults to stdin."""
        args = create_parser().parse_args([])

        assert args.input == "-"
        assert args.syntax is None
        assert args.profile is None
        assert not args.compact

    def test_syntax_choices(self):
        """Test that unknown syntaxes are rejected."""
        with pytest.raises(SystemExit):
            create_parser().parse_args(["--syntax", "exif"])


class TestLoadConfig:
    """Tests for building configuration from arguments."""

    def test_flags_map_to_config(self):
        """Test command line overrides."""
        args = create_parser().parse_args(
            ["page.html", "-b", "https://example.com/", "-p", "social", "--max-depth", "5", "--max-items", "50", "-v"]
        )

        config = load_config(args)

        assert config.base_url == "https://example.com/"
        assert config.profile == ProfileName.SOCIAL
        assert config.limits.max_depth == 5
        assert config.limits.max_items == 50
        assert config.log_level == "DEBUG"

    def test_invalid_value_raises_config_error(self):
        """Test that a bad value becomes ConfigError."""
        args = create_parser().parse_args(["--max-depth", "0"])

        with pytest.raises(ConfigError):
            load_config(args)

    def test_yaml_file_with_overrides(self, tmp_path):
        """Test that flags override values from the config file."""
        pytest.importorskip("yaml")
        path = tmp_path / "config.yaml"
        path.write_text("base_url: https://file.example/\nsyntaxes: [meta]\nlimits:\n  max_depth: 9\n")

        args = create_parser().parse_args(["--config", str(path), "--syntax", "jsonld"])
        config = load_config(args)

        assert config.base_url == "https://file.example/"
        assert config.syntaxes == [Syntax.JSONLD]
        assert config.limits.max_depth == 9

    def test_invalid_yaml_file(self, tmp_path):
        """Test that unknown keys in the file raise ConfigError."""
        pytest.importorskip("yaml")
        path = tmp_path / "config.yaml"
        path.write_text("no_such_option: 1\n")

        with pytest.raises(ConfigError):
            load_config(create_parser().parse_args(["--config", str(path)]))

    def test_malformed_yaml_file(self, tmp_path):
        """Test that a YAML syntax error raises ConfigError."""
        pytest.importorskip("yaml")
        path = tmp_path / "config.yaml"
        path.write_text("limits: [unclosed\n")

        with pytest.raises(ConfigError, match="Cannot parse config file"):
            load_config(create_parser().parse_args(["--config", str(path)]))

    def test_missing_config_file(self, tmp_path):
        """Test that an unreadable config file raises ConfigError."""
        pytest.importorskip("yaml")
        args = create_parser().parse_args(["--config", str(tmp_path / "missing.yaml")])

        with pytest.raises(ConfigError):
            load_config(args)


class TestMain:
    """Tests for the main entry point."""

    def test_compact_json_output(self, html_file, capsys):
        """Test single-line JSON on stdout."""
        exit_code = main([str(html_file), "--compact", "--base-url", "https://example.com/"])

        assert exit_code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["base_url"] == "https://example.com/"
        assert data["meta"]["canonical"] == "https://example.com/page"
        assert data["microdata"][0]["properties"] == {"name": ["Widget"]}
        assert data["jsonld"]["blocks"][0]["nodes"][0]["name"] == ["CLI"]

    def test_syntax_selection(self, html_file, capsys):
        """Test that only the requested syntaxes are written."""
        main([str(html_file), "--compact", "-s", "jsonld"])

        data = json.loads(capsys.readouterr().out)

        assert set(data) == {"base_url", "jsonld", "diagnostics"}

    def test_reads_stdin(self, monkeypatch, capsys):
        """Test "-" input."""
        monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(HTML.encode("utf-8"))))

        assert main(["-", "--compact", "-s", "meta"]) == 0
        assert json.loads(capsys.readouterr().out)["meta"]["title"] == "CLI Page"

    def test_summary_table(self, html_file, capsys):
        """Test the summary view."""
        assert main([str(html_file), "--summary"]) == 0

        out = capsys.readouterr().out
        assert "microdata" in out
        assert "jsonld" in out

    def test_pretty_output(self, html_file, capsys):
        """Test the default highlighted JSON output is still valid JSON."""
        assert main([str(html_file), "-s", "meta"]) == 0

        assert json.loads(capsys.readouterr().out)["meta"]["title"] == "CLI Page"

    def test_missing_input_file(self, tmp_path, capsys):
        """Test that an unreadable input exits with 1."""
        assert main([str(tmp_path / "missing.html")]) == 1
        assert "Cannot read" in capsys.readouterr().err

    def test_bad_option_exits_with_1(self, html_file, capsys):
        """Test that an invalid configuration exits with 1."""
        assert main([str(html_file), "--max-depth", "1000"]) == 1
        assert "Configuration error" in capsys.readouterr().err


class TestLogging:
    """Tests for setup_logging."""

    def test_configures_package_logger(self):
        """Test level, handlers and propagation."""
        logger = setup_logging("DEBUG", force=True)

        assert logger.name == "metapull"
        assert logger.level == logging.DEBUG
        assert logger.propagate is False
        assert len(logger.handlers) == 1

    def test_log_file(self, tmp_path):
        """Test the optional file handler."""
        log_file = tmp_path / "metapull.log"

        logger = setup_logging("INFO", log_file=str(log_file), force=True)
        logger.info("hello")
        for handler in logger.handlers:
            handler.flush()

        assert len(logger.handlers) == 2
        assert "hello" in log_file.read_text()

    def test_existing_handlers_kept_without_force(self):
        """Test that a second call does not add handlers."""
        setup_logging("WARNING", force=True)
        logger = setup_logging("ERROR")

        assert len(logger.handlers) == 1
        assert logger.level == logging.ERROR

    def test_unknown_level_rejected(self):
        """Test that a misspelled level name raises."""
        with pytest.raises(ValueError, match="Unknown log level"):
            setup_logging("LOUD")

    def test_level_is_case_insensitive(self):
        """Test lower-case level names."""
        assert setup_logging("info", force=True).level == logging.INFO


class TestDoctor:
    """Tests for the diagnostic command."""

    def test_check_dependency(self):
        """Test present and missing modules."""
        assert check_dependency("json") == (True, "[OK] json")
        ok, message = check_dependency("metapull_missing_module", "missing-pkg", optional=True)
        assert not ok
        assert "optional" in message

    def test_check_parser(self):
        """Test the built-in parser."""
        assert check_parser("html.parser")[0] is True

    def test_run_doctor(self, capsys):
        """Test the plain-text report."""
        assert run_doctor(use_rich=False) == 0

        out = capsys.readouterr().out
        assert "[OK] beautifulsoup4" in out
        assert "Parser html.parser" in out
