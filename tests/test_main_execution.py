# ABOUTME: Tests for the lodash-lint command line interface
# ABOUTME: Validates configuration precedence, output formats, exit codes and fixing files on disk

import json

import pytest

from main import ENV_PRAGMA, ENV_VERSION, build_config, collect_files, create_parser, main
from models import ChainMode, ConfigurationError, PathStyle, RuleName


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    monkeypatch.delenv(ENV_VERSION, raising=False)
    monkeypatch.delenv(ENV_PRAGMA, raising=False)


@pytest.fixture
def project(tmp_path):
    """A small JavaScript project with one violation of each rule"""
    src = tmp_path / "src"
    src.mkdir()
    (src / "paths.js").write_text("var v = _.get(user, ['a', 'b']);\n", encoding="utf-8")
    (src / "chain.js").write_text("var r = _(users).map(f).value();\n", encoding="utf-8")
    (src / "clean.js").write_text("var c = _.get(user, 'a.b');\n", encoding="utf-8")
    (src / "notes.txt").write_text("_.get(user, ['a'])\n", encoding="utf-8")
    vendored = tmp_path / "node_modules" / "dep"
    vendored.mkdir(parents=True)
    (vendored / "index.js").write_text("_(x).map(f).value();\n", encoding="utf-8")
    return tmp_path


class TestCollectFiles:
    """Test expansion of command line paths"""

    def test_directory_expansion(self, project):
        files = collect_files([str(project)])
        assert sorted(f.name for f in files) == ["chain.js", "clean.js", "paths.js"]

    def test_explicit_file_kept(self, project):
        target = project / "src" / "notes.txt"
        assert collect_files([str(target)]) == [target]


class TestBuildConfig:
    """Test configuration precedence"""

    def parse(self, *argv):
        return create_parser().parse_args(list(argv))

    def test_defaults(self, tmp_path):
        config = build_config(self.parse(str(tmp_path)), environ={})
        assert config.settings.version == 4
        assert config.settings.pragma == "_"
        assert config.chaining.mode == ChainMode.NEVER
        assert config.path_style.style == PathStyle.AS_NEEDED

    def test_package_json_version(self, tmp_path):
        (tmp_path / "package.json").write_text(
            json.dumps({"dependencies": {"lodash": "~3.10.1"}}), encoding="utf-8"
        )
        config = build_config(self.parse(str(tmp_path)), environ={})
        assert config.settings.version == 3

    def test_unsupported_package_json_version_ignored(self, tmp_path):
        (tmp_path / "package.json").write_text(
            json.dumps({"dependencies": {"lodash": "^2.4.0"}}), encoding="utf-8"
        )
        config = build_config(self.parse(str(tmp_path)), environ={})
        assert config.settings.version == 4

    def test_environment_overrides_package_json(self, tmp_path):
        (tmp_path / "package.json").write_text(
            json.dumps({"dependencies": {"lodash": "^4.17.0"}}), encoding="utf-8"
        )
        environ = {ENV_VERSION: "3", ENV_PRAGMA: "lodash"}
        config = build_config(self.parse(str(tmp_path)), environ=environ)
        assert config.settings.version == 3
        assert config.settings.pragma == "lodash"

    def test_empty_pragma_disables_it(self, tmp_path):
        config = build_config(self.parse(str(tmp_path)), environ={ENV_PRAGMA: ""})
        assert config.settings.pragma is None

    def test_config_file_overrides_environment(self, tmp_path):
        config_file = tmp_path / "lodash-lint.json"
        config_file.write_text(
            json.dumps({"settings": {"version": 4}, "chaining": {"mode": "always"}}),
            encoding="utf-8",
        )
        args = self.parse(str(tmp_path), "--config", str(config_file))
        config = build_config(args, environ={ENV_VERSION: "3", ENV_PRAGMA: "lo"})
        assert config.settings.version == 4
        # Unset keys in the file leave lower layers alone
        assert config.settings.pragma == "lo"
        assert config.chaining.mode == ChainMode.ALWAYS

    def test_command_line_wins(self, tmp_path):
        config_file = tmp_path / "lodash-lint.json"
        config_file.write_text(json.dumps({"chaining": {"mode": "always"}}), encoding="utf-8")
        args = self.parse(
            str(tmp_path),
            "--config", str(config_file),
            "--chaining-mode", "implicit",
            "--chaining-depth", "4",
            "--path-style", "array",
            "--lodash-version", "3",
            "--pragma", "lo",
            "--rule", "path-style",
        )
        config = build_config(args, environ={ENV_VERSION: "4"})
        assert config.chaining.mode == ChainMode.IMPLICIT
        assert config.chaining.depth == 4
        assert config.path_style.style == PathStyle.ARRAY
        assert config.settings.version == 3
        assert config.settings.pragma == "lo"
        assert config.rules == frozenset({RuleName.PATH_STYLE})

    def test_invalid_values_raise(self, tmp_path):
        args = self.parse(str(tmp_path), "--chaining-depth", "1")
        with pytest.raises(ConfigurationError):
            build_config(args, environ={})


class TestMain:
    """Test the CLI entry point"""

    def test_clean_file(self, project, capsys):
        assert main([str(project / "src" / "clean.js")]) == 0
        assert capsys.readouterr().out == ""

    def test_text_report(self, project, capsys):
        assert main([str(project / "src")]) == 1
        out = capsys.readouterr().out
        assert "chain.js:1:9  Prefer composition to Lodash chaining  chaining" in out
        assert "paths.js:1:21  Use a string for simple paths  path-style" in out
        assert "2 problems (1 fixable with --fix)" in out
        assert "node_modules" not in out

    def test_json_report(self, project, capsys):
        assert main([str(project / "src" / "paths.js"), "--format", "json"]) == 1
        report = json.loads(capsys.readouterr().out)
        assert len(report) == 1
        assert report[0]["rule"] == "path-style"
        assert report[0]["message_id"] == "stringForSimple"
        assert report[0]["message"] == "Use a string for simple paths"
        assert report[0]["fix"]["text"] == "'a.b'"

    def test_rule_selection(self, project):
        assert main([str(project / "src" / "chain.js"), "--rule", "path-style"]) == 0

    def test_fix_writes_file(self, project, capsys):
        target = project / "src" / "paths.js"
        assert main([str(target), "--fix"]) == 0
        assert target.read_text(encoding="utf-8") == "var v = _.get(user, 'a.b');\n"

    def test_invalid_configuration(self, project, capsys):
        assert main([str(project / "src"), "--chaining-depth", "1"]) == 2
        assert "ERROR" in capsys.readouterr().err

    def test_unreadable_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.js")]) == 2
        assert "could not be read" in capsys.readouterr().err

    def test_unknown_mode_rejected_by_parser(self, project):
        with pytest.raises(SystemExit) as excinfo:
            main([str(project), "--chaining-mode", "sometimes"])
        assert excinfo.value.code == 2
