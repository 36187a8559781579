import subprocess

from click.testing import CliRunner

import pgdock.cli as cli_module
from pgdock.core import PgDock
from pgdock.errors import DatabaseNotFoundError, ExecutionError


def _fake_pgdock(captured, exists_error=None, dump="CREATE TABLE t();\n"):
    class FakePgDock:
        def __init__(self, **_kwargs):
            return None

        def create(self, db_name, config):
            captured["create"] = (db_name, config)

        def exists(self, db_name, config):
            captured["exists"] = (db_name, config)
            if exists_error is not None:
                raise exists_error

        def terminate(self, db_name, config):
            captured["terminate"] = (db_name, config)

        def drop(self, db_name, config):
            captured["drop"] = (db_name, config)

        def import_sql(self, db_name, sql_file, config):
            captured["import"] = (db_name, sql_file, config)

        def schema_dump(self, db_name, output_file, config):
            captured["dump"] = (db_name, output_file, config)
            return dump

    return FakePgDock


def test_cli_uses_config_and_allows_cli_override(tmp_path, monkeypatch):
    config_file = tmp_path / ".pgdock.yml"
    config_file.write_text(
        "image: postgres:11.7-alpine\n"
        "host: config-host\n"
        "user: app\n"
        "password: secret\n"
        "database: shop\n",
        encoding="utf-8",
    )

    captured = {}
    monkeypatch.setattr(cli_module, "PgDock", _fake_pgdock(captured))

    runner = CliRunner()
    result = runner.invoke(
        cli_module.main,
        ["--config", str(config_file), "--host", "cli-host", "--port", "6543", "create"],
    )

    assert result.exit_code == 0, result.output
    db_name, config = captured["create"]
    assert db_name == "shop"
    assert config.host == "cli-host"
    assert config.port == 6543
    assert config.image == "postgres:11.7-alpine"


def test_cli_uses_default_config_file_when_present(tmp_path, monkeypatch):
    default_config = tmp_path / ".pgdock.yml"
    default_config.write_text(
        "image: postgres:12-alpine\nhost: db\nuser: app\npassword: secret\n",
        encoding="utf-8",
    )

    captured = {}
    monkeypatch.setattr(cli_module, "PgDock", _fake_pgdock(captured))
    monkeypatch.chdir(tmp_path)

    runner = CliRunner()
    result = runner.invoke(cli_module.main, ["drop", "legacy"])

    assert result.exit_code == 0, result.output
    db_name, config = captured["drop"]
    assert db_name == "legacy"
    assert config.image == "postgres:12-alpine"
    assert config.port == 5432


def test_cli_import_passes_sql_file_and_db_name(tmp_path, monkeypatch):
    captured = {}
    monkeypatch.setattr(cli_module, "PgDock", _fake_pgdock(captured))
    monkeypatch.chdir(tmp_path)

    runner = CliRunner()
    result = runner.invoke(cli_module.main, ["--host", "db", "import", "./data/schema.sql", "shop"])

    assert result.exit_code == 0, result.output
    assert captured["import"][:2] == ("shop", "./data/schema.sql")


def test_cli_exists_exits_one_when_database_missing(tmp_path, monkeypatch):
    captured = {}
    monkeypatch.setattr(
        cli_module, "PgDock", _fake_pgdock(captured, exists_error=DatabaseNotFoundError("shop"))
    )
    monkeypatch.chdir(tmp_path)

    runner = CliRunner()
    result = runner.invoke(cli_module.main, ["exists", "shop"])

    assert result.exit_code == 1
    assert captured["exists"][0] == "shop"


def test_cli_reports_execution_errors(tmp_path, monkeypatch):
    captured = {}
    monkeypatch.setattr(
        cli_module,
        "PgDock",
        _fake_pgdock(captured, exists_error=ExecutionError("connection refused", returncode=2)),
    )
    monkeypatch.chdir(tmp_path)

    runner = CliRunner()
    result = runner.invoke(cli_module.main, ["exists", "shop"])

    assert result.exit_code == 1
    assert "raw error: connection refused" in result.output


def test_cli_dump_prints_schema_without_output_file(tmp_path, monkeypatch):
    captured = {}
    monkeypatch.setattr(cli_module, "PgDock", _fake_pgdock(captured))
    monkeypatch.chdir(tmp_path)

    runner = CliRunner()
    result = runner.invoke(cli_module.main, ["dump", "shop"])

    assert result.exit_code == 0, result.output
    assert "CREATE TABLE t();" in result.output
    assert captured["dump"][:2] == ("shop", "")


def test_cli_rejects_unknown_config_keys(tmp_path, monkeypatch):
    config_file = tmp_path / "bad.yml"
    config_file.write_text("colour: blue\n", encoding="utf-8")
    monkeypatch.setattr(cli_module, "PgDock", _fake_pgdock({}))

    runner = CliRunner()
    result = runner.invoke(cli_module.main, ["--config", str(config_file), "create", "shop"])

    assert result.exit_code != 0
    assert "Unknown configuration keys" in result.output


class RecordingSubprocess:
    PIPE = subprocess.PIPE
    STDOUT = subprocess.STDOUT

    def __init__(self):
        self.calls = []

    def run(self, cmd, **kwargs):
        self.calls.append(cmd)
        return subprocess.CompletedProcess(cmd, 0, stdout="t\n")


def test_cli_empty_password_in_config_fails_before_running_commands(tmp_path, monkeypatch):
    config_file = tmp_path / ".pgdock.yml"
    config_file.write_text(
        "image: postgres:11.7-alpine\nhost: db\nuser: app\npassword:\ndatabase: shop\n",
        encoding="utf-8",
    )
    fake = RecordingSubprocess()
    monkeypatch.setattr(
        cli_module, "PgDock", lambda: PgDock(detector=lambda: True, subprocess_module=fake)
    )

    runner = CliRunner()
    result = runner.invoke(cli_module.main, ["--config", str(config_file), "create"])

    assert result.exit_code == 1
    assert "db password" in result.output
    assert fake.calls == []


def test_cli_reports_invalid_port_in_config(tmp_path, monkeypatch):
    config_file = tmp_path / ".pgdock.yml"
    config_file.write_text("host: db\nport: abc\n", encoding="utf-8")
    captured = {}
    monkeypatch.setattr(cli_module, "PgDock", _fake_pgdock(captured))

    runner = CliRunner()
    result = runner.invoke(cli_module.main, ["--config", str(config_file), "create", "shop"])

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "'port' must be an integer" in result.output
    assert "create" not in captured


def test_cli_empty_port_in_config_falls_back_to_default(tmp_path, monkeypatch):
    config_file = tmp_path / ".pgdock.yml"
    config_file.write_text("host: db\nport:\n", encoding="utf-8")
    captured = {}
    monkeypatch.setattr(cli_module, "PgDock", _fake_pgdock(captured))

    runner = CliRunner()
    result = runner.invoke(cli_module.main, ["--config", str(config_file), "create", "shop"])

    assert result.exit_code == 0, result.output
    assert captured["create"][1].port == 5432
