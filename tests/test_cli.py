import pytest

from kamut.cli.main import KamutCLI, __version__
from kamut.core.settings import GeneratorSettings

DEPLOYMENT = "name: web\nkind: Deployment\nimage: web:1\n"


@pytest.fixture
def cli():
    return KamutCLI(GeneratorSettings())


def parse(cli, argv):
    return cli.parser.parse_intermixed_args(argv)


def test_default_pattern(cli):
    assert cli.resolve_patterns(parse(cli, [])) == ["*.kamut.yaml"]


def test_custom_pattern(cli):
    assert cli.resolve_patterns(parse(cli, ["custom*.kamut.yaml"])) == ["custom*.kamut.yaml"]


def test_generate_command_default_pattern(cli):
    assert cli.resolve_patterns(parse(cli, ["generate"])) == ["*.kamut.yaml"]


def test_generate_command_custom_pattern(cli):
    args = parse(cli, ["generate", "--dry-run", "custom*.kamut.yaml"])
    assert cli.resolve_patterns(args) == ["custom*.kamut.yaml"]
    assert args.dry_run


def test_name_option(cli):
    assert cli.resolve_patterns(parse(cli, ["-n", "test-app"])) == ["test-app.kamut.yaml"]


def test_env_overrides_default_pattern():
    cli = KamutCLI(GeneratorSettings.from_env({"KAMUT_PATTERN": "conf/*.kamut.yaml"}))
    assert cli.resolve_patterns(parse(cli, [])) == ["conf/*.kamut.yaml"]


def test_version_command(cli, capsys):
    assert cli.run(["version"]) == 0
    assert __version__ in capsys.readouterr().out


def test_generate_writes_output(cli, tmp_path, monkeypatch, capsys):
    (tmp_path / "web.kamut.yaml").write_text(DEPLOYMENT)
    monkeypatch.chdir(tmp_path)

    assert cli.run(["generate"]) == 0

    assert (tmp_path / "web.yaml").exists()
    out = capsys.readouterr().out
    assert "web.kamut.yaml" in out
    assert "Deployment" in out


def test_no_files_found(cli, tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert cli.run([]) == 0
    assert "No matching kamut files found" in capsys.readouterr().out


def test_failure_exits_non_zero(cli, tmp_path, monkeypatch):
    (tmp_path / "nokind.kamut.yaml").write_text("name: web\nimage: web:1\n")
    monkeypatch.chdir(tmp_path)

    assert cli.run([]) == 1
    assert not (tmp_path / "nokind.yaml").exists()


def test_infer_kind_flag(cli, tmp_path, monkeypatch):
    (tmp_path / "nokind.kamut.yaml").write_text("name: web\nimage: web:1\n")
    monkeypatch.chdir(tmp_path)

    assert cli.run(["--infer-kind"]) == 0
    assert (tmp_path / "nokind.yaml").exists()


def test_unknown_kind_warns_without_failing(cli, tmp_path, monkeypatch, capsys):
    (tmp_path / "odd.kamut.yaml").write_text("name: odd\nkind: UnknownKind\n---\n" + DEPLOYMENT)
    monkeypatch.chdir(tmp_path)

    assert cli.run([]) == 0
    assert "Unsupported kind: UnknownKind" in capsys.readouterr().out


def test_env_require_kind_false():
    settings = GeneratorSettings.from_env({"KAMUT_REQUIRE_KIND": "false", "KAMUT_DEFAULT_RETENTION": "7d"})
    assert settings.require_kind is False
    assert settings.default_retention == "7d"


def test_overlapping_patterns_process_each_file_once(cli, tmp_path, monkeypatch, capsys):
    (tmp_path / "web.kamut.yaml").write_text(DEPLOYMENT)
    monkeypatch.chdir(tmp_path)
    reports = []
    monkeypatch.setattr(cli.formatter, "show_file_report", reports.append)

    assert cli.run(["web.kamut.yaml", "*.kamut.yaml", "-n", "web"]) == 0

    assert [r.file_path for r in reports] == ["web.kamut.yaml"]
