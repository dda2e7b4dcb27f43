import json
import logging

from click.testing import CliRunner

from goimporter.cli import cli


REPO_ARGS = [
    "--org", "gitlab.mvk.com/go",
    "--repo", "gitlab.mvk.com/go/vkgo",
    "--common-prefix", "gitlab.mvk.com/go/vkgo/pkg",
    "--domain-prefix", "gitlab.mvk.com/go/vkgo/projects/health/pkg",
    "--projects-tpl", "gitlab.mvk.com/go/vkgo/projects/health/%s",
]

MESSY = (
    "package main\n"
    "\n"
    "import (\n"
    '\t"gitlab.mvk.com/go/vkgo/projects/health/shared/util"\n'
    '\t"github.com/pkg/errors"\n'
    '\t"os"\n'
    ")\n"
)

TIDY = (
    "package main\n"
    "\n"
    "import (\n"
    '\t"os"\n'
    "\n"
    '\t"github.com/pkg/errors"\n'
    "\n"
    '\t"gitlab.mvk.com/go/vkgo/projects/health/shared/util"\n'
    ")\n"
)


def test_check_reports_without_modifying(tmp_path, caplog):
    go_file = tmp_path / "main.go"
    go_file.write_text(MESSY)
    with caplog.at_level(logging.INFO):
        result = CliRunner().invoke(cli, ["check", str(tmp_path)] + REPO_ARGS)
    assert result.exit_code == 1
    assert go_file.read_text() == MESSY
    assert "imports would be regrouped." in caplog.text


def test_fix_rewrites_files(tmp_path):
    go_file = tmp_path / "main.go"
    go_file.write_text(MESSY)
    runner = CliRunner()

    result = runner.invoke(cli, ["fix", str(go_file)] + REPO_ARGS)
    assert result.exit_code == 1
    assert go_file.read_text() == TIDY

    result = runner.invoke(cli, ["check", str(go_file)] + REPO_ARGS)
    assert result.exit_code == 0


def test_fix_recursive_and_mock_exclusion(tmp_path):
    sub = tmp_path / "pkg"
    sub.mkdir()
    (sub / "main.go").write_text(MESSY)
    (sub / "mock_main.go").write_text(MESSY)
    runner = CliRunner()

    result = runner.invoke(cli, ["fix", str(tmp_path)] + REPO_ARGS)
    assert result.exit_code == 0
    assert (sub / "main.go").read_text() == MESSY

    result = runner.invoke(cli, ["fix", "-r", str(tmp_path)] + REPO_ARGS)
    assert result.exit_code == 1
    assert (sub / "main.go").read_text() == TIDY
    assert (sub / "mock_main.go").read_text() == MESSY

    result = runner.invoke(cli, ["fix", "-r", "--include-mock", str(tmp_path)] + REPO_ARGS)
    assert result.exit_code == 1
    assert (sub / "mock_main.go").read_text() == TIDY


def test_pkgs_adds_common_prefixes(tmp_path):
    source = (
        "package main\n"
        "\n"
        "import (\n"
        '\t"gitlab.mvk.com/go/vkgo/projects/health/shared/util"\n'
        '\t"gitlab.mvk.com/go/vkgo/projects/health/pkg/richerr"\n'
        '\t"github.com/pkg/errors"\n'
        '\t"os"\n'
        ")\n"
    )
    head = 'package main\n\nimport (\n\t"os"\n\n\t"github.com/pkg/errors"\n\n'
    shared = '\t"gitlab.mvk.com/go/vkgo/projects/health/shared/util"\n'
    richerr = '\t"gitlab.mvk.com/go/vkgo/projects/health/pkg/richerr"\n'
    go_file = tmp_path / "main.go"
    runner = CliRunner()

    # shared is another repository package, after the domain group
    go_file.write_text(source)
    result = runner.invoke(cli, ["fix", str(go_file)] + REPO_ARGS)
    assert result.exit_code == 1
    assert go_file.read_text() == head + richerr + "\n" + shared + ")\n"

    # as a common prefix it moves ahead of the domain group
    go_file.write_text(source)
    result = runner.invoke(
        cli,
        ["fix", str(go_file), "--pkgs", "gitlab.mvk.com/go/vkgo/projects/health/shared, "] + REPO_ARGS,
    )
    assert result.exit_code == 1
    assert go_file.read_text() == head + shared + "\n" + richerr + ")\n"


def test_config_file_with_flag_override(tmp_path):
    cfg = tmp_path / "goimporter.json"
    cfg.write_text(json.dumps({
        "org_prefix": "gitlab.mvk.com/go",
        "repo_prefix": "gitlab.mvk.com/go/vkgo",
        "common_prefix": "gitlab.mvk.com/go/vkgo/pkg",
        "domain_prefix": "gitlab.mvk.com/go/vkgo/projects/health/pkg",
        "projects_template": "gitlab.mvk.com/go/vkgo/projects/health/%s",
    }))
    go_file = tmp_path / "main.go"
    go_file.write_text(MESSY)

    result = CliRunner().invoke(cli, ["fix", str(go_file), "--config", str(cfg)])
    assert result.exit_code == 1
    assert go_file.read_text() == TIDY

    # with every gitlab path external, both non-stdlib imports share a group
    go_file.write_text(MESSY)
    result = CliRunner().invoke(cli, ["fix", str(go_file), "--config", str(cfg), "--org", "bitbucket.org/acme"])
    assert result.exit_code == 1
    assert go_file.read_text() == (
        "package main\n"
        "\n"
        "import (\n"
        '\t"os"\n'
        "\n"
        '\t"github.com/pkg/errors"\n'
        '\t"gitlab.mvk.com/go/vkgo/projects/health/shared/util"\n'
        ")\n"
    )


def test_invalid_config_file_is_a_usage_error(tmp_path):
    cfg = tmp_path / "goimporter.json"
    cfg.write_text("{broken")
    result = CliRunner().invoke(cli, ["check", str(tmp_path), "--config", str(cfg)])
    assert result.exit_code == 2
    assert "parsing config file" in result.output


def test_unreadable_file_sets_error_exit_code(tmp_path, caplog):
    (tmp_path / "bad.go").write_bytes(b"package p\n\xff\n")
    (tmp_path / "good.go").write_text(MESSY)
    with caplog.at_level(logging.ERROR):
        result = CliRunner().invoke(cli, ["fix", str(tmp_path)] + REPO_ARGS)
    assert result.exit_code == 2
    assert "not valid UTF-8" in caplog.text
    assert (tmp_path / "good.go").read_text() == TIDY


def test_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "goimporter" in result.output
