"""Tests for the command-line interface."""
import pytest

from markdownlint_trap.cli import collect_markdown_files, main


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    """No config file or env override leaks into the CLI under test."""
    for name in ("MARKDOWNLINT_TRAP_CONFIG", "MARKDOWNLINT_TRAP_RULES"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def _exit_code(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc:
        main(argv)
    return exc.value.code


def test_collect_markdown_files(tmp_path):
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "b.md").write_text("")
    (tmp_path / "docs" / "a.markdown").write_text("")
    (tmp_path / "docs" / "c.txt").write_text("")
    single = tmp_path / "README.md"

    files = collect_markdown_files([tmp_path / "docs", single])

    assert [f.name for f in files] == ["a.markdown", "b.md", "README.md"]


def test_lint_reports_and_fails(tmp_path, capsys):
    path = tmp_path / "pets.md"
    path.write_text("Dogs & cats are pets\n")

    assert _exit_code(["lint", str(path), "--rules", "NLA001"]) == 1
    out = capsys.readouterr().out
    assert f"{path}:1:6 no-literal-ampersand" in out
    assert "[auto-fix]" in out


def test_lint_fix_succeeds(tmp_path, capsys):
    path = tmp_path / "pets.md"
    path.write_text("Dogs & cats are pets\n")

    assert _exit_code(["lint", str(path), "--fix", "--rules", "no-literal-ampersand"]) == 0
    assert path.read_text() == "Dogs and cats are pets\n"
    assert "fixed no-literal-ampersand" in capsys.readouterr().out


def test_lint_missing_file(tmp_path, capsys):
    assert _exit_code(["lint", str(tmp_path / "nope.md")]) == 2
    assert "File not found" in capsys.readouterr().err


def test_review_output_file(tmp_path):
    config = tmp_path / "review.yaml"
    config.write_text(
        "no-literal-ampersand:\n"
        "  autofixSafety:\n"
        "    alwaysReview: ['&']\n"
    )
    path = tmp_path / "pets.md"
    path.write_text("Dogs & cats are pets\n")
    out = tmp_path / "review.txt"

    code = _exit_code([
        "lint", str(path), "--rules", "NLA001", "--config", str(config),
        "--review-output", str(out),
    ])

    assert code == 1
    assert "NEEDS REVIEW (1 item)" in out.read_text()


def test_rules_command(capsys):
    main(["rules"])
    out = capsys.readouterr().out
    assert "no-bare-urls (wt/no-bare-urls)" in out
    assert "sentence-case-heading (SC001)" in out


def test_validate_config(tmp_path, capsys):
    good = tmp_path / "good.yaml"
    good.write_text("no-bare-urls:\n  allowedDomains: [example.com]\n")
    bad = tmp_path / "bad.yaml"
    bad.write_text("no-bare-urls:\n  allowedDomains: example.com\n")

    assert _exit_code(["validate-config", "--config", str(good)]) == 0
    assert _exit_code(["validate-config", "--config", str(bad)]) == 1
    assert 'Configuration validation failed for rule "no-bare-urls"' in capsys.readouterr().err


def test_validate_config_bad_yaml(tmp_path, capsys):
    bad = tmp_path / "bad.yaml"
    bad.write_text("key: [oops\n")
    assert _exit_code(["validate-config", "--config", str(bad)]) == 2
