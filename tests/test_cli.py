from typer.testing import CliRunner

from jinkls.cli import app

runner = CliRunner()


def test_check_reports_diagnostics(make_workspace, monkeypatch):
    root = make_workspace(
        {
            "src/main.jk": """\
            import from mathlib { sqrt, cube };
            let x = y;
            let r = sqrt(2);
            """,
            "src/mathlib.jk": "pub fun sqrt(float x) { return x; }\n",
        }
    )
    monkeypatch.chdir(root)

    result = runner.invoke(app, ["check", "."], catch_exceptions=False)

    assert result.exit_code == 1
    assert "main.jk:1:29: error: Symbol 'cube' not found in module 'mathlib'." in result.stdout
    assert "main.jk:2:9: error: Undefined symbol 'y'." in result.stdout
    assert "Checked 2 files: 2 errors, 0 warnings" in result.stdout


def test_check_clean_workspace(make_workspace, monkeypatch):
    root = make_workspace(
        {
            "src/main.jk": "import mathlib;\nlet r = mathlib.sqrt(2);\n",
            "src/mathlib.jk": "pub fun sqrt(float x) { return x; }\n",
        }
    )
    monkeypatch.chdir(root)

    result = runner.invoke(app, ["check", "."], catch_exceptions=False)

    assert result.exit_code == 0
    assert "Checked 2 files: 0 errors, 0 warnings" in result.stdout


def test_check_warnings_do_not_fail(make_workspace, monkeypatch):
    root = make_workspace(
        {
            "src/main.jk": "import mathlib;\n",
            "src/mathlib.jk": "pub fun sqrt(float x) { return x; }\n",
        }
    )
    monkeypatch.chdir(root)

    result = runner.invoke(app, ["check", "."], catch_exceptions=False)

    assert result.exit_code == 0
    assert "main.jk:1:8: warning: Import 'mathlib' is unused." in result.stdout
    assert "0 errors, 1 warnings" in result.stdout


def test_check_honors_max_number_of_problems(make_workspace, monkeypatch):
    root = make_workspace(
        {
            ".jinkls.yml": "max_number_of_problems: 1\n",
            "src/main.jk": "let a = x1;\nlet b = x2;\n",
        }
    )
    monkeypatch.chdir(root)

    result = runner.invoke(app, ["check", "."], catch_exceptions=False)

    assert result.exit_code == 1
    assert "Undefined symbol 'x1'." in result.stdout
    assert "Undefined symbol 'x2'." not in result.stdout


def test_check_single_file(make_workspace, monkeypatch):
    root = make_workspace({"src/main.jk": "let x = 1;\n", "src/other.jk": "let y = z;\n"})
    monkeypatch.chdir(root)

    result = runner.invoke(app, ["check", "src/main.jk"], catch_exceptions=False)

    assert result.exit_code == 0
    assert "Checked 1 files: 0 errors, 0 warnings" in result.stdout


def test_check_invalid_config(make_workspace, monkeypatch):
    root = make_workspace({".jinkls.yml": "max_number_of_problems: zero\n", "src/main.jk": ""})
    monkeypatch.chdir(root)

    result = runner.invoke(app, ["check", "."])

    assert result.exit_code == 2
