# tests/test_cli_basic.py
from typer.testing import CliRunner


def test_cli_help(cli_app):
    r = CliRunner().invoke(cli_app, ["--help"])
    assert r.exit_code == 0
    assert "Usage" in r.stdout


def test_eval_prints_result(cli_app, tmp_base_dir):
    r = CliRunner().invoke(cli_app, ["eval", "6 * 7"])
    assert r.exit_code == 0, r.stdout
    assert "42" in r.stdout


def test_eval_reports_script_error(cli_app, tmp_base_dir):
    r = CliRunner().invoke(cli_app, ["eval", "utils.parseJSON('{bad')"])
    assert r.exit_code == 1
    assert "ParseError" in r.stdout


def test_run_with_html_page(cli_app, tmp_base_dir, tmp_path, page_html):
    page = tmp_path / "page.html"
    page.write_text(page_html, encoding="utf-8")
    script = tmp_path / "title.py"
    script.write_text("navigation.title() + ' @ ' + navigation.currentUrl()\n", encoding="utf-8")
    r = CliRunner().invoke(cli_app, ["run", str(script), "--html", str(page), "--url", "https://site.example/"])
    assert r.exit_code == 0, r.stdout
    assert "Test page @ https://site.example/" in r.stdout


def test_scripts_crud(cli_app, tmp_base_dir, tmp_path):
    runner = CliRunner()
    src = tmp_path / "hello.py"
    src.write_text("utils.log('hello')\n", encoding="utf-8")

    r = runner.invoke(cli_app, ["scripts", "add", "hello", str(src), "--name", "Hello"])
    assert r.exit_code == 0, r.stdout
    r = runner.invoke(cli_app, ["scripts", "add", "hello", str(src)])
    assert r.exit_code == 1

    r = runner.invoke(cli_app, ["scripts", "list"])
    assert "hello" in r.stdout and "form-filler" in r.stdout

    r = runner.invoke(cli_app, ["scripts", "show", "hello"])
    assert r.stdout.strip() == "utils.log('hello')"

    r = runner.invoke(cli_app, ["scripts", "remove", "hello"])
    assert r.exit_code == 0
    r = runner.invoke(cli_app, ["scripts", "show", "hello"])
    assert r.exit_code == 1
    r = runner.invoke(cli_app, ["scripts", "remove", "form-filler"])
    assert r.exit_code == 1


def test_schedule_command(cli_app, tmp_base_dir, tmp_path):
    src = tmp_path / "tick.py"
    src.write_text("storage.set('t', 1)\n", encoding="utf-8")
    r = CliRunner().invoke(cli_app, ["schedule", "tick", str(src), "--interval", "10", "--duration", "0.05"])
    assert r.exit_code == 0, r.stdout
    assert "tick" in r.stdout and "failures=0" in r.stdout


def test_where(cli_app, tmp_base_dir):
    r = CliRunner().invoke(cli_app, ["where"])
    assert r.exit_code == 0
    assert str(tmp_base_dir.resolve()) in r.stdout


def test_reset_removes_base_dir(cli_app, tmp_base_dir):
    r = CliRunner().invoke(cli_app, ["reset"])
    assert r.exit_code == 0
    assert not tmp_base_dir.exists()


def test_callback_errors_print_traceback_in_debug(cli_app, tmp_base_dir, monkeypatch):
    import pagescript.apps.cli.app as cli_module

    def broken_init(settings):
        raise RuntimeError("bootstrap failed")

    monkeypatch.setattr(cli_module, "init_ctx", broken_init)
    monkeypatch.setenv("PAGESCRIPT_CLI_DEBUG", "1")
    r = CliRunner().invoke(cli_app, ["where"])
    assert r.exit_code != 0
    assert isinstance(r.exception, RuntimeError)
    assert "Traceback" in r.output
