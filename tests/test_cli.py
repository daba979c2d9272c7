from pathlib import Path

from tests.infrastructure import jload, run_cli, write


def test_render_with_data_and_partials(tmpproj: Path):
    cp = run_cli(tmpproj, "render", "templates/page.mustache", "--data", "data.yaml")
    assert cp.returncode == 0, cp.stderr
    assert cp.stdout == "<h1>Fruit &amp; Veg</h1>\n  <li>apple</li>\n  <li>kale</li>\n"


def test_render_from_stdin(tmp_path: Path):
    cp = run_cli(tmp_path, "render", "-", stdin="Hi {{name}}!")
    assert cp.returncode == 0, cp.stderr
    assert cp.stdout == "Hi !"


def test_render_json_data_to_file(tmp_path: Path):
    write(tmp_path / "t.mustache", "{{#xs}}{{.}};{{/xs}}")
    write(tmp_path / "d.json", '{"xs": [1, 2]}')
    cp = run_cli(tmp_path, "render", "t.mustache", "--data", "d.json", "-o", "out.txt")
    assert cp.returncode == 0, cp.stderr
    assert cp.stdout == ""
    assert "Wrote: out.txt" in cp.stderr
    assert (tmp_path / "out.txt").read_text(encoding="utf-8") == "1;2;"


def test_partials_directory_option(tmp_path: Path):
    write(tmp_path / "t.mustache", "[{{>box}}]")
    write(tmp_path / "parts" / "box.mustache", "boxed")
    cp = run_cli(tmp_path, "render", "t.mustache", "--partials", "parts")
    assert cp.returncode == 0, cp.stderr
    assert cp.stdout == "[boxed]"


def test_tags_option(tmp_path: Path):
    write(tmp_path / "t.txt", "<% a %> {{a}}")
    write(tmp_path / "d.yaml", "a: 1\n")
    cp = run_cli(tmp_path, "render", "t.txt", "--data", "d.yaml", "--tags", "<% %>")
    assert cp.returncode == 0, cp.stderr
    assert cp.stdout == "1 {{a}}"


def test_strict_flag(tmp_path: Path):
    write(tmp_path / "t.mustache", "{{missing}}")
    cp = run_cli(tmp_path, "render", "t.mustache", "--strict")
    assert cp.returncode == 2
    assert "Unknown key 'missing'" in cp.stderr
    assert cp.stdout == ""


def test_config_file_in_cwd(tmp_path: Path):
    write(tmp_path / "whisker.yaml", "strict: true\n")
    write(tmp_path / "t.mustache", "{{missing}}")
    cp = run_cli(tmp_path, "render", "t.mustache")
    assert cp.returncode == 2
    assert "strict mode" in cp.stderr


def test_invalid_config(tmp_path: Path):
    write(tmp_path / "whisker.yaml", "bogus: 1\n")
    write(tmp_path / "t.mustache", "x")
    cp = run_cli(tmp_path, "render", "t.mustache")
    assert cp.returncode == 2
    assert "unknown keys: bogus" in cp.stderr


def test_parse_error_exit_code(tmp_path: Path):
    write(tmp_path / "t.mustache", "ok\n{{#open}}\n")
    cp = run_cli(tmp_path, "render", "t.mustache")
    assert cp.returncode == 2
    assert "Unclosed section 'open'" in cp.stderr
    assert "2:1" in cp.stderr
    assert "Traceback" not in cp.stderr


def test_missing_template_file(tmp_path: Path):
    cp = run_cli(tmp_path, "render", "nope.mustache")
    assert cp.returncode == 2
    assert "Template file not found" in cp.stderr


def test_bad_tags_option(tmp_path: Path):
    write(tmp_path / "t.mustache", "x")
    cp = run_cli(tmp_path, "render", "t.mustache", "--tags", "<%")
    assert cp.returncode == 2
    assert "two space separated delimiters" in cp.stderr


def test_parse_report(tmp_path: Path):
    write(tmp_path / "t.mustache", "Hi {{name}}{{#a}}x{{/a}}")
    cp = run_cli(tmp_path, "parse", "t.mustache")
    assert cp.returncode == 0, cp.stderr
    data = jload(cp.stdout)
    assert data["template"] == "t.mustache"
    assert data["tags"] == "{{ }}"
    assert data["nodeCount"] == 4
    assert data["nodes"] == [
        {"index": 0, "kind": "text", "text": "Hi "},
        {"index": 1, "kind": "variable", "name": "name", "escape": True},
        {"index": 2, "kind": "section", "name": "a", "inverted": False, "start": 3, "end": 4, "tags": "{{ }}"},
        {"index": 3, "kind": "text", "text": "x"},
    ]


def test_parse_report_partials_and_delimiters(tmp_path: Path):
    cp = run_cli(tmp_path, "parse", "-", stdin="  {{>item}}\n{{=<% %>=}}<%! note %>")
    assert cp.returncode == 0, cp.stderr
    data = jload(cp.stdout)
    assert data["template"] == "<stdin>"
    assert [n["kind"] for n in data["nodes"]] == ["partial", "delimiters", "comment"]
    assert data["nodes"][0]["indent"] == "  "
    assert data["nodes"][1]["tags"] == "<% %>"


def test_version(tmp_path: Path):
    cp = run_cli(tmp_path, "--version")
    assert cp.returncode == 0
    assert cp.stdout.startswith("whisker ")


def test_debug_logging(tmp_path: Path):
    write(tmp_path / "t.mustache", "{{a}}")
    cp = run_cli(tmp_path, "--debug", "render", "t.mustache")
    assert cp.returncode == 0
    assert "[DEBUG]" in cp.stderr
