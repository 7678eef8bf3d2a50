"""Tests for the zplgrid CLI commands."""

import json

import pytest

from zplgrid.__main__ import main


@pytest.fixture
def template_file(tmp_path, sample_template):
    path = tmp_path / "label.json"
    path.write_text(json.dumps(sample_template), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "ZPLGRID_LABEL_WIDTH_MM",
        "ZPLGRID_LABEL_HEIGHT_MM",
        "ZPLGRID_SCALE_PX_PER_MM",
        "ZPLGRID_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


class TestDispatch:
    """Tests for top-level dispatch."""

    @pytest.mark.unit
    def test_no_args_shows_help(self, capsys):
        assert main([]) == 1
        assert "Usage: python -m zplgrid" in capsys.readouterr().out

    @pytest.mark.unit
    def test_help(self, capsys):
        assert main(["--help"]) == 0
        assert "validate" in capsys.readouterr().out

    @pytest.mark.unit
    def test_unknown_command(self, capsys):
        assert main(["frobnicate"]) == 1


class TestTemplateCommands:
    """Tests for commands reading or writing templates."""

    @pytest.mark.unit
    def test_new_to_file(self, tmp_path):
        path = tmp_path / "new.json"
        assert main(["new", "--name", "Bin", "-o", str(path)]) == 0
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["name"] == "Bin"
        assert data["layout"]["alias"] == "root"

    @pytest.mark.unit
    def test_validate_ok(self, template_file, capsys):
        assert main(["validate", str(template_file)]) == 0
        assert "OK" in capsys.readouterr().out

    @pytest.mark.unit
    def test_validate_reports_issues(self, tmp_path, sample_template, capsys):
        sample_template["layout"]["children"][1]["alias"] = "title"
        path = tmp_path / "dup.json"
        path.write_text(json.dumps(sample_template), encoding="utf-8")
        assert main(["validate", str(path)]) == 1
        assert "layout.children.1.alias: Duplicate alias: title" in capsys.readouterr().out

    @pytest.mark.unit
    def test_validate_invalid_json(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text("{", encoding="utf-8")
        assert main(["validate", str(path)]) == 1
        assert "$: Invalid JSON" in capsys.readouterr().out

    @pytest.mark.unit
    def test_missing_file(self, tmp_path):
        assert main(["tree", str(tmp_path / "missing.json")]) == 1

    @pytest.mark.unit
    def test_tree(self, template_file, capsys):
        assert main(["tree", str(template_file)]) == 0
        out = capsys.readouterr().out
        assert "├── r/0 (title)" in out
        assert "└── r/1 (code)" in out

    @pytest.mark.unit
    def test_layout_defaults(self, template_file, capsys):
        assert main(["layout", str(template_file)]) == 0
        out = capsys.readouterr().out
        assert "0,0 592x208" in out
        assert "296,0 296x208" in out

    @pytest.mark.unit
    def test_layout_json_with_dpi(self, template_file, capsys):
        assert main(["layout", str(template_file), "--width-mm", "25.4", "--height-mm", "25.4", "--dpi", "100", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["rects"]["r"]["w"] == pytest.approx(100)
        assert data["alias_to_id"] == {"title": "r/0", "code": "r/1"}

    @pytest.mark.unit
    def test_layout_rejects_zero_size(self, template_file):
        assert main(["layout", str(template_file), "--width-mm", "0"]) == 1

    @pytest.mark.unit
    def test_variables_json(self, template_file, capsys):
        assert main(["variables", str(template_file), "--json"]) == 0
        assert json.loads(capsys.readouterr().out) == {"variables": ["name", "sku"], "macros": []}

    @pytest.mark.unit
    def test_schema(self, capsys):
        assert main(["schema"]) == 0
        schema = json.loads(capsys.readouterr().out)
        assert schema["title"] == "TemplateDoc"

    @pytest.mark.unit
    def test_env(self, capsys):
        assert main(["env", "--category", "preview"]) == 0
        out = capsys.readouterr().out
        assert "ZPLGRID_LABEL_WIDTH_MM" in out
        assert "ZPLGRID_LOG_LEVEL" not in out
