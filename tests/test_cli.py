import json
from pathlib import Path
from unittest.mock import patch

import yaml
from click.testing import CliRunner

from openapi_synth.cli import main
from openapi_synth.errors import DocumentLoadError

FIXTURES = Path(__file__).parent / "fixtures"


class TestCliBuild:
    def test_build_json(self, tmp_path):
        output_file = tmp_path / "openapi.json"
        runner = CliRunner()
        result = runner.invoke(main, [
            "build", str(FIXTURES / "routes.yaml"),
            "-o", str(output_file),
            "--title", "Petstore",
        ])

        assert result.exit_code == 0, result.output
        data = json.loads(output_file.read_text())
        assert data["info"]["title"] == "Petstore"
        assert "Pet" in data["components"]["schemas"]
        assert "Wrote 3 routes" in result.output

    def test_build_yaml_by_suffix(self, tmp_path):
        output_file = tmp_path / "out" / "openapi.yaml"
        runner = CliRunner()
        result = runner.invoke(main, ["build", str(FIXTURES / "routes.yaml"), "-o", str(output_file)])

        assert result.exit_code == 0, result.output
        data = yaml.safe_load(output_file.read_text())
        assert set(data["paths"]) == {"/pets", "/pets/{petId}"}

    def test_build_extends_base(self, tmp_path):
        output_file = tmp_path / "openapi.json"
        runner = CliRunner()
        result = runner.invoke(main, [
            "build", str(FIXTURES / "routes.yaml"),
            "-o", str(output_file),
            "--base", str(FIXTURES / "petstore.json"),
        ])

        assert result.exit_code == 0, result.output
        data = json.loads(output_file.read_text())
        assert data["info"]["title"] == "Petstore"
        assert "Error" in data["components"]["schemas"]

    def test_defects_reported(self, tmp_path):
        examples = tmp_path / "routes.yaml"
        examples.write_text("routes:\n  - path: /items/{id}\n    method: get\n")
        output_file = tmp_path / "openapi.json"
        runner = CliRunner()
        result = runner.invoke(main, ["build", str(examples), "-o", str(output_file)])

        assert result.exit_code == 0
        assert output_file.exists()
        assert "not found in path" in result.output

    def test_strict_fails_on_defects(self, tmp_path):
        examples = tmp_path / "routes.yaml"
        examples.write_text("routes:\n  - path: /items/{id}\n    method: get\n")
        runner = CliRunner()
        result = runner.invoke(main, ["build", str(examples), "-o", str(tmp_path / "o.json"), "--strict"])

        assert result.exit_code == 1

    @patch("openapi_synth.cli.load_examples")
    def test_load_error(self, mock_load, tmp_path):
        mock_load.side_effect = DocumentLoadError("boom")
        runner = CliRunner()
        result = runner.invoke(main, [
            "build", str(FIXTURES / "routes.yaml"),
            "-o", str(tmp_path / "o.json"),
        ])

        assert result.exit_code == 1
        assert "boom" in result.output


class TestCliCompile:
    def test_compile(self, tmp_path):
        output_file = tmp_path / "compiled.json"
        runner = CliRunner()
        result = runner.invoke(main, [
            "compile", str(FIXTURES / "petstore.json"),
            "-o", str(output_file),
            "--format", "json",
        ])

        assert result.exit_code == 0, result.output
        data = json.loads(output_file.read_text())
        assert sorted(data["components"]["schemas"]) == ["Error", "Pet"]
        post = data["paths"]["/pets"]["post"]
        assert post["requestBody"]["content"]["application/json"]["schema"] == {"$ref": "#/components/schemas/Pet"}
        assert "path param petId" in result.output

    def test_compile_strict(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "compile", str(FIXTURES / "petstore.json"),
            "-o", str(tmp_path / "out.yaml"),
            "--strict",
        ])

        assert result.exit_code == 1
        assert (tmp_path / "out.yaml").exists()

    def test_missing_file(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["compile", str(tmp_path / "nope.json"), "-o", str(tmp_path / "o.json")])
        assert result.exit_code != 0
