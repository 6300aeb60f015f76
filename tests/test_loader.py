from pathlib import Path

import pytest

from openapi_synth.document.base import INVALID_JSON, JSON_MIME
from openapi_synth.document.document import Document
from openapi_synth.errors import DocumentLoadError
from openapi_synth.loader import ExamplesFile, apply_examples, load_examples

FIXTURES = Path(__file__).parent / "fixtures"


class TestLoadExamples:
    def test_load(self):
        examples = load_examples(FIXTURES / "routes.yaml")
        assert isinstance(examples, ExamplesFile)
        assert examples.schema_names == {"Pet": ["id", "name"]}
        assert len(examples.routes) == 3
        assert set(examples.routes[1].responses) == {"200", "404"}
        assert examples.routes[1].responses["404"].json_text == '{"error": "not found"}'

    def test_invalid_yaml(self, tmp_path):
        f = tmp_path / "bad.yaml"
        f.write_text("routes: [\n")
        with pytest.raises(DocumentLoadError):
            load_examples(f)

    def test_invalid_shape(self, tmp_path):
        f = tmp_path / "bad.yaml"
        f.write_text("routes:\n  - method: get\n")
        with pytest.raises(DocumentLoadError):
            load_examples(f)


class TestApplyExamples:
    def test_apply(self):
        doc = apply_examples(Document.new("pets", "1.0.0"), load_examples(FIXTURES / "routes.yaml"))
        assert sorted(doc.routes) == ["/pets/{petId}|get", "/pets|get", "/pets|post"]

        listing = doc.routes["/pets|get"]
        assert listing.tags == ["pets"]
        assert listing.summary == "List all pets"
        assert list(listing.parameters["query|limit"].examples) == ["10", "20"]
        assert listing.responses[200].description == "A list of pets"

        single = doc.routes["/pets/{petId}|get"]
        assert single.parameters["path|petId"].error is None
        assert single.responses[200].content[JSON_MIME].schema_.title == "Pet"
        assert single.responses[404].content[JSON_MIME].schema_.properties["error"].to_dict() == {"type": "string"}

        create = doc.routes["/pets|post"]
        assert create.request_body.content[JSON_MIME].schema_.title == "Pet"
        assert create.responses[201].description == "Created"

    def test_compiles_clean(self):
        doc = apply_examples(Document.new("pets", "1.0.0"), load_examples(FIXTURES / "routes.yaml"))
        assert doc.compile() is None
        assert "Pet" in doc.components.schemas
        assert len(doc.components.schemas) == 2

    def test_invalid_json_example(self, tmp_path):
        f = tmp_path / "routes.yaml"
        f.write_text("routes:\n  - path: /a\n    method: post\n    request_json: '{oops'\n")
        doc = apply_examples(Document.new("a", "1"), load_examples(f))
        assert INVALID_JSON in doc.routes["/a|post"].request_body.content
        assert doc.compile() is not None

    def test_unknown_param_location_skipped(self, tmp_path):
        f = tmp_path / "routes.yaml"
        f.write_text("routes:\n  - path: /a\n    method: get\n    params:\n      body: {x: 1}\n")
        doc = apply_examples(Document.new("a", "1"), load_examples(f))
        assert doc.routes["/a|get"].parameters == {}
