from pathlib import Path

import pytest

from api_client_gen.errors import DescriptionError
from api_client_gen.parser.description import parse_description

FIXTURES = Path(__file__).parent / "fixtures"


class TestParseDescription:
    def test_parse_endpoint_count(self):
        doc = parse_description(FIXTURES / "endpoints.yaml")
        assert len(doc.endpoints) == 5

    def test_parse_type_overrides(self):
        doc = parse_description(FIXTURES / "endpoints.yaml")
        assert doc.types["Shop.Models.OrderStatus"].value_type is True

    def test_parse_constant_header(self):
        doc = parse_description(FIXTURES / "endpoints.yaml")
        search = [e for e in doc.endpoints if e.action == "SearchUsers"][0]
        header = [p for p in search.parameters if p.source == "header"][0]
        assert header.constant is True
        assert header.default == "2.0"
        assert header.has_default is True

    def test_explicit_null_default(self):
        doc = parse_description(FIXTURES / "endpoints.yaml")
        legacy = [e for e in doc.endpoints if e.action == "GetLegacyOrder"][0]
        status = legacy.parameters[1]
        assert status.default is None
        assert status.has_default is True

    def test_bare_list_of_endpoints(self, tmp_path):
        f = tmp_path / "endpoints.json"
        f.write_text('[{"method": "GET", "path": "api/ping"}]')
        doc = parse_description(f)
        assert doc.endpoints[0].path == "api/ping"

    def test_invalid_yaml(self, tmp_path):
        f = tmp_path / "bad.yaml"
        f.write_text("endpoints: [invalid\n")
        with pytest.raises(DescriptionError) as exc:
            parse_description(f)
        assert str(f) in str(exc.value)

    def test_invalid_endpoint(self, tmp_path):
        f = tmp_path / "bad.yaml"
        f.write_text("endpoints:\n  - method: FETCH\n    path: api/x\n")
        with pytest.raises(DescriptionError):
            parse_description(f)

    def test_scalar_root(self, tmp_path):
        f = tmp_path / "bad.yaml"
        f.write_text("just text")
        with pytest.raises(DescriptionError):
            parse_description(f)
