from api_client_gen.naming import sanitize_identifier, to_camel_case, to_pascal_case


class TestToPascalCase:
    def test_snake_case(self):
        assert to_pascal_case("get_user") == "GetUser"

    def test_http_verb(self):
        assert to_pascal_case("GET") == "Get"
        assert to_pascal_case("DELETE") == "Delete"

    def test_kebab_case(self):
        assert to_pascal_case("user-accounts") == "UserAccounts"


class TestSanitizeIdentifier:
    def test_header_name(self):
        assert sanitize_identifier("X-Api-Version") == "xApiVersion"

    def test_camel_case_is_kept(self):
        assert to_camel_case("petId") == "petId"
        assert sanitize_identifier("userId") == "userId"

    def test_keyword_is_escaped(self):
        assert sanitize_identifier("class") == "@class"

    def test_leading_digit(self):
        assert sanitize_identifier("2fa") == "_2fa"
