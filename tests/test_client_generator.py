from api_client_gen.errors import ConstantParameterError, TypeNameError
from api_client_gen.generator.client import ClientGenerator, document_path, route_attribute
from api_client_gen.model import Client, ClientCollection, EndpointMethod, Parameter
from api_client_gen.options import GenerateClientOptions
from api_client_gen.types import VOID, TypeRef, parse_type


def _param(name, type_="int", source="Query", parameter_name=None, **overrides):
    return Parameter(
        name=name,
        parameter_name=parameter_name or name,
        type=parse_type(type_),
        source=source,
        **overrides,
    )


def _endpoint(name="GetUsers", method="GET", path="api/users", parameters=(), **overrides):
    return EndpointMethod(name=name, http_method=method, path=path, parameters=parameters, **overrides)


def _client(*endpoints, **overrides):
    defaults = dict(
        name="IUsersApi",
        namespace="ApiClient",
        endpoint_methods=endpoints,
        imported_namespaces=("System.Threading.Tasks", "Refit"),
    )
    defaults.update(overrides)
    return Client(**defaults)


EXPECTED_DOCUMENT = """//<auto-generated />

using System.Threading.Tasks;
using Refit;

namespace ApiClient
{
    public partial interface IUsersApi
    {
        /// <summary>
        /// Gets a user.
        /// </summary>
        [Get("/api/users/{id}")]
        Task<User> GetUser(int id);

        [Multipart]
        [Headers("X-Api-Version: 1.0")]
        [Post("/api/users/{id}/avatar")]
        Task UploadAvatar(int id, MultipartItem avatar);
    }
}
"""


class TestRenderClient:
    def test_full_document(self):
        get_user = _endpoint(
            name="GetUser",
            path="api/users/{id}",
            parameters=(_param("id", source="Path"),),
            response_type=parse_type("MyApp.Models.User"),
            documentation="/// <summary>\n/// Gets a user.\n/// </summary>",
        )
        upload = _endpoint(
            name="UploadAvatar",
            method="POST",
            path="api/users/{id}/avatar",
            parameters=(
                _param("X-Api-Version", "string", "Header", is_constant=True, default_value_literal='"1.0"'),
                _param("id", source="Path"),
                _param("avatar", "System.IO.Stream", "File"),
            ),
            is_multipart=True,
        )
        text, diagnostics = ClientGenerator().render_client(_client(get_user, upload))
        assert text == EXPECTED_DOCUMENT
        assert diagnostics == []

    def test_internal_access_modifier(self):
        text, _ = ClientGenerator().render_client(_client(_endpoint(), access_modifier="internal"))
        assert "    internal partial interface IUsersApi\n" in text

    def test_empty_client(self):
        text, _ = ClientGenerator().render_client(_client())
        assert "    public partial interface IUsersApi\n    {\n\n    }\n" in text


class TestScenarios:
    def test_duplicate_route_renders_once(self):
        client = _client(_endpoint(), _endpoint())
        text, diagnostics = ClientGenerator().render_client(client)
        assert text.count('[Get("/api/users")]') == 1
        assert len(diagnostics) == 1
        assert diagnostics[0].message == "Duplicate API endpoint GET api/users ()"

    def test_constant_header_and_plain_query(self):
        endpoint = _endpoint(parameters=(
            _param("X-Api-Version", "string", "Header", is_constant=True, default_value_literal='"1.0"'),
            _param("id", "int", "Query"),
        ))
        method = ClientGenerator().render_method(endpoint)
        assert method == (
            '[Headers("X-Api-Version: 1.0")]\n'
            '[Get("/api/users")]\n'
            "Task GetUsers(int id);"
        )
        assert "[Header(" not in method

    def test_no_payload_return_types(self):
        endpoint = _endpoint(response_type=VOID)
        plain = ClientGenerator(GenerateClientOptions(use_api_responses=False)).render_method(endpoint)
        wrapped = ClientGenerator(GenerateClientOptions(use_api_responses=True)).render_method(endpoint)
        assert plain.endswith("Task GetUsers();")
        assert wrapped.endswith("Task<IApiResponse> GetUsers();")

    def test_object_query_parameter_uses_query_attribute(self):
        endpoint = _endpoint(parameters=(_param("filter", "MyApp.Models.UserFilter"),))
        method = ClientGenerator().render_method(endpoint)
        assert "Task GetUsers([Query] UserFilter filter);" in method
        assert "AliasAs" not in method

    def test_case_insensitive_name_has_no_alias(self):
        endpoint = _endpoint(parameters=(_param("userId", "int", parameter_name="userid"),))
        method = ClientGenerator().render_method(endpoint)
        assert method.endswith("Task GetUsers(int userid);")


class TestGenerate:
    def test_output_is_byte_identical_across_runs(self):
        ambiguous = frozenset({TypeRef(name="Order", namespace="Shop.Models")})
        collection = ClientCollection(
            clients=(
                _client(
                    _endpoint(parameters=(_param("page", default_value_literal="1"), _param("q", "string"))),
                    _endpoint(name="CreateOrder", method="POST", path="api/orders",
                              parameters=(_param("order", "Shop.Models.Order", "Body"),)),
                ),
            ),
            ambiguous_types=ambiguous,
        )
        first = ClientGenerator().generate(collection)
        second = ClientGenerator().generate(collection)
        assert first.documents == second.documents
        assert "Task CreateOrder([Body] Shop.Models.Order order);" in first.documents["IUsersApi.cs"]
        assert "Task GetUsers(string q, int page = 1);" in first.documents["IUsersApi.cs"]

    def test_documents_are_keyed_by_location(self):
        collection = ClientCollection(clients=(_client(_endpoint(), location="V1"),))
        result = ClientGenerator().generate(collection)
        assert list(result.documents) == ["V1/IUsersApi.cs"]

    def test_broken_client_fails_alone(self):
        broken = _client(
            _endpoint(parameters=(_param("X-Key", "string", "Header", is_constant=True),)),
            name="IBrokenApi",
        )
        healthy = _client(_endpoint())
        result = ClientGenerator().generate(ClientCollection(clients=(broken, healthy)))
        assert list(result.documents) == ["IUsersApi.cs"]
        assert isinstance(result.failures["IBrokenApi.cs"], ConstantParameterError)
        assert "GET api/users" in str(result.failures["IBrokenApi.cs"])

    def test_unnamed_response_type_fails_with_context(self):
        client = _client(_endpoint(response_type=TypeRef(name="", namespace="MyApp")))
        result = ClientGenerator().generate(ClientCollection(clients=(client,)))
        error = result.failures["IUsersApi.cs"]
        assert isinstance(error, TypeNameError)
        assert error.endpoint == "GET api/users"
        assert result.documents == {}

    def test_diagnostics_are_collected(self):
        collection = ClientCollection(clients=(_client(_endpoint(), _endpoint()),))
        result = ClientGenerator().generate(collection)
        assert [d.kind for d in result.diagnostics] == ["endpoint"]

    def test_shared_document_path_is_a_failure(self):
        first = _client(_endpoint(name="A"))
        second = _client(_endpoint(name="B", path="api/other"))
        result = ClientGenerator().generate(ClientCollection(clients=(first, second)))
        assert "Task A();" in result.documents["IUsersApi.cs"]
        assert "already generated by another client" in str(result.failures["IUsersApi.cs"])


class TestHelpers:
    def test_route_attribute_adds_leading_slash(self):
        assert route_attribute(_endpoint(method="DELETE", path="api/users/{id}")) == '[Delete("/api/users/{id}")]'
        assert route_attribute(_endpoint(path="/api/users")) == '[Get("/api/users")]'

    def test_document_path_without_location(self):
        assert document_path(_client()) == "IUsersApi.cs"
