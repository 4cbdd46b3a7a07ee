"""CLI entry point for api-client-gen."""

from fnmatch import fnmatch
from pathlib import Path

import click

from api_client_gen.builder import ClientModelBuilder
from api_client_gen.errors import DescriptionError
from api_client_gen.generator.client import ClientGenerator, document_path
from api_client_gen.options import GenerateClientOptions, load_options
from api_client_gen.parser.base import ApiDescription, DescriptionDocument
from api_client_gen.parser.description import parse_description
from api_client_gen.parser.detect import detect_format
from api_client_gen.parser.swagger import parse_openapi


def _parse_doc(file_path: Path, fmt: str, options: GenerateClientOptions) -> DescriptionDocument:
    """Parse an API description based on format."""
    if fmt == "auto":
        fmt = detect_format(file_path)

    if fmt == "openapi":
        return parse_openapi(file_path, models_namespace=options.models_namespace)
    return parse_description(file_path)


def _filter_endpoints(endpoints: list[ApiDescription], patterns: tuple[str, ...]) -> list[ApiDescription]:
    """Keep endpoints matching any "METHOD /path" or "/path" glob pattern."""
    if not patterns:
        return endpoints

    result = []
    for ep in endpoints:
        path = "/" + ep.path.lstrip("/")
        for pattern in patterns:
            method, _, path_pattern = pattern.strip().rpartition(" ")
            if method and method.upper() != ep.method:
                continue
            if fnmatch(path, "/" + path_pattern.lstrip("/")):
                result.append(ep)
                break
    return result


def _load(doc_path: Path, fmt: str, options: GenerateClientOptions, endpoint_patterns: tuple[str, ...]):
    try:
        document = _parse_doc(doc_path, fmt, options)
        document = document.model_copy(update={"endpoints": _filter_endpoints(document.endpoints, endpoint_patterns)})
        return ClientModelBuilder(document, options).build()
    except DescriptionError as e:
        raise click.ClickException(str(e)) from e


_format_option = click.option(
    "--format", "fmt", default="auto",
    type=click.Choice(["auto", "openapi", "description"]), help="Document format.",
)
_endpoint_option = click.option(
    "--endpoint", "endpoint_patterns", multiple=True,
    help='Only include endpoints matching "METHOD /path" or "/path" (glob, repeatable).',
)


def _client_options(command):
    """Options that shape the generated clients, shared by every command."""
    decorators = [
        click.option(
            "--config", "config_path", default=None,
            type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML options file.",
        ),
        click.option("--namespace", default=None, help="Namespace of the generated clients."),
        click.option("--type-name-pattern", default=None, help='Client name pattern, e.g. "I[controller]Api".'),
        click.option(
            "--access-modifier", default=None,
            type=click.Choice(["public", "internal"]), help="Access modifier of the interfaces.",
        ),
        click.option("--use-api-responses/--no-use-api-responses", default=None, help="Return IApiResponse wrappers."),
    ]
    for decorator in reversed(decorators):
        command = decorator(command)
    return command


def _options(config_path: Path | None, **overrides) -> GenerateClientOptions:
    try:
        return load_options(config_path, **overrides)
    except DescriptionError as e:
        raise click.ClickException(str(e)) from e


@click.group()
def main():
    """API Client Gen: generate typed Refit client interfaces from API descriptions."""
    pass


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(file_okay=False, path_type=Path), help="Output directory for client files.")
@_format_option
@_endpoint_option
@_client_options
def generate(
    doc_path: Path,
    output: Path,
    fmt: str,
    endpoint_patterns: tuple[str, ...],
    config_path: Path | None,
    **overrides,
):
    """Generate one client interface file per controller."""
    options = _options(config_path, **overrides)

    click.echo(f"Parsing {doc_path} (format: {fmt})...")
    collection = _load(doc_path, fmt, options, endpoint_patterns)
    click.echo(f"Found {len(collection.clients)} clients.")

    result = ClientGenerator(options).generate(collection)
    for diagnostic in result.diagnostics:
        click.echo(diagnostic.message, err=True)

    for relative_path, text in result.documents.items():
        file_path = output / relative_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(text, encoding="utf-8")
        click.echo(f"  Created {file_path}")

    for relative_path, error in result.failures.items():
        click.echo(f"  Failed {relative_path}: {error}", err=True)

    click.echo(f"Generated {len(result.documents)} files in {output}")
    if result.failures:
        raise SystemExit(1)


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_format_option
@_endpoint_option
@_client_options
def inspect(doc_path: Path, fmt: str, endpoint_patterns: tuple[str, ...], config_path: Path | None, **overrides):
    """List the clients and endpoints that would be generated."""
    options = _options(config_path, **overrides)

    collection = _load(doc_path, fmt, options, endpoint_patterns)
    for client in collection.clients:
        click.echo(f"{document_path(client)} ({client.namespace})")
        for method in client.endpoint_methods:
            click.echo(f"  {method.http_method} /{method.path.lstrip('/')} -> {method.name}")
