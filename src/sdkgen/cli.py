"""CLI entry point for sdkgen."""

from contextlib import contextmanager
from pathlib import Path

import click
from pydantic import ValidationError

from sdkgen.config import SdkgenConfig, load_config, merge_options
from sdkgen.core.types import RecordType, UnionType
from sdkgen.emitter.languages import get_emitter
from sdkgen.errors import SdkgenError
from sdkgen.parser.detect import load_document
from sdkgen.pipeline import ApiModel, build_model

FORMATS = ["auto", "openapi", "apidoc"]


@contextmanager
def _reporting_errors():
    """Turn generation failures into a clean CLI error (exit code 1)."""
    try:
        yield
    except SdkgenError as e:
        raise click.ClickException(str(e)) from e
    except ValidationError as e:
        raise click.ClickException(f"Invalid API description:\n{e}") from e


def _resolve_config(config_path: Path | None, **overrides) -> SdkgenConfig:
    return merge_options(load_config(config_path), **overrides)


def _load_model(doc_path: Path, config: SdkgenConfig, quiet: bool) -> ApiModel:
    if not quiet:
        click.echo(f"Parsing {doc_path} (format: {config.format})...")
    document = load_document(doc_path)
    model = build_model(document, config)
    if not quiet:
        click.echo(f"Found {len(model.routes)} routes and {len(model.types)} type declarations.")
    return model


@click.group()
def main():
    """sdkgen: generate client SDKs from apiDoc data or OpenAPI documents."""
    pass


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output file for the generated SDK.")
@click.option("-l", "--language", default=None, envvar="SDKGEN_LANGUAGE", help="Target language (typescript, csharp).")
@click.option("--format", "fmt", default=None, envvar="SDKGEN_FORMAT", type=click.Choice(FORMATS), help="Document format.")
@click.option("--api-version", default=None, envvar="SDKGEN_API_VERSION", help="Version label for OpenAPI routes.")
@click.option("--allow-redefinition", is_flag=True, envvar="SDKGEN_ALLOW_REDEFINITION", help="Let a later type definition replace an earlier one with the same name.")
@click.option("--config", "config_path", default=None, envvar="SDKGEN_CONFIG", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML settings file.")
@click.option("-q", "--quiet", is_flag=True, help="Only report errors.")
def generate(
    doc_path: Path,
    output: Path,
    language: str | None,
    fmt: str | None,
    api_version: str | None,
    allow_redefinition: bool,
    config_path: Path | None,
    quiet: bool,
):
    """Generate an SDK source file from an API description."""
    with _reporting_errors():
        config = _resolve_config(config_path, language=language, format=fmt, api_version=api_version)
        if allow_redefinition:
            config = config.model_copy(update={"allow_redefinition": True})

        emitter = get_emitter(config.language)
        model = _load_model(doc_path, config, quiet)

        if not quiet:
            click.echo(f"Generating {emitter.language} SDK...")
        source = emitter.generate(model.types, model.versions)

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(source, encoding="utf-8")
    if not quiet:
        click.echo(f"SDK saved to {output}")


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--format", "fmt", default=None, envvar="SDKGEN_FORMAT", type=click.Choice(FORMATS), help="Document format.")
@click.option("--api-version", default=None, envvar="SDKGEN_API_VERSION", help="Version label for OpenAPI routes.")
@click.option("--allow-redefinition", is_flag=True, envvar="SDKGEN_ALLOW_REDEFINITION", help="Let a later type definition replace an earlier one with the same name.")
@click.option("--config", "config_path", default=None, envvar="SDKGEN_CONFIG", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML settings file.")
def inspect(
    doc_path: Path,
    fmt: str | None,
    api_version: str | None,
    allow_redefinition: bool,
    config_path: Path | None,
):
    """Print the normalized routes and type declarations without rendering."""
    with _reporting_errors():
        config = _resolve_config(config_path, format=fmt, api_version=api_version)
        if allow_redefinition:
            config = config.model_copy(update={"allow_redefinition": True})
        model = _load_model(doc_path, config, quiet=True)

    for version in model.versions:
        click.echo(f"version '{version.version}'")
        for resource in version.resources:
            click.echo(f"  {resource.resource}")
            for route in resource.routes:
                click.echo(f"    {route.method.value} {route.url} -> {route.name}")

    click.echo("types")
    for name, ty in model.types:
        if isinstance(ty, RecordType):
            click.echo(f"  {name} (record, {len(ty.members)} members)")
        elif isinstance(ty, UnionType):
            click.echo(f"  {name} (union: {', '.join(ty.cases)})")
