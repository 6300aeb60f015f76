"""CLI entry point for openapi-synth."""

import logging
from pathlib import Path

import click

from openapi_synth.config import SynthesisSettings
from openapi_synth.document.document import Document
from openapi_synth.errors import OpenAPISynthError
from openapi_synth.loader import apply_examples, load_examples


def _settings(max_depth: int | None) -> SynthesisSettings:
    settings = SynthesisSettings.from_env()
    if max_depth is not None:
        settings = settings.model_copy(update={"max_depth": max_depth})
    return settings


def _write(doc: Document, output: Path, fmt: str) -> None:
    if fmt == "auto":
        fmt = "yaml" if output.suffix in (".yaml", ".yml") else "json"
    text = doc.to_yaml() if fmt == "yaml" else doc.to_json()
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")


def _finish(doc: Document, output: Path, fmt: str, strict: bool) -> None:
    """Compile, write and report defects."""
    err = doc.compile()
    _write(doc, output, fmt)
    click.echo(f"Wrote {len(doc.routes)} routes to {output}")
    if err is None:
        return
    click.echo(f"Found {len(err.defects)} defects:", err=True)
    for defect in err.defects:
        click.echo(f"  {defect}", err=True)
    if strict:
        raise click.exceptions.Exit(1)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Show debug logs.")
def main(verbose: bool):
    """openapi-synth: build OpenAPI documents from example values."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("examples_path", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output file for the document.")
@click.option("--base", default=None, type=click.Path(exists=True, path_type=Path), help="Existing document to extend.")
@click.option("--title", default="my app", help="Title for a new document.")
@click.option("--version", "api_version", default="0.1.0", help="API version for a new document.")
@click.option("--description", default=None, help="Description for a new document.")
@click.option("--format", "fmt", default="auto", type=click.Choice(["auto", "json", "yaml"]), help="Output format.")
@click.option("--max-depth", default=None, type=int, help="Nesting limit for synthesized schemas.")
@click.option("--strict", is_flag=True, help="Exit non-zero when the document has defects.")
def build(
    examples_path: Path,
    output: Path,
    base: Path | None,
    title: str,
    api_version: str,
    description: str | None,
    fmt: str,
    max_depth: int | None,
    strict: bool,
):
    """Build a document from a route examples file."""
    settings = _settings(max_depth)
    try:
        if base is not None:
            click.echo(f"Extending {base}...")
            doc = Document.from_file(base, settings)
        else:
            doc = Document.new(title, api_version, description, settings)
        click.echo(f"Reading examples from {examples_path}...")
        apply_examples(doc, load_examples(examples_path))
    except OpenAPISynthError as e:
        raise click.ClickException(str(e)) from e

    _finish(doc, output, fmt, strict)


@main.command(name="compile")
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output file for the document.")
@click.option("--format", "fmt", default="auto", type=click.Choice(["auto", "json", "yaml"]), help="Output format.")
@click.option("--strict", is_flag=True, help="Exit non-zero when the document has defects.")
def compile_cmd(doc_path: Path, output: Path, fmt: str, strict: bool):
    """Compile an existing document: share object schemas and report defects."""
    click.echo(f"Loading {doc_path}...")
    try:
        doc = Document.from_file(doc_path, _settings(None))
    except OpenAPISynthError as e:
        raise click.ClickException(str(e)) from e

    _finish(doc, output, fmt, strict)
