"""CLI command printing the identifier a document name maps to."""

from __future__ import annotations

import click

from ftxindex.lib.identifiers import build_composite_id, normalize_identifier


@click.command(name="doc-id")
@click.argument("name")
@click.option(
    "--file",
    "file_name",
    default=None,
    help="Source file name; prints the composite id '<file>_<NAME>' instead",
)
def doc_id(name: str, file_name: str | None) -> None:
    """Print the identifier used for NAME in the indexes.

    Useful to find the --doc-id of an imported document, or the
    File_Para_ID / File_Defined_Term_Id of a paragraph or term.

    \b
    EXAMPLES:

        ftxindex doc-id "Acme Corp"

        ftxindex doc-id "Force Majeure" --file acme.json
    """
    if file_name:
        click.echo(build_composite_id(file_name, name))
    else:
        click.echo(normalize_identifier(name))
