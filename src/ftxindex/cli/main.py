"""Entry point for the ftxindex command line."""

import click

from ftxindex import __version__
from ftxindex.cli.commands.delete import delete_doc, delete_indexes
from ftxindex.cli.commands.doc_id import doc_id
from ftxindex.cli.commands.import_cmd import import_cmd


@click.group(name="ftxindex")
@click.version_option(__version__, prog_name="ftxindex")
def main() -> None:
    """Import and delete extracted documents in the FTX search indexes.

    Every command talks to a Meilisearch-compatible service and reads the
    API key from the MEILISEARCH_KEY environment variable.
    """
    pass


main.add_command(import_cmd)
main.add_command(delete_doc)
main.add_command(delete_indexes)
main.add_command(doc_id)


if __name__ == "__main__":
    main()
