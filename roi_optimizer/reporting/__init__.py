"""
Output helpers: JSON/CSV export and plain-text formatting for the CLI.

Modules
-------
export     : export_to_json() + export_to_csv() + flatten helpers.
formatters : ASCII formatters returning strings for ``typer.echo()``.
"""
