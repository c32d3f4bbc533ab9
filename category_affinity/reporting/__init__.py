"""
Reporting layer: file output and terminal formatting.

Modules
-------
export     : JSON / CSV / Parquet writers for matrices and affinity results,
             plus readers used by the ``report`` command.
formatters : ASCII summaries returned as strings for ``typer.echo()``.
"""
