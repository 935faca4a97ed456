"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdxlate.cli.commands import assemble_cmd, build_cmd, extract_cmd


app = typer.Typer(name="mdxlate", no_args_is_help=True, help="Translate Markdown/MDX docs while protecting structure")

app.command(name="build")(build_cmd)
app.command(name="extract")(extract_cmd)
app.command(name="assemble")(assemble_cmd)
