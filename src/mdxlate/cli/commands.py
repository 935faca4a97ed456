"""CLI command implementations"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from dotenv import find_dotenv, load_dotenv

from mdxlate.config import Settings, load_config
from mdxlate.core.errors import ConfigError
from mdxlate.core.models import BuildReport, DocResult
from mdxlate.core.pipeline import run_assemble, run_build, run_extract
from mdxlate.core.translate import identity


ConfigOpt = Annotated[Optional[str], typer.Option("--config", "-c", help="Path to a YAML config file")]
OutOpt = Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")]
WorkersOpt = Annotated[Optional[int], typer.Option("--workers", help="Documents processed concurrently")]


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None, config_file: str = None) -> Settings:
    """Load .env + config with standard CLI error handling, then configure logging."""
    load_dotenv(find_dotenv(usecwd=True))
    try:
        settings = load_config(overrides=overrides, config_file=config_file)
    except ValueError as e:
        _fail(str(e))
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return settings


def _echo_progress(done: int, total: int, result: DocResult) -> None:
    status = "ok" if result.ok else "FAILED"
    typer.echo(f"  [{done}/{total}] {status}: {result.source}")


def _echo_report(report: BuildReport, settings: Settings) -> None:
    for failed in report.failed:
        typer.echo(f"  failed: {failed.file} ({failed.reason})")
    typer.echo(
        f"Build complete - "
        f"{len(report.success)} translated, "
        f"{len(report.failed)} failed, "
        f"report: {Path(settings.output_dir) / settings.report_name}"
    )


def build_cmd(
    input_dir: Annotated[Optional[str], typer.Argument(help="Source directory (or set input_dir in config)")] = None,
    config: ConfigOpt = None,
    out: OutOpt = None,
    model: Annotated[Optional[str], typer.Option("--model", help="Chat completion model")] = None,
    prompt: Annotated[Optional[str], typer.Option("--prompt", help="System prompt for translation")] = None,
    workers: WorkersOpt = None,
    resume: Annotated[bool, typer.Option("--resume", help="Keep output dir and reuse masked artifacts")] = False,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Skip the API; round-trip masked text unchanged")] = False,
    ):
    """Run the full pipeline: extract -> translate -> reinject, then write the build report."""
    settings = _settings(
        overrides={"input_dir": input_dir, "output_dir": out, "model": model, "prompt": prompt, "workers": workers},
        config_file=config,
    )
    try:
        report = run_build(
            settings,
            translator=identity if dry_run else None,
            resume=resume,
            on_progress=_echo_progress,
        )
    except ConfigError as e:
        _fail(str(e))
    except OSError as e:
        _fail("Build failed", e)
    _echo_report(report, settings)


def extract_cmd(
    path: Annotated[str, typer.Argument(help="File or directory to mask")],
    config: ConfigOpt = None,
    out: OutOpt = None,
    ):
    """Mask protected regions and write text + snippet artifacts to <out-dir>/preprocess."""
    settings = _settings(overrides={"output_dir": out}, config_file=config)
    try:
        results = run_extract(path, settings)
    except ConfigError as e:
        _fail(str(e))
    except OSError as e:
        _fail("Extract failed", e)
    extracted = [r for r in results if r.ok]
    for r in results:
        if r.ok:
            typer.echo(f"  {r.source} -> {r.output}")
        else:
            typer.echo(f"  failed: {r.source} ({r.reason})")
    typer.echo(
        f"Extracted {len(extracted)} document(s) to {Path(settings.output_dir)}/, "
        f"{len(results) - len(extracted)} failed"
    )


def assemble_cmd(
    input_dir: Annotated[Optional[str], typer.Argument(help="Source directory (or set input_dir in config)")] = None,
    config: ConfigOpt = None,
    out: OutOpt = None,
    workers: WorkersOpt = None,
    ):
    """Reinject already translated preprocess files into <out-dir>/build without calling the API."""
    settings = _settings(
        overrides={"input_dir": input_dir, "output_dir": out, "workers": workers},
        config_file=config,
    )
    try:
        report = run_assemble(settings, on_progress=_echo_progress)
    except ConfigError as e:
        _fail(str(e))
    except OSError as e:
        _fail("Assemble failed", e)
    _echo_report(report, settings)
