"""Pipeline step functions: per-document extract -> translate -> reinject, and run orchestration"""

import functools
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Optional

from mdxlate.config import Settings, require
from mdxlate.core.artifacts import has_artifacts, read_artifacts, write_artifacts
from mdxlate.core.errors import ConfigError, ReinjectionError
from mdxlate.core.extract.extract import extract
from mdxlate.core.models import BuildReport, DocResult, MaskedDoc
from mdxlate.core.reinject import finalize, reinject
from mdxlate.core.translate import Translator, make_client, translate
from mdxlate.util.fs import clean_dir, copy_file, discover_files


logger = logging.getLogger(__name__)

PREPROCESS_DIR = "preprocess"
BUILD_DIR = "build"

ProgressCallback = Callable[[int, int, DocResult], None]


def _dirs(settings: Settings) -> tuple[Path, Path]:
    out = Path(settings.output_dir)
    return out / PREPROCESS_DIR, out / BUILD_DIR


def _input_root(settings: Settings) -> Path:
    require(settings, "input_dir")
    root = Path(settings.input_dir)
    if not root.exists():
        raise ConfigError(f"Input directory not found: {root}")
    return root


def _relative(path: Path, root: Path) -> Path:
    return Path(path.name) if root.is_file() else path.relative_to(root)


def _mask(source: Path, settings: Settings) -> MaskedDoc:
    return extract(
        source.read_text(encoding="utf-8"),
        reserved_words=settings.reserved_words,
        admonition_kinds=settings.admonition_kinds,
    )


def _restore(translated: str, masked: MaskedDoc, settings: Settings) -> str:
    restored = reinject(translated, masked.snippets, settings.reserved_words)
    return finalize(restored, settings.asset_prefix, settings.asset_depth)


def _fallback(source: Path, dest: Path, stage: str, error: Exception) -> DocResult:
    """Record the failure and copy the untranslated original into the build tree."""
    reason = f"{stage} error: {error}"
    if isinstance(error, ReinjectionError):
        logger.error("%s: %s (snippet=%s excerpt=%r)", source, reason, error.snippet_id, error.excerpt)
    else:
        logger.error("%s: %s", source, reason)
    try:
        copy_file(source, dest)
        logger.info("Copied original %s -> %s", source, dest)
    except OSError as e:
        logger.error("Fallback copy failed for %s: %s", source, e)
        reason = f"{reason}; fallback copy failed: {e}"
    return DocResult(source=source, output=dest, ok=False, reason=reason)


def process_document(
    source: Path,
    rel: Path,
    settings: Settings,
    translator: Translator,
    resume: bool = False,
    ) -> DocResult:
    """Run one document through extract -> translate -> reinject.

    Never raises for per-document failures: they come back as a failed
    DocResult after the original is copied to the build path.
    """
    preprocess_dir, build_dir = _dirs(settings)
    staged = preprocess_dir / rel
    dest = build_dir / rel

    stage = "preprocess"
    try:
        if resume and has_artifacts(staged):
            logger.info("Resuming %s from masked artifacts", rel)
            masked = read_artifacts(staged)
        else:
            masked = _mask(source, settings)
            write_artifacts(masked, staged)

        stage = "translate"
        logger.info("Translating %s (%d snippet(s) protected)", rel, len(masked.snippets))
        translated = translator(masked.text, settings)
        staged.write_text(translated, encoding="utf-8")

        stage = "postprocess"
        restored = _restore(translated, masked, settings)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(restored, encoding="utf-8")
    except Exception as e:  # per-document boundary; siblings keep running
        return _fallback(source, dest, stage, e)
    return DocResult(source=source, output=dest)


def assemble_document(source: Path, rel: Path, settings: Settings) -> DocResult:
    """Reinject an already translated preprocess file against its stored artifacts."""
    preprocess_dir, build_dir = _dirs(settings)
    staged = preprocess_dir / rel
    dest = build_dir / rel
    try:
        masked = read_artifacts(staged)
        translated = staged.read_text(encoding="utf-8")
        restored = _restore(translated, masked, settings)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(restored, encoding="utf-8")
    except Exception as e:  # per-document boundary
        return _fallback(source, dest, "postprocess", e)
    return DocResult(source=source, output=dest)


def _run_all(
    jobs: list[tuple[Path, Path]],
    task: Callable[[Path, Path], DocResult],
    workers: int,
    on_progress: Optional[ProgressCallback],
    ) -> list[DocResult]:
    """Run task over (source, rel) jobs; progress is counted here, on the coordinating thread."""
    total = len(jobs)
    results: list[DocResult] = []
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(task, source, rel) for source, rel in jobs]
        for future in as_completed(futures):
            result = future.result()
            results.append(result)
            done = len(results)
            logger.info("Processed %d of %d files. Remaining: %d", done, total, total - done)
            if on_progress:
                on_progress(done, total, result)
    order = {source: i for i, (source, _) in enumerate(jobs)}
    return sorted(results, key=lambda r: order[r.source])


def _write_report(report: BuildReport, settings: Settings) -> Path:
    path = Path(settings.output_dir) / settings.report_name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(report.model_dump_json(indent=2), encoding="utf-8")
    logger.info("Build report: %s success=%d failed=%d", path, len(report.success), len(report.failed))
    return path


def _report(results: list[DocResult]) -> BuildReport:
    report = BuildReport()
    for result in results:
        report.add(result)
    return report


def run_build(
    settings: Settings,
    translator: Translator = None,
    resume: bool = False,
    on_progress: ProgressCallback = None,
    ) -> BuildReport:
    """Translate every document under input_dir into output_dir/build and write the report.

    Without resume the output directory is cleaned first. With resume,
    documents whose masked artifacts exist are not re-extracted.
    """
    root = _input_root(settings)
    if translator is None:
        require(settings, "prompt")
        translator = functools.partial(translate, client=make_client(settings))

    out = Path(settings.output_dir).resolve()
    if out == root.resolve() or out in root.resolve().parents:
        raise ConfigError(f"output_dir {out} must not contain input_dir {root}")

    files = discover_files(root, exclude=out)
    logger.info("Total files to process: %d", len(files))
    if not resume:
        clean_dir(Path(settings.output_dir))

    jobs = [(f, _relative(f, root)) for f in files]
    task = functools.partial(process_document, settings=settings, translator=translator, resume=resume)
    report = _report(_run_all(jobs, task, settings.workers, on_progress))
    _write_report(report, settings)
    return report


def run_assemble(settings: Settings, on_progress: ProgressCallback = None) -> BuildReport:
    """Re-run reinjection for already translated documents without calling the API."""
    root = _input_root(settings)
    jobs = [(f, _relative(f, root)) for f in discover_files(root, exclude=Path(settings.output_dir))]
    task = functools.partial(assemble_document, settings=settings)
    report = _report(_run_all(jobs, task, settings.workers, on_progress))
    _write_report(report, settings)
    return report


def extract_document(source: Path, rel: Path, settings: Settings) -> DocResult:
    """Mask one document into output_dir/preprocess; output is the masked text artifact."""
    preprocess_dir, _ = _dirs(settings)
    try:
        paths = write_artifacts(_mask(source, settings), preprocess_dir / rel)
    except Exception as e:  # per-document boundary
        reason = f"preprocess error: {e}"
        logger.error("%s: %s", source, reason)
        return DocResult(source=source, ok=False, reason=reason)
    return DocResult(source=source, output=paths.text)


def run_extract(path: str, settings: Settings, on_progress: ProgressCallback = None) -> list[DocResult]:
    """Mask every document under path into output_dir/preprocess.

    A document that fails to mask is reported and does not stop the others.
    """
    root = Path(path)
    if not root.exists():
        raise ConfigError(f"Path not found: {root}")
    jobs = [(f, _relative(f, root)) for f in discover_files(root, exclude=Path(settings.output_dir))]
    task = functools.partial(extract_document, settings=settings)
    return _run_all(jobs, task, settings.workers, on_progress)
