"""Durable masked-text + snippet-list artifacts written between extract and translate"""

from pathlib import Path

import yaml

from mdxlate.core.models import MaskedDoc, Snippet
from mdxlate.core.utils.paths import ArtifactPaths, artifact_paths


class _SnippetDumper(yaml.SafeDumper):
    """SafeDumper emitting multi-line strings as literal blocks where YAML allows it."""


def _str_representer(dumper: yaml.SafeDumper, data: str):
    style = "|" if "\n" in data else None
    return dumper.represent_scalar("tag:yaml.org,2002:str", data, style=style)


_SnippetDumper.add_representer(str, _str_representer)


def dump_snippets(snippets: list[Snippet]) -> str:
    """Serialize snippets as a YAML list of {id, code} records."""
    return yaml.dump(
        [s.model_dump() for s in snippets],
        Dumper=_SnippetDumper,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
        width=float("inf"),
    )


def load_snippets(text: str) -> list[Snippet]:
    try:
        records = yaml.safe_load(text) or []
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid snippet list: {e}") from e
    if not isinstance(records, list):
        raise ValueError(f"Invalid snippet list: expected a list, got {type(records).__name__}")
    return [Snippet.model_validate(r) for r in records]


def write_artifacts(masked: MaskedDoc, dest: Path) -> ArtifactPaths:
    """Write masked text and snippet YAML beside dest. Returns the artifact paths."""
    paths = artifact_paths(dest)
    paths.text.parent.mkdir(parents=True, exist_ok=True)
    paths.text.write_text(masked.text, encoding="utf-8")
    paths.code.write_text(dump_snippets(masked.snippets), encoding="utf-8")
    return paths


def read_artifacts(dest: Path) -> MaskedDoc:
    """Load the artifacts written for dest; FileNotFoundError if either is missing."""
    paths = artifact_paths(dest)
    text = paths.text.read_text(encoding="utf-8")
    snippets = load_snippets(paths.code.read_text(encoding="utf-8"))
    return MaskedDoc(text=text, snippets=snippets)


def has_artifacts(dest: Path) -> bool:
    paths = artifact_paths(dest)
    return paths.text.exists() and paths.code.exists()
