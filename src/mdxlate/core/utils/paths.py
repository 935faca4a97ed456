"""Artifact path naming and static-asset path rewriting"""

import re
from dataclasses import dataclass
from pathlib import Path


ASSET_PREFIX = "/apps/main-app/static/images/"


@dataclass(frozen=True)
class ArtifactPaths:
    text: Path      # masked document body
    code: Path      # YAML snippet list


def artifact_paths(path: Path) -> ArtifactPaths:
    """Return sidecar artifact paths for a document, e.g. guide.mdx -> guide-text.tmp.mdx."""
    path = Path(path)
    return ArtifactPaths(
        text=path.with_name(f"{path.stem}-text.tmp{path.suffix}"),
        code=path.with_name(f"{path.stem}-code.tmp.yaml"),
    )


def is_artifact(path: Path) -> bool:
    name = Path(path).name
    return name.endswith("-code.tmp.yaml") or "-text.tmp." in name


def rewrite_asset_paths(text: str, prefix: str = ASSET_PREFIX, depth: int = 2) -> str:
    """Point absolute asset links at a location `depth` directories up.

    /apps/main-app/static/images/a.png -> /../../apps/main-app/static/images/a.png
    Occurrences already rewritten are left as they are.
    """
    if not prefix or depth <= 0:
        return text
    replacement = "/" + "../" * depth + prefix.lstrip("/")
    return re.sub(r"(?<!\.)" + re.escape(prefix), lambda m: replacement, text)
