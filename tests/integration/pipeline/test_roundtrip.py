"""Integration tests for the extract -> translate -> reinject pipeline.

Each test runs the canonical document below through one or more stages and
asserts stable expected values. Read this file top-to-bottom as a reference
for what each stage produces with default settings.

Canonical document (docs/setup.md)
----------------------------------
    ---
    id: setup
    title: Setup
    description: Install and configure
    ---

    # Setup

    Install with:

    ```sh
    pip install tool
    ```

    | Flag | Meaning |
    |------|---------|
    | -q   | quiet   |

    :::note
    Requires Python 3.10.
    :::

    The title: field is shown in the sidebar.

Masked text after extract (4 snippets):
    <notranslate>meta_header</notranslate>
    # Setup / Install with: / cx_spt_0 / tz_spt_0 / admonition_0
    The <notranslate>title:</notranslate> field is shown in the sidebar.

Build output after a (fake) French translation:
    header, code, table and admonition byte-identical to the source,
    prose translated, `title:` unwrapped.
"""

import json

import pytest
import yaml

from mdxlate.config import Settings
from mdxlate.core.extract.extract import extract
from mdxlate.core.pipeline import run_build, run_extract
from mdxlate.core.reinject import reinject
from mdxlate.core.utils.tokens import make_token


CANONICAL_MD = """\
---
id: setup
title: Setup
description: Install and configure
---

# Setup

Install with:

```sh
pip install tool
```

| Flag | Meaning |
|------|---------|
| -q   | quiet   |

:::note
Requires Python 3.10.
:::

The title: field is shown in the sidebar.
"""

MASKED_MD = """\
<notranslate>meta_header</notranslate>

# Setup

Install with:

<notranslate>cx_spt_0</notranslate>

<notranslate>tz_spt_0</notranslate>

<notranslate>admonition_0</notranslate>

The <notranslate>title:</notranslate> field is shown in the sidebar.
"""

FRENCH = {
    "# Setup": "# Installation",
    "Install with:": "Installer avec :",
    "The ": "Le ",
    "field is shown in the sidebar.": "champ est affiché dans la barre latérale.",
}


def french(text: str, settings: Settings) -> str:
    for en, fr in FRENCH.items():
        text = text.replace(en, fr)
    return text


def reorder(text: str, settings: Settings) -> str:
    """Keep the header token first, reverse every other paragraph."""
    head, *rest = text.rstrip("\n").split("\n\n")
    return "\n\n".join([head, *reversed(rest)]) + "\n"


def drop_table(text: str, settings: Settings) -> str:
    return text.replace(make_token("tz_spt_0"), "")


# --- fixtures ---

@pytest.fixture(name="source_dir")
def source_dir_fixture(tmp_path):
    """Write the canonical document into a docs/ tree."""
    root = tmp_path / "docs"
    root.mkdir()
    (root / "setup.md").write_text(CANONICAL_MD, encoding="utf-8")
    return root


@pytest.fixture(name="settings")
def settings_fixture(tmp_path, source_dir):
    return Settings(input_dir=str(source_dir), output_dir=str(tmp_path / "dist"), prompt="Translate to French")


@pytest.fixture(autouse=True)
def chdir_tmp(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


# --- extract ---

def test_extract_masked_text():
    assert extract(CANONICAL_MD).text == MASKED_MD


def test_extract_snippet_ids():
    assert extract(CANONICAL_MD).tokens == [
        make_token("meta_header"),
        make_token("cx_spt_0"),
        make_token("tz_spt_0"),
        make_token("admonition_0"),
    ]


def test_extract_artifacts_on_disk(source_dir, settings, tmp_path):
    """run_extract persists the masked text and a YAML list of {id, code} records."""
    results = run_extract(str(source_dir), settings)
    text_file = results[0].output
    assert text_file.read_text(encoding="utf-8") == MASKED_MD

    records = yaml.safe_load((tmp_path / "dist" / "preprocess" / "setup-code.tmp.yaml").read_text(encoding="utf-8"))
    assert [r["id"] for r in records] == extract(CANONICAL_MD).tokens
    assert records[2]["code"] == "| Flag | Meaning |\n|------|---------|\n| -q   | quiet   |"


# --- round trips ---

def test_identity_round_trip():
    masked = extract(CANONICAL_MD)
    assert reinject(masked.text, masked.snippets) == CANONICAL_MD


def test_translated_round_trip():
    masked = extract(CANONICAL_MD)
    restored = reinject(french(masked.text, None), masked.snippets)
    assert restored == CANONICAL_MD.replace("# Setup\n", "# Installation\n").replace(
        "Install with:", "Installer avec :"
    ).replace(
        "The title: field is shown in the sidebar.", "Le title: champ est affiché dans la barre latérale."
    )


def test_reordered_round_trip_keeps_every_snippet():
    masked = extract(CANONICAL_MD)
    restored = reinject(reorder(masked.text, None), masked.snippets)
    assert restored.startswith("---\nid: setup\n")
    for snippet in masked.snippets:
        assert restored.count(snippet.code) == 1


# --- build ---

def test_build_writes_translated_output(settings, tmp_path):
    report = run_build(settings, translator=french)
    assert len(report.success) == 1
    out = (tmp_path / "dist" / "build" / "setup.md").read_text(encoding="utf-8")
    assert out.startswith("---\nid: setup\ntitle: Setup\n")
    assert "```sh\npip install tool\n```" in out
    assert ":::note\nRequires Python 3.10.\n:::" in out
    assert "Installer avec :" in out
    assert "<notranslate>" not in out


def test_build_dropped_token_falls_back(settings, tmp_path):
    report = run_build(settings, translator=drop_table)
    assert report.success == []
    assert "tz_spt_0" in report.failed[0].reason
    assert (tmp_path / "dist" / "build" / "setup.md").read_text(encoding="utf-8") == CANONICAL_MD

    data = json.loads((tmp_path / "dist" / "ai-build-report.json").read_text(encoding="utf-8"))
    assert data["failed"][0]["file"].endswith("setup.md")
