"""Shared fixtures for core unit tests"""

import pytest


SAMPLE_DOC = """\
---
id: intro
title: Getting Started
description: First steps
---

# Getting Started

Install the CLI:

```bash
npm install -g tool
```

| Option | Meaning |
| ------ | ------- |
| `-v`   | verbose |

<Tabs groupId="os">
  <TabItem value="mac" label="macOS">

Use Homebrew.

  </TabItem>
</Tabs>

:::tip
Run `tool --help` first.
:::

See ![diagram](/apps/main-app/static/images/flow.png) for the title: layout.
"""

SAMPLE_MASKED = """\
<notranslate>meta_header</notranslate>

# Getting Started

Install the CLI:

<notranslate>cx_spt_0</notranslate>

<notranslate>tz_spt_0</notranslate>

<notranslate>Tabs_0</notranslate>
<notranslate>TabItem_0</notranslate>

Use Homebrew.

  </TabItem>
</Tabs>

<notranslate>admonition_0</notranslate>

See ![diagram](/apps/main-app/static/images/flow.png) for the <notranslate>title:</notranslate> layout.
"""


@pytest.fixture(name="sample_doc")
def sample_doc_fixture():
    return SAMPLE_DOC


@pytest.fixture(name="sample_masked")
def sample_masked_fixture():
    return SAMPLE_MASKED
