from __future__ import annotations

from pathlib import Path

import pytest

from lectio.core.cross_ref import CrossRefResolver
from lectio.core.renderer import Renderer

FIXTURES_DIR = Path(__file__).parent / "fixtures"

TEI_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<TEI xmlns="http://www.tei-c.org/ns/1.0">
  <teiHeader><fileDesc><titleStmt><title>Header Title</title></titleStmt>
  <publicationStmt><p/></publicationStmt><sourceDesc><p/></sourceDesc></fileDesc></teiHeader>
  <text><body>{body}</body></text>
</TEI>
"""


def make_tei(body: str) -> str:
    return TEI_TEMPLATE.format(body=body)


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def resolver() -> CrossRefResolver:
    return CrossRefResolver(prefix="I", default_slug="tlg0012.tlg001")


@pytest.fixture
def renderer(resolver) -> Renderer:
    return Renderer(cross_refs=resolver)
