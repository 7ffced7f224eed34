"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Isolation from PAGECRAFT_* variables set in the developer's shell
- Shared document fixtures with predictable ids and geometry
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
from dotenv import load_dotenv

if TYPE_CHECKING:
    from pagecraft.model import Component, Document

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Environment Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def _clean_pagecraft_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test against built-in configuration defaults."""
    import os

    for name in list(os.environ):
        if name.startswith("PAGECRAFT_"):
            monkeypatch.delenv(name, raising=False)


# =============================================================================
# Builders
# =============================================================================


def make_component(
    component_id: str,
    component_type: str = "container",
    x: float = 0,
    y: float = 0,
    width: float | str = 100,
    height: float | str = 40,
    **fields: Any,
) -> Component:
    """Build a component with an explicit id and geometry."""
    from pagecraft.model import Component, Position, Size

    return Component(
        id=component_id,
        type=component_type,
        position=Position(x=x, y=y),
        size=Size(width=width, height=height),
        **fields,
    )


# =============================================================================
# Common Test Fixtures
# =============================================================================


@pytest.fixture
def component_factory():
    """Expose `make_component` to test modules."""
    return make_component


@pytest.fixture
def empty_document() -> Document:
    """An empty document with default settings."""
    from pagecraft.model import Document

    return Document(id="doc-empty", name="Empty")


@pytest.fixture
def row_document() -> Document:
    """Three 50px-wide root boxes spanning x=0..300.

    Returns:
        Document with roots a (x=0), b (x=60), c (x=250).
    """
    from pagecraft.model import Document

    doc = Document(id="doc-row", name="Row")
    doc.add(make_component("a", "button", x=0, y=0, width=50, height=40))
    doc.add(make_component("b", "button", x=60, y=30, width=50, height=40))
    doc.add(make_component("c", "button", x=250, y=10, width=50, height=40))
    return doc


@pytest.fixture
def nested_document() -> Document:
    """A section holding a card with two children, plus a root text.

    Returns:
        Document shaped as::

            section (100,100 400x300)
            └── card (20,20 200x150)
                ├── title (10,10 180x40)
                └── cta (10,60 120x40)
            note (600,100 200x24)
    """
    from pagecraft.model import Document, Flags

    doc = Document(id="doc-nested", name="Nested")
    doc.add(
        make_component(
            "section", "section", x=100, y=100, width=400, height=300,
            flags=Flags(droppable=True),
        )
    )
    doc.add(
        make_component(
            "card", "card", x=20, y=20, width=200, height=150,
            flags=Flags(droppable=True), props={"title": "Plans"},
        ),
        parent_id="section",
    )
    doc.add(
        make_component(
            "title", "heading", x=10, y=10, width=180, height=40,
            props={"text": "Pro", "level": 2},
        ),
        parent_id="card",
    )
    doc.add(
        make_component(
            "cta", "button", x=10, y=60, width=120, height=40,
            props={"text": "Buy now"},
        ),
        parent_id="card",
    )
    doc.add(
        make_component(
            "note", "text", x=600, y=100, width=200, height=24,
            props={"text": "Prices include VAT"},
        )
    )
    return doc
