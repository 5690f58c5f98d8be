"""Pytest configuration and shared fixtures for the mymd test suite."""

import logging
from typing import Generator

import pytest

from mymd.parsers.diagnostics import DiagnosticsCollector


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture(autouse=True)
def restore_root_logging() -> Generator[None, None, None]:
    """Undo handler changes made by ``configure_logging`` during a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    try:
        yield
    finally:
        for handler in root.handlers:
            if handler not in handlers:
                handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)


@pytest.fixture
def sink() -> DiagnosticsCollector:
    """Provide a fresh diagnostics collector."""
    return DiagnosticsCollector()


@pytest.fixture
def sample_source() -> str:
    """Provide a document exercising most of the markup.

    Returns
    -------
    str
        Source text with front matter, headings, lists, math and code.

    """
    return """---
title: Sample Paper
draft: false
authors:
  - Ada
  - Grace
---
# Introduction [sec:intro]

Some **bold** and *italic* text with `code`, $x^2$ and a citation [@knuth84].
See [sec:method] for details.

1. First
2. Second
   - nested bullet

$$ E = mc^2 $$ [eq:energy]

```python
print("hi")
```
"""
