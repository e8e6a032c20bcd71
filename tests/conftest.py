"""Shared pytest fixtures and helpers for doclinks tests."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path
from unittest import mock

import httpx
import pytest

from doclinks.env_settings import clear_env_settings_cache
from doclinks.models import LinkOccurrence, LinkSyntax, SourceRange
from doclinks.products import ProductMapping

DOC_HOST = "https://docs.itrsgroup.com"


def make_occurrence(raw_text: str, start: int = 0) -> LinkOccurrence:
    """Create a LinkOccurrence at ``start`` spanning ``raw_text``."""
    return LinkOccurrence(
        raw_text=raw_text,
        span=SourceRange(start, start + len(raw_text)),
        syntax=LinkSyntax.MARKDOWN,
    )


def make_client(
    handler: Callable[[httpx.Request], httpx.Response],
) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@dataclass
class Site:
    """A throwaway Hugo site tree: <root>/<product>/{config,content}."""

    root: Path
    product: str

    @property
    def product_dir(self) -> Path:
        return self.root / self.product

    @property
    def config_file(self) -> Path:
        return self.product_dir / "config" / "config.toml"

    def write_config(self, text: str) -> Path:
        self.config_file.parent.mkdir(parents=True, exist_ok=True)
        self.config_file.write_text(text, encoding="utf-8")
        return self.config_file

    def write_page(self, relative: str, text: str) -> Path:
        page = self.product_dir / "content" / relative
        page.parent.mkdir(parents=True, exist_ok=True)
        page.write_text(text, encoding="utf-8")
        return page


@pytest.fixture
def site(tmp_path: Path) -> Site:
    """Geneos site with an unversioned build config."""
    site = Site(root=tmp_path, product="geneos")
    site.write_config('baseURL = "/"\ntitle = "Geneos"\n')
    return site


@pytest.fixture
def products() -> ProductMapping:
    """Small product mapping used across tests."""
    return ProductMapping(
        {
            "geneos": "docs/geneos",
            "geneos-versioned": "docs/geneos/current",
            "widget": "widgetcurrent",
            "opsview-cloud": "docs/opsview/cloud",
        }
    )


@pytest.fixture(autouse=True)
def clean_env() -> Iterator[None]:
    """Isolate tests from DOCLINKS_* / LOG_LEVEL in the real environment."""
    env = {
        k: v for k, v in os.environ.items() if not k.startswith("DOCLINKS_") and k != "LOG_LEVEL"
    }
    with mock.patch.dict(os.environ, env, clear=True):
        clear_env_settings_cache()
        yield
    clear_env_settings_cache()
