from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from blocksmith.core.config import ThemeConfig, load_theme_config
from blocksmith.core.scaffold import AGGREGATOR_TEMPLATE
from blocksmith.core.sources import render_registry_source


def write_manifest(config: ThemeConfig, payload: Any) -> Path:
    path = config.build_dir / "manifest.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    text = payload if isinstance(payload, str) else json.dumps(payload)
    path.write_text(text, encoding="utf-8")
    return path


def write_block(config: ThemeConfig, block_id: str, *, definition: bool = True) -> Path:
    block_dir = config.block_dir(block_id)
    block_dir.mkdir(parents=True, exist_ok=True)
    if definition:
        payload = {"name": f"{config.namespace}/{block_id}", "title": block_id}
        (block_dir / "block.json").write_text(json.dumps(payload), encoding="utf-8")
    return block_dir


@pytest.fixture
def theme_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.delenv("BLOCKSMITH_DEBUG", raising=False)
    monkeypatch.delenv("BLOCKSMITH_THEME_URI", raising=False)
    root = tmp_path / "theme"
    (root / "app").mkdir(parents=True)
    (root / "resources" / "js").mkdir(parents=True)
    (root / "app" / "blocks.py").write_text(render_registry_source("acme"), encoding="utf-8")
    (root / "resources" / "js" / "blocks.js").write_text(AGGREGATOR_TEMPLATE, encoding="utf-8")
    return root


@pytest.fixture
def theme_config(theme_dir: Path) -> ThemeConfig:
    return load_theme_config(
        theme_dir,
        namespace="acme",
        theme_uri="https://example.test/app/themes/acme",
    )
