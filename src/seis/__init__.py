"""
どこで: `src/seis/__init__.py`。
何を: Seis スケッチの公開 API を 1 箇所から import できるようにする。
なぜ: スクリプトや CLI が内部モジュール構成に依存しないようにするため。
"""

from __future__ import annotations

from seis.core.noise import NoiseSource, OpenSimplexNoise
from seis.core.parameters import SeisParams
from seis.core.pipeline import SeisScene, render_scene
from seis.core.session import SeisSession
from seis.export.svg import export_svg

__all__ = [
    "NoiseSource",
    "OpenSimplexNoise",
    "SeisParams",
    "SeisScene",
    "SeisSession",
    "export_svg",
    "render_scene",
]
