# どこで: `src/seis/core/session.py`。
# 何を: パラメータとノイズ源を保持し、reset / update / randomize / export_svg を提供する。
# なぜ: GUI と CLI が同じ「1 スケッチ分の状態と操作」を共有し、描画の配線を薄く保つため。

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from seis.core.noise import NoiseSource, OpenSimplexNoise, reseed
from seis.core.output_paths import output_path_for_params, unique_path
from seis.core.parameters import SeisParams, dumps_params, sanitize_params
from seis.core.pipeline import SeisScene, render_scene
from seis.core.runtime_config import runtime_config
from seis.export.svg import export_svg

_logger = logging.getLogger(__name__)


class SeisSession:
    """1 スケッチ分の状態（パラメータ + ノイズ源 + 最新シーン）。

    Notes
    -----
    どの操作もシーンを差分更新せず、`reset()` でゼロから作り直す。
    """

    def __init__(
        self,
        params: SeisParams | None = None,
        *,
        noise: NoiseSource | None = None,
        noise_seed: int | None = None,
        canvas_size: tuple[float, float] | None = None,
        flatten_steps: int | None = None,
    ) -> None:
        cfg = runtime_config()
        self._params = sanitize_params(SeisParams() if params is None else params)
        self._noise: NoiseSource = noise if noise is not None else OpenSimplexNoise(seed=noise_seed)
        size = cfg.canvas_size if canvas_size is None else canvas_size
        self.canvas_size = (float(size[0]), float(size[1]))
        self.flatten_steps = int(cfg.flatten_steps if flatten_steps is None else flatten_steps)
        self._scene: SeisScene | None = None

    @property
    def params(self) -> SeisParams:
        return self._params

    @property
    def noise(self) -> NoiseSource:
        return self._noise

    @property
    def scene(self) -> SeisScene:
        """最新のシーン。まだ描画していなければここで描画する。"""
        if self._scene is None:
            return self.reset()
        return self._scene

    def reset(self) -> SeisScene:
        """現在のパラメータとノイズ源でシーンを作り直す。"""
        self._scene = render_scene(
            self._params,
            self._noise,
            canvas_size=self.canvas_size,
            flatten_steps=self.flatten_steps,
        )
        return self._scene

    def set_params(self, params: SeisParams) -> SeisScene:
        """パラメータを置き換えて描画し直す。"""
        self._params = sanitize_params(params)
        return self.reset()

    def update(self, **changes: Any) -> SeisScene:
        """一部のパラメータを変更して描画し直す。"""
        return self.set_params(self._params.with_changes(**changes))

    def randomize(self, seed: int | None = None) -> SeisScene:
        """ノイズ源を再シードして描画し直す（パラメータは変更しない）。"""
        self._noise = reseed(self._noise, seed)
        _logger.info("ノイズを再シードしました: %r", self._noise)
        return self.reset()

    def export_svg(self, path: str | Path | None = None) -> Path:
        """現在のシーンを SVG へ書き出し、保存先パスを返す。

        `path` 未指定なら `output/svg/Seis<params JSON>.svg` に保存する。
        同名ファイルが既にある場合（Randomize 後の再 export など）は `(1)` などの連番を付け、
        上書きしない。
        """
        cfg = runtime_config()
        if path is not None:
            out = Path(path)
        else:
            out = unique_path(output_path_for_params(self._params))
        return export_svg(
            self.scene,
            out,
            stroke_color=cfg.stroke_color,
            stroke_width=cfg.stroke_width,
            description=dumps_params(self._params),
        )


__all__ = ["SeisSession"]
