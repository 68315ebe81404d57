# どこで: `src/seis/interactive/parameter_gui/panel.py`。
# 何を: SeisParams をグループ見出し + スライダー等で描画し、編集結果とボタン操作を返す。
# なぜ: imgui を引数で受け取る純粋寄りのロジックにして、GUI のライフサイクルから切り離してテスト可能に保つため。

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from seis.core.parameters import PARAM_GROUPS, ParamMeta, SeisParams, seis_meta

RANDOMIZE_LABEL = "Randomize"
EXPORT_SVG_LABEL = "Export SVG"


@dataclass(frozen=True, slots=True)
class PanelResult:
    """1 フレーム分のパネル操作結果。"""

    params: SeisParams
    changed: bool
    randomize: bool
    export_svg: bool


def render_widget(imgui: Any, name: str, meta: ParamMeta, value: Any) -> tuple[bool, Any]:
    """meta.kind に応じた 1 ウィジェットを描画し `(changed, value)` を返す。"""

    kind = meta.kind
    if kind == "float":
        changed, v = imgui.slider_float(name, float(value), float(meta.ui_min), float(meta.ui_max))
        return bool(changed), float(v)
    if kind == "int":
        changed, v = imgui.slider_int(name, int(value), int(meta.ui_min), int(meta.ui_max))
        return bool(changed), int(v)
    if kind == "bool":
        clicked, state = imgui.checkbox(name, bool(value))
        return bool(clicked), bool(state)
    if kind == "choice":
        choices = list(meta.choices or ())
        current = choices.index(str(value)) if str(value) in choices else 0
        clicked, index = imgui.combo(name, current, choices)
        index_i = int(index)
        if not 0 <= index_i < len(choices):
            return False, value
        picked = choices[index_i]
        return bool(clicked) and picked != str(value), picked
    raise ValueError(f"未対応の kind です: {kind!r}")


def render_param_panel(imgui: Any, params: SeisParams) -> PanelResult:
    """パラメータパネル全体を描画する。

    上に `Randomize`、下に `Export SVG` ボタンを置き、その間に
    グループごとの折りたたみ見出しとウィジェットを並べる。
    """

    randomize = bool(imgui.button(RANDOMIZE_LABEL))

    changes: dict[str, Any] = {}
    for group, names in PARAM_GROUPS:
        expanded, _visible = imgui.collapsing_header(group)
        if not expanded:
            continue
        for name in names:
            changed, value = render_widget(imgui, name, seis_meta[name], getattr(params, name))
            if changed:
                changes[name] = value

    export = bool(imgui.button(EXPORT_SVG_LABEL))

    new_params = params.with_changes(**changes) if changes else params
    return PanelResult(
        params=new_params,
        changed=bool(changes),
        randomize=randomize,
        export_svg=export,
    )


class EditCommitter:
    """編集中の値を保留し、ウィジェット操作が終わった時点で 1 回だけ確定する。

    スライダーのドラッグ中に毎フレーム描画し直さないためのもの。
    """

    def __init__(self) -> None:
        self._pending: SeisParams | None = None

    @property
    def pending(self) -> SeisParams | None:
        return self._pending

    def push(self, params: SeisParams) -> None:
        self._pending = params

    def poll(self, *, editing: bool) -> SeisParams | None:
        """編集が終わっていれば保留値を返してクリアする。"""

        if editing or self._pending is None:
            return None
        out = self._pending
        self._pending = None
        return out


__all__ = [
    "EXPORT_SVG_LABEL",
    "EditCommitter",
    "PanelResult",
    "RANDOMIZE_LABEL",
    "render_param_panel",
    "render_widget",
]
