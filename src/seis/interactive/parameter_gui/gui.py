# どこで: `src/seis/interactive/parameter_gui/gui.py`。
# 何を: SeisParams を pyimgui で編集するための最小 GUI（初期化/1フレーム描画/破棄）を提供する。
# なぜ: 依存の重いライフサイクル管理を 1 箇所に閉じ込め、他モジュールを純粋に保つため。

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

from seis.core.parameters import SeisParams

from .panel import EditCommitter, render_param_panel


@dataclass(frozen=True, slots=True)
class GuiFrameResult:
    """1 フレーム分の GUI 操作の結果。"""

    committed: SeisParams | None
    randomize: bool
    export_svg: bool


class ParameterGUI:
    """pyimgui でパラメータを編集するための最小 GUI。

    `draw_frame()` を呼ぶことで 1 フレーム分の UI を描画する。
    """

    def __init__(self, gui_window: Any, *, title: str = "Parameters") -> None:
        """GUI の初期化（ImGui コンテキスト / renderer 作成）。"""

        import imgui  # type: ignore[import-untyped]

        try:
            from imgui.integrations import pyglet as imgui_pyglet  # type: ignore[import-untyped]
        except ImportError as exc:
            raise RuntimeError(f"imgui.integrations.pyglet を import できない: {exc}") from exc

        self._window = gui_window
        self._title = str(title)
        self._imgui = imgui
        self._context = imgui.create_context()
        imgui.set_current_context(self._context)
        imgui.style_colors_dark()

        # ImGui の draw_data を OpenGL へ流す renderer。内部に GL リソースを保持する。
        self._renderer = imgui_pyglet.create_renderer(gui_window)
        self._committer = EditCommitter()
        self._prev_time = time.monotonic()
        self._closed = False

    def draw_frame(self, params: SeisParams) -> GuiFrameResult:
        """1 フレーム分の GUI を描画し、確定した編集とボタン操作を返す。

        `flip()` は呼ばない。呼び出し側（pyglet のイベントループ）が担当する。
        """

        if self._closed:
            return GuiFrameResult(committed=None, randomize=False, export_svg=False)

        imgui = self._imgui
        imgui.set_current_context(self._context)

        now = time.monotonic()
        io = imgui.get_io()
        io.delta_time = max(now - self._prev_time, 1e-4)
        self._prev_time = now
        width, height = self._window.get_size()
        io.display_size = (float(width), float(height))

        imgui.new_frame()
        imgui.set_next_window_position(0, 0)
        imgui.set_next_window_size(float(width), float(height))
        imgui.begin(
            self._title,
            flags=imgui.WINDOW_NO_RESIZE | imgui.WINDOW_NO_COLLAPSE | imgui.WINDOW_NO_TITLE_BAR,
        )
        # ドラッグ中は保留値を表示し、確定するまで描画パイプラインへは流さない。
        shown = self._committer.pending or params
        result = render_param_panel(imgui, shown)
        if result.changed:
            self._committer.push(result.params)
        editing = bool(imgui.is_any_item_active())
        imgui.end()
        imgui.render()

        import pyglet

        pyglet.gl.glClearColor(0.12, 0.12, 0.12, 1.0)
        self._window.clear()
        self._renderer.render(imgui.get_draw_data())

        return GuiFrameResult(
            committed=self._committer.poll(editing=editing),
            randomize=result.randomize,
            export_svg=result.export_svg,
        )

    def close(self) -> None:
        """GUI を終了し、コンテキストとウィンドウを破棄する（二重 close 可）。"""

        if self._closed:
            return
        self._closed = True
        shutdown = getattr(self._renderer, "shutdown", None)
        if callable(shutdown):
            shutdown()
        self._imgui.destroy_context(self._context)
        self._window.close()


__all__ = ["GuiFrameResult", "ParameterGUI"]
