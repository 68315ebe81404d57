# どこで: `src/seis/interactive/runtime/app.py`。
# 何を: 描画ウィンドウとパラメータ GUI ウィンドウを開き、pyglet のイベントループを回す。
# なぜ: GUI の操作（確定した編集 / Randomize / Export SVG）を SeisSession の操作へ 1 箇所で配線するため。

from __future__ import annotations

import logging

from seis.core.runtime_config import runtime_config
from seis.core.session import SeisSession

from ..parameter_gui.gui import GuiFrameResult, ParameterGUI
from .draw_window import DrawWindow

_logger = logging.getLogger(__name__)


def apply_gui_result(session: SeisSession, result: GuiFrameResult) -> bool:
    """GUI の操作結果をセッションへ反映し、シーンを作り直したら True を返す。"""

    rerendered = False
    if result.committed is not None and result.committed != session.params:
        session.set_params(result.committed)
        rerendered = True
    if result.randomize:
        session.randomize()
        rerendered = True
    if result.export_svg:
        path = session.export_svg()
        _logger.info("Export SVG: %s", path)
    return rerendered


def run(session: SeisSession, *, fps: float = 60.0) -> None:
    """対話ウィンドウを開いてイベントループを開始する（閉じるまで戻らない）。"""

    import pyglet

    cfg = runtime_config()
    w, h = session.canvas_size

    draw_pyglet_window = pyglet.window.Window(
        width=int(round(w)),
        height=int(round(h)),
        caption="seis",
    )
    draw_pyglet_window.set_location(*cfg.window_pos_draw)
    gui_w, gui_h = cfg.parameter_gui_window_size
    gui_pyglet_window = pyglet.window.Window(
        width=int(gui_w),
        height=int(gui_h),
        caption="seis parameters",
        resizable=True,
    )
    gui_pyglet_window.set_location(*cfg.window_pos_parameter_gui)

    draw_window = DrawWindow(
        draw_pyglet_window,
        stroke_color=cfg.stroke_color,
        background_color=cfg.background_color,
        flatten_steps=session.flatten_steps,
    )
    gui = ParameterGUI(gui_pyglet_window)
    draw_window.set_scene(session.scene)

    @draw_pyglet_window.event
    def on_draw() -> None:  # noqa: F811
        draw_window.draw()

    @gui_pyglet_window.event
    def on_draw() -> None:  # noqa: F811
        result = gui.draw_frame(session.params)
        if apply_gui_result(session, result):
            draw_window.set_scene(session.scene)

    def _on_close() -> None:
        pyglet.app.exit()

    draw_pyglet_window.push_handlers(on_close=_on_close)
    gui_pyglet_window.push_handlers(on_close=_on_close)

    try:
        pyglet.app.run(interval=1.0 / float(fps))
    finally:
        gui.close()
        draw_pyglet_window.close()


__all__ = ["apply_gui_result", "run"]
