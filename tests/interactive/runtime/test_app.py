"""GUI の操作結果をセッションへ反映する配線のテスト。"""

from __future__ import annotations

from pathlib import Path

from seis.core.noise import NoiseSource
from seis.core.parameters import SeisParams
from seis.core.session import SeisSession
from seis.interactive.parameter_gui.gui import GuiFrameResult
from seis.interactive.runtime.app import apply_gui_result


class _ConstantNoise(NoiseSource):
    def sample(self, x: float, y: float, z: float) -> float:
        return 0.5


def _session() -> SeisSession:
    return SeisSession(SeisParams(n_vertices=30, n_seis=100), noise=_ConstantNoise(), canvas_size=(300, 300))


def test_no_action_keeps_scene() -> None:
    session = _session()
    scene = session.scene
    result = GuiFrameResult(committed=None, randomize=False, export_svg=False)
    assert apply_gui_result(session, result) is False
    assert session.scene is scene


def test_committed_params_rerender() -> None:
    session = _session()
    committed = session.params.with_changes(n_seis=40)
    result = GuiFrameResult(committed=committed, randomize=False, export_svg=False)
    assert apply_gui_result(session, result) is True
    assert len(session.scene.displaced) == 40


def test_randomize_reseeds_and_keeps_params() -> None:
    session = _session()
    params = session.params
    result = GuiFrameResult(committed=None, randomize=True, export_svg=False)
    assert apply_gui_result(session, result) is True
    assert session.params == params
    assert not isinstance(session.noise, _ConstantNoise)


def test_export_writes_svg(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    session = _session()
    result = GuiFrameResult(committed=None, randomize=False, export_svg=True)
    assert apply_gui_result(session, result) is False
    assert list((tmp_path / "output" / "svg").glob("Seis*.svg"))
