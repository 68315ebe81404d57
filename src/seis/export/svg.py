"""
どこで: `src/seis/export/svg.py`。
何を: SeisScene を SVG（1 パス = 1 つの `<path>`、3 次ベジェのコマンド列）として書き出す。
なぜ: プロッタや他のベクタツールで、平滑化されたパスをそのまま扱えるようにするため。
"""

from __future__ import annotations

import logging
from pathlib import Path

import svgwrite  # type: ignore[import-untyped]

from seis.core.bezier_path import BezierPath
from seis.core.pipeline import SeisScene

_logger = logging.getLogger(__name__)


def _fmt(value: float, decimals: int) -> str:
    s = f"{float(value):.{int(decimals)}f}"
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    if s in {"-0", ""}:
        s = "0"
    return s


def path_data(path: BezierPath, *, decimals: int = 3) -> str:
    """BezierPath を SVG の path data（`M ... C ...`）にして返す。空パスは空文字。"""

    n = len(path)
    if n == 0:
        return ""

    p = path.points
    h_in = path.handles_in
    h_out = path.handles_out

    def pt(x: float, y: float) -> str:
        return f"{_fmt(x, decimals)},{_fmt(y, decimals)}"

    parts = [f"M{pt(p[0, 0], p[0, 1])}"]
    for i in range(n - 1):
        c1 = p[i] + h_out[i]
        c2 = p[i + 1] + h_in[i + 1]
        parts.append(
            f"C{pt(c1[0], c1[1])} {pt(c2[0], c2[1])} {pt(p[i + 1, 0], p[i + 1, 1])}"
        )
    return "".join(parts)


def _rgb(color: tuple[float, float, float]) -> str:
    r, g, b = (min(max(float(c), 0.0), 1.0) * 100.0 for c in color)
    return svgwrite.rgb(r, g, b, "%")


def build_drawing(
    scene: SeisScene,
    *,
    stroke_color: tuple[float, float, float] = (0.0, 0.0, 0.0),
    stroke_width: float = 1.0,
    description: str | None = None,
    decimals: int = 3,
) -> svgwrite.Drawing:
    """SeisScene から svgwrite の Drawing を組み立てて返す。"""

    w, h = scene.canvas_size
    # 10 万点規模の path data を属性検証させないため debug=False にする。
    dwg = svgwrite.Drawing(size=(_fmt(w, 3), _fmt(h, 3)), debug=False)
    dwg.viewbox(0, 0, float(w), float(h))
    if description is not None:
        dwg.set_desc(title="Seis", desc=str(description))

    stroke = _rgb(stroke_color)
    for path in scene.paths:
        d = path_data(path, decimals=decimals)
        if not d:
            continue
        dwg.add(
            dwg.path(
                d=d,
                fill="none",
                stroke=stroke,
                stroke_width=float(stroke_width),
            )
        )
    return dwg


def svg_string(scene: SeisScene, **kwargs: object) -> str:
    """SeisScene を SVG 文字列にして返す。kwargs は `build_drawing()` と同じ。"""

    return build_drawing(scene, **kwargs).tostring()  # type: ignore[arg-type]


def export_svg(
    scene: SeisScene,
    path: str | Path,
    *,
    stroke_color: tuple[float, float, float] = (0.0, 0.0, 0.0),
    stroke_width: float = 1.0,
    description: str | None = None,
    decimals: int = 3,
) -> Path:
    """SeisScene を SVG ファイルへ書き出し、保存先パスを返す。"""

    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    dwg = build_drawing(
        scene,
        stroke_color=stroke_color,
        stroke_width=stroke_width,
        description=description,
        decimals=decimals,
    )
    with out.open("w", encoding="utf-8") as fp:
        dwg.write(fp)
    _logger.info("SVG を書き出しました: %s", out)
    return out


__all__ = ["build_drawing", "export_svg", "path_data", "svg_string"]
