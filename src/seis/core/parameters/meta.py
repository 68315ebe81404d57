"""パラメータの UI メタ情報（種別とレンジ）。"""

from __future__ import annotations

from dataclasses import dataclass

PARAM_KINDS = ("float", "int", "bool", "choice")


@dataclass(frozen=True, slots=True)
class ParamMeta:
    """1 パラメータ分の UI メタ情報。

    Parameters
    ----------
    kind : str
        `"float"`, `"int"`, `"bool"`, `"choice"` のいずれか。
    ui_min, ui_max : float | int | None
        スライダーのレンジ。値のクランプ範囲としても使う。
    choices : tuple[str, ...] | None
        `kind="choice"` の候補。
    """

    kind: str
    ui_min: float | int | None = None
    ui_max: float | int | None = None
    choices: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        if self.kind not in PARAM_KINDS:
            raise ValueError(f"未知の ParamMeta.kind です: {self.kind!r}")
        if self.kind == "choice" and not self.choices:
            raise ValueError("kind='choice' には choices が必要です")
        if self.choices is not None:
            object.__setattr__(self, "choices", tuple(str(c) for c in self.choices))


__all__ = ["PARAM_KINDS", "ParamMeta"]
