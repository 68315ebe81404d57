# どこで: `src/seis/core/parameters/codec.py`。
# 何を: SeisParams の JSON encode/decode とファイル入出力を提供する。
# なぜ: export ファイル名・CLI の `--params` で同じ直列化仕様を共有するため。

"""SeisParams の JSON codec。

- `encode_params()` / `dumps_params()`: 保存側（params -> dict/JSON）
- `decode_params()` / `loads_params()`: 復元側（dict/JSON -> params）

Notes
-----
- decode は壊れた/古い/部分的な JSON を想定し、可能な範囲で復元して不正な要素は捨てる。
  例外で落とすのは「payload が dict ではない」ケースに限定する。
- `dumps_params()` は整数値の float を整数表記で書く（`3.0` ではなく `3`）。
  export ファイル名に埋め込むため、区切りの空白も入れない。
"""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from .params import SeisParams, params_from_mapping


def _compact_number(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def encode_params(params: SeisParams) -> dict[str, Any]:
    """SeisParams を JSON 化可能な dict（フィールド順）に変換して返す。"""

    return {k: _compact_number(v) for k, v in asdict(params).items()}


def dumps_params(params: SeisParams, *, indent: int | None = None) -> str:
    """SeisParams を JSON 文字列へ変換して返す。"""

    payload = encode_params(params)
    if indent is None:
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    return json.dumps(payload, indent=int(indent), ensure_ascii=False)


def decode_params(payload: object, *, base: SeisParams | None = None) -> SeisParams:
    """JSON デコード結果から SeisParams を復元する。"""

    if not isinstance(payload, dict):
        raise TypeError(f"params の JSON は object である必要があります: got={type(payload)!r}")
    return params_from_mapping(payload, base=base)


def loads_params(text: str, *, base: SeisParams | None = None) -> SeisParams:
    """JSON 文字列から SeisParams を復元する。"""

    return decode_params(json.loads(text), base=base)


def load_params_file(path: str | Path, *, base: SeisParams | None = None) -> SeisParams:
    """UTF-8 の JSON ファイルから SeisParams を読み込む。"""

    p = Path(path)
    return loads_params(p.read_text(encoding="utf-8"), base=base)


def save_params_file(params: SeisParams, path: str | Path) -> Path:
    """SeisParams を整形 JSON として保存し、保存先パスを返す。"""

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(dumps_params(params, indent=2) + "\n", encoding="utf-8")
    return p


__all__ = [
    "decode_params",
    "dumps_params",
    "encode_params",
    "load_params_file",
    "loads_params",
    "save_params_file",
]
