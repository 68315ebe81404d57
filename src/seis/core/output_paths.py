# どこで: `src/seis/core/output_paths.py`。
# 何を: export ファイル名（`Seis<params JSON>.svg`）と保存先パスを決める。
# なぜ: 出力ファイル名だけで、その絵を再現するパラメータが分かるようにするため。

from __future__ import annotations

import hashlib
import json
import os
import re
from pathlib import Path

from seis.core.parameters import SeisParams, dumps_params, encode_params
from seis.core.runtime_config import output_root_dir

FILENAME_PREFIX = "Seis"

# 一般的なファイルシステムのファイル名上限（バイト）。
MAX_FILENAME_BYTES = 255

# Windows のファイル名で使えない文字。
_WINDOWS_FORBIDDEN = re.compile(r'[<>:"/\\|?*]')


def _sanitize_filename(name: str, *, windows: bool) -> str:
    """OS のファイル名として使えない文字を `_` に置き換えて返す。"""

    s = str(name).replace("/", "_").replace("\0", "_")
    if windows:
        s = _WINDOWS_FORBIDDEN.sub("_", s)
    return s


def _non_default_json(params: SeisParams) -> str:
    """既定値から変更されたフィールドだけの JSON を返す。"""

    current = encode_params(params)
    defaults = encode_params(SeisParams())
    diff = {k: v for k, v in current.items() if defaults.get(k) != v}
    return json.dumps(diff, separators=(",", ":"), ensure_ascii=False)


def export_filename(
    params: SeisParams,
    *,
    ext: str = "svg",
    windows: bool | None = None,
    max_bytes: int = MAX_FILENAME_BYTES,
) -> str:
    """`Seis<JSON>.<ext>` 形式のファイル名を返す。

    Notes
    -----
    全パラメータの JSON がファイル名上限に収まらない場合は、既定値から変更された
    パラメータだけの JSON を使う。それでも収まらない場合は `Seis_<hash>.<ext>` にする。
    """

    ext_norm = str(ext).lstrip(".").strip()
    if not ext_norm:
        raise ValueError("ext は空でない必要がある")
    is_windows = (os.name == "nt") if windows is None else bool(windows)

    full_json = dumps_params(params)
    for body in (full_json, _non_default_json(params)):
        name = _sanitize_filename(f"{FILENAME_PREFIX}{body}.{ext_norm}", windows=is_windows)
        if len(name.encode("utf-8")) <= int(max_bytes):
            return name

    digest = hashlib.sha1(full_json.encode("utf-8")).hexdigest()[:12]
    return f"{FILENAME_PREFIX}_{digest}.{ext_norm}"


def output_path_for_params(
    params: SeisParams,
    *,
    kind: str = "svg",
    ext: str = "svg",
    out_dir: str | Path | None = None,
) -> Path:
    """export の保存先パスを返す。

    `out_dir` 未指定の場合は `output_root/{kind}/` に置く。
    """

    base_dir = Path(out_dir) if out_dir is not None else output_root_dir() / str(kind)
    return base_dir / export_filename(params, ext=ext)


def unique_path(path: str | Path) -> Path:
    """既存ファイルと衝突しないパスを返す。

    `path` が既にあれば `<stem>(1)<suffix>`, `<stem>(2)<suffix>`, ... の最初の空きを返す。
    """

    p = Path(path)
    if not p.exists():
        return p
    i = 1
    while True:
        candidate = p.with_name(f"{p.stem}({i}){p.suffix}")
        if not candidate.exists():
            return candidate
        i += 1


__all__ = [
    "FILENAME_PREFIX",
    "MAX_FILENAME_BYTES",
    "export_filename",
    "output_path_for_params",
    "unique_path",
]
