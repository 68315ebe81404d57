# どこで: `src/seis/__main__.py`。
# 何を: `python -m seis ...` の CLI エントリポイントを提供する。
# なぜ: ヘッドレス書き出し・対話シェル・パラメータ一覧を短い導線で実行できるようにするため。

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from seis.core.parameters import (
    PARAM_NAMES,
    SeisParams,
    load_params_file,
    params_from_mapping,
    parse_assignment,
    seis_meta,
)
from seis.core.runtime_config import set_config_path
from seis.core.session import SeisSession

_logger = logging.getLogger("seis")


def _add_session_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--set",
        dest="assignments",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="パラメータを上書きする（複数指定可）",
    )
    p.add_argument("--params", type=Path, default=None, help="パラメータ JSON ファイル")
    p.add_argument("--noise-seed", type=int, default=None, help="ノイズ源のシード（省略時: 時刻）")
    p.add_argument("--config", type=Path, default=None, help="明示する config.yaml")
    p.add_argument(
        "--canvas",
        type=float,
        nargs=2,
        default=None,
        metavar=("W", "H"),
        help="キャンバス寸法（省略時: config の canvas.size）",
    )


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="python -m seis")
    p.add_argument("-v", "--verbose", action="store_true", help="debug ログを出す")
    sub = p.add_subparsers(dest="cmd", required=True)

    export_p = sub.add_parser("export", help="ウィンドウを開かずに SVG を書き出す")
    _add_session_args(export_p)
    export_p.add_argument("--out", type=Path, default=None, help="出力 SVG パス")

    run_p = sub.add_parser("run", help="対話ウィンドウを開く（extra `interactive` が必要）")
    _add_session_args(run_p)

    sub.add_parser("list", help="パラメータ一覧（種別/レンジ/既定値）を表示する")

    return p.parse_args(argv)


def _params_from_args(args: argparse.Namespace) -> SeisParams:
    params = SeisParams()
    if args.params is not None:
        params = load_params_file(args.params)
    overrides = dict(parse_assignment(text) for text in args.assignments)
    if overrides:
        params = params_from_mapping(overrides, base=params)
    return params


def _session_from_args(args: argparse.Namespace) -> SeisSession:
    if args.config is not None:
        set_config_path(args.config)
    canvas = None if args.canvas is None else (float(args.canvas[0]), float(args.canvas[1]))
    return SeisSession(
        _params_from_args(args),
        noise_seed=args.noise_seed,
        canvas_size=canvas,
    )


def _format_param_rows() -> list[str]:
    defaults = SeisParams()
    rows = []
    for name in PARAM_NAMES:
        meta = seis_meta[name]
        if meta.kind == "choice":
            span = "|".join(meta.choices or ())
        elif meta.kind == "bool":
            span = "true|false"
        else:
            span = f"{meta.ui_min}..{meta.ui_max}"
        rows.append(f"{name}\t{meta.kind}\t{span}\t{getattr(defaults, name)!r}")
    return rows


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "list":
        for row in _format_param_rows():
            print(row)
        return 0

    try:
        session = _session_from_args(args)
    except (OSError, ValueError, TypeError) as exc:
        _logger.error("%s", exc)
        return 2

    if args.cmd == "export":
        try:
            path = session.export_svg(args.out)
        except OSError as exc:
            _logger.error("SVG を書き出せませんでした: %s", exc)
            return 2
        print(path)
        return 0

    if args.cmd == "run":
        from seis.interactive.runtime.app import run

        try:
            run(session)
        except ImportError as exc:
            _logger.error("対話シェルには `pip install seis[interactive]` が必要です: %s", exc)
            return 1
        return 0

    raise AssertionError(f"unknown cmd: {args.cmd!r}")


if __name__ == "__main__":
    raise SystemExit(main())
