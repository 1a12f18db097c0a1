#!/usr/bin/env python
"""递推生成统一入口。

按积分族与最大角动量枚举描述符，构造子积分闭包与完全展开的递推组，
打印摘要并可导出 CSV/JSON 供代码输出层使用。
"""

import argparse
import sys
import time
from pathlib import Path

# 添加 src 到路径
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from intgen.config import GeneratorConfig
from intgen.families import IntegralFamily, is_available
from intgen.generator import run_generator
from intgen.io import export_closure_json, export_group_json, export_integrals_csv


def parse_orders(text):
    """解析 ``"1,0,0,0"`` 形式的几何导数阶数。"""
    if not text:
        return ()
    return tuple(int(k) for k in text.split(","))


def print_results(result, show_terms=0):
    """打印每个描述符的闭包与递推组摘要。"""
    print("\n" + "=" * 60)
    print(f"{'积分':<20}{'闭包':>8}{'分量':>8}{'项数':>10}")
    print("-" * 60)
    for integral in result.requested:
        group = result.groups[integral]
        nterms = sum(len(dist) for dist in group)
        print(
            f"{integral.label():<20}{len(result.closures[integral]):>8}"
            f"{len(group):>8}{nterms:>10}"
        )
    print("-" * 60)
    print(f"不同子积分总数: {len(result.all_integrals())}")

    if show_terms > 0 and result.requested:
        last = result.requested[-1]
        dist = result.groups[last][0]
        print(f"\n{dist.root().integral.label()} 的展开（前 {show_terms} 项）:")
        for term in dist.terms()[:show_terms]:
            print(f"  {term.label()}")


def main():
    parser = argparse.ArgumentParser(
        description="Obara–Saika 递推生成入口",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--family",
        type=str,
        default=IntegralFamily.ELECTRON_REPULSION.value,
        help="积分族: " + ", ".join(f.value for f in IntegralFamily),
    )
    parser.add_argument("--max-ang-mom", type=int, default=1, help="每个中心的最大角动量")
    parser.add_argument(
        "--geom", type=str, default="", help="各中心几何导数阶数，如 1,0,0,0"
    )
    parser.add_argument(
        "--operator-order", type=int, default=None, help="算符张量阶数（多极矩、电场）"
    )
    parser.add_argument("--workers", type=int, default=1, help="并行进程数")
    parser.add_argument("--show-terms", type=int, default=0, help="打印最后一个积分首分量的前 N 项")
    parser.add_argument("--export-dir", type=str, default=None, help="导出目录")
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=True,
        help="详细输出（默认启用，使用 --no-verbose 禁用）",
    )
    parser.add_argument(
        "--no-verbose",
        dest="verbose",
        action="store_false",
        help="禁用详细输出",
    )
    parser.add_argument("--progress-every", type=int, default=1, help="进度输出间隔")
    args = parser.parse_args()

    if not is_available(args.family):
        print(f"不支持的积分族: {args.family}")
        sys.exit(1)

    cfg = GeneratorConfig(
        family=args.family,
        max_ang_mom=args.max_ang_mom,
        geom_orders=parse_orders(args.geom),
        operator_order=args.operator_order,
        max_workers=args.workers,
        verbose=args.verbose,
        progress_every=args.progress_every,
    )

    t_start = time.time()
    result = run_generator(cfg)
    t_elapsed = time.time() - t_start

    print_results(result, args.show_terms)
    print(f"\n总用时: {t_elapsed:.2f}s")

    if args.export_dir:
        out = Path(args.export_dir)
        export_integrals_csv(out / "integrals.csv", result.all_integrals())
        export_closure_json(out / "closures.json", result.closures)
        for integral, group in result.groups.items():
            export_group_json(out / f"group_{integral.label()}.json", group)
        print(f"\n结果已导出到: {out}")


if __name__ == "__main__":
    main()
