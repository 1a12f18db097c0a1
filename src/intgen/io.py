from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List

from intgen.algebra.integral import Integral
from intgen.algebra.recursion import RecursionGroup

__all__ = [
    "export_integrals_csv",
    "export_closure_json",
    "export_group_json",
]


def export_integrals_csv(out_path: str | Path, integrals) -> None:
    """导出有序积分集合为 CSV：列为 `index,label,angmoms,order,prefixes,operator`。

    索引即集合的枚举位置，供生成代码分配缓冲区偏移。
    """
    p = Path(out_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        f.write("index,label,angmoms,order,prefixes,operator\n")
        for index, integral in enumerate(integrals):
            angmoms = "".join(str(l) for l in integral.angmoms())
            prefixes = "".join(str(k) for k in integral.prefixes_order())
            f.write(
                f"{index},{integral.label()},{angmoms},{integral.order},"
                f"{prefixes},\"{integral.integrand.label()}\"\n"
            )


def _integral_record(integral: Integral) -> Dict:
    return {
        "label": integral.label(use_order=True),
        "operator": integral.integrand.label(),
        "angmoms": list(integral.angmoms()),
        "order": integral.order,
        "prefixes": list(integral.prefixes_order()),
    }


def export_closure_json(out_path: str | Path, closures: Dict) -> None:
    """导出 ``{描述符: 闭包}`` 为 JSON。"""
    p = Path(out_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    data: List[Dict] = []
    for integral, closure in closures.items():
        record = _integral_record(integral)
        record["closure"] = [_integral_record(i) for i in closure]
        data.append(record)
    with p.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def export_group_json(out_path: str | Path, group: RecursionGroup) -> None:
    """导出递推组：每个根分量一条记录，列出各项的前因子、因子与积分分量。

    前因子以 ``"p/q"`` 文本保存以保持精确。
    """
    p = Path(out_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    data: List[Dict] = []
    for dist in group:
        data.append(
            {
                "root": dist.root().integral.label(),
                "terms": [
                    {
                        "prefactor": str(term.prefactor),
                        "factors": {f.label(): n for f, n in term.factor_counts},
                        "integral": term.integral.label(),
                        "order": term.integral.order,
                        "operator": term.integral.integrand.label(),
                    }
                    for term in dist
                ],
            }
        )
    with p.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
