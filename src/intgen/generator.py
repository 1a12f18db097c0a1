r"""递推生成入口

:func:`run_generator` 按配置枚举全部被请求的积分描述符，对每个描述符构造

- 子积分闭包（:func:`~intgen.families.create_closure`）
- 完全展开并化简的递推组（:func:`~intgen.families.create_recursion_group`）

不同描述符之间互不依赖，``max_workers > 1`` 时用进程池并行构造；
结果按请求顺序收集，与进程数无关。
"""

from __future__ import annotations

import warnings
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field

from intgen.algebra.integral import Integral
from intgen.algebra.recursion import RecursionGroup
from intgen.config import GeneratorConfig
from intgen.families import (
    FAMILIES,
    create_closure,
    create_recursion_group,
    get_family,
    get_integrals,
)

__all__ = ["GeneratorResult", "build_recursion", "run_generator"]


@dataclass
class GeneratorResult:
    """生成结果。

    Attributes
    ----------
    requested : list[Integral]
        被请求的描述符（枚举顺序）。
    closures : dict
        描述符 -> 子积分闭包。
    groups : dict
        描述符 -> 递推组。
    """

    requested: list[Integral] = field(default_factory=list)
    closures: dict = field(default_factory=dict)
    groups: dict = field(default_factory=dict)

    def all_integrals(self) -> list[Integral]:
        """全部闭包的并集（有序）。"""
        merged = set()
        for closure in self.closures.values():
            merged.update(closure)
        return sorted(merged)


def build_recursion(integral: Integral) -> tuple:
    """单个描述符的 ``(闭包, 递推组)``。"""
    return create_closure(integral), create_recursion_group(integral).simplify()


def run_generator(cfg: GeneratorConfig, verbose: bool | None = None) -> GeneratorResult:
    """按配置构造全部闭包与递推组。

    Parameters
    ----------
    cfg : GeneratorConfig
        运行配置。
    verbose : bool, optional
        覆盖 ``cfg.verbose``。

    Returns
    -------
    GeneratorResult
    """
    if verbose is None:
        verbose = cfg.verbose
    tag = FAMILIES[get_family(cfg.family)].tag
    requested = get_integrals(
        cfg.family, cfg.max_ang_mom, cfg.geom_orders, cfg.operator_order
    )
    if cfg.max_workers > len(requested):
        warnings.warn(
            f"进程数 {cfg.max_workers} 超过积分数目 {len(requested)}",
            RuntimeWarning,
            stacklevel=2,
        )

    if cfg.max_workers > 1:
        with ProcessPoolExecutor(max_workers=cfg.max_workers) as pool:
            built = list(pool.map(build_recursion, requested))
    else:
        built = [build_recursion(integral) for integral in requested]

    result = GeneratorResult(requested=requested)
    for it, (integral, (closure, group)) in enumerate(zip(requested, built), start=1):
        result.closures[integral] = closure
        result.groups[integral] = group
        if verbose and (it == 1 or it % cfg.progress_every == 0 or it == len(requested)):
            nterms = _group_size(group)
            print(
                f"[{tag}] {it}/{len(requested)} {integral.label()}: "
                f"closure={len(closure)} components={len(group)} terms={nterms}"
            )
    if verbose:
        print(f"[{tag}] done: {len(result.all_integrals())} unique integrals")
    return result


def _group_size(group: RecursionGroup) -> int:
    return sum(len(dist) for dist in group)
