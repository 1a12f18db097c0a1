"""生成器运行配置"""

from __future__ import annotations

from dataclasses import dataclass, field

from intgen.families import FAMILIES, get_family

__all__ = ["GeneratorConfig"]


@dataclass
class GeneratorConfig:
    """递推生成配置。

    Attributes
    ----------
    family : str
        算符族标签（如 ``"overlap"``、``"electron repulsion"``）。
    max_ang_mom : int
        每个中心的最大角动量。
    geom_orders : tuple[int, ...]
        各中心几何导数阶数；空元组表示不求导。
    operator_order : int | None
        算符张量阶数（多极矩、电场），默认取该族下限。
    max_workers : int
        并行构造递推组的进程数；1 表示串行。
    verbose : bool
        是否打印进度。
    progress_every : int
        每隔多少个积分打印一次进度。
    """

    family: str
    max_ang_mom: int = 1
    geom_orders: tuple[int, ...] = field(default_factory=tuple)
    operator_order: int | None = None
    max_workers: int = 1
    verbose: bool = False
    progress_every: int = 1

    def __post_init__(self):
        fam = get_family(self.family)
        if fam is None:
            raise ValueError(f"不支持的积分族: {self.family!r}")
        self.geom_orders = tuple(self.geom_orders)
        if self.max_ang_mom < 0:
            raise ValueError(f"最大角动量必须非负，当前值: {self.max_ang_mom}")
        if self.geom_orders:
            n_centers = FAMILIES[fam].n_centers
            if len(self.geom_orders) != n_centers:
                raise ValueError(
                    f"几何导数阶数数目必须为 {n_centers}，实际: {len(self.geom_orders)}"
                )
            if any(k < 0 for k in self.geom_orders):
                raise ValueError(f"几何导数阶数必须非负: {self.geom_orders}")
        if self.max_workers < 1:
            raise ValueError(f"进程数必须为正，当前值: {self.max_workers}")
        if self.progress_every < 1:
            raise ValueError(f"progress_every 必须为正，当前值: {self.progress_every}")
