r"""递推项、递推分布与递推组

一条递推关系写作

.. math::

    I_{\mathrm{root}} = \sum_k c_k \Big(\prod_j f_j^{n_{kj}}\Big) I_k

其中 :math:`c_k` 为有理数前因子，:math:`f_j` 为符号因子（见 :class:`~intgen.algebra.factor.Factor`），
:math:`I_k` 为积分分量。

- :class:`RecursionTerm`：单项 :math:`c_k \prod f^n I_k`（不可变值类型）
- :class:`RecursionDist`：根项 + 展开项列表
- :class:`RecursionGroup`：一组分布，每个分布对应一个被请求的积分分量

化简（:meth:`RecursionDist.simplify`）合并积分分量与因子完全相同的项（前因子相加），
并删除前因子为零的项；化简不改变分布所表示的数学值。
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field, replace as dc_replace
from fractions import Fraction

import sympy as sp

from intgen.algebra.factor import Factor
from intgen.algebra.integral import IntegralComponent

__all__ = [
    "RecursionTerm",
    "RecursionDist",
    "RecursionGroup",
    "R2CTerm",
    "R4CTerm",
    "R2CDist",
    "R4CDist",
    "R2Group",
    "R4Group",
]


@dataclass(frozen=True, order=True)
class RecursionTerm:
    """递推项：积分分量 × 有理前因子 × 符号因子多重集。

    Attributes
    ----------
    integral : IntegralComponent
        积分分量。
    factor_counts : tuple[tuple[Factor, int], ...]
        按因子排序的 ``(因子, 次数)`` 对。
    prefactor : Fraction
        有理数前因子。
    """

    integral: IntegralComponent
    factor_counts: tuple[tuple[Factor, int], ...] = ()
    prefactor: Fraction = Fraction(1)

    def __post_init__(self):
        object.__setattr__(self, "prefactor", Fraction(self.prefactor))
        object.__setattr__(self, "factor_counts", tuple(sorted(self.factor_counts)))

    def add(self, factor: Factor, prefactor=1, order: int = 1) -> RecursionTerm:
        """乘以 ``factor**order`` 并把前因子乘以 ``prefactor``。"""
        counts = Counter(dict(self.factor_counts))
        counts[factor] += order
        return RecursionTerm(
            self.integral,
            tuple((f, n) for f, n in counts.items() if n != 0),
            self.prefactor * Fraction(prefactor),
        )

    def scale(self, value) -> RecursionTerm:
        return dc_replace(self, prefactor=self.prefactor * Fraction(value))

    def times(self, other: RecursionTerm) -> RecursionTerm:
        """保留本项积分分量，乘上 ``other`` 的前因子与全部因子。"""
        counts = Counter(dict(self.factor_counts))
        counts.update(dict(other.factor_counts))
        return RecursionTerm(
            self.integral, tuple(counts.items()), self.prefactor * other.prefactor
        )

    def _with(self, integral) -> RecursionTerm | None:
        if integral is None:
            return None
        return dc_replace(self, integral=integral)

    def shift(self, axis: str, value: int, center: int) -> RecursionTerm | None:
        return self._with(self.integral.shift(axis, value, center))

    def shift_prefix(
        self, axis: str, value: int, center: int, keep_order: bool = False
    ) -> RecursionTerm | None:
        return self._with(self.integral.shift_prefix(axis, value, center, keep_order))

    def shift_operator(self, axis: str, value: int) -> RecursionTerm | None:
        return self._with(self.integral.shift_operator(axis, value))

    def shift_order(self, value: int) -> RecursionTerm | None:
        return self._with(self.integral.shift_order(value))

    def replace(self, integrand) -> RecursionTerm:
        return dc_replace(self, integral=self.integral.replace(integrand))

    def clear_prefixes(self) -> RecursionTerm:
        return dc_replace(self, integral=self.integral.base())

    def factors(self) -> list[Factor]:
        return [f for f, _ in self.factor_counts]

    def factor_order(self, factor: Factor) -> int:
        return dict(self.factor_counts).get(factor, 0)

    def integrand(self):
        return self.integral.integrand

    def prefixes_order(self) -> tuple[int, ...]:
        return self.integral.prefixes_order()

    def is_zero_center(self, center: int) -> bool:
        """中心 ``center`` 为零阶（s 型，辅助中心）。"""
        return self.integral[center].order == 0

    def signature(self) -> tuple:
        """化简时用于合并的键：积分分量 + 因子多重集。"""
        return (self.integral, self.factor_counts)

    def label(self) -> str:
        factors = "*".join(
            f.label() if n == 1 else f"{f.label()}^{n}" for f, n in self.factor_counts
        )
        text = f"{self.prefactor}"
        if factors:
            text += f"*{factors}"
        return f"{text}*[{self.integral.label()}]"

    def to_sympy(self, integral_symbol=None) -> sp.Expr:
        """转换为 sympy 表达式。

        ``integral_symbol`` 将积分分量映射为 sympy 对象，默认使用 ``I[label]`` 符号
        （含辅助阶数与被积算符，保证不同分量对应不同符号）。
        """
        if integral_symbol is None:
            integral_symbol = _default_integral_symbol
        expr = sp.Rational(self.prefactor.numerator, self.prefactor.denominator)
        for factor, n in self.factor_counts:
            expr *= factor.symbol() ** n
        return expr * integral_symbol(self.integral)


def _default_integral_symbol(integral: IntegralComponent) -> sp.Symbol:
    return sp.Symbol(f"I[{integral.integrand.name}|{integral.label()}|{integral.order}]")


@dataclass
class RecursionDist:
    """递推分布：``root = sum(terms)``。"""

    root_term: RecursionTerm
    _terms: list[RecursionTerm] = field(default_factory=list)

    def add(self, term: RecursionTerm | None) -> None:
        """追加一项；``None`` 忽略（非法平移不贡献任何项）。"""
        if term is not None:
            self._terms.append(term)

    def root(self) -> RecursionTerm:
        return self.root_term

    def terms(self) -> list[RecursionTerm]:
        return list(self._terms)

    def __getitem__(self, index: int) -> RecursionTerm:
        return self._terms[index]

    def __len__(self) -> int:
        return len(self._terms)

    def __iter__(self):
        return iter(self._terms)

    def simplify(self) -> RecursionDist:
        """合并同类项并删除零项（原地修改，返回自身）。"""
        merged: dict[tuple, RecursionTerm] = {}
        for term in self._terms:
            key = term.signature()
            if key in merged:
                prev = merged[key]
                merged[key] = dc_replace(prev, prefactor=prev.prefactor + term.prefactor)
            else:
                merged[key] = term
        self._terms = [t for t in merged.values() if t.prefactor != 0]
        return self

    def unique_integrals(self) -> list[IntegralComponent]:
        """展开项中出现的不同积分分量（有序）。"""
        return sorted({t.integral for t in self._terms})

    def count_new_integrals(self, known) -> int:
        """展开项中不在 ``known`` 里的不同积分分量数目。"""
        return sum(1 for comp in self.unique_integrals() if comp not in known)

    def to_sympy(self, integral_symbol=None) -> sp.Expr:
        return sp.Add(*(t.to_sympy(integral_symbol) for t in self._terms))


@dataclass
class RecursionGroup:
    """递推组：每个被请求积分分量的完全展开分布。"""

    _dists: list[RecursionDist] = field(default_factory=list)

    def add(self, dist: RecursionDist) -> None:
        self._dists.append(dist)

    def expansions(self) -> list[RecursionDist]:
        return list(self._dists)

    def __getitem__(self, index: int) -> RecursionDist:
        return self._dists[index]

    def __len__(self) -> int:
        return len(self._dists)

    def __iter__(self):
        return iter(self._dists)

    def roots(self) -> list[IntegralComponent]:
        return [d.root().integral for d in self._dists]

    def simplify(self) -> RecursionGroup:
        for dist in self._dists:
            dist.simplify()
        return self

    def unique_integrals(self) -> list[IntegralComponent]:
        comps = set()
        for dist in self._dists:
            comps.update(t.integral for t in dist)
        return sorted(comps)

    def split_terms(self) -> dict:
        """按描述符分组的终端积分分量（键与值均有序）。"""
        groups: dict = {}
        for comp in self.unique_integrals():
            groups.setdefault(comp.integral(), []).append(comp)
        return {key: groups[key] for key in sorted(groups)}


R2CTerm = R4CTerm = RecursionTerm
R2CDist = R4CDist = RecursionDist
R2Group = R4Group = RecursionGroup
