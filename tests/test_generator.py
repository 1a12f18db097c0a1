"""生成器配置与运行入口测试

测试 config.py 与 generator.py。
"""

import pytest

from intgen.config import GeneratorConfig
from intgen.families import get_integral
from intgen.generator import build_recursion, run_generator


@pytest.mark.quick
def test_config_defaults():
    """测试默认配置。"""
    cfg = GeneratorConfig(family="overlap")
    assert cfg.max_ang_mom == 1
    assert cfg.geom_orders == ()
    assert cfg.max_workers == 1
    assert not cfg.verbose


@pytest.mark.quick
def test_config_validation():
    """测试非法配置抛出 ValueError。"""
    with pytest.raises(ValueError, match="不支持的积分族"):
        GeneratorConfig(family="spin orbit")
    with pytest.raises(ValueError, match="最大角动量"):
        GeneratorConfig(family="overlap", max_ang_mom=-1)
    with pytest.raises(ValueError, match="几何导数阶数数目"):
        GeneratorConfig(family="electron repulsion", geom_orders=(1, 0))
    with pytest.raises(ValueError, match="非负"):
        GeneratorConfig(family="overlap", geom_orders=(-1, 0))
    with pytest.raises(ValueError, match="进程数"):
        GeneratorConfig(family="overlap", max_workers=0)
    with pytest.raises(ValueError, match="progress_every"):
        GeneratorConfig(family="overlap", progress_every=0)


@pytest.mark.quick
def test_run_generator_overlap():
    """测试重叠积分生成：请求数、闭包与递推组一一对应。"""
    result = run_generator(GeneratorConfig(family="overlap", max_ang_mom=2))
    assert len(result.requested) == 9
    assert set(result.closures) == set(result.requested)
    assert set(result.groups) == set(result.requested)
    for integral in result.requested:
        assert len(result.groups[integral]) == len(integral.components())
    merged = result.all_integrals()
    assert merged == sorted(merged)
    assert get_integral("overlap", (0, 0)) in merged


@pytest.mark.quick
def test_run_generator_verbose(capsys):
    """测试 verbose 输出带族标签的进度行。"""
    run_generator(GeneratorConfig(family="electron repulsion", max_ang_mom=1), verbose=True)
    out = capsys.readouterr().out
    lines = out.strip().splitlines()
    assert lines[0].startswith("[ERI] 1/16 SSSS")
    assert lines[-1].startswith("[ERI] done")
    assert "closure=" in lines[0] and "terms=" in lines[0]


@pytest.mark.quick
def test_run_generator_progress_every(capsys):
    """测试 progress_every 控制进度行数（首行与末行总会输出）。"""
    cfg = GeneratorConfig(family="overlap", max_ang_mom=2, verbose=True, progress_every=4)
    run_generator(cfg)
    lines = capsys.readouterr().out.strip().splitlines()
    # it = 1, 4, 8, 9 以及 done
    assert len(lines) == 5


@pytest.mark.quick
def test_run_generator_silent(capsys):
    """测试默认不输出。"""
    run_generator(GeneratorConfig(family="multipole", max_ang_mom=1))
    assert capsys.readouterr().out == ""


@pytest.mark.quick
def test_geometric_generator():
    """测试带几何导数的生成：闭包含无前缀积分。"""
    cfg = GeneratorConfig(family="electron repulsion", max_ang_mom=1, geom_orders=(1, 0, 0, 0))
    result = run_generator(cfg)
    assert len(result.requested) == 16
    assert all(not i.is_simple() for i in result.requested)
    assert any(i.is_simple() for i in result.all_integrals())


@pytest.mark.quick
def test_build_recursion_simplified():
    """测试 build_recursion 返回化简后的递推组（无零项、无重复项）。"""
    closure, group = build_recursion(get_integral("kinetic energy", (1, 1)))
    assert len(closure) > 1
    for dist in group:
        signatures = [t.signature() for t in dist]
        assert len(signatures) == len(set(signatures))
        assert all(t.prefactor != 0 for t in dist)


@pytest.mark.slow
def test_parallel_matches_serial():
    """测试多进程构造结果与串行一致。"""
    serial = run_generator(GeneratorConfig(family="nuclear potential", max_ang_mom=1))
    parallel = run_generator(
        GeneratorConfig(family="nuclear potential", max_ang_mom=1, max_workers=2)
    )
    assert serial.requested == parallel.requested
    for integral in serial.requested:
        assert list(serial.closures[integral]) == list(parallel.closures[integral])
        assert [d.terms() for d in serial.groups[integral]] == [
            d.terms() for d in parallel.groups[integral]
        ]


@pytest.mark.quick
def test_too_many_workers_warns():
    """测试进程数超过积分数目时给出警告。"""
    cfg = GeneratorConfig(family="overlap", max_ang_mom=0, max_workers=2)
    with pytest.warns(RuntimeWarning, match="进程数"):
        run_generator(cfg)
