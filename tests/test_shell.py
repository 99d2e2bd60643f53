"""Tests for the command driver and its renderers."""

import pytest

from ptsim.machine import Machine
from ptshell.shell_env import ShellEnv
from ptshell.shell_host import main, render_free_map, render_page_table, run_commands


@pytest.fixture
def env() -> ShellEnv:
    return ShellEnv(m=Machine())


def test_render_free_map() -> None:
    lines = render_free_map([True, True] + [False] * 62)
    assert lines[0] == "--- PAGE FREE MAP ---"
    assert lines[1:] == ["##" + "." * 14] + ["." * 16] * 3


def test_render_page_table() -> None:
    assert render_page_table(1, [(0, 2), (17, 42)]) == [
        "--- PROCESS 1 PAGE TABLE ---",
        "00 -> 02",
        "11 -> 2a",
    ]


def test_np_ppt(env: ShellEnv, capsys) -> None:
    assert run_commands(env, ["np", "1", "2", "ppt", "1"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ["--- PROCESS 1 PAGE TABLE ---", "00 -> 02", "01 -> 03"]


def test_np_zero_pages(env: ShellEnv, capsys) -> None:
    run_commands(env, ["np", "0", "0", "ppt", "0"])
    assert capsys.readouterr().out.splitlines() == ["--- PROCESS 0 PAGE TABLE ---"]


def test_pfm(env: ShellEnv, capsys) -> None:
    run_commands(env, ["np", "1", "2", "pfm"])
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "--- PAGE FREE MAP ---"
    assert out[1] == "####" + "." * 12
    assert len(out) == 5


def test_store_load(env: ShellEnv, capsys) -> None:
    run_commands(env, ["np", "1", "2", "sb", "1", "300", "99", "lb", "1", "300"])
    out = capsys.readouterr().out.splitlines()
    # virtual page 1 -> physical page 3, offset 44
    assert out == ["Store proc 1: 300 => 812, value=99", "Load proc 1: 300 => 812, value=99"]


def test_oom_reported(env: ShellEnv, capsys) -> None:
    tokens = []
    for pid in range(13):
        tokens += ["np", str(pid), "4"]
    assert run_commands(env, tokens) == 1
    out = capsys.readouterr().out.splitlines()
    assert out == ["OOM: proc 12: data page"]
    assert env.m.free_map().count(True) == 61


def test_kp_then_ppt_reports_unknown(env: ShellEnv, capsys) -> None:
    assert run_commands(env, ["np", "1", "1", "kp", "1", "ppt", "1"]) == 1
    assert capsys.readouterr().out.splitlines() == ["ppt: unknown process: 1"]


def test_usage_errors(env: ShellEnv, capsys) -> None:
    assert run_commands(env, ["np", "1"]) == 2
    assert run_commands(env, ["ppt", "x"]) == 2
    assert run_commands(env, ["zz"]) == 2
    assert capsys.readouterr().out.splitlines() == [
        "np: usage: np <proc> <pages>",
        "ppt: invalid integer argument",
        "unknown command: zz",
    ]


def test_main(capsys) -> None:
    assert main(["--page-count", "16", "--page-size", "64", "np", "1", "1", "pfm"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ["--- PAGE FREE MAP ---", "###" + "." * 13]


def test_main_without_commands(capsys) -> None:
    assert main([]) == 1
    assert "usage" in capsys.readouterr().err


@pytest.mark.parametrize(("page_size", "page_count"), [(64, 16), (512, 256)])
def test_main_custom_geometry(capsys, page_size: int, page_count: int) -> None:
    argv = ["--page-size", str(page_size), "--page-count", str(page_count)]
    assert main(argv + ["np", "0", "0", "np", "1", "2", "ppt", "1", "sb", "1", str(page_size + 3), "9", "lb", "1", str(page_size + 3)]) == 0
    out = capsys.readouterr().out.splitlines()
    phys = 4 * page_size + 3
    assert out == [
        "--- PROCESS 1 PAGE TABLE ---",
        "00 -> 03",
        "01 -> 04",
        f"Store proc 1: {page_size + 3} => {phys}, value=9",
        f"Load proc 1: {page_size + 3} => {phys}, value=9",
    ]
