# src/lc3_tracer/arch/lc3/display.py
"""
レジスタパネルのテキスト表示。

各レジスタを16進と符号付き10進で、条件コードを1文字タグ(N/Z/P)で表示します。
"""
from typing import List

from lc3_tracer.arch.lc3.state import Lc3CpuState, REGISTER_COUNT, to_signed

# @intent:responsibility 1つのレジスタを "R0 0x0000 0" 形式に整形します。
def format_register(name: str, value: int) -> str:
    return f"{name} 0x{value & 0xFFFF:04X} {to_signed(value)}"

# @intent:responsibility レジスタパネル全体を行のリストとして返します。
# @intent:flow 汎用レジスタを左右2列（R0-R3, R4-R7）、右端にPC/IR/CCを並べます。
def render_state(state: Lc3CpuState) -> List[str]:
    half = REGISTER_COUNT // 2
    control = [
        format_register("PC", state.pc),
        format_register("IR", state.ir),
        f"CC {state.cc.value}",
        "HALTED" if state.halted else "",
    ]
    lines = []
    for row in range(half):
        left = format_register(f"R{row}", state.registers[row])
        right = format_register(f"R{row + half}", state.registers[row + half])
        lines.append(f"{left:<17}{right:<17}{control[row]}".rstrip())
    return lines
