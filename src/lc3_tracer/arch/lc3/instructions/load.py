# src/lc3_tracer/arch/lc3/instructions/load.py
"""
転送命令（LEA, LD, LDR, LDI, ST, STR, STI）の実装。

デコーダに渡されるpcはフェッチ後（インクリメント済み）のPCで、PC相対アドレスの表示にのみ使用します。
実行時のアドレス計算は常にstate.pcを使用します。
"""
from dataclasses import dataclass

from lc3_tracer.core.snapshot import Operation
from lc3_tracer.transport.bus import Bus
from lc3_tracer.arch.lc3.state import Lc3CpuState, KBDR, MCR
from lc3_tracer.arch.lc3.devices import Console
from .base import (
    Instruction, dr_of, sr1_of, offset6_of, pc_offset9_of, add16,
    reg_name, imm_text, addr_text,
)

# @intent:data_structure PC相対形式（9bitオフセット）の命令レコード。
@dataclass(frozen=True)
class Lea(Instruction):
    dr: int
    pc_offset9: int

@dataclass(frozen=True)
class Ld(Instruction):
    dr: int
    pc_offset9: int

@dataclass(frozen=True)
class Ldi(Instruction):
    dr: int
    pc_offset9: int

@dataclass(frozen=True)
class St(Instruction):
    sr: int
    pc_offset9: int

@dataclass(frozen=True)
class Sti(Instruction):
    sr: int
    pc_offset9: int

# @intent:data_structure ベース+オフセット形式（6bitオフセット）の命令レコード。
@dataclass(frozen=True)
class Ldr(Instruction):
    dr: int
    base_r: int
    offset6: int

@dataclass(frozen=True)
class Str(Instruction):
    sr: int
    base_r: int
    offset6: int

def _decode_pc_relative(ir: int, pc: int, cls, mnemonic: str) -> Operation:
    reg, offset = dr_of(ir), pc_offset9_of(ir)
    inst = cls(reg, offset)
    return Operation(f"{ir:04X}", mnemonic, [reg_name(reg), addr_text(add16(pc, offset))], inst)

def _decode_base_offset(ir: int, cls, mnemonic: str) -> Operation:
    reg, base_r, offset = dr_of(ir), sr1_of(ir), offset6_of(ir)
    inst = cls(reg, base_r, offset)
    return Operation(f"{ir:04X}", mnemonic, [reg_name(reg), reg_name(base_r), imm_text(offset)], inst)

# --- LEA ---
def decode_lea(ir: int, pc: int) -> Operation:
    return _decode_pc_relative(ir, pc, Lea, "LEA")

# @intent:responsibility LEA命令を実行します。アドレスそのものを格納し、メモリは参照しません。
def execute_lea(state: Lc3CpuState, bus: Bus, op: Operation, console: Console) -> None:
    inst: Lea = op.instruction
    state.write_register(inst.dr, add16(state.pc, inst.pc_offset9))

# --- LD ---
def decode_ld(ir: int, pc: int) -> Operation:
    return _decode_pc_relative(ir, pc, Ld, "LD")

def execute_ld(state: Lc3CpuState, bus: Bus, op: Operation, console: Console) -> None:
    inst: Ld = op.instruction
    state.write_register(inst.dr, bus.read(add16(state.pc, inst.pc_offset9)))

# --- LDR ---
def decode_ldr(ir: int, pc: int) -> Operation:
    return _decode_base_offset(ir, Ldr, "LDR")

def execute_ldr(state: Lc3CpuState, bus: Bus, op: Operation, console: Console) -> None:
    inst: Ldr = op.instruction
    state.write_register(inst.dr, bus.read(add16(state.registers[inst.base_r], inst.offset6)))

# --- LDI ---
def decode_ldi(ir: int, pc: int) -> Operation:
    return _decode_pc_relative(ir, pc, Ldi, "LDI")

# @intent:responsibility LDI命令を実行します。
# @intent:rationale 間接アドレスがKBDRの場合のみ、メモリを読まずにコンソールから1文字を取得します。
#                  LD/LDRによるKBDR読み出しやKBSRの確認は行いません（既存の挙動との互換性を維持）。
def execute_ldi(state: Lc3CpuState, bus: Bus, op: Operation, console: Console) -> None:
    inst: Ldi = op.instruction
    pointer = bus.read(add16(state.pc, inst.pc_offset9))
    if pointer == KBDR:
        value = console.read_char()
    else:
        value = bus.read(pointer)
    state.write_register(inst.dr, value)

# --- ST ---
def decode_st(ir: int, pc: int) -> Operation:
    return _decode_pc_relative(ir, pc, St, "ST")

def execute_st(state: Lc3CpuState, bus: Bus, op: Operation, console: Console) -> None:
    inst: St = op.instruction
    bus.write(add16(state.pc, inst.pc_offset9), state.registers[inst.sr])

# --- STR ---
def decode_str(ir: int, pc: int) -> Operation:
    return _decode_base_offset(ir, Str, "STR")

def execute_str(state: Lc3CpuState, bus: Bus, op: Operation, console: Console) -> None:
    inst: Str = op.instruction
    bus.write(add16(state.registers[inst.base_r], inst.offset6), state.registers[inst.sr])

# --- STI ---
def decode_sti(ir: int, pc: int) -> Operation:
    return _decode_pc_relative(ir, pc, Sti, "STI")

# @intent:responsibility STI命令を実行します。間接アドレスがMCRであれば、書き込み後にHALT状態にします。
def execute_sti(state: Lc3CpuState, bus: Bus, op: Operation, console: Console) -> None:
    inst: Sti = op.instruction
    pointer = bus.read(add16(state.pc, inst.pc_offset9))
    bus.write(pointer, state.registers[inst.sr])
    if pointer == MCR:
        state.halted = True
