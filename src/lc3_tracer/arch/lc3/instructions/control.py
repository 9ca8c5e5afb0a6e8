# src/lc3_tracer/arch/lc3/instructions/control.py
"""
制御命令（BR, JMP, JSR/JSRR, TRAP）と未使用オペコードの実装。
いずれも条件コードを変更しません。
"""
from dataclasses import dataclass

from lc3_tracer.core.snapshot import Operation
from lc3_tracer.transport.bus import Bus
from lc3_tracer.arch.lc3.state import Lc3CpuState
from lc3_tracer.arch.lc3.devices import Console
from .base import (
    Instruction, Opcode, opcode_of, sr1_of, pc_offset9_of, pc_offset11_of,
    add16, reg_name, addr_text,
)

# @intent:constant 標準的なTRAPサービスルーチンの名前（逆アセンブル表示用）。
TRAP_NAMES = {
    0x20: "GETC",
    0x21: "OUT",
    0x22: "PUTS",
    0x23: "IN",
    0x24: "PUTSP",
    0x25: "HALT",
}

@dataclass(frozen=True)
class Br(Instruction):
    n: bool
    z: bool
    p: bool
    pc_offset9: int

@dataclass(frozen=True)
class Jmp(Instruction):
    base_r: int

@dataclass(frozen=True)
class Jsr(Instruction):
    pc_offset11: int

@dataclass(frozen=True)
class Jsrr(Instruction):
    base_r: int

@dataclass(frozen=True)
class Trap(Instruction):
    trapvect8: int

# @intent:data_structure RTI(0x8)と予約オペコード(0xD)。フェッチとI/O整合処理以外は何もしません。
@dataclass(frozen=True)
class Reserved(Instruction):
    opcode: int

# --- BR ---
# @intent:responsibility BR命令をデコードします。条件ビットが全て0の場合はNOPとして表示します。
def decode_br(ir: int, pc: int) -> Operation:
    inst = Br(n=bool(ir & 0x0800), z=bool(ir & 0x0400), p=bool(ir & 0x0200),
              pc_offset9=pc_offset9_of(ir))
    suffix = ("n" if inst.n else "") + ("z" if inst.z else "") + ("p" if inst.p else "")
    if not suffix:
        return Operation(f"{ir:04X}", "NOP", [], inst)
    return Operation(f"{ir:04X}", "BR" + suffix, [addr_text(add16(pc, inst.pc_offset9))], inst)

# @intent:responsibility 条件ビットのいずれかが現在の条件コードと一致すれば分岐します。
def execute_br(state: Lc3CpuState, bus: Bus, op: Operation, console: Console) -> None:
    inst: Br = op.instruction
    if (inst.n and state.flag_n) or (inst.z and state.flag_z) or (inst.p and state.flag_p):
        state.pc = add16(state.pc, inst.pc_offset9)

# --- JMP / RET ---
def decode_jmp(ir: int, pc: int) -> Operation:
    inst = Jmp(base_r=sr1_of(ir))
    if inst.base_r == 7:
        return Operation(f"{ir:04X}", "RET", [], inst)
    return Operation(f"{ir:04X}", "JMP", [reg_name(inst.base_r)], inst)

def execute_jmp(state: Lc3CpuState, bus: Bus, op: Operation, console: Console) -> None:
    state.pc = state.registers[op.instruction.base_r]

# --- JSR / JSRR ---
# @intent:responsibility ビット[11]でPC相対形式(JSR)とレジスタ形式(JSRR)を切り替えてデコードします。
def decode_jsr(ir: int, pc: int) -> Operation:
    if ir & 0x0800:
        inst = Jsr(pc_offset11=pc_offset11_of(ir))
        return Operation(f"{ir:04X}", "JSR", [addr_text(add16(pc, inst.pc_offset11))], inst)
    inst = Jsrr(base_r=sr1_of(ir))
    return Operation(f"{ir:04X}", "JSRR", [reg_name(inst.base_r)], inst)

def execute_jsr(state: Lc3CpuState, bus: Bus, op: Operation, console: Console) -> None:
    state.registers[7] = state.pc
    state.pc = add16(state.pc, op.instruction.pc_offset11)

# @intent:rationale R7への戻りアドレス保存を先に行うため、JSRR R7はR7の新しい値（戻りアドレス）へ分岐します。
def execute_jsrr(state: Lc3CpuState, bus: Bus, op: Operation, console: Console) -> None:
    state.registers[7] = state.pc
    state.pc = state.registers[op.instruction.base_r]

# --- TRAP ---
def decode_trap(ir: int, pc: int) -> Operation:
    inst = Trap(trapvect8=ir & 0xFF)
    name = TRAP_NAMES.get(inst.trapvect8)
    if name:
        return Operation(f"{ir:04X}", name, [], inst)
    return Operation(f"{ir:04X}", "TRAP", [f"x{inst.trapvect8:02X}"], inst)

# @intent:responsibility 戻りアドレスをR7に保存し、トラップベクタテーブルからPCを読み込みます。
def execute_trap(state: Lc3CpuState, bus: Bus, op: Operation, console: Console) -> None:
    state.registers[7] = state.pc
    state.pc = bus.read(op.instruction.trapvect8)

# --- RTI / Reserved ---
def decode_reserved(ir: int, pc: int) -> Operation:
    opcode = opcode_of(ir)
    mnemonic = "RTI" if opcode == Opcode.RTI else "RESERVED"
    return Operation(f"{ir:04X}", mnemonic, [], Reserved(opcode=opcode))

def execute_reserved(state: Lc3CpuState, bus: Bus, op: Operation, console: Console) -> None:
    # Intentional: unsupported opcodes execute as no-ops.
    pass
