# src/lc3_tracer/arch/lc3/instructions/alu.py
"""
演算命令（ADD, AND, NOT）の実装。
"""
from dataclasses import dataclass
from typing import Optional

from lc3_tracer.core.snapshot import Operation
from lc3_tracer.transport.bus import Bus
from lc3_tracer.arch.lc3.state import Lc3CpuState
from lc3_tracer.arch.lc3.devices import Console
from .base import Instruction, dr_of, sr1_of, sr2_of, imm5_of, reg_name, imm_text

# @intent:data_structure ADD/ANDのオペランド。ビット[5]によりsr2かimm5のどちらか一方のみを持ちます。
@dataclass(frozen=True)
class Add(Instruction):
    dr: int
    sr1: int
    sr2: Optional[int] = None
    imm5: Optional[int] = None

@dataclass(frozen=True)
class And(Instruction):
    dr: int
    sr1: int
    sr2: Optional[int] = None
    imm5: Optional[int] = None

@dataclass(frozen=True)
class Not(Instruction):
    dr: int
    sr: int

def _decode_operate(ir: int, cls, mnemonic: str) -> Operation:
    dr, sr1 = dr_of(ir), sr1_of(ir)
    if ir & 0x0020:
        inst = cls(dr=dr, sr1=sr1, imm5=imm5_of(ir))
        second = imm_text(inst.imm5)
    else:
        inst = cls(dr=dr, sr1=sr1, sr2=sr2_of(ir))
        second = reg_name(inst.sr2)
    return Operation(f"{ir:04X}", mnemonic, [reg_name(dr), reg_name(sr1), second], inst)

def _second_operand(state: Lc3CpuState, inst) -> int:
    if inst.imm5 is not None:
        return inst.imm5 & 0xFFFF
    return state.registers[inst.sr2]

# --- ADD ---
# @intent:responsibility ADD命令をデコードします。
def decode_add(ir: int, pc: int) -> Operation:
    return _decode_operate(ir, Add, "ADD")

# @intent:responsibility ADD命令を実行し、条件コードを更新します。
def execute_add(state: Lc3CpuState, bus: Bus, op: Operation, console: Console) -> None:
    inst: Add = op.instruction
    state.write_register(inst.dr, state.registers[inst.sr1] + _second_operand(state, inst))

# --- AND ---
# @intent:responsibility AND命令をデコードします。
def decode_and(ir: int, pc: int) -> Operation:
    return _decode_operate(ir, And, "AND")

# @intent:responsibility AND命令を実行し、条件コードを更新します。
def execute_and(state: Lc3CpuState, bus: Bus, op: Operation, console: Console) -> None:
    inst: And = op.instruction
    state.write_register(inst.dr, state.registers[inst.sr1] & _second_operand(state, inst))

# --- NOT ---
# @intent:responsibility NOT命令をデコードします。
def decode_not(ir: int, pc: int) -> Operation:
    inst = Not(dr=dr_of(ir), sr=sr1_of(ir))
    return Operation(f"{ir:04X}", "NOT", [reg_name(inst.dr), reg_name(inst.sr)], inst)

# @intent:responsibility NOT命令を実行し、ビット反転結果で条件コードを更新します。
def execute_not(state: Lc3CpuState, bus: Bus, op: Operation, console: Console) -> None:
    inst: Not = op.instruction
    state.write_register(inst.dr, ~state.registers[inst.sr])
