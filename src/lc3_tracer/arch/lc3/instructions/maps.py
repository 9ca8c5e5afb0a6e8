"""
オペコードと命令実装のマッピング定義。
"""
from .base import Opcode
from . import load
from . import alu
from . import control

# @intent:map 4bitオペコードからデコード関数へのマッピングテーブル。全16パターンを網羅します。
DECODE_MAP = {
    # ALU
    Opcode.ADD: alu.decode_add,
    Opcode.AND: alu.decode_and,
    Opcode.NOT: alu.decode_not,

    # Load/Store
    Opcode.LEA: load.decode_lea,
    Opcode.LD: load.decode_ld,
    Opcode.LDR: load.decode_ldr,
    Opcode.LDI: load.decode_ldi,
    Opcode.ST: load.decode_st,
    Opcode.STR: load.decode_str,
    Opcode.STI: load.decode_sti,

    # Control
    Opcode.BR: control.decode_br,
    Opcode.JMP: control.decode_jmp,
    Opcode.JSR: control.decode_jsr,
    Opcode.TRAP: control.decode_trap,
    Opcode.RTI: control.decode_reserved,
    Opcode.RES: control.decode_reserved,
}

# @intent:map デコード済み命令レコードの型から実行関数へのマッピングテーブル。
EXECUTE_MAP = {
    # ALU
    alu.Add: alu.execute_add,
    alu.And: alu.execute_and,
    alu.Not: alu.execute_not,

    # Load/Store
    load.Lea: load.execute_lea,
    load.Ld: load.execute_ld,
    load.Ldr: load.execute_ldr,
    load.Ldi: load.execute_ldi,
    load.St: load.execute_st,
    load.Str: load.execute_str,
    load.Sti: load.execute_sti,

    # Control
    control.Br: control.execute_br,
    control.Jmp: control.execute_jmp,
    control.Jsr: control.execute_jsr,
    control.Jsrr: control.execute_jsrr,
    control.Trap: control.execute_trap,
    control.Reserved: control.execute_reserved,
}
