# src/lc3_tracer/arch/lc3/instructions/base.py
"""
LC-3命令実装用の共通ユーティリティ。

命令語のビットフィールド抽出、符号拡張、デコード済み命令レコードの基底クラスを提供します。
"""
from dataclasses import dataclass
from enum import IntEnum

# @intent:constant 命令語のビット[15:12]に格納される4bitオペコード。
class Opcode(IntEnum):
    BR = 0x0
    ADD = 0x1
    LD = 0x2
    ST = 0x3
    JSR = 0x4
    AND = 0x5
    LDR = 0x6
    STR = 0x7
    RTI = 0x8
    NOT = 0x9
    LDI = 0xA
    STI = 0xB
    JMP = 0xC
    RES = 0xD
    LEA = 0xE
    TRAP = 0xF

# @intent:utility_function Nbitのフィールドを符号付き整数に拡張します。
def sign_extend(value: int, bits: int) -> int:
    """
    下位bitsビットを2の補数として解釈した符号付き整数を返します。
    例: sign_extend(0b11111, 5) == -1
    """
    mask = (1 << bits) - 1
    value &= mask
    if value & (1 << (bits - 1)):
        value -= (1 << bits)
    return value

# @intent:utility_function 命令語のオペコード(ビット[15:12])を取り出します。
def opcode_of(ir: int) -> int:
    return (ir >> 12) & 0xF

def dr_of(ir: int) -> int:
    """ビット[11:9]: DR / SR (ストア系)"""
    return (ir >> 9) & 0x7

def sr1_of(ir: int) -> int:
    """ビット[8:6]: SR1 / BaseR"""
    return (ir >> 6) & 0x7

def sr2_of(ir: int) -> int:
    """ビット[2:0]: SR2"""
    return ir & 0x7

def imm5_of(ir: int) -> int:
    return sign_extend(ir, 5)

def offset6_of(ir: int) -> int:
    return sign_extend(ir, 6)

def pc_offset9_of(ir: int) -> int:
    return sign_extend(ir, 9)

def pc_offset11_of(ir: int) -> int:
    return sign_extend(ir, 11)

# @intent:utility_function 16bitアドレス演算（折り返しあり）。
def add16(base: int, offset: int) -> int:
    return (base + offset) & 0xFFFF

# @intent:utility_function 逆アセンブル表示用の書式。
def reg_name(index: int) -> str:
    return f"R{index}"

def imm_text(value: int) -> str:
    return f"#{value}"

def addr_text(value: int) -> str:
    return f"x{value & 0xFFFF:04X}"

# @intent:responsibility デコード済み命令レコードの基底クラス。
# @intent:rationale 命令種別ごとに必要なフィールドだけを持つ不変レコードとし、デコードと実行を分離します。
@dataclass(frozen=True)
class Instruction:
    pass
