# src/lc3_tracer/arch/lc3/state.py
"""
LC-3 CPU固有の状態定義。
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from lc3_tracer.core.state import CpuState

# @intent:constant メモリマップドデバイスレジスタのアドレス。
KBSR = 0xFE00  # Keyboard Status
KBDR = 0xFE02  # Keyboard Data
DSR = 0xFE04   # Display Status
DDR = 0xFE06   # Display Data
MCR = 0xFFFE   # Machine Control

# @intent:constant ステータスレジスタのReadyビット。
DEVICE_READY = 0x8000

# 汎用レジスタ数
REGISTER_COUNT = 8

# @intent:responsibility 条件コード（N/Z/P）を表します。値は表示用の1文字タグです。
class ConditionCode(Enum):
    N = "N"
    Z = "Z"
    P = "P"

# @intent:utility_function 16bit値を符号付き整数として解釈します。
def to_signed(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value

# @intent:responsibility LC-3 CPUの全てのレジスタ（R0-R7, PC, IR）と条件コード、HALT状態を保持します。
@dataclass
class Lc3CpuState(CpuState):
    """
    LC-3 CPUのレジスタ状態を保持するデータクラス。
    メモリはBus側が保持するため、ここには含みません。
    """
    pc: int = 0x3000  # ユーザプログラムの慣例的な開始アドレス
    registers: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    ir: int = 0x0000
    cc: ConditionCode = ConditionCode.Z
    halted: bool = False

    # @intent:accessor 表示層やデバッガが名前でアクセスするための汎用レジスタのプロパティ。
    @property
    def r0(self) -> int: return self.registers[0]
    @property
    def r1(self) -> int: return self.registers[1]
    @property
    def r2(self) -> int: return self.registers[2]
    @property
    def r3(self) -> int: return self.registers[3]
    @property
    def r4(self) -> int: return self.registers[4]
    @property
    def r5(self) -> int: return self.registers[5]
    @property
    def r6(self) -> int: return self.registers[6]
    @property
    def r7(self) -> int: return self.registers[7]

    @property
    def flag_n(self) -> bool:
        return self.cc is ConditionCode.N

    @property
    def flag_z(self) -> bool:
        return self.cc is ConditionCode.Z

    @property
    def flag_p(self) -> bool:
        return self.cc is ConditionCode.P

    # @intent:responsibility 最後に書き込まれた値から条件コードを設定します。
    # @intent:pre-condition valueは書き込み直後の16bit値である必要があります（書き込み前の古い値ではない）。
    def set_cc(self, value: int) -> None:
        if value & 0xFFFF == 0:
            self.cc = ConditionCode.Z
        elif to_signed(value) < 0:
            self.cc = ConditionCode.N
        else:
            self.cc = ConditionCode.P

    # @intent:responsibility 値を16bitに切り詰めてレジスタに書き込み、その値から条件コードを設定します。
    def write_register(self, index: int, value: int, set_cc: bool = True) -> int:
        value &= 0xFFFF
        self.registers[index] = value
        if set_cc:
            self.set_cc(value)
        return value
