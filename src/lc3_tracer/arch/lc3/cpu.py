# src/lc3_tracer/arch/lc3/cpu.py
"""
LC-3 CPUエミュレーションの中心モジュール。
"""
from typing import Dict, List, Optional, Tuple

from lc3_tracer.core.snapshot import Operation
from lc3_tracer.common.types import RegisterLayoutInfo, RegisterInfo
from lc3_tracer.core.cpu import AbstractCpu
from lc3_tracer.transport.bus import Bus
from lc3_tracer.arch.lc3.state import Lc3CpuState
from lc3_tracer.arch.lc3.devices import Console, ScriptedConsole, reconcile_io
from lc3_tracer.arch.lc3.instructions import fetch_instruction, decode_instruction, execute_instruction
from lc3_tracer.arch.lc3 import disassembler

# @intent:responsibility LC-3 CPUの具体的なエミュレーションロジック（フェッチ、デコード、実行、I/O整合）を提供します。
class Lc3Cpu(AbstractCpu):
    """
    LC-3 CPUをエミュレートするクラス。
    HALT状態になってもstep()は命令を実行し続けます。停止判断は呼び出し側（デバッガなど）の責務です。
    """
    def __init__(self, bus: Bus, console: Optional[Console] = None):
        super().__init__(bus)
        self._console = console if console is not None else ScriptedConsole()

    # @intent:responsibility I/Oはメモリマップドのため、独立したI/O空間は持ちません。
    @property
    def has_io_port(self) -> bool:
        return False

    @property
    def console(self) -> Console:
        return self._console

    def _create_initial_state(self) -> Lc3CpuState:
        return Lc3CpuState()

    # @intent:responsibility PCの指す命令語をIRにフェッチします。PCの更新は_update_pcで行います。
    def _fetch(self) -> int:
        return fetch_instruction(self._state, self._bus)

    # @intent:rationale PC相対アドレスの表示にはフェッチ後のPCを用います。
    def _decode(self, opcode: int) -> Operation:
        return decode_instruction(opcode, (self._state.pc + 1) & 0xFFFF)

    def _execute(self, operation: Operation) -> None:
        execute_instruction(operation, self._state, self._bus, self._console)

    # @intent:responsibility 命令ごとのメモリマップドI/O整合処理（DDR排出、ステータスReady化）を行います。
    def _post_execute(self, operation: Operation) -> None:
        reconcile_io(self._bus, self._console)

    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"R{i}": value for i, value in enumerate(s.registers)}
        registers.update({"PC": s.pc, "IR": s.ir})
        return registers

    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [RegisterInfo(f"R{i}", 16) for i in range(8)]),
            RegisterLayoutInfo("Control", [RegisterInfo("PC", 16), RegisterInfo("IR", 16)]),
        ]

    def get_flag_state(self) -> Dict[str, bool]:
        s = self._state
        return {"N": s.flag_n, "Z": s.flag_z, "P": s.flag_p}

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(self._bus, start_addr, length, self._symbol_map)
