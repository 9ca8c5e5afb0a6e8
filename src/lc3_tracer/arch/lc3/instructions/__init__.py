"""
LC-3命令セット実装パッケージ。

fetch -> decode -> execute -> I/O整合 の1命令サイクルを、明示的に渡された状態に対して実行します。
"""
from lc3_tracer.transport.bus import Bus
from lc3_tracer.core.snapshot import Operation
from lc3_tracer.arch.lc3.state import Lc3CpuState
from lc3_tracer.arch.lc3.devices import Console, reconcile_io
from .base import Opcode, opcode_of, sign_extend
from .maps import DECODE_MAP, EXECUTE_MAP

# @intent:responsibility PCの指す命令語を読み込み、IRに格納します。PCは変更しません。
def fetch_instruction(state: Lc3CpuState, bus: Bus) -> int:
    state.ir = bus.read(state.pc)
    return state.ir

# @intent:responsibility 命令語をデコードします。
# @intent:pre-condition pcはフェッチ後（インクリメント済み）のPCである必要があります。
def decode_instruction(ir: int, pc: int) -> Operation:
    """
    LC-3の命令語をデコードし、デコード済み命令レコードを保持するOperationを返します。
    4bitオペコードの全パターンがDECODE_MAPに登録されているため、失敗しません。
    """
    return DECODE_MAP[Opcode(opcode_of(ir))](ir & 0xFFFF, pc & 0xFFFF)

# @intent:responsibility デコードされたLC-3命令を実行します。
def execute_instruction(operation: Operation, state: Lc3CpuState, bus: Bus, console: Console) -> None:
    executor = EXECUTE_MAP.get(type(operation.instruction))
    if executor:
        executor(state, bus, operation, console)

# @intent:responsibility 状態を1命令分進めます。
# @intent:flow フェッチ -> PC更新 -> デコード -> 実行 -> I/O整合 の順序で処理を行います。
def step(state: Lc3CpuState, bus: Bus, console: Console) -> Operation:
    ir = fetch_instruction(state, bus)
    state.pc = (state.pc + 1) & 0xFFFF
    operation = decode_instruction(ir, state.pc)
    execute_instruction(operation, state, bus, console)
    reconcile_io(bus, console)
    return operation

__all__ = [
    "Opcode", "sign_extend", "fetch_instruction", "decode_instruction",
    "execute_instruction", "step",
]
