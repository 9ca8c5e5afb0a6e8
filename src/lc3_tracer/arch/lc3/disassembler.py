# src/lc3_tracer/arch/lc3/disassembler.py
"""
LC-3 逆アセンブラ。

バスのpeekのみを使用するため、アクティビティログやデバイス状態に影響しません。
"""
from typing import List, Optional, Tuple

from lc3_tracer.transport.bus import Bus
from lc3_tracer.common.types import SymbolMap
from lc3_tracer.arch.lc3.instructions import decode_instruction

# @intent:responsibility 1命令語を逆アセンブルします。addressは命令語が置かれているアドレスです。
def disassemble_word(ir: int, address: int) -> str:
    return decode_instruction(ir, (address + 1) & 0xFFFF).text()

# @intent:responsibility 指定範囲のメモリを逆アセンブルし、(address, hex_word, text) のリストを返します。
def disassemble(bus: Bus, start_addr: int, length: int,
                symbol_map: Optional[SymbolMap] = None) -> List[Tuple[int, str, str]]:
    labels = {addr: name for name, addr in (symbol_map or {}).items()}
    result = []
    for i in range(length):
        addr = (start_addr + i) & 0xFFFF
        ir = bus.peek(addr)
        text = disassemble_word(ir, addr)
        if addr in labels:
            text = f"{labels[addr]}: {text}"
        result.append((addr, f"{ir:04X}", text))
    return result
