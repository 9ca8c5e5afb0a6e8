# tests/arch/lc3/test_disassembler.py
"""
LC-3 逆アセンブラの単体テスト。
"""
import pytest

from lc3_tracer.transport.bus import Bus, RAM
from lc3_tracer.arch.lc3.cpu import Lc3Cpu
from lc3_tracer.arch.lc3.disassembler import disassemble, disassemble_word

# @intent:test_suite 命令語からアセンブリ表記への変換を検証します。

class TestDisassembleWord:
    @pytest.mark.parametrize("ir, text", [
        (0x103F, "ADD R0, R0, #-1"),
        (0x1642, "ADD R3, R1, R2"),
        (0x5070, "AND R0, R1, #-16"),
        (0x997F, "NOT R4, R5"),
        (0xE207, "LEA R1, x3008"),
        (0x2405, "LD R2, x3006"),
        (0x673F, "LDR R3, R4, #-1"),
        (0xA001, "LDI R0, x3002"),
        (0x3202, "ST R1, x3003"),
        (0x74C3, "STR R2, R3, #3"),
        (0xB001, "STI R0, x3002"),
        (0x0DFF, "BRnz x3000"),
        (0x0E03, "BRnzp x3004"),
        (0x0000, "NOP"),
        (0xC080, "JMP R2"),
        (0xC1C0, "RET"),
        (0x4810, "JSR x3011"),
        (0x40C0, "JSRR R3"),
        (0xF025, "HALT"),
        (0xF020, "GETC"),
        (0xF0AA, "TRAP xAA"),
        (0x8000, "RTI"),
        (0xD000, "RESERVED"),
    ])
    def test_text(self, ir, text):
        assert disassemble_word(ir, 0x3000) == text

class TestDisassemble:
    @pytest.fixture
    def bus(self):
        bus = Bus()
        bus.register_device(0x0000, 0xFFFF, RAM(0x10000))
        bus.load(0x3000, 0x103F)
        bus.load(0x3001, 0xF025)
        return bus

    def test_range(self, bus):
        result = disassemble(bus, 0x3000, 2)
        assert result == [
            (0x3000, "103F", "ADD R0, R0, #-1"),
            (0x3001, "F025", "HALT"),
        ]
        assert bus.get_and_clear_activity_log() == []

    def test_labels(self, bus):
        result = disassemble(bus, 0x3000, 1, {"main": 0x3000})
        assert result[0][2] == "main: ADD R0, R0, #-1"

    def test_cpu_disassemble_uses_symbol_map(self, bus):
        cpu = Lc3Cpu(bus)
        cpu.set_symbol_map({"done": 0x3001})
        result = cpu.disassemble(0x3000, 2)
        assert result[1] == (0x3001, "F025", "done: HALT")
