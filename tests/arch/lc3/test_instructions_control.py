# tests/arch/lc3/test_instructions_control.py
"""
LC-3 制御命令（BR, JMP/RET, JSR/JSRR, TRAP）と未使用オペコードの単体テスト。
"""
import copy
import unittest
from lc3_tracer.transport.bus import Bus, RAM
from lc3_tracer.arch.lc3.cpu import Lc3Cpu
from lc3_tracer.arch.lc3.devices import ScriptedConsole
from lc3_tracer.arch.lc3.state import ConditionCode, KBSR, DSR

class TestLc3ControlInstructions(unittest.TestCase):
    def setUp(self):
        self.bus = Bus()
        self.bus.register_device(0x0000, 0xFFFF, RAM(0x10000))
        self.console = ScriptedConsole()
        self.cpu = Lc3Cpu(self.bus, self.console)
        self.state = self.cpu.get_state()

    def _execute(self, ir):
        self.state.pc = 0x3000
        self.bus.load(0x3000, ir)
        return self.cpu.step()

    def test_br_positive_not_taken_when_negative(self):
        self.state.cc = ConditionCode.N
        # BRp #5
        self._execute(0x0205)
        self.assertEqual(self.state.pc, 0x3001)

    def test_br_positive_taken(self):
        self.state.cc = ConditionCode.P
        self._execute(0x0205)
        self.assertEqual(self.state.pc, 0x3006)

    def test_br_nz_backward(self):
        self.state.cc = ConditionCode.Z
        # BRnz #-1
        self._execute(0x0DFF)
        self.assertEqual(self.state.pc, 0x3000)

    def test_br_always(self):
        for cc in ConditionCode:
            self.state.cc = cc
            # BRnzp #3
            self._execute(0x0E03)
            self.assertEqual(self.state.pc, 0x3004)
            self.assertEqual(self.state.cc, cc)

    def test_br_without_condition_bits_is_nop(self):
        snapshot = self._execute(0x0000)
        self.assertEqual(self.state.pc, 0x3001)
        self.assertEqual(snapshot.operation.mnemonic, "NOP")

    def test_jmp(self):
        self.state.registers[2] = 0x4000
        # JMP R2
        self._execute(0xC080)
        self.assertEqual(self.state.pc, 0x4000)

    def test_ret(self):
        self.state.registers[7] = 0x3456
        snapshot = self._execute(0xC1C0)
        self.assertEqual(self.state.pc, 0x3456)
        self.assertEqual(snapshot.operation.mnemonic, "RET")

    def test_jsr_pc_relative(self):
        # JSR #16
        self._execute(0x4810)
        self.assertEqual(self.state.registers[7], 0x3001)
        self.assertEqual(self.state.pc, 0x3011)

    def test_jsr_negative_eleven_bit_offset(self):
        # JSR #-1
        self._execute(0x4FFF)
        self.assertEqual(self.state.registers[7], 0x3001)
        self.assertEqual(self.state.pc, 0x3000)

    def test_jsrr(self):
        self.state.registers[3] = 0x5000
        # JSRR R3
        self._execute(0x40C0)
        self.assertEqual(self.state.registers[7], 0x3001)
        self.assertEqual(self.state.pc, 0x5000)

    def test_jsrr_r7_uses_saved_return_address(self):
        self.state.registers[7] = 0x5000
        # JSRR R7
        self._execute(0x41C0)
        self.assertEqual(self.state.registers[7], 0x3001)
        self.assertEqual(self.state.pc, 0x3001)

    def test_trap_uses_vector_table(self):
        self.bus.load(0x0025, 0x0400)
        self.state.cc = ConditionCode.N
        # TRAP x25
        self._execute(0xF025)
        self.assertEqual(self.state.registers[7], 0x3001)
        self.assertEqual(self.state.pc, 0x0400)
        self.assertEqual(self.state.cc, ConditionCode.N)

    def test_unused_opcodes_only_touch_pc_ir_and_status(self):
        for ir in (0x8000, 0xD123):
            self.state.pc = 0x3000
            self.bus.load(0x3000, ir)
            self.state.registers[:] = [1, 2, 3, 4, 5, 6, 7, 8]
            self.state.cc = ConditionCode.P
            before = copy.deepcopy(self.state)
            memory_before = [self.bus.peek(a) for a in range(0x10000)]

            self.cpu.step()

            self.assertEqual(self.state.pc, 0x3001)
            self.assertEqual(self.state.ir, ir)
            self.assertEqual(self.state.registers, before.registers)
            self.assertEqual(self.state.cc, before.cc)
            self.assertEqual(self.state.halted, before.halted)
            memory_after = [self.bus.peek(a) for a in range(0x10000)]
            changed = [a for a in range(0x10000) if memory_before[a] != memory_after[a]]
            self.assertTrue(set(changed) <= {KBSR, DSR})
            self.assertEqual(self.bus.peek(KBSR), 0x8000)
            self.assertEqual(self.bus.peek(DSR), 0x8000)

if __name__ == '__main__':
    unittest.main()
