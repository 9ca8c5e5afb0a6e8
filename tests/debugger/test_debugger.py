# tests/debugger/test_debugger.py
"""
lc3_tracer.debugger.debuggerモジュールの単体テスト。
Debuggerの実行制御、ブレークポイント管理、および履歴の巻き戻しを検証します。
"""
import pytest

from lc3_tracer.transport.bus import Bus, RAM
from lc3_tracer.arch.lc3.cpu import Lc3Cpu
from lc3_tracer.arch.lc3.devices import ScriptedConsole
from lc3_tracer.arch.lc3.state import MCR
from lc3_tracer.debugger.debugger import Debugger, BreakpointCondition, BreakpointConditionType, StopReason

# @intent:test_suite デバッガのブレークポイントと実行制御機能の検証。

COUNTER_PROGRAM = [
    0x1261,  # 0x3000: ADD R1, R1, #1
    0x3404,  # 0x3001: ST R2, x3006
    0x14A2,  # 0x3002: ADD R2, R2, #2
    0xB001,  # 0x3003: STI R0, x3005 -> MCR
    0x0000,  # 0x3004: NOP
    MCR,     # 0x3005: MCRPTR
    0x0000,  # 0x3006: DATA
]

class TestDebugger:
    @pytest.fixture
    def setup_debugger(self):
        bus = Bus()
        bus.register_device(0x0000, 0xFFFF, RAM(0x10000))
        for i, word in enumerate(COUNTER_PROGRAM):
            bus.load(0x3000 + i, word)
        cpu = Lc3Cpu(bus, ScriptedConsole())
        debugger = Debugger(cpu)
        return debugger, cpu, bus

    # @intent:test_case_add_remove_breakpoint ブレークポイントの追加と削除が正しく行われることを検証します。
    def test_add_remove_breakpoint(self, setup_debugger):
        debugger, _, _ = setup_debugger
        bp1 = BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x3002)
        bp2 = BreakpointCondition(BreakpointConditionType.MEMORY_WRITE, address=0x3005)
        debugger.add_breakpoint(bp1)
        debugger.add_breakpoint(bp2)
        debugger.add_breakpoint(bp1)
        assert debugger.get_breakpoints() == [bp1, bp2]

        bp3 = BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x3003)
        debugger.update_breakpoint(bp1, bp3)
        assert debugger.get_breakpoints() == [bp3, bp2]

        debugger.remove_breakpoint(bp3)
        debugger.remove_breakpoint(bp3)
        assert debugger.get_breakpoints() == [bp2]

    def test_run_until_halt(self, setup_debugger):
        debugger, cpu, bus = setup_debugger
        assert debugger.run() == StopReason.HALTED
        assert cpu.get_state().halted is True
        assert len(debugger.get_history()) == 4
        assert bus.peek(MCR) == 0

    def test_run_does_not_step_when_halted(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        cpu.get_state().halted = True
        assert debugger.run() == StopReason.HALTED
        assert debugger.get_history() == []

    def test_run_step_limit(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        assert debugger.run(max_steps=2) == StopReason.STEP_LIMIT
        assert cpu.get_state().pc == 0x3002

    def test_pc_breakpoint(self, setup_debugger, capsys):
        debugger, cpu, _ = setup_debugger
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x3002))
        assert debugger.run() == StopReason.BREAKPOINT
        assert cpu.get_state().pc == 0x3002
        assert "Breakpoint hit at PC: 0x3002" in capsys.readouterr().out

        # 停止位置のブレークポイントからは再開できる
        assert debugger.run() == StopReason.HALTED

    def test_disabled_breakpoint_ignored(self, setup_debugger):
        debugger, _, _ = setup_debugger
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x3002, enabled=False))
        assert debugger.run() == StopReason.HALTED

    def test_memory_write_breakpoint(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.MEMORY_WRITE, address=0x3006))
        assert debugger.run() == StopReason.BREAKPOINT
        assert cpu.get_state().pc == 0x3002

    def test_memory_read_breakpoint(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.MEMORY_READ, address=0x3005))
        assert debugger.run() == StopReason.BREAKPOINT
        assert cpu.get_state().halted is True

    def test_register_value_breakpoint(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        debugger.add_breakpoint(BreakpointCondition(
            BreakpointConditionType.REGISTER_VALUE, value=2, register_name="r2"))
        assert debugger.run() == StopReason.BREAKPOINT
        assert cpu.get_state().pc == 0x3003

    def test_register_change_breakpoint(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        debugger.add_breakpoint(BreakpointCondition(
            BreakpointConditionType.REGISTER_CHANGE, register_name="r1"))
        assert debugger.run() == StopReason.BREAKPOINT
        assert cpu.get_state().pc == 0x3001

    # @intent:test_case_step_back 巻き戻しでレジスタとメモリ書き込みが復元されることを検証します。
    def test_step_back(self, setup_debugger):
        debugger, cpu, bus = setup_debugger
        cpu.get_state().registers[2] = 0x0007
        debugger.step_instruction()
        debugger.step_instruction()
        assert bus.peek(0x3006) == 0x0007

        previous = debugger.step_back()
        assert previous is not None
        assert bus.peek(0x3006) == 0x0000
        assert cpu.get_state().pc == 0x3001
        assert cpu.get_state().registers[1] == 1

        assert debugger.step_back() is None
        assert cpu.get_state().pc == 0x3000
        assert cpu.get_state().registers[1] == 0
        assert debugger.step_back() is None

    def test_step_back_keeps_history_snapshots_intact(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        first = debugger.step_instruction()
        debugger.step_instruction()
        debugger.step_back()
        cpu.get_state().registers[1] = 0x00FF
        assert first.state.registers[1] == 1

    def test_run_back(self, setup_debugger, capsys):
        debugger, cpu, _ = setup_debugger
        debugger.run()
        assert debugger.run_back() == StopReason.STOPPED
        assert "Reached start of history." in capsys.readouterr().out
        assert cpu.get_state().pc == 0x3000
        assert cpu.get_state().halted is False

    # @intent:test_case_reverse_register_change 逆方向実行でのレジスタ変化判定が、戻った命令の直前状態と比較されることを検証します。
    def test_run_back_register_change_breakpoint(self, setup_debugger):
        debugger, cpu, _ = setup_debugger
        assert debugger.run() == StopReason.HALTED
        debugger.add_breakpoint(BreakpointCondition(
            BreakpointConditionType.REGISTER_CHANGE, register_name="r1"))
        assert debugger.run_back() == StopReason.BREAKPOINT
        # ADD R1, R1, #1 の実行直後で停止する
        assert cpu.get_state().pc == 0x3001
        assert cpu.get_state().registers[1] == 1
        assert len(debugger.get_history()) == 1
