# tests/arch/lc3/test_devices.py
"""
コンソールデバイスとメモリマップドI/O整合処理の単体テスト。
"""
import io
import pytest

from lc3_tracer.transport.bus import Bus, RAM
from lc3_tracer.arch.lc3.devices import ScriptedConsole, StreamConsole, reconcile_io
from lc3_tracer.arch.lc3.state import KBSR, DSR, DDR

# @intent:test_suite コンソールの入出力とDDR排出、ステータスレジスタのReady化を検証します。

@pytest.fixture
def bus():
    bus = Bus()
    bus.register_device(0x0000, 0xFFFF, RAM(0x10000))
    return bus

class TestScriptedConsole:
    def test_read_in_order(self):
        console = ScriptedConsole("ab")
        assert console.read_char() == ord("a")
        assert console.read_char() == ord("b")
        assert console.pending_input == 0

    def test_feed_integers(self):
        console = ScriptedConsole([0x0A, 0x41])
        assert console.read_char() == 0x0A
        assert console.read_char() == 0x41

    def test_feed_masks_string_and_integers(self):
        console = ScriptedConsole("\U0001F600")
        console.feed([0x1F600])
        assert console.read_char() == 0xF600
        assert console.read_char() == 0xF600

    def test_exhausted_input_raises(self):
        console = ScriptedConsole()
        with pytest.raises(EOFError):
            console.read_char()

    def test_output_collected(self):
        console = ScriptedConsole()
        console.write_char(ord("o"))
        console.write_char(ord("k"))
        assert console.output == [ord("o"), ord("k")]
        assert console.output_text() == "ok"

class TestStreamConsole:
    def test_stream_read_write(self):
        out = io.StringIO()
        console = StreamConsole(io.StringIO("q"), out)
        assert console.read_char() == ord("q")
        assert console.read_char() == 0
        console.write_char(ord("!"))
        assert out.getvalue() == "!"

class TestReconcileIo:
    def test_ddr_drained(self, bus):
        console = ScriptedConsole()
        bus.load(DDR, 0x0041)
        reconcile_io(bus, console)
        assert console.output_text() == "A"
        assert bus.peek(DDR) == 0

    def test_zero_ddr_not_emitted(self, bus):
        console = ScriptedConsole()
        reconcile_io(bus, console)
        assert console.output == []

    def test_status_registers_ready(self, bus):
        reconcile_io(bus, ScriptedConsole())
        assert bus.peek(KBSR) == 0x8000
        assert bus.peek(DSR) == 0x8000

    def test_reconcile_is_not_logged(self, bus):
        bus.load(DDR, 0x0041)
        reconcile_io(bus, ScriptedConsole())
        assert bus.get_and_clear_activity_log() == []
