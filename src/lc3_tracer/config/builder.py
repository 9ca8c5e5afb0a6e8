from typing import List, Optional, Tuple
from lc3_tracer.transport.bus import Bus, RAM, ROM
from lc3_tracer.arch.lc3.cpu import Lc3Cpu
from lc3_tracer.arch.lc3.devices import Console
from lc3_tracer.arch.lc3.state import ConditionCode, REGISTER_COUNT
from .models import SystemConfig, CpuInitialState, MemoryRegion

ADDRESS_SPACE_END = 0xFFFF

# @intent:responsibility システム構成（Config）に基づいて、Bus、Device、CPUを生成・接続し、初期状態を適用します。
class SystemBuilder:
    def build_system(self, config: SystemConfig, console: Optional[Console] = None) -> Tuple[Lc3Cpu, Bus]:
        if config.architecture.upper().replace("-", "") != "LC3":
            raise ValueError(f"Unsupported architecture: {config.architecture}")

        bus = Bus()

        for region in config.memory_map:
            size = region.end - region.start + 1
            if region.type == "ROM" or (region.type == "RAM" and region.permissions == "RO"):
                device = ROM(size)
            elif region.type == "RAM":
                device = RAM(size)
            else:
                print(f"Warning: Unknown device type '{region.type}' for range {region.start:04X}-{region.end:04X}, defaulting to RAM")
                device = RAM(size)
            bus.register_device(region.start, region.end, device)

        # メモリマップで覆われていない範囲はRAMで埋め、64Kワード全域を常に読み書き可能にする
        for start, end in self._unmapped_ranges(config.memory_map):
            if config.memory_map:
                print(f"Warning: Unmapped range {start:04X}-{end:04X}, filling with RAM")
            bus.register_device(start, end, RAM(end - start + 1))

        for address, value in config.memory.items():
            bus.load(address, value)

        cpu = Lc3Cpu(bus, console)
        self.apply_initial_state(cpu, config.initial_state)
        return cpu, bus

    # @intent:responsibility 0x0000-0xFFFFのうち、どのリージョンにも含まれない連続範囲を列挙します。
    def _unmapped_ranges(self, regions: List[MemoryRegion]) -> List[Tuple[int, int]]:
        gaps = []
        next_free = 0
        for region in sorted(regions, key=lambda r: r.start):
            if region.start > next_free:
                gaps.append((next_free, region.start - 1))
            next_free = max(next_free, region.end + 1)
        if next_free <= ADDRESS_SPACE_END:
            gaps.append((next_free, ADDRESS_SPACE_END))
        return gaps

    # @intent:responsibility Configで定義された初期状態をCPUに適用します。
    def apply_initial_state(self, cpu: Lc3Cpu, config_state: CpuInitialState) -> None:
        """
        CPUをリセットし、Configから指定された初期値を適用します。
        レジスタ名は "r0" から "r7" を受け付けます。
        """
        cpu.reset()
        state = cpu.get_state()
        state.pc = config_state.pc & 0xFFFF
        state.cc = ConditionCode(config_state.cc)
        for reg_name, value in config_state.registers.items():
            index = self._register_index(reg_name)
            state.registers[index] = value & 0xFFFF

    def _register_index(self, name: str) -> int:
        if len(name) == 2 and name[0] == "r" and name[1].isdigit():
            index = int(name[1])
            if index < REGISTER_COUNT:
                return index
        raise ValueError(f"Unknown register: {name}")
