from dataclasses import dataclass, field
from typing import Dict, List

@dataclass
class MemoryRegion:
    start: int
    end: int
    type: str  # "RAM", "ROM"
    label: str = ""
    permissions: str = "RW"  # "RW", "RO"（RAMでROを指定するとROMとして構築）

@dataclass
class CpuInitialState:
    pc: int = 0x3000
    cc: str = "Z"
    registers: Dict[str, int] = field(default_factory=dict)

@dataclass
class SystemConfig:
    architecture: str = "LC3"
    memory_map: List[MemoryRegion] = field(default_factory=list)
    initial_state: CpuInitialState = field(default_factory=CpuInitialState)
    memory: Dict[int, int] = field(default_factory=dict)  # アドレス -> 初期ワード値
