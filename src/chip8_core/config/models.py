from dataclasses import dataclass, field
from typing import List, Optional

@dataclass
class MemoryRegion:
    start: int
    end: int
    type: str = "RAM"  # 現状 "RAM" のみ
    label: str = ""

@dataclass
class CpuInitialState:
    pc: int = 0x200
    registers: dict = field(default_factory=dict)  # 例: {"i": 0x300, "v": [...], "delay_timer": 10}

@dataclass
class SystemConfig:
    architecture: str = "CHIP8"
    memory_map: List[MemoryRegion] = field(default_factory=list)  # 空の場合は 0x000-0xFFF のRAM 1つ
    initial_state: CpuInitialState = field(default_factory=CpuInitialState)
    rng_seed: Optional[int] = None
