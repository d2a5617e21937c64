import logging
from typing import Tuple

from chip8_core.transport.bus import Bus, RAM
from chip8_core.arch.chip8.cpu import Chip8Cpu
from chip8_core.arch.chip8.state import MEMORY_SIZE, STACK_SIZE
from .models import SystemConfig, CpuInitialState, MemoryRegion
from .loader import ConfigLoader

logger = logging.getLogger(__name__)

SUPPORTED_ARCHITECTURES = ("CHIP8", "CHIP-8")

# @intent:responsibility システム構成（Config）に基づいて、Bus、Device、CPUを生成・接続し、初期状態を適用します。
class SystemBuilder:
    def build_system(self, config: SystemConfig) -> Tuple[Chip8Cpu, Bus]:
        if config.architecture.upper() not in SUPPORTED_ARCHITECTURES:
            raise ValueError(f"Unsupported architecture: {config.architecture}")

        regions = config.memory_map or [MemoryRegion(0x000, MEMORY_SIZE - 1, "RAM", "Main RAM")]
        self._check_coverage(regions)

        bus = Bus()
        for region in regions:
            size = region.end - region.start + 1
            if region.type != "RAM":
                logger.warning(
                    "Unknown device type '%s' for range %03X-%03X, defaulting to RAM",
                    region.type, region.start, region.end,
                )
            bus.register_device(region.start, region.end, RAM(size))

        cpu = Chip8Cpu(bus, rng_seed=config.rng_seed)

        # 初期状態の適用
        self.apply_initial_state(cpu, config.initial_state)

        return cpu, bus

    # @intent:responsibility メモリマップが 0x000〜0xFFF を重複も隙間もなく覆っていることを検査します。
    # @intent:rationale フォントとプログラム領域の配置はアドレス空間全体がマップされていることを前提とします。
    def _check_coverage(self, regions) -> None:
        expected = 0
        for region in sorted(regions, key=lambda r: r.start):
            if region.start != expected or region.end < region.start:
                raise ValueError(
                    f"Memory map must cover 0x000-0x{MEMORY_SIZE - 1:03X} contiguously; "
                    f"region {region.start:03X}-{region.end:03X} breaks it."
                )
            expected = region.end + 1
        if expected != MEMORY_SIZE:
            raise ValueError(f"Memory map must cover 0x000-0x{MEMORY_SIZE - 1:03X}; it ends at {expected - 1:03X}.")

    # @intent:responsibility Configで定義された初期状態をCPUに適用します。
    # @intent:pre-condition 値は各レジスタの幅に収まること。範囲外の値はValueErrorとします。
    def apply_initial_state(self, cpu: Chip8Cpu, config_state: CpuInitialState) -> None:
        """
        Configから指定された初期値を適用します。未知のレジスタ名と範囲外の値はValueErrorとします。
        """
        state = cpu.get_state()
        state.pc = _check_range("pc", config_state.pc, 0xFFFF)
        for reg_name, value in config_state.registers.items():
            if reg_name in ("v", "stack"):
                target = getattr(state, reg_name)
                if len(value) > len(target):
                    raise ValueError(f"Too many values for '{reg_name}': {len(value)}")
                limit = 0xFFFF if reg_name == "stack" else 0xFF
                target[:len(value)] = [_check_range(reg_name, v, limit) for v in value]
            elif len(reg_name) == 2 and reg_name[0] in "vV" and reg_name[1] in "0123456789abcdefABCDEF":
                state.v[int(reg_name[1], 16)] = _check_range(reg_name, value, 0xFF)
            elif reg_name in REGISTER_LIMITS:
                setattr(state, reg_name, _check_range(reg_name, value, REGISTER_LIMITS[reg_name]))
            else:
                raise ValueError(f"Unknown register in initial_state: {reg_name}")

# @intent:constant 単一値で指定できるレジスタとその上限値。spはスタック段数 [0, 16]。
REGISTER_LIMITS = {
    "i": 0xFFFF,
    "sp": STACK_SIZE,
    "delay_timer": 0xFF,
    "sound_timer": 0xFF,
}

# @intent:utility_function 値が [0, limit] に収まることを検査して返します。
def _check_range(name: str, value: int, limit: int) -> int:
    if not 0 <= value <= limit:
        raise ValueError(f"Value {value} for '{name}' is outside [0, {limit:#x}].")
    return value

# @intent:responsibility YAMLファイルから構成を読み込み、システムを構築します。
def build_from_file(path: str) -> Tuple[Chip8Cpu, Bus]:
    return SystemBuilder().build_system(ConfigLoader().load_from_file(path))
