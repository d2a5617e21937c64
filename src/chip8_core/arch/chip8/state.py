# src/chip8_core/arch/chip8/state.py
"""
CHIP-8 CPU固有の状態定義。
"""
import random
from dataclasses import dataclass, field
from typing import List

from chip8_core.core.state import CpuState
from chip8_core.arch.chip8.framebuffer import FrameBuffer
from chip8_core.arch.chip8.keypad import Keypad

# @intent:constant CHIP-8 のメモリ構成。
MEMORY_SIZE = 0x1000      # 4KB
PROGRAM_START = 0x200     # プログラムのエントリポイント
NUM_REGISTERS = 16
STACK_SIZE = 16
FLAG_REGISTER = 0xF       # VF: キャリー/ボロー/シフトアウト/衝突フラグ

# @intent:responsibility CHIP-8 CPUの全てのレジスタ、スタック、タイマー、画面、キー状態を保持します。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 CPUの状態を保持するデータクラス。

    メモリはBus上のRAMデバイスが保持し、ここには含まれません。
    `rng` はRND命令の乱数源です。状態と一緒に複製されるため、
    Debuggerで状態を巻き戻すと乱数列も巻き戻ります。
    """
    pc: int = PROGRAM_START
    sp: int = 0
    v: List[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)
    i: int = 0x0000
    stack: List[int] = field(default_factory=lambda: [0] * STACK_SIZE)
    delay_timer: int = 0
    sound_timer: int = 0
    beep: bool = False
    framebuffer: FrameBuffer = field(default_factory=FrameBuffer)
    keypad: Keypad = field(default_factory=Keypad)
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    # @intent:accessor フラグレジスタVFへのアクセスを提供します。
    @property
    def vf(self) -> int:
        return self.v[FLAG_REGISTER]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[FLAG_REGISTER] = value & 0xFF
