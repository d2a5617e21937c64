# src/chip8_core/arch/chip8/instructions/display.py
"""
画面命令（CLS, DRW）の実装。
"""
from chip8_core.transport.bus import Bus
from chip8_core.arch.chip8.state import Chip8CpuState
from .base import Chip8Operation, read_operands

SPRITE_WIDTH = 8

# @intent:responsibility CLS命令を実行し、画面を全消去します。
def execute_cls(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    state.framebuffer.clear()

# @intent:responsibility DRW Vx, Vy, n 命令を実行し、I から n バイトのスプライトをXOR描画します。
# @intent:post-condition 点灯していたピクセルが1つでも消灯した場合VF=1、それ以外はVF=0。
#                       スプライト範囲が不正な場合はピクセルを1つも変更せずに例外を送出します。
def execute_drw(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    x, y = read_operands(state, op.fields)
    height = op.fields.n
    bus.check_range(state.i, height)
    rows = [bus.read(state.i + row) for row in range(height)]

    fb = state.framebuffer
    collision = False
    for row, bits in enumerate(rows):
        for col in range(SPRITE_WIDTH):
            if bits & (0x80 >> col):
                collision |= fb.toggle(x + col, y + row)

    state.vf = 1 if collision else 0
