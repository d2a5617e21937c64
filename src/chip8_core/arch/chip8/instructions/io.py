# src/chip8_core/arch/chip8/instructions/io.py
"""
入力とタイマーに関する命令の実装。
"""
from chip8_core.transport.bus import Bus
from chip8_core.arch.chip8.state import Chip8CpuState
from .base import Chip8Operation, read_operands, skip_next

# --- Keypad ---
# @intent:responsibility SKP Vx 命令を実行します。Vxが [0, 16) 外ならInvalidKeyIndexError。
def execute_skp(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    x, _ = read_operands(state, op.fields)
    if state.keypad.is_pressed(x):
        skip_next(state)

# @intent:responsibility SKNP Vx 命令を実行します。Vxが [0, 16) 外ならInvalidKeyIndexError。
def execute_sknp(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    x, _ = read_operands(state, op.fields)
    if not state.keypad.is_pressed(x):
        skip_next(state)

# @intent:responsibility LD Vx, K 命令を実行し、押下中の最小番号のキーをVxへ格納します。
# @intent:rationale 押されたキーがない場合はPCを2戻し、次のstep()で同じ命令を再フェッチさせます（ビジーウェイト）。
#                  待機中もホストの実行ループとタイマー駆動は通常通り継続します。
def execute_ld_vx_k(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    key = state.keypad.first_pressed()
    if key is None:
        state.pc = (state.pc - 2) & 0xFFFF
        return
    state.v[op.fields.f2] = key

# --- Timers ---
def execute_ld_vx_dt(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    state.v[op.fields.f2] = state.delay_timer

def execute_ld_dt_vx(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    x, _ = read_operands(state, op.fields)
    state.delay_timer = x

def execute_ld_st_vx(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    x, _ = read_operands(state, op.fields)
    state.sound_timer = x
