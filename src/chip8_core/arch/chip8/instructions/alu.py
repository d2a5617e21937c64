# src/chip8_core/arch/chip8/instructions/alu.py
"""
算術論理演算命令の実装。

全ての8ビット演算は256を法としてラップします。フラグを伴う命令は結果を
V[x]に書き込んだ後にVFへフラグを書き込むため、x が F の場合はフラグが残ります。
"""
from chip8_core.transport.bus import Bus
from chip8_core.arch.chip8.state import Chip8CpuState
from .base import Chip8Operation, read_operands

# --- Immediate ---
# @intent:responsibility ADD Vx, kk 命令を実行します。VFは変化しません。
def execute_add_vx_byte(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    x, _ = read_operands(state, op.fields)
    state.v[op.fields.f2] = (x + op.fields.kk) & 0xFF

# --- Logic ---
def execute_or(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    x, y = read_operands(state, op.fields)
    state.v[op.fields.f2] = x | y

def execute_and(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    x, y = read_operands(state, op.fields)
    state.v[op.fields.f2] = x & y

def execute_xor(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    x, y = read_operands(state, op.fields)
    state.v[op.fields.f2] = x ^ y

# --- Arithmetic ---
# @intent:responsibility ADD Vx, Vy 命令を実行し、キャリーをVFに設定します。
def execute_add_vx_vy(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    x, y = read_operands(state, op.fields)
    res = x + y
    state.v[op.fields.f2] = res & 0xFF
    state.vf = 1 if res > 0xFF else 0

# @intent:responsibility SUB Vx, Vy 命令を実行します。ボローが発生しなければVF=1。
def execute_sub(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    x, y = read_operands(state, op.fields)
    state.v[op.fields.f2] = (x - y) & 0xFF
    state.vf = 0 if x < y else 1

# @intent:responsibility SUBN Vx, Vy 命令（y - x）を実行します。ボローが発生しなければVF=1。
def execute_subn(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    x, y = read_operands(state, op.fields)
    state.v[op.fields.f2] = (y - x) & 0xFF
    state.vf = 0 if y < x else 1

# --- Shifts ---
# @intent:responsibility SHR Vx 命令を実行し、押し出された最下位ビットをVFに設定します。
def execute_shr(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    x, _ = read_operands(state, op.fields)
    state.v[op.fields.f2] = x >> 1
    state.vf = x & 0x01

# @intent:responsibility SHL Vx 命令を実行し、押し出された最上位ビットをVFに設定します。
def execute_shl(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    x, _ = read_operands(state, op.fields)
    state.v[op.fields.f2] = (x << 1) & 0xFF
    state.vf = (x >> 7) & 0x01

# --- Random ---
# @intent:responsibility RND Vx, kk 命令を実行します。乱数源は状態が保持するrngです。
def execute_rnd(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    state.v[op.fields.f2] = state.rng.randrange(256) & op.fields.kk
