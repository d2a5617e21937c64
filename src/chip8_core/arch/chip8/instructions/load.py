# src/chip8_core/arch/chip8/instructions/load.py
"""
転送命令（レジスタ、インデックスレジスタ、メモリブロック）の実装。

メモリへ複数バイトを書き込む命令は、書き込み前に範囲全体を検査します。
範囲外であればOutOfBoundsAddressErrorを送出し、メモリもレジスタも変更しません。
"""
from chip8_core.transport.bus import Bus
from chip8_core.arch.chip8.state import Chip8CpuState
from chip8_core.arch.chip8.font import glyph_address
from .base import Chip8Operation, read_operands

# --- Registers ---
# @intent:responsibility LD Vx, kk 命令を実行します。
def execute_ld_vx_byte(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    state.v[op.fields.f2] = op.fields.kk

# @intent:responsibility LD Vx, Vy 命令を実行します。
def execute_ld_vx_vy(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    _, y = read_operands(state, op.fields)
    state.v[op.fields.f2] = y

# --- Index register ---
# @intent:responsibility LD I, nnn 命令を実行します。
def execute_ld_i(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    state.i = op.fields.nnn

# @intent:responsibility ADD I, Vx 命令を実行します。Iは16ビットでラップします。
def execute_add_i_vx(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    x, _ = read_operands(state, op.fields)
    state.i = (state.i + x) & 0xFFFF

# @intent:responsibility LD F, Vx 命令を実行し、Vx * 5（Vxが示す数字グリフの先頭アドレス）をIに設定します。
def execute_ld_f_vx(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    x, _ = read_operands(state, op.fields)
    state.i = glyph_address(x) & 0xFFFF

# --- Memory ---
# @intent:responsibility LD B, Vx 命令を実行し、Vxの10進3桁をI, I+1, I+2へ書き込みます。
def execute_bcd(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    x, _ = read_operands(state, op.fields)
    bus.check_range(state.i, 3)
    bus.write(state.i, x // 100)
    bus.write(state.i + 1, (x // 10) % 10)
    bus.write(state.i + 2, x % 10)

# @intent:responsibility LD [I], Vx 命令を実行し、V0〜Vx（両端含む）をIから連続して書き込みます。
# @intent:post-condition I は x+1 だけ進みます。
def execute_store(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    count = op.fields.f2 + 1
    bus.check_range(state.i, count)
    for idx in range(count):
        bus.write(state.i + idx, state.v[idx])
    state.i = (state.i + count) & 0xFFFF

# @intent:responsibility LD Vx, [I] 命令を実行し、Iから連続してV0〜Vx（両端含む）へ読み込みます。
# @intent:post-condition I は x+1 だけ進みます。
def execute_load(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    count = op.fields.f2 + 1
    bus.check_range(state.i, count)
    values = [bus.read(state.i + idx) for idx in range(count)]
    state.v[:count] = values
    state.i = (state.i + count) & 0xFFFF
