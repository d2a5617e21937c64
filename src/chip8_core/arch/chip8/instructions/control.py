# src/chip8_core/arch/chip8/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ）の実装。
"""
from chip8_core.transport.bus import Bus
from chip8_core.common.errors import StackOverflowError, StackUnderflowError
from chip8_core.arch.chip8.state import Chip8CpuState, STACK_SIZE
from .base import Chip8Operation, read_operands, skip_next, describe_location

# --- NOP ---
# @intent:responsibility NOP命令を実行します（何もしません）。
def execute_nop(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    # Intentional: NOP (No Operation)
    pass

# --- Subroutine ---
# @intent:responsibility CALL命令を実行し、戻りアドレスをスタックにプッシュしてからジャンプします。
# @intent:pre-condition sp < 16。満杯の場合はStackOverflowErrorを送出し、状態は変更しません。
def execute_call(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    if state.sp >= STACK_SIZE:
        raise StackOverflowError(f"Call stack overflow (depth {STACK_SIZE}){describe_location(op)}.")
    # state.pc は step() 内のフェッチで既に次の命令を指している
    state.stack[state.sp] = state.pc
    state.sp += 1
    state.pc = op.fields.nnn

# @intent:responsibility RET命令を実行し、スタックから戻りアドレスをポップしてPCに設定します。
# @intent:pre-condition sp > 0。空の場合はStackUnderflowErrorを送出します。
def execute_ret(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    if state.sp <= 0:
        raise StackUnderflowError(f"Return with empty call stack{describe_location(op)}.")
    state.sp -= 1
    state.pc = state.stack[state.sp]

# --- Jumps ---
# @intent:responsibility JP nnn 命令を実行します。
def execute_jp(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    state.pc = op.fields.nnn

# @intent:responsibility JP V0, nnn 命令を実行します。
def execute_jp_v0(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    state.pc = (state.v[0] + op.fields.nnn) & 0xFFFF

# --- Conditional skips ---
def execute_se_vx_byte(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    x, _ = read_operands(state, op.fields)
    if x == op.fields.kk:
        skip_next(state)

def execute_sne_vx_byte(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    x, _ = read_operands(state, op.fields)
    if x != op.fields.kk:
        skip_next(state)

def execute_se_vx_vy(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    x, y = read_operands(state, op.fields)
    if x == y:
        skip_next(state)

def execute_sne_vx_vy(state: Chip8CpuState, bus: Bus, op: Chip8Operation) -> None:
    x, y = read_operands(state, op.fields)
    if x != y:
        skip_next(state)
