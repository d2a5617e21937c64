# src/chip8_core/arch/chip8/timers.py
"""
遅延タイマーとサウンドタイマー。

命令実行とは独立に、ホストが一定周期（通常60Hz）で advance_timers を呼び出します。
"""
from chip8_core.arch.chip8.state import Chip8CpuState

# @intent:responsibility 両タイマーを1ティック進め、ビープ信号を更新します。
# @intent:post-condition タイマーは0で飽和します。beepは減算前のsound_timerが正だった場合にTrueになります。
def advance_timers(state: Chip8CpuState) -> None:
    if state.delay_timer > 0:
        state.delay_timer -= 1

    if state.sound_timer > 0:
        state.sound_timer -= 1
        state.beep = True
    else:
        state.beep = False
