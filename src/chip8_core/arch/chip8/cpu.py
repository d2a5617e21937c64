# src/chip8_core/arch/chip8/cpu.py
"""
CHIP-8 CPUエミュレーションの中心モジュール。

このモジュールはCHIP-8 CPUの具体的な実装を提供し、
AbstractCpuインターフェースを実装します。ホストは step() を任意の頻度で、
advance_timers() を60Hzで、それぞれ独立に呼び出します。
"""
import logging
import random
from typing import Dict, List, Optional, Tuple

from chip8_core.core.cpu import AbstractCpu
from chip8_core.core.snapshot import Operation
from chip8_core.transport.bus import Bus, RAM
from chip8_core.common.errors import OutOfBoundsAddressError, ProgramTooLargeError
from chip8_core.common.types import RegisterLayoutInfo, RegisterInfo, DisassemblyLine
from chip8_core.arch.chip8.state import Chip8CpuState, MEMORY_SIZE, PROGRAM_START, NUM_REGISTERS
from chip8_core.arch.chip8.font import FONTSET, FONT_BASE_ADDRESS
from chip8_core.arch.chip8.timers import advance_timers
from chip8_core.arch.chip8.instructions import decode_opcode, execute_instruction
from chip8_core.arch.chip8 import disassembler

logger = logging.getLogger(__name__)

# @intent:responsibility CHIP-8 CPUの具体的なエミュレーションロジック（フェッチ、デコード、実行）と
#                        ライフサイクル（構築、リセット、ロード）、タイマー、入力を提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 CPUをエミュレートするクラス。

    メモリは `bus` に接続されたRAMデバイスが保持します。バスは 0x000〜0xFFF を
    隙間なくマップしている必要があります（SystemBuilderまたはcreate_bus()で構築）。
    `rng_seed` を指定するとRND命令の乱数列が再現可能になります。
    """
    # @intent:responsibility Chip8Cpuを初期化し、フォントをメモリ先頭へロードします。
    # @intent:pre-condition `bus`は4KBのアドレス空間を提供する有効なBusオブジェクトである必要があります。
    def __init__(self, bus: Bus, rng_seed: Optional[int] = None):
        # _create_initial_state は基底クラスの__init__から呼ばれるため、先に設定する
        self._rng_seed = rng_seed
        super().__init__(bus)
        self._load_font()

    # @intent:responsibility CHIP-8はメモリ以外のI/O空間を持たないためFalseを返します。
    @property
    def has_io_port(self) -> bool:
        return False

    # @intent:responsibility CHIP-8の初期状態を生成します。PC=0x200、その他は全て0。
    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState(rng=random.Random(self._rng_seed))

    # @intent:responsibility 不変のフォントデータをメモリ先頭にコピーします。
    def _load_font(self) -> None:
        self._bus.load_block(FONT_BASE_ADDRESS, FONTSET)

    # --- Lifecycle ---

    # @intent:responsibility CPUとメモリを構築直後の状態へ戻します。
    # @intent:rationale フォントのみ再ロードし、以前にロードしたプログラムは復元しません（工場出荷状態へのリセット）。
    #                  同じプログラムを再実行したい場合、呼び出し側がreset()の後にload()を呼び直します。
    def reset(self) -> None:
        super().reset()
        for _, _, device in self._bus.get_devices():
            if isinstance(device, RAM):
                device.fill(0x00)
        self._load_font()
        self._bus.get_and_clear_activity_log()
        logger.debug("CHIP-8 reset; memory cleared and font reloaded")

    # @intent:responsibility プログラムを 0x200 からメモリへコピーします。
    # @intent:pre-condition len(data) <= 4096 - 0x200。超過時はProgramTooLargeErrorを送出し、メモリは変更しません。
    def load(self, data: bytes) -> None:
        data = bytes(data)
        capacity = MEMORY_SIZE - PROGRAM_START
        if len(data) > capacity:
            raise ProgramTooLargeError(len(data), capacity)
        self._bus.load_block(PROGRAM_START, data)
        logger.debug("Loaded %d bytes at %#05x", len(data), PROGRAM_START)

    # --- Instruction cycle ---

    # @intent:responsibility PCから2バイトをビッグエンディアンで読み出し、PCを2進めて命令語を返します。
    # @intent:pre-condition PC+1 がメモリ内であること。範囲外ならOutOfBoundsAddressErrorを送出し、PCは変更しません。
    def _fetch(self) -> int:
        pc = self._state.pc
        if not 0 <= pc < MEMORY_SIZE - 1:
            raise OutOfBoundsAddressError(pc, f"Cannot fetch a 2-byte instruction at {pc:#06x}.")
        hi = self._bus.read(pc)
        lo = self._bus.read(pc + 1)
        self._state.pc = (pc + 2) & 0xFFFF
        return (hi << 8) | lo

    # @intent:responsibility 命令語をデコードし、Chip8Operationを返します。
    def _decode(self, opcode: int) -> Operation:
        # フェッチ済みのためPCは既に2進んでいる
        return decode_opcode(opcode, (self._state.pc - 2) & 0xFFFF)

    # @intent:responsibility フェッチ時にPCを進めているため、ここでは何もしません。
    def _update_pc(self, operation: Operation) -> None:
        pass

    # @intent:responsibility Operationを実行し、状態を更新します。
    def _execute(self, operation: Operation) -> None:
        execute_instruction(operation, self._state, self._bus)

    # --- Timers / Sound ---

    # @intent:responsibility 60Hzのタイマーティックを1回進めます。
    def advance_timers(self) -> None:
        advance_timers(self._state)

    # @intent:responsibility 直近のタイマーティックでサウンドタイマーが動作していたかを返します。
    def beeping(self) -> bool:
        return self._state.beep

    # --- Display / Input ---

    # @intent:responsibility 画面の読み取り専用ビュー（width*height個の真偽値、行優先）を返します。
    def display(self) -> Tuple[bool, ...]:
        return self._state.framebuffer.view()

    # @intent:responsibility キーの押下状態を設定します。範囲外のキー番号はInvalidKeyIndexError。
    def set_key(self, index: int, pressed: bool) -> None:
        self._state.keypad.set_key(index, pressed)

    def is_key_pressed(self, index: int) -> bool:
        return self._state.keypad.is_pressed(index)

    # --- Introspection ---

    # @intent:responsibility 表示用に、現在のレジスタ値を辞書形式で提供します。
    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"V{idx:X}": s.v[idx] for idx in range(NUM_REGISTERS)}
        registers.update({
            "I": s.i, "PC": s.pc, "SP": s.sp, "DT": s.delay_timer, "ST": s.sound_timer
        })
        return registers

    # @intent:responsibility レジスタ表示レイアウト（グループ化）を定義します。
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [RegisterInfo(f"V{idx:X}", 8) for idx in range(NUM_REGISTERS)]),
            RegisterLayoutInfo("Pointers/Timers", [
                RegisterInfo("I", 16), RegisterInfo("PC", 16), RegisterInfo("SP", 8),
                RegisterInfo("DT", 8), RegisterInfo("ST", 8)
            ])
        ]

    # @intent:responsibility 表示用に、現在のフラグ状態を辞書形式で提供します。
    def get_flag_state(self) -> Dict[str, bool]:
        s = self._state
        return {"VF": s.vf != 0, "BEEP": s.beep}

    # @intent:responsibility 指定範囲のメモリを逆アセンブルします。
    def disassemble(self, start_addr: int, length: int) -> List[DisassemblyLine]:
        return disassembler.disassemble(self._bus, start_addr, length)


# @intent:responsibility 0x000〜0xFFF の4KB RAMを1つ持つバスを生成します。
def create_bus() -> Bus:
    bus = Bus()
    bus.register_device(0x0000, MEMORY_SIZE - 1, RAM(MEMORY_SIZE))
    return bus

# @intent:responsibility 標準構成のCHIP-8マシンを構築します。
def create_chip8(program: Optional[bytes] = None, rng_seed: Optional[int] = None) -> Chip8Cpu:
    """
    4KB RAMのバスにCHIP-8 CPUを接続して返します。`program` を指定した場合はロード済みの状態で返します。
    """
    cpu = Chip8Cpu(create_bus(), rng_seed=rng_seed)
    if program is not None:
        cpu.load(program)
    return cpu
