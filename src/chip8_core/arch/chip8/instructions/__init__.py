# src/chip8_core/arch/chip8/instructions/__init__.py
"""
CHIP-8命令セット実装パッケージ。
"""
from typing import Optional

from chip8_core.transport.bus import Bus
from chip8_core.common.errors import UnknownOpcodeError
from chip8_core.arch.chip8.state import Chip8CpuState
from .base import Chip8Operation, InstructionKind, InstructionFields, split_word
from .maps import DECODE_TABLE, EXECUTE_MAP

# @intent:responsibility 16ビット命令語をデコードし、種別タグ付きのChip8Operationを返します。
# @intent:post-condition どのパターンにも一致しない場合はUnknownOpcodeErrorを送出します。
def decode_opcode(word: int, address: Optional[int] = None) -> Chip8Operation:
    """
    CHIP-8の命令語をデコードし、Chip8Operationオブジェクトを返します。
    `address` は命令がフェッチされたアドレスで、エラー報告と表示に使用されます。
    """
    for entry in DECODE_TABLE:
        if word & entry.mask == entry.pattern:
            fields = split_word(word)
            return Chip8Operation(
                opcode_hex=f"{word:04X}",
                mnemonic=entry.mnemonic,
                operands=entry.operands(fields),
                operand_bytes=[(word >> 8) & 0xFF, word & 0xFF],
                cycle_count=1,
                length=2,
                kind=entry.kind,
                fields=fields,
                address=address,
            )
    raise UnknownOpcodeError(word, address)

# @intent:responsibility デコードされたCHIP-8命令を実行します。
def execute_instruction(operation: Chip8Operation, state: Chip8CpuState, bus: Bus) -> None:
    """
    デコードされたCHIP-8命令を実行し、CPUの状態を変更します。
    """
    executor = EXECUTE_MAP.get(operation.kind)
    if executor is None:
        raise UnknownOpcodeError(int(operation.opcode_hex, 16), operation.address)
    executor(state, bus, operation)
