# src/chip8_core/arch/chip8/disassembler.py
"""
CHIP-8 Disassembler

メモリ上のバイナリデータを解析し、CHIP-8のアセンブリ言語（ニーモニック）に変換します。
Instruction Layerのデコードロジックを再利用しますが、バスアクセスログを汚さないように
peek（ログなし読み込み）のみを使用します。
"""
from typing import List

from chip8_core.transport.bus import Bus
from chip8_core.common.errors import UnknownOpcodeError, OutOfBoundsAddressError
from chip8_core.common.types import DisassemblyLine
from chip8_core.arch.chip8.instructions import decode_opcode

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、表示用データを生成します。
def disassemble(bus: Bus, start_addr: int, length: int) -> List[DisassemblyLine]:
    """
    指定された範囲のメモリを逆アセンブルします。
    命令として解釈できない語は "DW $XXXX"、末尾の端数バイトは "DB $XX" として出力します。

    Returns:
        List of (address, hex_bytes, mnemonic) tuples.
    """
    result = []
    current_addr = start_addr
    end_addr = start_addr + length

    while current_addr < end_addr:
        try:
            hi = bus.peek(current_addr)
        except OutOfBoundsAddressError:
            # メモリ境界に到達
            break

        try:
            lo = bus.peek(current_addr + 1)
        except OutOfBoundsAddressError:
            result.append((current_addr, f"{hi:02X}", f"DB ${hi:02X}"))
            break

        word = (hi << 8) | lo
        hex_bytes = f"{hi:02X} {lo:02X}"
        try:
            operation = decode_opcode(word, current_addr)
            mnemonic_str = operation.mnemonic
            if operation.operands:
                mnemonic_str += " " + ", ".join(operation.operands)
        except UnknownOpcodeError:
            # データ領域やスプライトは命令として解釈できないことが多い
            mnemonic_str = f"DW ${word:04X}"

        result.append((current_addr, hex_bytes, mnemonic_str))
        current_addr += 2

    return result
