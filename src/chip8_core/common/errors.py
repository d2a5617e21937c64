"""
例外階層の定義。

コアが呼び出し元へ返す全ての失敗は Chip8Error のサブクラスとして表現されます。
ホスト側はこれを捕捉し、停止・スキップ・再起動のいずれを選ぶかを決定します。
"""
from typing import Optional


# @intent:responsibility コアが送出する全ての例外の基底クラスです。
class Chip8Error(Exception):
    """CHIP-8 コアの基底例外。"""


# @intent:responsibility どの命令パターンにも一致しない命令語を表します。
class UnknownOpcodeError(Chip8Error):
    """
    デコード時にどの命令パターンにも一致しなかった命令語。

    `address` は命令がフェッチされたアドレス（判明している場合）。
    """
    def __init__(self, opcode: int, address: Optional[int] = None):
        self.opcode = opcode
        self.address = address
        where = f" at {address:#05x}" if address is not None else ""
        super().__init__(f"Unknown opcode {opcode:#06x}{where}.")


# @intent:responsibility アドレス空間 [0, 4096) の外側へのアクセスを表します。
# @intent:rationale IndexErrorも継承し、組み込み例外で捕捉している既存の呼び出し元と互換を保ちます。
class OutOfBoundsAddressError(Chip8Error, IndexError):
    """メモリ空間外へのアクセス。"""
    def __init__(self, address: int, message: Optional[str] = None):
        self.address = address
        super().__init__(message or f"Address {address:#06x} is outside the mapped address space.")


# @intent:responsibility 16段を超えるサブルーチン呼び出しを表します。
class StackOverflowError(Chip8Error):
    """CALL 実行時にスタックが満杯だった。"""


# @intent:responsibility 空スタックからのRETを表します。
class StackUnderflowError(Chip8Error):
    """RET 実行時にスタックが空だった。"""


# @intent:responsibility [0, 16) 外のキー番号によるキー状態アクセスを表します。
class InvalidKeyIndexError(Chip8Error, ValueError):
    """キー番号が範囲外。"""
    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Key index {index} is outside [0, 16).")


# @intent:responsibility プログラム領域 [0x200, 4096) に収まらないプログラムを表します。
class ProgramTooLargeError(Chip8Error, ValueError):
    """ロードしようとしたプログラムがプログラム領域より大きい。"""
    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(f"Program of {size} bytes does not fit in {capacity} bytes of program memory.")
