# src/chip8_core/arch/chip8/instructions/base.py
"""
CHIP-8命令実装用の共通定義。

命令語の分解（4つのニブルと3種類の即値ビュー）、命令種別のタグ、
およびデコード結果を運ぶ Chip8Operation を定義します。
"""
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional

from chip8_core.core.snapshot import Operation
from chip8_core.arch.chip8.state import Chip8CpuState

# @intent:responsibility 命令の種別（オペコード形式ごとに1つ）を表すタグです。
class InstructionKind(Enum):
    NOP = "NOP"
    CLS = "CLS"
    RET = "RET"
    JP = "JP"
    CALL = "CALL"
    SE_VX_BYTE = "SE_VX_BYTE"
    SNE_VX_BYTE = "SNE_VX_BYTE"
    SE_VX_VY = "SE_VX_VY"
    LD_VX_BYTE = "LD_VX_BYTE"
    ADD_VX_BYTE = "ADD_VX_BYTE"
    LD_VX_VY = "LD_VX_VY"
    OR = "OR"
    AND = "AND"
    XOR = "XOR"
    ADD_VX_VY = "ADD_VX_VY"
    SUB = "SUB"
    SHR = "SHR"
    SUBN = "SUBN"
    SHL = "SHL"
    SNE_VX_VY = "SNE_VX_VY"
    LD_I = "LD_I"
    JP_V0 = "JP_V0"
    RND = "RND"
    DRW = "DRW"
    SKP = "SKP"
    SKNP = "SKNP"
    LD_VX_DT = "LD_VX_DT"
    LD_VX_K = "LD_VX_K"
    LD_DT_VX = "LD_DT_VX"
    LD_ST_VX = "LD_ST_VX"
    ADD_I_VX = "ADD_I_VX"
    LD_F_VX = "LD_F_VX"
    BCD = "BCD"
    STORE = "STORE"
    LOAD = "LOAD"

# @intent:data_structure 命令語を分解したフィールド。
# f1..f4: 上位から順の4ビットフィールド
# nnn: 下位12ビット（アドレス）, kk: 下位8ビット（即値）, n: 下位4ビット（個数）
class InstructionFields(NamedTuple):
    f1: int
    f2: int
    f3: int
    f4: int
    nnn: int
    kk: int
    n: int

# @intent:utility_function 16ビット命令語を各フィールドに分解します。
def split_word(word: int) -> InstructionFields:
    return InstructionFields(
        f1=(word & 0xF000) >> 12,
        f2=(word & 0x0F00) >> 8,
        f3=(word & 0x00F0) >> 4,
        f4=word & 0x000F,
        nnn=word & 0x0FFF,
        kk=word & 0x00FF,
        n=word & 0x000F,
    )

# @intent:responsibility デコード済みのCHIP-8命令。種別タグとオペランドフィールドを保持します。
# @intent:rationale Operationを拡張することで、Snapshot・逆アセンブラ・Debuggerは共通の表現をそのまま扱えます。
@dataclass(frozen=True)
class Chip8Operation(Operation):
    kind: Optional[InstructionKind] = None
    fields: Optional[InstructionFields] = None
    address: Optional[int] = None # 命令がフェッチされたアドレス

# @intent:responsibility 命令実行時に参照するオペランド値 (x, y) を取り出します。
# @intent:rationale 同じレジスタを読み書きする命令（シフト、キャリー付き加算など）で更新後の値を
#                  誤って使わないよう、実行関数は本体の先頭でこの値をローカル変数に確保します。
def read_operands(state: Chip8CpuState, fields: InstructionFields):
    return state.v[fields.f2], state.v[fields.f3]

# @intent:utility_function 次の命令をスキップします。
def skip_next(state: Chip8CpuState) -> None:
    state.pc = (state.pc + 2) & 0xFFFF

# @intent:utility_function エラーメッセージ用に命令の所在を整形します。
def describe_location(op: Chip8Operation) -> str:
    return f" at {op.address:#05x}" if op.address is not None else ""
