# src/chip8_core/arch/chip8/instructions/maps.py
"""
命令パターンと命令実装のマッピング定義。
"""
from typing import Callable, Dict, List, NamedTuple

from chip8_core.transport.bus import Bus
from chip8_core.arch.chip8.state import Chip8CpuState
from .base import InstructionKind as K, InstructionFields, Chip8Operation
from . import load
from . import alu
from . import control
from . import display
from . import io

# Operand Formatter Type
OperandFunc = Callable[[InstructionFields], List[str]]
# Execution Function Type
ExecFunc = Callable[[Chip8CpuState, Bus, Chip8Operation], None]

# --- Operand formatters (disassembly / symbol info) ---
def _none(f: InstructionFields) -> List[str]:
    return []

def _addr(f: InstructionFields) -> List[str]:
    return [f"${f.nnn:03X}"]

def _vx(f: InstructionFields) -> List[str]:
    return [f"V{f.f2:X}"]

def _vx_byte(f: InstructionFields) -> List[str]:
    return [f"V{f.f2:X}", f"#${f.kk:02X}"]

def _vx_vy(f: InstructionFields) -> List[str]:
    return [f"V{f.f2:X}", f"V{f.f3:X}"]

def _named_vx(name: str) -> OperandFunc:
    # 例: "LD DT, V3"
    return lambda f: [name, f"V{f.f2:X}"]

def _vx_named(name: str) -> OperandFunc:
    # 例: "LD V3, DT"
    return lambda f: [f"V{f.f2:X}", name]

# @intent:data_structure デコードテーブルの1エントリ。(word & mask) == pattern で一致を判定します。
class DecodeEntry(NamedTuple):
    mask: int
    pattern: int
    kind: K
    mnemonic: str
    operands: OperandFunc

# @intent:map 命令パターンから命令種別への対応表。完全一致のエントリを先に置き、上から順に評価します。
DECODE_TABLE: List[DecodeEntry] = [
    # System
    DecodeEntry(0xFFFF, 0x0000, K.NOP, "NOP", _none),
    DecodeEntry(0xFFFF, 0x00E0, K.CLS, "CLS", _none),
    DecodeEntry(0xFFFF, 0x00EE, K.RET, "RET", _none),

    # Control
    DecodeEntry(0xF000, 0x1000, K.JP, "JP", _addr),
    DecodeEntry(0xF000, 0x2000, K.CALL, "CALL", _addr),
    DecodeEntry(0xF000, 0x3000, K.SE_VX_BYTE, "SE", _vx_byte),
    DecodeEntry(0xF000, 0x4000, K.SNE_VX_BYTE, "SNE", _vx_byte),
    DecodeEntry(0xF00F, 0x5000, K.SE_VX_VY, "SE", _vx_vy),
    DecodeEntry(0xF00F, 0x9000, K.SNE_VX_VY, "SNE", _vx_vy),
    DecodeEntry(0xF000, 0xB000, K.JP_V0, "JP", lambda f: ["V0", f"${f.nnn:03X}"]),

    # Load / ALU
    DecodeEntry(0xF000, 0x6000, K.LD_VX_BYTE, "LD", _vx_byte),
    DecodeEntry(0xF000, 0x7000, K.ADD_VX_BYTE, "ADD", _vx_byte),
    DecodeEntry(0xF00F, 0x8000, K.LD_VX_VY, "LD", _vx_vy),
    DecodeEntry(0xF00F, 0x8001, K.OR, "OR", _vx_vy),
    DecodeEntry(0xF00F, 0x8002, K.AND, "AND", _vx_vy),
    DecodeEntry(0xF00F, 0x8003, K.XOR, "XOR", _vx_vy),
    DecodeEntry(0xF00F, 0x8004, K.ADD_VX_VY, "ADD", _vx_vy),
    DecodeEntry(0xF00F, 0x8005, K.SUB, "SUB", _vx_vy),
    DecodeEntry(0xF00F, 0x8006, K.SHR, "SHR", _vx_vy),
    DecodeEntry(0xF00F, 0x8007, K.SUBN, "SUBN", _vx_vy),
    DecodeEntry(0xF00F, 0x800E, K.SHL, "SHL", _vx_vy),
    DecodeEntry(0xF000, 0xA000, K.LD_I, "LD", lambda f: ["I", f"${f.nnn:03X}"]),
    DecodeEntry(0xF000, 0xC000, K.RND, "RND", _vx_byte),

    # Display
    DecodeEntry(0xF000, 0xD000, K.DRW, "DRW", lambda f: [f"V{f.f2:X}", f"V{f.f3:X}", f"#${f.n:X}"]),

    # Keypad
    DecodeEntry(0xF0FF, 0xE09E, K.SKP, "SKP", _vx),
    DecodeEntry(0xF0FF, 0xE0A1, K.SKNP, "SKNP", _vx),

    # Timers / Memory
    DecodeEntry(0xF0FF, 0xF007, K.LD_VX_DT, "LD", _vx_named("DT")),
    DecodeEntry(0xF0FF, 0xF00A, K.LD_VX_K, "LD", _vx_named("K")),
    DecodeEntry(0xF0FF, 0xF015, K.LD_DT_VX, "LD", _named_vx("DT")),
    DecodeEntry(0xF0FF, 0xF018, K.LD_ST_VX, "LD", _named_vx("ST")),
    DecodeEntry(0xF0FF, 0xF01E, K.ADD_I_VX, "ADD", _named_vx("I")),
    DecodeEntry(0xF0FF, 0xF029, K.LD_F_VX, "LD", _named_vx("F")),
    DecodeEntry(0xF0FF, 0xF033, K.BCD, "LD", _named_vx("B")),
    DecodeEntry(0xF0FF, 0xF055, K.STORE, "LD", _named_vx("[I]")),
    DecodeEntry(0xF0FF, 0xF065, K.LOAD, "LD", _vx_named("[I]")),
]

# @intent:map 命令種別から実行関数へのマッピングテーブル。
EXECUTE_MAP: Dict[K, ExecFunc] = {
    # System / Control
    K.NOP: control.execute_nop,
    K.RET: control.execute_ret,
    K.JP: control.execute_jp,
    K.CALL: control.execute_call,
    K.SE_VX_BYTE: control.execute_se_vx_byte,
    K.SNE_VX_BYTE: control.execute_sne_vx_byte,
    K.SE_VX_VY: control.execute_se_vx_vy,
    K.SNE_VX_VY: control.execute_sne_vx_vy,
    K.JP_V0: control.execute_jp_v0,

    # Load / Store
    K.LD_VX_BYTE: load.execute_ld_vx_byte,
    K.LD_VX_VY: load.execute_ld_vx_vy,
    K.LD_I: load.execute_ld_i,
    K.ADD_I_VX: load.execute_add_i_vx,
    K.LD_F_VX: load.execute_ld_f_vx,
    K.BCD: load.execute_bcd,
    K.STORE: load.execute_store,
    K.LOAD: load.execute_load,

    # ALU
    K.ADD_VX_BYTE: alu.execute_add_vx_byte,
    K.OR: alu.execute_or,
    K.AND: alu.execute_and,
    K.XOR: alu.execute_xor,
    K.ADD_VX_VY: alu.execute_add_vx_vy,
    K.SUB: alu.execute_sub,
    K.SHR: alu.execute_shr,
    K.SUBN: alu.execute_subn,
    K.SHL: alu.execute_shl,
    K.RND: alu.execute_rnd,

    # Display
    K.CLS: display.execute_cls,
    K.DRW: display.execute_drw,

    # Keypad / Timers
    K.SKP: io.execute_skp,
    K.SKNP: io.execute_sknp,
    K.LD_VX_K: io.execute_ld_vx_k,
    K.LD_VX_DT: io.execute_ld_vx_dt,
    K.LD_DT_VX: io.execute_ld_dt_vx,
    K.LD_ST_VX: io.execute_ld_st_vx,
}
