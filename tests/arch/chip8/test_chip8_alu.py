import unittest
from chip8_core.arch.chip8.cpu import create_chip8

class TestChip8AluInstructions(unittest.TestCase):
    def setUp(self):
        self.cpu = create_chip8(rng_seed=1234)
        self.state = self.cpu.get_state()
        self.bus = self.cpu.bus

    def _execute(self, word):
        # 命令語を現在のPCに置いて1命令実行する
        pc = self.state.pc
        self.bus.load(pc, (word >> 8) & 0xFF)
        self.bus.load(pc + 1, word & 0xFF)
        return self.cpu.step()

    def test_add_vx_byte_wraps_without_flag(self):
        self.state.v[0x3] = 0xFF
        self.state.vf = 0x42
        self._execute(0x7302) # ADD V3, #$02
        self.assertEqual(self.state.v[0x3], 0x01)
        self.assertEqual(self.state.vf, 0x42)

    def test_or_and_xor(self):
        self.state.v[0] = 0b1100
        self.state.v[1] = 0b1010
        self._execute(0x8011) # OR V0, V1
        self.assertEqual(self.state.v[0], 0b1110)

        self.state.v[0] = 0b1100
        self._execute(0x8012) # AND V0, V1
        self.assertEqual(self.state.v[0], 0b1000)

        self.state.v[0] = 0b1100
        self._execute(0x8013) # XOR V0, V1
        self.assertEqual(self.state.v[0], 0b0110)

    def test_add_vx_vy_with_carry(self):
        self.state.v[0] = 0xFF
        self.state.v[1] = 0x02
        self._execute(0x8014) # ADD V0, V1
        self.assertEqual(self.state.v[0], 0x01)
        self.assertEqual(self.state.vf, 1)

    def test_add_vx_vy_without_carry(self):
        self.state.v[0] = 0x10
        self.state.v[1] = 0x20
        self.state.vf = 1
        self._execute(0x8014)
        self.assertEqual(self.state.v[0], 0x30)
        self.assertEqual(self.state.vf, 0)

    def test_sub_no_borrow(self):
        self.state.v[2] = 0x30
        self.state.v[3] = 0x10
        self._execute(0x8235) # SUB V2, V3
        self.assertEqual(self.state.v[2], 0x20)
        self.assertEqual(self.state.vf, 1)

    def test_sub_equal_operands_sets_flag(self):
        self.state.v[2] = 0x10
        self.state.v[3] = 0x10
        self._execute(0x8235)
        self.assertEqual(self.state.v[2], 0x00)
        self.assertEqual(self.state.vf, 1)

    def test_sub_with_borrow(self):
        self.state.v[2] = 0x10
        self.state.v[3] = 0x30
        self._execute(0x8235)
        self.assertEqual(self.state.v[2], 0xE0)
        self.assertEqual(self.state.vf, 0)

    def test_subn(self):
        self.state.v[0] = 0x05
        self.state.v[1] = 0x10
        self._execute(0x8017) # SUBN V0, V1
        self.assertEqual(self.state.v[0], 0x0B)
        self.assertEqual(self.state.vf, 1)

        self.state.v[0] = 0x10
        self.state.v[1] = 0x05
        self._execute(0x8017)
        self.assertEqual(self.state.v[0], 0xF5)
        self.assertEqual(self.state.vf, 0)

    def test_shr(self):
        self.state.v[4] = 0b00000101
        self._execute(0x8406) # SHR V4
        self.assertEqual(self.state.v[4], 0b00000010)
        self.assertEqual(self.state.vf, 1)

    def test_shl(self):
        self.state.v[4] = 0b10000001
        self._execute(0x840E) # SHL V4
        self.assertEqual(self.state.v[4], 0b00000010)
        self.assertEqual(self.state.vf, 1)

        self.state.v[4] = 0b01000000
        self._execute(0x840E)
        self.assertEqual(self.state.v[4], 0b10000000)
        self.assertEqual(self.state.vf, 0)

    def test_flag_wins_when_target_is_vf(self):
        # 結果の書き込み後にフラグが書き込まれる
        self.state.vf = 0xFF
        self.state.v[1] = 0x01
        self._execute(0x8F14) # ADD VF, V1
        self.assertEqual(self.state.vf, 1)

        self.state.vf = 0x02
        self._execute(0x8F06) # SHR VF
        self.assertEqual(self.state.vf, 0)

    def test_rnd_is_masked(self):
        for _ in range(32):
            self._execute(0xC50F) # RND V5, #$0F
            self.assertEqual(self.state.v[5] & 0xF0, 0)

    def test_rnd_with_zero_mask(self):
        self._execute(0xC500)
        self.assertEqual(self.state.v[5], 0)

    def test_rnd_is_reproducible_with_seed(self):
        other = create_chip8(rng_seed=1234)
        program = bytes([0xC6, 0xFF] * 8)
        self.cpu.load(program)
        other.load(program)
        for _ in range(8):
            self.cpu.step()
            other.step()
            self.assertEqual(self.state.v[6], other.get_state().v[6])

if __name__ == '__main__':
    unittest.main()
