# chip8_core/transport/bus.py
"""
Transport Layer (共通バス)

このモジュールは、システム全体のメモリアドレス空間を抽象化し、
読み書きアクセスを適切なデバイスに委譲する責務を負います。
アドレス空間の外側へのアクセスは OutOfBoundsAddressError として報告されます。
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from dataclasses import dataclass
from enum import Enum

from chip8_core.common.errors import OutOfBoundsAddressError

# @intent:responsibility バスアクセスを記録するためのタイプを定義します。
class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"

# @intent:responsibility 個々のバスアクセス操作を記録します。
@dataclass(frozen=True) # 不変データ構造
class BusAccess:
    """
    バス上で行われた単一のアクセス（読み込みまたは書き込み）を記録するデータクラス。
    書き込みの場合、previous_data に上書き前の値を保持します（Debuggerのstep_backで使用）。
    """
    address: int
    data: int # 8bit value
    access_type: BusAccessType
    previous_data: Optional[int] = None

# @intent:responsibility バスの抽象デバイスインターフェースを定義します。
class Device(ABC):
    """
    バスに接続されるデバイスの抽象基底クラス。
    全てのデバイスはreadとwriteのインターフェースを実装する必要があります。
    """
    # @intent:responsibility 指定されたアドレスから8bitのデータを読み出す責務を負います。
    # @intent:pre-condition アドレスはデバイスの有効範囲内である必要があります。
    @abstractmethod
    def read(self, address: int) -> int:
        """
        指定されたアドレスから8bitのデータを読み出します。
        アドレスはデバイス内でのオフセットとして扱われます。
        """
        pass

    # @intent:responsibility 指定されたアドレスに8bitのデータを書き込みます。
    # @intent:pre-condition アドレスはデバイスの有効範囲内であり、データは8bit値である必要があります。
    @abstractmethod
    def write(self, address: int, data: int) -> None:
        """
        指定されたアドレスに8bitのデータを書き込みます。
        アドレスはデバイス内でのオフセットとして扱われます。
        """
        pass

# @intent:responsibility 基本的なRAMデバイスの機能を提供します。
class RAM(Device):
    """
    CHIP-8 の主記憶として使用されるRAMデバイス。
    """
    # @intent:responsibility 指定されたサイズのメモリ領域を初期化します。
    # @intent:pre-condition sizeは正の整数である必要があります。
    def __init__(self, size: int):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("RAM size must be a positive integer.")
        self._memory = bytearray(size)
        self._size = size

    def _check_address(self, address: int) -> None:
        if not 0 <= address < self._size:
            raise OutOfBoundsAddressError(
                address, f"Address {address} out of bounds for RAM of size {self._size}."
            )

    # @intent:responsibility 指定されたアドレスから8bitのデータを読み出します。
    def read(self, address: int) -> int:
        self._check_address(address)
        return self._memory[address]

    # @intent:responsibility 指定されたアドレスに8bitのデータを書き込みます。
    def write(self, address: int, data: int) -> None:
        self._check_address(address)
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        self._memory[address] = data

    # @intent:responsibility 全領域を指定値で埋めます。リセット時のメモリ初期化に使用します。
    def fill(self, value: int = 0x00) -> None:
        if not 0 <= value <= 0xFF:
            raise ValueError(f"Data {value} is not an 8-bit value.")
        self._memory[:] = bytes([value]) * self._size

    # @intent:responsibility RAMのサイズを返します。
    def get_size(self) -> int:
        return self._size

# @intent:responsibility メモリアドレス空間を管理し、デバイスへのアクセスをディスパッチする共通バス。
# @intent:rationale バスの全てのアクセスを記録し、Snapshotに含めることでシステムの観測可能性を高めます。
class Bus:
    """
    メモリアドレス空間を管理し、デバイスへのアクセスをディスパッチする共通バス。
    バス上で行われた全てのメモリアクセスを記録する機能を提供します。
    """
    # @intent:responsibility 空のメモリマップとバスアクティビティログを初期化します。
    def __init__(self):
        # メモリマップ: (start_address, end_address, device) のタプルリスト
        self._memory_map: List[Tuple[int, int, Device]] = []
        self._bus_activity_log: List[BusAccess] = [] # バスアクセスログ

    # @intent:responsibility バスアクセスをログに記録します。
    def _log_access(self, address: int, data: int, access_type: BusAccessType,
                    previous_data: Optional[int] = None) -> None:
        self._bus_activity_log.append(
            BusAccess(address=address, data=data, access_type=access_type, previous_data=previous_data)
        )

    # @intent:responsibility 記録されたバスアクティビティログを取得し、クリアします。
    def get_and_clear_activity_log(self) -> List[BusAccess]:
        """
        現在のバスアクティビティログを返し、内部ログをクリアします。
        """
        log = self._bus_activity_log
        self._bus_activity_log = [] # ログをクリア
        return log

    # @intent:responsibility 指定されたアドレス範囲にデバイスを登録します。
    # @intent:pre-condition start_address <= end_addressかつ非負であり、deviceはDeviceのインスタンスである必要があります。
    # @intent:rationale アドレス範囲の重複チェックは行いません。システム構成（SystemBuilder）の層で管理します。
    def register_device(self, start_address: int, end_address: int, device: Device) -> None:
        """
        指定されたアドレス範囲にデバイスを登録します。
        RAMを登録する場合、そのサイズが指定されたアドレス範囲と一致する必要があります。
        """
        if not (0 <= start_address <= end_address):
            raise ValueError("Invalid address range: start_address must be <= end_address and non-negative.")
        if not isinstance(device, Device):
            raise TypeError("Device must be an instance of a class derived from Device.")

        if isinstance(device, RAM):
            expected_size = end_address - start_address + 1
            if device.get_size() != expected_size:
                raise ValueError(
                    f"Registered {type(device).__name__} device size ({device.get_size()} bytes) does not match "
                    f"the specified address range size ({expected_size} bytes)."
                )

        self._memory_map.append((start_address, end_address, device))

    # @intent:responsibility 登録済みデバイスの一覧を返します。
    def get_devices(self) -> List[Tuple[int, int, Device]]:
        return list(self._memory_map)

    # @intent:responsibility 指定されたアドレスに対応するデバイスとオフセットを検索します。
    # @intent:post-condition デバイスが見つからなかった場合、OutOfBoundsAddressErrorを発生させます。
    def _find_device(self, address: int) -> Tuple[Device, int]:
        for start, end, device in self._memory_map:
            if start <= address <= end:
                return device, address - start
        raise OutOfBoundsAddressError(address, f"Address {address:#06x} not mapped to any device.")

    # @intent:responsibility 指定された範囲 [address, address+length) が全てマップ済みか検査します。
    # @intent:rationale 複数バイトを書き込む命令が途中で失敗して状態を半端に壊さないよう、事前検査に使用します。
    def check_range(self, address: int, length: int) -> None:
        for offset in range(length):
            self._find_device(address + offset)

    # @intent:responsibility 指定されたアドレスから8bitのデータを読み出します。
    def read(self, address: int) -> int:
        """
        指定されたアドレスから8bitのデータを読み出します。
        アクセスはログに記録されます。
        """
        device, offset = self._find_device(address)
        data = device.read(offset)
        self._log_access(address, data, BusAccessType.READ)
        return data

    # @intent:responsibility ログを記録せずに指定されたアドレスからデータを読み出します。
    def peek(self, address: int) -> int:
        """
        指定されたアドレスから8bitのデータを読み出します（ログ記録なし）。
        逆アセンブラやインスペクタ用。
        """
        device, offset = self._find_device(address)
        return device.read(offset)

    # @intent:responsibility 指定されたアドレスに8bitのデータを書き込みます。
    def write(self, address: int, data: int) -> None:
        """
        指定されたアドレスに8bitのデータを書き込みます。
        上書き前の値と共にアクセスはログに記録されます。
        """
        device, offset = self._find_device(address)
        previous = device.read(offset)
        device.write(offset, data)
        self._log_access(address, data, BusAccessType.WRITE, previous_data=previous)

    # @intent:responsibility ログを記録せずにデータを書き込みます（ローダー・リセット用のバックドア）。
    def load(self, address: int, data: int) -> None:
        device, offset = self._find_device(address)
        device.write(offset, data)

    # @intent:responsibility バイト列をまとめてログなしで書き込みます。
    # @intent:pre-condition 全範囲がマップ済みであること。検査は書き込み前に行われます。
    def load_block(self, address: int, data: bytes) -> None:
        self.check_range(address, len(data))
        for i, byte in enumerate(data):
            self.load(address + i, byte)
