# lc3_tracer/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1命令実行後のCPUとバスの状態を記録した不変のデータ構造を定義します。
表示層への情報提供と、デバッガによる履歴管理に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import Any, List, Optional

from lc3_tracer.core.state import CpuState
from lc3_tracer.transport.bus import BusAccessType, BusAccess


# @intent:responsibility デコード済みの命令を記録します。
@dataclass(frozen=True)
class Operation:
    """
    デコードされた命令の詳細（命令語HEX、ニーモニック、オペランド、デコード済みフィールド）を記録するデータクラス。
    """
    opcode_hex: str  # 例: "1021"
    mnemonic: str  # 例: "ADD"
    operands: List[str] = field(default_factory=list)  # 例: ["R0", "R0", "#1"]
    instruction: Any = None  # アーキテクチャ固有のデコード済み命令レコード
    cycle_count: int = 1
    length: int = 1  # 命令長（ワード単位）

    # @intent:responsibility 表示用の1行テキストを返します。
    def text(self) -> str:
        if self.operands:
            return f"{self.mnemonic} " + ", ".join(self.operands)
        return self.mnemonic

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True)
class Metadata:
    """
    実行に関するメタデータ（累計サイクル数、シンボル情報など）を記録するデータクラス。
    """
    cycle_count: int
    symbol_info: Optional[str] = None  # 例: "loop: ADD R1, R1, #-1"

# @intent:responsibility ある一時点におけるCPUとバスの状態を不変に記録します。
@dataclass(frozen=True)
class Snapshot:
    """
    1命令実行直後のCPU状態、実行した命令、メタデータ、バスアクティビティの記録。
    stateは生成時点のコピーであり、その後のステップで変化しません。
    """
    state: CpuState
    operation: Operation
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)

    # @intent:responsibility 指定された種類のバスアクセスのみを返します。
    def accesses(self, access_type: BusAccessType) -> List[BusAccess]:
        return [a for a in self.bus_activity if a.access_type == access_type]
