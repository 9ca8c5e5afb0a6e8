# lc3_tracer/debugger/debugger.py
"""
デバッガモジュール。

コアエンジンの実行を制御し、HALT状態またはユーザーが指定した条件（ブレークポイント）で
実行を中断させる責務を負います。エンジン自体はHALTで停止しないため、停止判断はここで行います。
"""
import copy
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from lc3_tracer.core.cpu import AbstractCpu
from lc3_tracer.core.snapshot import Snapshot
from lc3_tracer.core.state import CpuState
from lc3_tracer.transport.bus import BusAccessType

# @intent:responsibility ブレークポイントの条件タイプを定義します。
class BreakpointConditionType(Enum):
    PC_MATCH = "PC_MATCH"               # プログラムカウンタが特定のアドレスに一致
    MEMORY_READ = "MEMORY_READ"         # 特定のアドレスが読み込まれた
    MEMORY_WRITE = "MEMORY_WRITE"       # 特定のアドレスに書き込まれた
    REGISTER_VALUE = "REGISTER_VALUE"   # 特定のレジスタが特定の値になった
    REGISTER_CHANGE = "REGISTER_CHANGE" # 特定のレジスタの値が変化した

# @intent:responsibility ブレークポイントをトリガーする条件を定義します。
@dataclass(frozen=True)
class BreakpointCondition:
    """
    ブレークポイントがヒットするための条件を定義するデータクラス。
    register_nameは状態の属性名（"r0"〜"r7", "pc", "ir"）です。
    """
    condition_type: BreakpointConditionType
    value: Optional[int] = None           # PC_MATCH, REGISTER_VALUEで使用
    address: Optional[int] = None         # MEMORY_READ, MEMORY_WRITEで使用
    register_name: Optional[str] = None   # REGISTER_VALUE, REGISTER_CHANGEで使用
    enabled: bool = True

# @intent:responsibility 実行停止の理由を表します。
class StopReason(Enum):
    HALTED = "HALTED"
    BREAKPOINT = "BREAKPOINT"
    STEP_LIMIT = "STEP_LIMIT"
    STOPPED = "STOPPED"

# @intent:responsibility コアエンジンの実行制御とブレークポイント管理を行います。
class Debugger:
    """
    CPUの実行を制御し、ブレークポイントと実行履歴の管理を行うクラス。
    """
    def __init__(self, cpu: AbstractCpu):
        self._cpu = cpu
        self._breakpoints: List[BreakpointCondition] = []
        self._running: bool = False
        self._previous_state: CpuState = copy.deepcopy(self._cpu.get_state())
        self._last_snapshot: Optional[Snapshot] = None
        # @intent:responsibility 実行履歴を保持し、タイムトラベルデバッグをサポートします。
        self._history: List[Snapshot] = []
        # @intent:responsibility 履歴が尽きた時に戻るための初期状態を保持します。
        self._initial_state: CpuState = copy.deepcopy(self._cpu.get_state())

    def add_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition not in self._breakpoints:
            self._breakpoints.append(condition)

    def update_breakpoint(self, old_condition: BreakpointCondition, new_condition: BreakpointCondition) -> None:
        if old_condition in self._breakpoints:
            idx = self._breakpoints.index(old_condition)
            self._breakpoints[idx] = new_condition

    def remove_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition in self._breakpoints:
            self._breakpoints.remove(condition)

    def get_breakpoints(self) -> List[BreakpointCondition]:
        return list(self._breakpoints)

    def get_history(self) -> List[Snapshot]:
        return list(self._history)

    def get_last_snapshot(self) -> Optional[Snapshot]:
        return self._last_snapshot

    def _is_halted(self) -> bool:
        return bool(getattr(self._cpu.get_state(), "halted", False))

    def _pc_breakpoint_hit(self, pc: int) -> bool:
        return any(
            bp.enabled and bp.condition_type == BreakpointConditionType.PC_MATCH and bp.value == pc
            for bp in self._breakpoints
        )

    def _check_other_breakpoints(self, snapshot: Snapshot) -> bool:
        """
        Snapshotに基づいてPC_MATCH以外のブレークポイントをチェックします。
        """
        current_state = snapshot.state

        for bp in self._breakpoints:
            if not bp.enabled:
                continue

            if bp.condition_type == BreakpointConditionType.MEMORY_READ:
                for access in snapshot.accesses(BusAccessType.READ):
                    if access.address == bp.address:
                        return True
            elif bp.condition_type == BreakpointConditionType.MEMORY_WRITE:
                for access in snapshot.accesses(BusAccessType.WRITE):
                    if access.address == bp.address:
                        return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_VALUE:
                if bp.register_name and hasattr(current_state, bp.register_name):
                    if getattr(current_state, bp.register_name) == bp.value:
                        return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_CHANGE:
                if bp.register_name and self._previous_state:
                    if hasattr(current_state, bp.register_name) and hasattr(self._previous_state, bp.register_name):
                        if getattr(current_state, bp.register_name) != getattr(self._previous_state, bp.register_name):
                            return True
        return False

    def step_instruction(self) -> Snapshot:
        """
        CPUを1命令分実行し、その結果のSnapshotを返します。
        """
        self._previous_state = copy.deepcopy(self._cpu.get_state())
        snapshot = self._cpu.step()
        self._last_snapshot = snapshot
        self._history.append(snapshot)
        return snapshot

    def step_back(self) -> Optional[Snapshot]:
        """
        実行履歴を1つ戻り、CPUとメモリの状態を復元します。
        デバイス側の更新（DDR排出、ステータスReady化、コンソール入出力）は取り消しません。
        """
        if not self._history:
            return None

        snapshot_to_revert = self._history.pop()

        # バスアクティビティを逆順にスキャンし、書き込み操作があれば元に戻す
        bus = self._cpu.bus
        for access in reversed(snapshot_to_revert.bus_activity):
            if access.access_type == BusAccessType.WRITE and access.previous_data is not None:
                bus.load(access.address, access.previous_data)

        if self._history:
            previous_snapshot = self._history[-1]
            self._cpu.restore_state(previous_snapshot.state)
            self._last_snapshot = previous_snapshot
            # REGISTER_CHANGEの比較元を、戻った命令の実行直前の状態に合わせる
            if len(self._history) > 1:
                self._previous_state = copy.deepcopy(self._history[-2].state)
            else:
                self._previous_state = copy.deepcopy(self._initial_state)
            return previous_snapshot

        self._previous_state = copy.deepcopy(self._initial_state)
        self._cpu.restore_state(self._initial_state)
        self._last_snapshot = None
        return None

    def run(self, max_steps: Optional[int] = None) -> StopReason:
        """
        HALT状態、ブレークポイント、またはmax_stepsに達するまでCPUの実行を継続します。
        開始時点のPCにあるブレークポイントでは停止しません。
        """
        self._running = True
        steps = 0

        while self._running:
            if self._is_halted():
                self._running = False
                return StopReason.HALTED

            if max_steps is not None and steps >= max_steps:
                self._running = False
                return StopReason.STEP_LIMIT

            current_pc = self._cpu.get_state().pc
            if steps > 0 and self._pc_breakpoint_hit(current_pc):
                self._running = False
                print(f"Breakpoint hit at PC: {current_pc:#06x}")
                return StopReason.BREAKPOINT

            snapshot = self.step_instruction()
            steps += 1

            if self._check_other_breakpoints(snapshot):
                self._running = False
                print(f"Breakpoint hit at PC: {snapshot.state.pc:#06x}")
                return StopReason.BREAKPOINT

        return StopReason.STOPPED

    def run_back(self) -> StopReason:
        """
        CPUの実行を逆方向（過去）へ連続的に戻します。
        """
        self._running = True

        while self._running:
            snapshot = self.step_back()

            if snapshot is None:
                self._running = False
                print("Reached start of history.")
                return StopReason.STOPPED

            current_pc = snapshot.state.pc
            if self._pc_breakpoint_hit(current_pc):
                self._running = False
                print(f"Reverse Breakpoint hit at PC: {current_pc:#06x}")
                return StopReason.BREAKPOINT

            # 戻った時点のSnapshot（＝その命令実行直後の状態）で評価する
            if self._check_other_breakpoints(snapshot):
                self._running = False
                print(f"Reverse Breakpoint hit at PC: {snapshot.state.pc:#06x}")
                return StopReason.BREAKPOINT

        return StopReason.STOPPED

    def stop(self) -> None:
        self._running = False
