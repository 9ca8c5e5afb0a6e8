import yaml
from typing import Dict, Any
from .models import SystemConfig, MemoryRegion, CpuInitialState

class ConfigLoader:
    def load_from_file(self, path: str) -> SystemConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return self._parse_config(data or {})

    def load_from_string(self, text: str) -> SystemConfig:
        return self._parse_config(yaml.safe_load(text) or {})

    def _parse_config(self, data: Dict[str, Any]) -> SystemConfig:
        arch = data.get("architecture", "LC3")

        memory_map = []
        for region_data in data.get("memory_map") or []:
            memory_map.append(MemoryRegion(
                start=self._parse_int(region_data.get("start")),
                end=self._parse_int(region_data.get("end")),
                type=region_data.get("type", "RAM"),
                label=region_data.get("label", ""),
                permissions=str(region_data.get("permissions", "RW")).upper()
            ))

        initial_state_data = data.get("initial_state") or {}
        registers = {
            str(name).lower(): self._parse_int(value)
            for name, value in (initial_state_data.get("registers") or {}).items()
        }
        cc = str(initial_state_data.get("cc", "Z")).upper()
        if cc not in ("N", "Z", "P"):
            raise ValueError(f"Invalid condition code: {cc}")
        initial_state = CpuInitialState(
            pc=self._parse_int(initial_state_data.get("pc", 0x3000)),
            cc=cc,
            registers=registers
        )

        memory = {
            self._parse_int(addr): self._parse_int(value)
            for addr, value in (data.get("memory") or {}).items()
        }

        return SystemConfig(
            architecture=arch,
            memory_map=memory_map,
            initial_state=initial_state,
            memory=memory
        )

    # @intent:rationale LC-3のアセンブリ慣例に合わせ、"0x"に加えて"x"接頭辞の16進表記も受け付けます。
    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            text = value.strip()
            try:
                if text.lower().startswith("0x"):
                    return int(text, 16)
                if text.lower().startswith("x"):
                    return int(text[1:], 16)
                return int(text)
            except ValueError:
                pass
        raise ValueError(f"Invalid integer format: {value}")
