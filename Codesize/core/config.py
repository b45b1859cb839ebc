import dataclasses
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from Codesize.core.errors import ConfigError

# EIP-170 runtime code limit
MAX_CONTRACT_SIZE = 24576

@dataclasses.dataclass
class SizerConfig:
    artifacts_dir: Path = Path("artifacts")
    history_path: Path = Path("cache") / ".contract_sizes.json"
    max_contract_size: int = MAX_CONTRACT_SIZE
    min_size: int = 0
    include_tests: bool = False

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'SizerConfig':
        cfg = SizerConfig()
        if "artifacts_dir" in data:
            cfg.artifacts_dir = Path(data["artifacts_dir"])
        if "history_path" in data:
            cfg.history_path = Path(data["history_path"])
        if "max_contract_size" in data:
            cfg.max_contract_size = _as_int("max_contract_size", data["max_contract_size"])
        if "min_size" in data:
            cfg.min_size = _as_int("min_size", data["min_size"])
        if "include_tests" in data:
            cfg.include_tests = bool(data["include_tests"])
        return cfg

    @staticmethod
    def from_env_or_file(env: Optional[Dict[str, str]] = None) -> 'SizerConfig':
        env = os.environ if env is None else env

        # 1. Config file
        config_path = env.get("CODESIZE_CONFIG_PATH")
        cfg = SizerConfig()
        if config_path and os.path.exists(config_path):
            try:
                with open(config_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                raise ConfigError(f"Failed to read config {config_path}: {e}")
            if not isinstance(data, dict):
                raise ConfigError(f"Config {config_path} must contain a JSON object")
            cfg = SizerConfig.from_dict(data)

        # 2. Env overrides
        if env.get("CODESIZE_ARTIFACTS_DIR"):
            cfg.artifacts_dir = Path(env["CODESIZE_ARTIFACTS_DIR"])
        if env.get("CODESIZE_HISTORY_PATH"):
            cfg.history_path = Path(env["CODESIZE_HISTORY_PATH"])
        if env.get("CODESIZE_MAX_CONTRACT_SIZE"):
            cfg.max_contract_size = _as_int("CODESIZE_MAX_CONTRACT_SIZE", env["CODESIZE_MAX_CONTRACT_SIZE"])

        return cfg

def _as_int(key: str, value: Any) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    if n < 0:
        raise ConfigError(f"{key} must not be negative, got {n}")
    return n
