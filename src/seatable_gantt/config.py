import os
import tomllib
from pathlib import Path

DEFAULT_MAPPING_FILE = "~/.config/seatable-gantt/mapping.json"


def find_config() -> Path:
    """查找顺序：环境变量 > ./config.toml > ~/.config/seatable-gantt/config.toml"""
    config_path = os.environ.get("SEATABLE_GANTT_CONFIG")
    if config_path:
        return Path(config_path)
    local = Path("config.toml")
    if local.exists():
        return local
    return Path.home() / ".config" / "seatable-gantt" / "config.toml"


def load_config(path: str | Path | None = None) -> dict:
    """加载配置，优先级：环境变量 > config.toml > 默认值"""
    config_path = Path(path) if path else find_config()
    with open(config_path, "rb") as f:
        config = tomllib.load(f)

    # 环境变量覆盖 token
    env_token = os.environ.get("SEATABLE_API_TOKEN")
    if env_token:
        config.setdefault("seatable", {})["api_token"] = env_token

    gantt = config.setdefault("gantt", {})
    gantt.setdefault("mapping_file", DEFAULT_MAPPING_FILE)
    gantt.setdefault("output", "gantt.json")
    gantt.setdefault("poll_interval", 0)
    return config
