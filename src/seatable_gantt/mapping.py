import logging
from collections.abc import Mapping

from .models import DEFAULT_FIELD_MAP, TARGET_KEYS

logger = logging.getLogger(__name__)


class _Missing:
    """路径解析失败的标记（区别于值本身为 None）"""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "MISSING"


MISSING = _Missing()


class MappingConfigError(ValueError):
    pass


def resolve_path(record, path: str):
    """按点分路径逐级取值，如 parent.id；任何一级取不到都返回 MISSING，不抛异常"""
    value = record
    for segment in path.split("."):
        if not isinstance(value, Mapping) or segment not in value:
            return MISSING
        value = value[segment]
    return value


def _validate(overrides) -> dict[str, str]:
    if not isinstance(overrides, Mapping):
        raise MappingConfigError(f"映射配置必须是字典，实际为 {type(overrides).__name__}")
    for key, path in overrides.items():
        if key not in TARGET_KEYS:
            raise MappingConfigError(f"未知的目标字段：{key!r}")
        if not isinstance(path, str) or not path.strip():
            raise MappingConfigError(f"目标字段 {key!r} 的源路径无效：{path!r}")
    return {key: path.strip() for key, path in overrides.items()}


class FieldMapping:
    """目标字段 → 源路径。未覆盖的字段使用 DEFAULT_FIELD_MAP。

    只能整体替换：构造时整组校验，任何一项不合法则整组拒绝。
    """

    def __init__(self, overrides: Mapping | None = None):
        self._overrides = _validate(overrides or {})

    @classmethod
    def from_settings(cls, raw) -> "FieldMapping":
        """从持久化设置加载；为空或格式不对时整体回退到默认值"""
        if raw is None:
            return cls()
        try:
            return cls(raw)
        except MappingConfigError as e:
            logger.warning("映射配置无效，使用默认映射：%s", e)
            return cls()

    def replace(self, overrides: Mapping | None) -> "FieldMapping":
        return type(self)(overrides)

    def get(self, key: str) -> str:
        if key not in TARGET_KEYS:
            raise KeyError(key)
        return self._overrides.get(key, DEFAULT_FIELD_MAP[key])

    def resolve(self, record, key: str):
        return resolve_path(record, self.get(key))

    @property
    def overrides(self) -> dict[str, str]:
        return dict(self._overrides)

    def as_dict(self) -> dict[str, str]:
        return {key: self.get(key) for key in TARGET_KEYS}

    def __eq__(self, other):
        if not isinstance(other, FieldMapping):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __repr__(self):
        return f"FieldMapping({self._overrides!r})"
