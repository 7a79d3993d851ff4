import json
import logging
import os
import tempfile
from pathlib import Path

from .mapping import FieldMapping

logger = logging.getLogger(__name__)


class MappingStore:
    """字段映射的本地持久化（JSON 文件，只存用户覆盖的部分）"""

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def load(self):
        """读取失败或文件不存在时返回 None，由调用方回退到默认映射"""
        if not self.path.exists():
            return None
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("无法读取映射配置 %s：%s", self.path, e)
            return None

    def load_mapping(self) -> FieldMapping:
        return FieldMapping.from_settings(self.load())

    def save(self, mapping: FieldMapping):
        """整体写入：先写临时文件再替换，避免留下半截配置"""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".mapping-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(mapping.overrides, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        logger.info("映射配置已保存：%s", self.path)
