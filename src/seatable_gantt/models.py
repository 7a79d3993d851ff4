from dataclasses import dataclass


# 目标字段 → 默认源路径
DEFAULT_FIELD_MAP = {
    "id": "id",
    "name": "name",
    "startTime": "start_on",
    "endTime": "due_on",
    "progress": "completed_percentage",
    "parentId": "parent.id",
    "dependencies": "dependencies",
    "completed": "completed",
}

TARGET_KEYS = tuple(DEFAULT_FIELD_MAP)

UNTITLED = "Untitled Task"


@dataclass(frozen=True)
class OutputItem:
    id: str                          # 任务标识
    name: str                        # 显示名称
    start_time: str                  # MM-DD-YYYY
    end_time: str                    # MM-DD-YYYY
    progress: int = 0                # 0-100
    parent_id: str | None = None     # 父任务标识

    @property
    def dependencies(self) -> list[str] | None:
        """与 parentId 同义，兼容按 dependencies 建立层级的甘特组件"""
        return [self.parent_id] if self.parent_id else None

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "progress": self.progress,
        }
        if self.parent_id:
            data["parentId"] = self.parent_id
            data["dependencies"] = self.dependencies
        return data
