"""把任务森林转换为甘特图序列。

流程：逐条记录按 FieldMapping 取字段（normalize），按层级先序遍历并去重（walk），
最后得到按首次访问顺序排列的 OutputItem 列表（build_series）。
纯函数，不修改输入记录。
"""
import logging
from collections.abc import Mapping

from .dates import DateFormatError, format_date
from .mapping import MISSING, FieldMapping
from .models import UNTITLED, OutputItem

logger = logging.getLogger(__name__)

CHILDREN_KEY = "childRecords"


def _absent(value) -> bool:
    return value is MISSING or value is None or value == ""


def _to_progress(value) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return 0
    if not isinstance(value, (int, float)) or value != value:  # NaN
        return 0
    return int(max(0, min(100, value)))


def resolve_identity(record, mapping: FieldMapping) -> str | None:
    identity = mapping.resolve(record, "id")
    return None if _absent(identity) else str(identity)


def normalize(record, mapping: FieldMapping, inherited_parent_id: str | None = None):
    """单条记录 → (identity, OutputItem | None)

    起止日期都缺失时返回 (identity, None)，调用方仍可登记该节点供子任务挂靠。
    取不到标识时返回 (None, None)。
    日期格式错误时抛 DateFormatError。
    """
    identity = resolve_identity(record, mapping)
    if identity is None:
        return None, None

    # 上层传下来的父任务优先于记录自带的 parent 字段
    parent_id = inherited_parent_id
    if parent_id is None:
        own_parent = mapping.resolve(record, "parentId")
        parent_id = None if _absent(own_parent) else str(own_parent)

    start = mapping.resolve(record, "startTime")
    end = mapping.resolve(record, "endTime")
    if _absent(start) and _absent(end):
        return identity, None
    # 只有一端日期时，起止取同一天
    if _absent(start):
        start = end
    if _absent(end):
        end = start

    if mapping.resolve(record, "completed") is True:
        progress = 100
    else:
        progress = _to_progress(mapping.resolve(record, "progress"))

    name = mapping.resolve(record, "name")
    item = OutputItem(
        id=identity,
        name=UNTITLED if _absent(name) else str(name),
        start_time=format_date(start),
        end_time=format_date(end),
        progress=progress,
        parent_id=parent_id,
    )
    return identity, item


def walk(forest, mapping: FieldMapping, children_key: str = CHILDREN_KEY) -> list[OutputItem]:
    """先序深度优先遍历；同一 identity 只处理一次（重复引用、环都在这里截断）"""
    series: list[OutputItem] = []
    visited: dict[str, OutputItem | None] = {}
    anonymous: set[int] = set()

    # 栈代替递归，逆序压栈以保持兄弟节点的原始顺序
    stack = [(record, None) for record in reversed(forest)]
    while stack:
        record, inherited = stack.pop()

        identity = resolve_identity(record, mapping)
        if identity is None:
            if id(record) in anonymous:
                continue
            anonymous.add(id(record))
            logger.warning("记录缺少标识字段 %r，跳过", mapping.get("id"))
            # 子任务越过本节点挂到上一层
            child_parent = inherited
        elif identity in visited:
            continue
        else:
            try:
                _, item = normalize(record, mapping, inherited)
            except DateFormatError as e:
                logger.warning("任务 %s 日期无效，跳过：%s", identity, e)
                item = None
            visited[identity] = item
            if item is not None:
                series.append(item)
            child_parent = identity

        children = record.get(children_key) if isinstance(record, Mapping) else None
        if isinstance(children, list):
            stack.extend((child, child_parent) for child in reversed(children))

    return series


def build_series(forest, mapping: FieldMapping, children_key: str = CHILDREN_KEY) -> list[OutputItem]:
    """入口：空森林或全部无日期时返回空列表"""
    if not forest:
        return []
    return walk(forest, mapping, children_key)
