import time
import logging
from seatable_api import Base

logger = logging.getLogger(__name__)

PAGE_SIZE = 1000


def _link_row_id(value) -> str | None:
    """link 列的值：新版为 [{"row_id": ..., "display_value": ...}]，旧版为 [row_id]，取第一个"""
    if not isinstance(value, list) or not value:
        return None
    first = value[0]
    if isinstance(first, dict):
        return first.get("row_id")
    if isinstance(first, str):
        return first
    return None


class SeaTableClient:
    def __init__(self, server_url: str, api_token: str, table_name: str, parent_column: str = "父任务"):
        self.server_url = server_url
        self.api_token = api_token
        self.table_name = table_name
        self.parent_column = parent_column
        self.base = None
        self._auth_time = 0

    def init(self):
        """认证"""
        self.base = Base(self.api_token, self.server_url)
        self.base.auth()
        self._auth_time = time.time()
        logger.info("SeaTable 连接成功：表=%s", self.table_name)

    def list_rows(self, view_name: str | None = None) -> list[dict]:
        """分页读取全部行"""
        rows = []
        start = 0
        while True:
            page = self.base.list_rows(self.table_name, view_name=view_name, start=start, limit=PAGE_SIZE)
            rows.extend(page)
            if len(page) < PAGE_SIZE:
                return rows
            start += PAGE_SIZE

    def fetch_forest(self, view_name: str | None = None) -> list[dict]:
        """读取任务表并按父任务 link 列组装成森林（每条记录带 childRecords）"""
        rows = self.list_rows(view_name)
        return build_forest(rows, self.parent_column)

    def refresh_auth_if_needed(self):
        """base_token 有效期 3 天，超 2 天自动刷新"""
        if time.time() - self._auth_time > 2 * 86400:
            self.base.auth()
            self._auth_time = time.time()
            logger.info("SeaTable token 已刷新")


def build_forest(rows: list[dict], parent_column: str) -> list[dict]:
    """行 → 记录：id 取 _id，parent 取 link 列第一个关联行，childRecords 为子记录列表。

    不修改 SDK 返回的行。根为没有父任务（或父任务不在本次结果中）的行；
    成环而从任何根都走不到的行按原顺序追加为根。
    """
    records: dict[str, dict] = {}
    parents: dict[str, str | None] = {}
    for row in rows:
        row_id = row.get("_id")
        if not row_id or row_id in records:
            continue
        record = dict(row)
        record["id"] = row_id
        record["childRecords"] = []
        parent_id = _link_row_id(row.get(parent_column))
        if parent_id and parent_id != row_id:
            record["parent"] = {"id": parent_id}
        records[row_id] = record
        parents[row_id] = parent_id

    roots = []
    for row_id, record in records.items():
        parent_id = parents[row_id]
        if parent_id and parent_id in records and parent_id != row_id:
            records[parent_id]["childRecords"].append(record)
        else:
            roots.append(record)

    reached: set[str] = set()
    for record in roots:
        _mark_reached(record, reached)

    for row_id, record in records.items():
        if row_id in reached:
            continue
        logger.warning("任务 %s 的父任务链成环，作为顶层任务处理", row_id)
        roots.append(record)
        _mark_reached(record, reached)

    return roots


def _mark_reached(root: dict, reached: set[str]):
    stack = [root]
    while stack:
        record = stack.pop()
        if record["id"] in reached:
            continue
        reached.add(record["id"])
        stack.extend(record["childRecords"])
