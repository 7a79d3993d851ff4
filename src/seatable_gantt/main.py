import argparse
import json
import signal
import logging
import time

from .chart import write_chart
from .config import load_config
from .mapping import MappingConfigError
from .models import TARGET_KEYS
from .seatable_client import SeaTableClient
from .settings import MappingStore
from .timeline import build_series

logger = logging.getLogger("seatable-gantt")
_running = True


def _handle_signal(signum, frame):
    global _running
    _running = False
    logger.info("收到退出信号，正在停止...")


def _parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="seatable-gantt", description="把 SeaTable 任务表导出为甘特图数据")
    parser.add_argument("--config", help="config.toml 路径")
    parser.add_argument("--once", action="store_true", help="只运行一轮")
    parser.add_argument("--show-mapping", action="store_true", help="打印当前字段映射")
    parser.add_argument("--map", action="append", default=[], metavar="KEY=PATH",
                        help=f"设置字段映射，KEY 可选：{', '.join(TARGET_KEYS)}"
                             "（dependencies 仅为兼容保留，输出只含父任务）")
    parser.add_argument("--reset-mapping", action="store_true", help="恢复默认字段映射")
    return parser.parse_args(argv)


def _edit_mapping(store: MappingStore, edits: list[str], reset: bool) -> int:
    """把修改合并成完整的一组覆盖项，校验通过后整体保存"""
    current = store.load_mapping()
    overrides = {} if reset else current.overrides
    for edit in edits:
        key, sep, path = edit.partition("=")
        if not sep:
            logger.error("映射参数格式应为 KEY=PATH：%s", edit)
            return 2
        overrides[key.strip()] = path
    try:
        mapping = current.replace(overrides)
    except MappingConfigError as e:
        logger.error("映射未保存：%s", e)
        return 2
    if "dependencies" in mapping.overrides:
        logger.info("dependencies 映射仅为兼容保留，导出的 dependencies 只包含父任务")
    store.save(mapping)
    return 0


def main(argv=None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )

    args = _parse_args(argv)
    config = load_config(args.config)
    gantt = config["gantt"]
    store = MappingStore(gantt["mapping_file"])

    if args.map or args.reset_mapping:
        return _edit_mapping(store, args.map, args.reset_mapping)
    if args.show_mapping:
        print(json.dumps(store.load_mapping().as_dict(), ensure_ascii=False, indent=2))
        return 0

    poll_interval = 0 if args.once else gantt["poll_interval"]
    seatable = config["seatable"]
    client = SeaTableClient(
        server_url=seatable["server_url"],
        api_token=seatable["api_token"],
        table_name=seatable.get("table_name", "任务"),
        parent_column=seatable.get("parent_column", "父任务"),
    )
    client.init()
    logger.info("启动成功，表=%s，间隔=%ds", client.table_name, poll_interval)

    if poll_interval <= 0:
        _run_once(config, client, store)
        return 0

    signal.signal(signal.SIGTERM, _handle_signal)
    signal.signal(signal.SIGINT, _handle_signal)

    while _running:
        try:
            _run_once(config, client, store)
            client.refresh_auth_if_needed()
        except Exception:
            logger.exception("本轮导出出错，将在下次重试")
        time.sleep(poll_interval)

    logger.info("已停止")
    return 0


def _run_once(config: dict, client: SeaTableClient, store: MappingStore):
    # 每轮重新读取映射，保存的修改下一轮即生效
    mapping = store.load_mapping()
    forest = client.fetch_forest(config["seatable"].get("view_name") or None)
    series = build_series(forest, mapping)

    if not forest:
        logger.warning("表中没有任务")
    elif not series:
        logger.warning("没有带日期的任务（共 %d 个顶层任务）", len(forest))

    path = write_chart(config["gantt"]["output"], series)
    logger.info("已导出 %d 个任务到 %s", len(series), path)


if __name__ == "__main__":
    raise SystemExit(main())
