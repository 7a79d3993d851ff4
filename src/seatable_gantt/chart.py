import json
from pathlib import Path

from .models import OutputItem


def gantt_options(series: list[OutputItem]) -> dict:
    """生成甘特组件的完整配置（series 即组件的全部输入）"""
    return {
        "series": [item.to_dict() for item in series],
        "chart": {"height": max(400, len(series) * 50)},
        "plotOptions": {"bar": {"horizontal": True, "barHeight": "60%"}},
        "xaxis": {"type": "datetime"},
    }


def write_chart(path: str | Path, series: list[OutputItem]) -> Path:
    path = Path(path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(gantt_options(series), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    return path
