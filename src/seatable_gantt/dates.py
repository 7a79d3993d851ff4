from datetime import date, datetime


class DateFormatError(ValueError):
    pass


def format_date(value) -> str | None:
    """YYYY-MM-DD → MM-DD-YYYY；空值返回 None"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        value = value.isoformat()
    if not isinstance(value, str):
        raise DateFormatError(f"无法识别的日期：{value!r}")
    # 带时间的日期列（如 "2024-03-01 10:00"、ISO 的 "T"）只取日期部分
    value = value.split(" ")[0].split("T")[0]

    parts = value.split("-")
    if len(parts) != 3:
        raise DateFormatError(f"日期格式应为 YYYY-MM-DD：{value!r}")
    year, month, day = parts
    return f"{month}-{day}-{year}"
