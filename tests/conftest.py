"""
Pytest fixtures shared by the seatable-gantt tests.
"""

import pytest

from seatable_gantt.mapping import FieldMapping


@pytest.fixture
def default_mapping():
    return FieldMapping()


@pytest.fixture
def design_task():
    return {
        "id": "1",
        "name": "Design",
        "start_on": "2024-01-01",
        "due_on": "2024-01-05",
        "completed": False,
        "completed_percentage": 40,
    }


@pytest.fixture
def epic_forest():
    """没有日期的父任务 + 一个带日期的子任务"""
    return [
        {
            "id": "1",
            "name": "Epic",
            "childRecords": [
                {"id": "2", "name": "Sub", "start_on": "2024-02-01", "due_on": "2024-02-02"},
            ],
        }
    ]


@pytest.fixture
def seatable_rows():
    return [
        {"_id": "r1", "任务名": "Epic", "父任务": []},
        {"_id": "r2", "任务名": "Build", "开始": "2024-03-01", "结束": "2024-03-04",
         "父任务": [{"row_id": "r1", "display_value": "Epic"}]},
        {"_id": "r3", "任务名": "Ship", "结束": "2024-03-10", "父任务": ["r2"]},
        {"_id": "r4", "任务名": "Docs", "开始": "2024-03-02"},
    ]
