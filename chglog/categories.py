"""コミット種別と見出しの定義モジュール。"""

from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType


class CommitType(StrEnum):
    """見出しが定義されているコミット種別。"""
    CHORE = "chore"
    DOCS = "docs"
    FEAT = "feat"
    FIX = "fix"
    OTHER = "other"
    PERF = "perf"
    REFACTOR = "refactor"
    REVERT = "revert"
    STYLE = "style"
    TEST = "test"


# 種別・カテゴリが存在しないことを表す番兵値
EMPTY = "EMPTY"
# カテゴリなし、空の ()、ワイルドカード (*) を表す番兵値
GLOBAL = "GLOBAL"

DEFAULT_HEADING = "Other"

TYPE_HEADINGS: Mapping[str, str] = MappingProxyType({
    CommitType.CHORE: "Chores",
    CommitType.DOCS: "Documentation Changes",
    CommitType.FEAT: "New Features",
    CommitType.FIX: "Bug Fixes",
    CommitType.OTHER: "Miscellaneous Tasks",
    CommitType.PERF: "Performance Enhancements",
    CommitType.REFACTOR: "Code Improvements",
    CommitType.REVERT: "Revert a Change",
    CommitType.STYLE: "Stylistic Enhancements",
    CommitType.TEST: "Tests",
})


def heading_for(commit_type: str, headings: Mapping[str, str] = TYPE_HEADINGS) -> str:
    """種別に対応する見出しを返す。未知の種別は "Other"。"""
    return headings.get(commit_type, DEFAULT_HEADING)
