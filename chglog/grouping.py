"""分類済みコミットを種別・カテゴリごとにまとめ、出力順を決定するモジュール。

出力順は入力順に依存しない。種別、カテゴリ、短縮 ID の昇順（同値の場合は
完全 ID、件名の順）で並べるため、同じコミット集合からは常に同じ順序が得られる。
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from itertools import groupby

from chglog.categories import TYPE_HEADINGS, heading_for
from chglog.parser import ClassifiedCommit


@dataclass
class Section:
    """種別 1 つ分のコミット群。"""

    type: str
    heading: str
    commits: list[ClassifiedCommit] = field(default_factory=list)

    @property
    def categories(self) -> dict[str, list[ClassifiedCommit]]:
        """カテゴリごとのコミット（カテゴリ昇順）。"""
        return {
            category: list(items)
            for category, items in groupby(self.commits, key=lambda c: c.category)
        }


def sort_key(commit: ClassifiedCommit) -> tuple[str, str, str, str, str]:
    return (commit.type, commit.category, commit.short_id, commit.long_id, commit.subject_text)


def group_commits(commits: Iterable[ClassifiedCommit]) -> dict[str, dict[str, list[ClassifiedCommit]]]:
    """type -> category -> コミット の入れ子 dict を決定的な順序で構築する。"""
    grouped: dict[str, dict[str, list[ClassifiedCommit]]] = {}
    for commit in sorted(commits, key=sort_key):
        grouped.setdefault(commit.type, {}).setdefault(commit.category, []).append(commit)
    return grouped


def build_sections(
    commits: Iterable[ClassifiedCommit],
    headings: Mapping[str, str] = TYPE_HEADINGS,
) -> list[Section]:
    """コミットを Section のリストにまとめる。

    Args:
        commits: 分類済みコミット（順不同）。
        headings: 種別 -> 見出しの対応表。含まれない種別は "Other" になる。

    Returns:
        種別昇順の Section リスト。空の Section は含まない。
    """
    sections = []
    for commit_type, by_category in group_commits(commits).items():
        section = Section(type=commit_type, heading=heading_for(commit_type, headings))
        for items in by_category.values():
            section.commits.extend(items)
        sections.append(section)
    return sections
