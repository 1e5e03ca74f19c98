"""分類・整列済みのコミットを Markdown に整形するモジュール。"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from chglog.categories import EMPTY
from chglog.grouping import Section
from chglog.parser import ClassifiedCommit


@dataclass
class ChangelogRange:
    """タグ間 1 区間分の変更履歴。

    ``start_tag`` が None の場合は ``end_tag`` から到達できる全履歴を表す。
    ``start_tag == end_tag`` の場合は ``end_tag`` のコミット 1 件のみ。
    """

    start_tag: str | None
    end_tag: str
    tag_date: str
    repo_link_base: str
    sections: list[Section] = field(default_factory=list)

    @property
    def tag(self) -> str:
        return self.end_tag


def format_commit_link(commit: ClassifiedCommit, repo_link_base: str) -> str:
    return f"[{commit.short_id}]({repo_link_base}/{commit.long_id})"


def format_bullet(commit: ClassifiedCommit, repo_link_base: str) -> str:
    """コミット 1 件分の箇条書き行を生成する。"""
    link = format_commit_link(commit, repo_link_base)
    if commit.category == EMPTY:
        return f"* {commit.subject_text} {link}"
    return f"* **{commit.category}**: {commit.subject_text} {link}"


def render_range(changelog_range: ChangelogRange) -> list[str]:
    """1 区間分の Markdown 行を生成する。

    Section ごとに空行と ``### 見出し`` を置き、その後にコミットを列挙する。
    コミットのない Section は出力しない。
    """
    lines = [f"## {changelog_range.tag} ({changelog_range.tag_date})"]
    for section in changelog_range.sections:
        if not section.commits:
            continue
        lines.append("")
        lines.append(f"### {section.heading}")
        for commit in section.commits:
            lines.append(format_bullet(commit, changelog_range.repo_link_base))
    return lines


def render_document(ranges: Iterable[ChangelogRange]) -> str:
    """区間を渡された順に連結し、変更履歴全体の Markdown を返す。"""
    lines: list[str] = []
    for changelog_range in ranges:
        lines.extend(render_range(changelog_range))
        lines.append("")
    if not lines:
        return ""
    return "\n".join(lines) + "\n"
