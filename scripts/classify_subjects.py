#!/usr/bin/env python3
"""コミット件名の分類結果を確認するためのスクリプト。

指定区間のコミットを分類し、短縮 ID・種別・カテゴリ・見出し・件名を CSV に保存する。
規約に従っていない件名（EMPTY）や未知の種別を洗い出す用途を想定する。

Usage:
    # HEAD から到達できる全コミット
    uv run python scripts/classify_subjects.py ~/local_repo

    # タグ間を指定して標準出力へ
    uv run python scripts/classify_subjects.py . --start v1.0.0 --end v1.1.0 --output -
"""

import argparse
import csv
import logging
import sys
from pathlib import Path

# プロジェクトルートをパスに追加
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from dotenv import load_dotenv

load_dotenv()

from chglog.categories import EMPTY, TYPE_HEADINGS, heading_for
from chglog.git_client import GitCommandError, is_local_git_repo, list_commits
from chglog.grouping import sort_key
from chglog.parser import ClassifiedCommit, classify_commits

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

FIELDNAMES = ["short_id", "type", "category", "heading", "subject"]


def to_rows(commits: list[ClassifiedCommit]) -> list[dict]:
    """分類済みコミットを CSV 行に変換する（出力順は changelog と同じ）。"""
    return [
        {
            "short_id": c.short_id,
            "type": c.type,
            "category": c.category,
            "heading": heading_for(c.type),
            "subject": c.subject_text,
        }
        for c in sorted(commits, key=sort_key)
    ]


def write_rows(rows: list[dict], output: str) -> None:
    if output == "-":
        writer = csv.DictWriter(sys.stdout, fieldnames=FIELDNAMES)
        writer.writeheader()
        writer.writerows(rows)
        return
    with open(output, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        writer.writerows(rows)


def main():
    parser = argparse.ArgumentParser(description="コミット件名の分類結果を CSV に出力")
    parser.add_argument("repo", help="ローカル git リポジトリのパス")
    parser.add_argument("--start", default=None, help="区間の開始タグ（含まない）")
    parser.add_argument("--end", default="HEAD", help="区間の終了リビジョン（デフォルト: HEAD）")
    parser.add_argument(
        "--output",
        default="classification.csv",
        help="出力先 CSV（- で標準出力、デフォルト: classification.csv）",
    )
    args = parser.parse_args()

    if not is_local_git_repo(args.repo):
        print("ERROR: Not a local git repository.", file=sys.stderr)
        sys.exit(1)

    try:
        raws = list_commits(args.repo, args.start, args.end)
    except GitCommandError as e:
        logger.error("%s", e)
        sys.exit(1)

    commits = classify_commits(raws)
    rows = to_rows(commits)
    write_rows(rows, args.output)

    unstructured = sum(1 for c in commits if c.type == EMPTY)
    unknown = sum(1 for c in commits if c.type != EMPTY and c.type not in TYPE_HEADINGS)
    print(f"\n総コミット数: {len(commits)}", file=sys.stderr)
    print(f"  規約外の件名（EMPTY）: {unstructured}件", file=sys.stderr)
    print(f"  未知の種別（Other）: {unknown}件", file=sys.stderr)


if __name__ == "__main__":
    main()
