"""Changelog Generator のメインエントリーポイント。"""

import argparse
import logging
import os
import re
import sys

from dotenv import load_dotenv

load_dotenv()

from chglog.categories import TYPE_HEADINGS
from chglog.git_client import (
    GitCommandError,
    initial_commit_id,
    initial_tagged_commit_id,
    is_local_git_repo,
    list_commits,
    list_tags_by_date,
    tag_date,
)
from chglog.grouping import build_sections
from chglog.parser import classify_commits
from chglog.renderer import ChangelogRange, render_document


def resolve_log_level(name: str | None) -> int | None:
    """ログレベル名を数値に変換する。未設定なら WARNING、未知の名前なら None。"""
    return logging.getLevelNamesMapping().get((name or "WARNING").strip().upper())


_log_level_name = os.environ.get("CHGLOG_LOG_LEVEL")
_log_level = resolve_log_level(_log_level_name)

logging.basicConfig(
    level=logging.WARNING if _log_level is None else _log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

if _log_level is None:
    logger.warning("Unknown CHGLOG_LOG_LEVEL %r, falling back to WARNING", _log_level_name)

APP_DESC = "Changelog Generator"
VERSION = "0.1.0"
USAGE = "%(prog)s --[help|version] | <REPO> | <REPO> <URL>"

_URL_RE = re.compile(r"(file|https?)://[-A-Za-z0-9+&@#/%?=~_|!:,.;]*[-A-Za-z0-9+&@#/%=~_|]")


def is_valid_url_string(url: str) -> bool:
    """リンク先として使える URL 文字列かを判定する。"""
    return bool(_URL_RE.fullmatch(url))


def plan_ranges(repo: str, repo_link_base: str) -> list[ChangelogRange]:
    """タグ履歴から出力する区間を新しい順に組み立てる。

    隣り合うタグの組ごとに 1 区間を作り、新しい方のタグを見出しにする。
    最も古いタグは、最初のコミットに付いていればそのコミット 1 件、
    そうでなければそのタグまでの全履歴を区間とする。
    """
    tags = list_tags_by_date(repo)
    if not tags:
        logger.warning("No tags found in %s, nothing to do", repo)
        return []

    ranges = []
    for newer, older in zip(tags, tags[1:]):
        ranges.append(ChangelogRange(older, newer, tag_date(repo, newer), repo_link_base))

    oldest = tags[-1]
    if initial_tagged_commit_id(repo) == initial_commit_id(repo):
        start = oldest
    else:
        start = None
    ranges.append(ChangelogRange(start, oldest, tag_date(repo, oldest), repo_link_base))
    return ranges


def build_range(repo: str, changelog_range: ChangelogRange) -> ChangelogRange:
    """区間のコミットを取得・分類し、Section を設定する。"""
    raws = list_commits(repo, changelog_range.start_tag, changelog_range.end_tag)
    changelog_range.sections = build_sections(classify_commits(raws), TYPE_HEADINGS)
    return changelog_range


def generate_changelog(repo: str, repo_link_base: str) -> str:
    """リポジトリ全体の変更履歴を Markdown 文字列で返す。"""
    ranges = [build_range(repo, r) for r in plan_ranges(repo, repo_link_base)]
    logger.info("Rendered %d range(s)", len(ranges))
    return render_document(ranges)


def _die(parser: argparse.ArgumentParser, msg: str) -> None:
    print(f"ERROR: {msg}", file=sys.stderr)
    parser.print_usage(sys.stderr)
    sys.exit(1)


class _ArgumentParser(argparse.ArgumentParser):
    """引数の誤りを他の入力エラーと同じ形式・終了コードで報告するパーサー。"""

    def error(self, message: str) -> None:
        logger.debug("Argument error: %s", message)
        _die(self, "Incorrect arguments.")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="gen-chg-log",
        usage=USAGE,
        description=f"{APP_DESC} ({VERSION}).",
        add_help=False,
    )
    parser.add_argument("-h", "-H", "--help", action="help", help="使い方を表示して終了する")
    parser.add_argument(
        "-v",
        "-V",
        "--version",
        action="version",
        version=f"Version: {VERSION}",
    )
    parser.add_argument("repo", help="ローカル git リポジトリのパス")
    parser.add_argument(
        "url",
        nargs="?",
        default=None,
        help="コミットリンクのベース URL（デフォルト: file://<リポジトリの絶対パス>）",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not is_local_git_repo(args.repo):
        _die(parser, "Not a local git repository.")

    # URL は引数 > CHGLOG_REPO_URL > ローカルパスの順
    repo = os.path.realpath(args.repo)
    url = args.url or os.environ.get("CHGLOG_REPO_URL")
    if url is not None and not is_valid_url_string(url):
        _die(parser, "Not a valid URL string.")
    repo_link_base = url or f"file://{repo}"

    try:
        document = generate_changelog(repo, repo_link_base)
    except GitCommandError as e:
        logger.error("Failed to read repository history: %s", e)
        sys.exit(1)

    sys.stdout.write(document)


if __name__ == "__main__":
    main()
