"""ローカル git リポジトリからタグとコミット情報を取得するクライアント。

git 実行ファイルをサブプロセスとして呼び出す。実行ファイルは環境変数
``CHGLOG_GIT`` で差し替えられる（デフォルト: ``git``）。

既知の制約:
    タグの並び順は ``taggerdate`` を使うため、軽量タグ（lightweight tag）同士の
    相対順序は git の出力順に従う。
"""

import logging
import os
import subprocess

from chglog.parser import FIELD_SEP, RawCommit, parse_log_output

logger = logging.getLogger(__name__)

# %x1f は FIELD_SEP と一致させること
LOG_FORMAT = "%s%x1f%h%x1f%H"


class GitCommandError(RuntimeError):
    """git コマンドの実行に失敗した。"""

    def __init__(self, args: list[str], stderr: str = ""):
        self.command = args
        self.stderr = stderr.strip()
        message = f"git {' '.join(args)} failed"
        if self.stderr:
            message = f"{message}: {self.stderr}"
        super().__init__(message)


def _git_executable() -> str:
    return os.environ.get("CHGLOG_GIT") or "git"


def _run_git(repo: str, args: list[str]) -> str:
    """リポジトリ内で git を実行し標準出力を返す。"""
    logger.debug("Running git %s in %s", " ".join(args), repo)
    try:
        result = subprocess.run(
            [_git_executable(), *args],
            cwd=repo,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=True,
        )
    except FileNotFoundError as e:
        raise GitCommandError(args, f"git executable not found: {e}") from e
    except subprocess.CalledProcessError as e:
        raise GitCommandError(args, e.stderr or "") from e
    return result.stdout


def is_local_git_repo(path: str) -> bool:
    """パスがローカル git リポジトリ（.git ディレクトリを持つ）かを判定する。"""
    return os.path.isdir(os.path.join(os.path.realpath(path), ".git"))


def list_tags_by_date(repo: str) -> list[str]:
    """タグ名の一覧を返す。新しい順。"""
    output = _run_git(repo, ["tag", "--sort=-taggerdate"])
    tags = [line.strip() for line in output.splitlines() if line.strip()]
    logger.info("Found %d tag(s) in %s", len(tags), repo)
    return tags


def tag_date(repo: str, tag: str) -> str:
    """タグが指すコミットの日付を YYYY-MM-DD で返す。"""
    return _run_git(repo, ["log", "-1", "--format=%ad", "--date=short", tag]).strip()


def list_commits(repo: str, start: str | None, end: str) -> list[RawCommit]:
    """区間内のコミットを取得する。

    Args:
        repo: リポジトリのパス。
        start: 区間の開始タグ（含まない）。None の場合は end から到達できる全コミット。
        end: 区間の終了タグ。start と同じ場合は end のコミット 1 件のみ。

    Returns:
        git が出力した順の RawCommit リスト。
    """
    fmt = f"--format={LOG_FORMAT}"
    if start is None:
        args = ["log", end, fmt]
    elif start == end:
        args = ["log", end, fmt, "-1"]
    else:
        args = ["log", f"{start}...{end}", fmt]

    commits = parse_log_output(_run_git(repo, args))
    logger.info("Fetched %d commit(s) for %s..%s", len(commits), start or "(root)", end)
    return commits


def initial_commit_id(repo: str) -> str:
    """HEAD の最初のコミット（親を持たないコミット）の ID を返す。"""
    roots = _run_git(repo, ["rev-list", "--max-parents=0", "HEAD"]).split()
    # 複数のルートがある場合は最も古いもの（rev-list は新しい順）
    return roots[-1] if roots else ""


def initial_tagged_commit_id(repo: str) -> str:
    """タグが付いたコミットのうち最も古いものの ID を返す。"""
    output = _run_git(
        repo, ["log", "--tags", "--simplify-by-decoration", "--format=%H", "--reverse"]
    )
    ids = output.split()
    return ids[0] if ids else ""
