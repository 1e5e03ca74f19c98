"""コミットの件名行を解析し、種別・カテゴリ・件名に分類するモジュール。

件名行は ``type(category): subject`` 形式を想定するが、形式に従わない自由文も
受け付ける。分類は例外を送出せず、解釈できない行は件名全体を本文とする
``EMPTY`` 分類にフォールバックする。

対応する形式（優先順）:

    type: subject            -> (type, GLOBAL, subject)
    type(): subject          -> (type, GLOBAL, subject)
    type(category): subject  -> (type, category, subject)
    type(*): subject         -> (type, GLOBAL, subject)
    subject                  -> (EMPTY, EMPTY, subject)
"""

import logging
import re
from dataclasses import dataclass
from typing import NamedTuple

from chglog.categories import EMPTY, GLOBAL

logger = logging.getLogger(__name__)

# git log の出力レコードのフィールド区切り（ASCII Unit Separator）
FIELD_SEP = "\x1f"

_STRICT_PREFACE_RE = re.compile(r"(?P<type>[a-z]+)(?:\((?P<category>[a-z]*|\*)\))?")
_LOOSE_TYPE_RE = re.compile(r"(?P<type>[^\s()]+)")
_LOOSE_SCOPED_RE = re.compile(r"(?P<type>[^\s()]+)\((?P<category>[^\s()]*)\)")


@dataclass(frozen=True)
class RawCommit:
    """git から取得した 1 コミット分のレコード。

    ``malformed`` はフィールド数が想定外だったレコードを示す。その場合
    ``subject`` には行全体が入り、分類では常に件名のみの扱いになる。
    """

    subject: str
    short_id: str
    long_id: str
    malformed: bool = False


@dataclass(frozen=True)
class ClassifiedCommit:
    """分類済みのコミット。"""

    type: str
    category: str
    subject_text: str
    short_id: str
    long_id: str


class Classification(NamedTuple):
    type: str
    category: str
    subject_text: str


def _split_preface(text: str) -> tuple[str, str] | None:
    """括弧の外側にある最初のコロンで前置部と件名に分割する。"""
    depth = 0
    for i, ch in enumerate(text):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(depth - 1, 0)
        elif ch == ":" and depth == 0:
            return text[:i], text[i + 1:]
    return None


def _normalize_category(category: str | None) -> str:
    if not category or category == "*":
        return GLOBAL
    return category


def classify_subject(line: str) -> Classification:
    """件名行を (type, category, subject_text) に分類する。

    Args:
        line: コミットの件名行。

    Returns:
        Classification。どのような入力でも必ず結果を返す。
    """
    text = line.strip() if line else ""
    unstructured = Classification(EMPTY, EMPTY, text)

    parts = _split_preface(text)
    if parts is None:
        return unstructured

    preface, subject = parts
    subject = subject.strip()

    m = _STRICT_PREFACE_RE.fullmatch(preface)
    if m:
        return Classification(m.group("type"), _normalize_category(m.group("category")), subject)

    # 形式崩れの前置部はベストエフォートで復元する
    loose = preface.strip()
    m = _LOOSE_TYPE_RE.fullmatch(loose)
    if m:
        return Classification(m.group("type"), GLOBAL, subject)
    m = _LOOSE_SCOPED_RE.fullmatch(loose)
    if m:
        return Classification(m.group("type"), _normalize_category(m.group("category")), subject)

    logger.debug("Unrecognized subject preface, keeping whole line: %r", text)
    return unstructured


def classify_commit(raw: RawCommit) -> ClassifiedCommit:
    """RawCommit を ClassifiedCommit に変換する。"""
    if raw.malformed:
        commit_type, category, subject_text = EMPTY, EMPTY, raw.subject.strip()
    else:
        commit_type, category, subject_text = classify_subject(raw.subject)
    return ClassifiedCommit(
        type=commit_type,
        category=category,
        subject_text=subject_text,
        short_id=raw.short_id,
        long_id=raw.long_id,
    )


def classify_commits(raws: list[RawCommit]) -> list[ClassifiedCommit]:
    return [classify_commit(raw) for raw in raws]


def parse_log_record(line: str) -> RawCommit:
    """``subject<US>short<US>long`` 形式の 1 行を RawCommit にパースする。

    件名自体に区切り文字が含まれても壊れないよう右側から分割する。
    フィールド数が合わない場合は行全体を件名とする malformed レコードを返す。
    """
    record = line.rstrip("\r\n")
    fields = record.rsplit(FIELD_SEP, 2)
    if len(fields) != 3 or not fields[1] or not fields[2]:
        logger.warning("Unexpected git log record, treating as plain subject: %r", record)
        return RawCommit(
            subject=record.replace(FIELD_SEP, " "),
            short_id="",
            long_id="",
            malformed=True,
        )
    subject, short_id, long_id = fields
    return RawCommit(subject=subject, short_id=short_id.strip(), long_id=long_id.strip())


def parse_log_output(output: str) -> list[RawCommit]:
    """git log の出力全体を RawCommit のリストに変換する。空行は無視する。"""
    # 改行以外の行区切り文字（\x1c など）では分割しない
    return [parse_log_record(line) for line in output.split("\n") if line.strip()]
