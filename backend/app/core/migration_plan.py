"""Migration Plan — pure decisions behind the SQL migration runner.

Invariants:
    - Migration files are ordered by filename; the 14-digit timestamp prefix makes that chronological
    - A file is executed only when its record says executed AND its checksum still matches
    - select_pending never reorders; select_rollbacks always returns newest first
    - Nothing here touches the filesystem, the clock or the database

Design Decisions:
    - Runner shell (services.migration_runner) does IO, this module decides (ADR: core/shell split)
    - Rollback SQL is generated at execution time and stored with the record, so a later edit
      of the file cannot change what a rollback drops
    - Statement splitting is explicit: async drivers execute one statement per call
"""

import hashlib
import re
from dataclasses import dataclass
from datetime import datetime

from app.core.domain_types import BatchId, MigrationState
from app.core.errors import MigrationTargetNotFoundError, RollbackRequestError

CHECKSUM_MISMATCH_MESSAGE = "Checksum mismatch - file has been modified"
BATCH_SUFFIX_LENGTH = 9

_TIMESTAMP_PATTERN = re.compile(r"^(\d{14})")


@dataclass(frozen=True)
class MigrationFile:
    name: str
    path: str
    content: str
    checksum: str
    timestamp: str


@dataclass(frozen=True)
class MigrationEntry:
    """A row of the tracking table, detached from the ORM."""
    name: str
    checksum: str
    status: MigrationState = MigrationState.EXECUTED
    executed_at: datetime | None = None
    execution_time_ms: int | None = None
    rollback_sql: str | None = None
    batch_id: str | None = None
    error_message: str | None = None


@dataclass(frozen=True)
class MigrationStatus:
    name: str
    status: MigrationState
    executed_at: datetime | None = None
    execution_time_ms: int | None = None
    error_message: str | None = None
    checksum: str | None = None
    batch_id: str | None = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "status": self.status.value,
            "executed_at": self.executed_at.isoformat() if self.executed_at else None,
            "execution_time_ms": self.execution_time_ms,
            "error_message": self.error_message,
            "checksum": self.checksum,
            "batch_id": self.batch_id,
        }


# --- File helpers -------------------------------------------------------------


def calculate_checksum(content: str) -> str:
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def extract_timestamp(filename: str) -> str:
    match = _TIMESTAMP_PATTERN.match(filename)
    return match.group(1) if match else ""


def build_migration_file(name: str, path: str, content: str) -> MigrationFile:
    return MigrationFile(
        name=name,
        path=path,
        content=content,
        checksum=calculate_checksum(content),
        timestamp=extract_timestamp(name),
    )


def _to_base36(number: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    if number == 0:
        return "0"
    out = []
    while number:
        number, rem = divmod(number, 36)
        out.append(digits[rem])
    return "".join(reversed(out))


def generate_batch_id(now_ms: int, suffix: int | str) -> BatchId:
    """batch_<epoch ms>_<9 base36 chars>. Clock and randomness are injected."""
    if isinstance(suffix, int):
        suffix = _to_base36(suffix)
    suffix = suffix.lower().rjust(BATCH_SUFFIX_LENGTH, "0")[-BATCH_SUFFIX_LENGTH:]
    return BatchId(f"batch_{now_ms}_{suffix}")


# --- SQL text -----------------------------------------------------------------

_DOLLAR_TAG = re.compile(r"\$(?:[A-Za-z_][A-Za-z0-9_]*)?\$")


def _is_escape_string_prefix(sql: str, quote_at: int) -> bool:
    """True for PostgreSQL E'...' literals, where a backslash escapes the next character."""
    if quote_at == 0 or sql[quote_at - 1] not in "Ee":
        return False
    before = sql[quote_at - 2] if quote_at >= 2 else ""
    return not (before.isalnum() or before in "_$")


def split_sql_statements(sql: str) -> list[str]:
    """Split a script on ';' outside quotes, comments and $tag$ bodies.

    Comment-only fragments are dropped; statements keep their inner comments.
    """
    statements: list[str] = []
    current: list[str] = []
    has_code = False
    i, n = 0, len(sql)

    def flush():
        nonlocal has_code
        text = "".join(current).strip()
        if has_code and text:
            statements.append(text)
        current.clear()
        has_code = False

    while i < n:
        ch = sql[i]

        if ch == "-" and sql.startswith("--", i):
            end = sql.find("\n", i)
            end = n if end == -1 else end
            current.append(sql[i:end])
            i = end
            continue

        if ch == "/" and sql.startswith("/*", i):
            end = sql.find("*/", i + 2)
            end = n if end == -1 else end + 2
            current.append(sql[i:end])
            i = end
            continue

        if ch in ("'", '"'):
            backslash_escapes = ch == "'" and _is_escape_string_prefix(sql, i)
            j = i + 1
            while j < n:
                if backslash_escapes and sql[j] == "\\":
                    j += 2
                    continue
                if sql[j] == ch:
                    if j + 1 < n and sql[j + 1] == ch:
                        j += 2
                        continue
                    break
                j += 1
            current.append(sql[i:j + 1])
            has_code = True
            i = j + 1
            continue

        if ch == "$":
            tag = _DOLLAR_TAG.match(sql, i)
            if tag:
                close = sql.find(tag.group(0), tag.end())
                end = n if close == -1 else close + len(tag.group(0))
                current.append(sql[i:end])
                has_code = True
                i = end
                continue

        if ch == ";":
            flush()
            i += 1
            continue

        current.append(ch)
        if not ch.isspace():
            has_code = True
        i += 1

    flush()
    return statements


_NAME = r'((?:"[^"]+"|[\w$]+)(?:\.(?:"[^"]+"|[\w$]+))?)'
_IF_NOT_EXISTS = r"(?:IF\s+NOT\s+EXISTS\s+)?"

_ROLLBACK_RULES: list[tuple[re.Pattern, str]] = [
    (
        re.compile(
            r"^\s*CREATE\s+(?:(?:GLOBAL|LOCAL)\s+)?(?:TEMP(?:ORARY)?\s+|UNLOGGED\s+)?TABLE\s+"
            + _IF_NOT_EXISTS + _NAME,
            re.IGNORECASE,
        ),
        "DROP TABLE IF EXISTS {name}{cascade};",
    ),
    (
        re.compile(
            r"^\s*CREATE\s+(?:UNIQUE\s+)?INDEX\s+(?:CONCURRENTLY\s+)?" + _IF_NOT_EXISTS + _NAME,
            re.IGNORECASE,
        ),
        "DROP INDEX IF EXISTS {name};",
    ),
    (
        re.compile(r"^\s*CREATE\s+(?:OR\s+REPLACE\s+)?FUNCTION\s+" + _NAME, re.IGNORECASE),
        "DROP FUNCTION IF EXISTS {name}{cascade};",
    ),
    (
        re.compile(
            r"^\s*CREATE\s+(?:OR\s+REPLACE\s+)?MATERIALIZED\s+VIEW\s+" + _IF_NOT_EXISTS + _NAME,
            re.IGNORECASE,
        ),
        "DROP MATERIALIZED VIEW IF EXISTS {name}{cascade};",
    ),
    (
        re.compile(
            r"^\s*CREATE\s+(?:OR\s+REPLACE\s+)?(?:TEMP(?:ORARY)?\s+)?VIEW\s+" + _IF_NOT_EXISTS + _NAME,
            re.IGNORECASE,
        ),
        "DROP VIEW IF EXISTS {name}{cascade};",
    ),
]


def generate_rollback_sql(content: str, cascade: bool = True) -> str:
    """DROP statements for every object the script creates, newest first.

    Only CREATE statements that start a line are recognized. cascade=False
    omits CASCADE for dialects without it (SQLite).
    """
    suffix = " CASCADE" if cascade else ""
    drops: list[str] = []
    for line in content.split("\n"):
        for pattern, template in _ROLLBACK_RULES:
            match = pattern.match(line)
            if match:
                drops.append(template.format(name=match.group(1), cascade=suffix))
                break
    return "\n".join(reversed(drops))


# --- Status and selection -----------------------------------------------------


def build_statuses(
    files: list[MigrationFile],
    records: list[MigrationEntry],
    rolled_back_names: set[str] | frozenset[str] = frozenset(),
) -> list[MigrationStatus]:
    """One status per file, in file order. Records without a file are not reported."""
    by_name = {r.name: r for r in records}
    statuses = []
    for file in files:
        record = by_name.get(file.name)

        if record is None:
            state = (
                MigrationState.ROLLED_BACK if file.name in rolled_back_names
                else MigrationState.PENDING
            )
            statuses.append(MigrationStatus(name=file.name, status=state))
            continue

        common = {
            "name": file.name,
            "executed_at": record.executed_at,
            "execution_time_ms": record.execution_time_ms,
            "checksum": record.checksum,
            "batch_id": record.batch_id,
        }
        if record.status == MigrationState.FAILED:
            statuses.append(MigrationStatus(
                status=MigrationState.FAILED, error_message=record.error_message, **common,
            ))
        elif record.checksum != file.checksum:
            statuses.append(MigrationStatus(
                status=MigrationState.FAILED, error_message=CHECKSUM_MISMATCH_MESSAGE, **common,
            ))
        else:
            statuses.append(MigrationStatus(status=MigrationState.EXECUTED, **common))
    return statuses


def select_pending(
    files: list[MigrationFile],
    records: list[MigrationEntry],
    target: str | None = None,
) -> list[MigrationFile]:
    """Files to run, in order. Failed records are retried; target is inclusive."""
    executed = {r.name for r in records if r.status == MigrationState.EXECUTED}
    pending = [f for f in files if f.name not in executed]

    if target:
        names = [f.name for f in pending]
        if target not in names:
            raise MigrationTargetNotFoundError(target)
        pending = pending[:names.index(target) + 1]
    return pending


def select_rollbacks(
    records: list[MigrationEntry],
    target: str | None = None,
    count: int | None = None,
) -> list[MigrationEntry]:
    """Executed records to undo, newest first.

    target: everything executed after it (the target itself stays).
    count: the newest N.
    """
    executed = sorted(
        (r for r in records if r.status == MigrationState.EXECUTED),
        key=lambda r: (r.executed_at.timestamp() if r.executed_at else 0.0, r.name),
        reverse=True,
    )

    if target:
        names = [r.name for r in executed]
        if target not in names:
            raise MigrationTargetNotFoundError(target)
        return executed[:names.index(target)]
    if count is not None and count > 0:
        return executed[:count]
    raise RollbackRequestError()
