"""
응답 메시지 포맷

명령 처리 결과를 사용자에게 보낼 plain text로 변환.
금액은 모두 센트 정수로 받아 format_cents로 표시.
"""

from core.ledger.amount import format_cents
from core.ledger.types import Entry
from core.utils.timezone import format_utc


FORMAT_HINT = "Format: /save 12.34 [reason] or /adjust -5.50 [reason]"

HELP_TEXT = (
    "Commands:\n"
    "/start - register or show your UUID\n"
    "/save {amount} [reason] - save money with optional reason\n"
    "/adjust {+/-amount} [reason] - adjust balance with optional reason\n"
    "/allinvoo - invest current stash and reset current to 0 (moves to history)\n"
    "/query [n] - list your last n entries (default 10)\n"
    "/help - this help"
)

NO_SENDER_TEXT = "I can only respond to user messages."
SAVE_NOT_POSITIVE_TEXT = "Amount must be positive for /save."
ADJUST_ZERO_TEXT = "Adjustment must be non-zero."
NOTHING_TO_ARCHIVE_TEXT = "Nothing to invest yet. Your current total is 0."
NO_ENTRIES_TEXT = "No entries yet. Use /save to start!"
GENERIC_FAILURE_TEXT = "Something went wrong. Please try again later."


def _reason_line(reason: str | None) -> str:
    return f"Reason: {reason}\n" if reason else ""


def welcome(display_name: str, user_id: str) -> str:
    return (
        f"Welcome, {display_name}!\n"
        f"Your user UUID: {user_id}\n"
        "Use /save, /adjust, /allinvoo, /query."
    )


def saved(amount_cents: int, reason: str | None, total_cents: int) -> str:
    return (
        f"Saved {format_cents(amount_cents)}\n"
        f"{_reason_line(reason)}"
        f"Total now: {format_cents(total_cents)}"
    )


def adjusted(delta_cents: int, reason: str | None, total_cents: int) -> str:
    direction = "added" if delta_cents > 0 else "subtracted"
    return (
        f"Adjustment {direction} {format_cents(abs(delta_cents))}\n"
        f"{_reason_line(reason)}"
        f"Total now: {format_cents(total_cents)}"
    )


def archived(moved_cents: int, history_cents: int) -> str:
    return (
        f"Invested {format_cents(moved_cents)} into VOO (moved to history).\n"
        "Current now: 0.00\n"
        f"History total: {format_cents(history_cents)}"
    )


def entry_line(entry: Entry) -> str:
    """Entry 한 줄 ("+ 12.50 [save] 2026-02-21 01:00 - 점심")"""
    sign = "+" if entry.amount_cents >= 0 else "-"
    line = (
        f"{sign} {format_cents(abs(entry.amount_cents))} "
        f"[{entry.kind.value}] {format_utc(entry.created_at)}"
    )
    if entry.reason:
        line += f" - {entry.reason}"
    return line


def entry_list(
    display_name: str,
    entries: list[Entry],
    current_cents: int,
    history_cents: int,
) -> str:
    """/query 응답 (최근 Entry + 현재/누적/총합)"""
    lines = [f"Last {len(entries)} entries for {display_name}:"]
    lines.extend(entry_line(entry) for entry in entries)
    lines.append("")
    lines.append(f"Current total: {format_cents(current_cents)}")
    lines.append(f"History total: {format_cents(history_cents)}")
    lines.append(f"Grand total: {format_cents(current_cents + history_cents)}")
    return "\n".join(lines)


def rejection(reason: str) -> str:
    """입력 오류 응답 (사용법 힌트 포함)"""
    return f"{reason}\n{FORMAT_HINT}"
