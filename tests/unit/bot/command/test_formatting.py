"""
bot/command/formatting.py 테스트
"""

from bot.command import formatting
from core.ledger.types import Entry, EntryKind


def _entry(amount_cents: int, kind: EntryKind, reason: str | None = None) -> Entry:
    return Entry(
        id=1,
        user_id="u",
        amount_cents=amount_cents,
        kind=kind,
        reason=reason,
        created_at="2026-02-21T01:00:00+00:00",
    )


class TestReplies:
    """명령 응답 문구"""

    def test_saved_with_reason(self) -> None:
        assert formatting.saved(1234, "lunch", 5000) == (
            "Saved 12.34\nReason: lunch\nTotal now: 50.00"
        )

    def test_saved_without_reason(self) -> None:
        assert formatting.saved(100, None, 100) == "Saved 1.00\nTotal now: 1.00"

    def test_adjusted_direction(self) -> None:
        assert formatting.adjusted(-350, None, -350).startswith("Adjustment subtracted 3.50")
        assert formatting.adjusted(5, None, 5).startswith("Adjustment added 0.05")

    def test_archived(self) -> None:
        text = formatting.archived(1250, 3000)

        assert "Invested 12.50 into VOO" in text
        assert "Current now: 0.00" in text
        assert text.endswith("History total: 30.00")

    def test_welcome(self) -> None:
        text = formatting.welcome("@saver", "uuid-1")

        assert text.startswith("Welcome, @saver!")
        assert "uuid-1" in text

    def test_rejection_has_hint(self) -> None:
        assert formatting.rejection("Bad amount format.") == (
            "Bad amount format.\n" + formatting.FORMAT_HINT
        )


class TestEntryList:
    """/query 응답"""

    def test_entry_line(self) -> None:
        assert formatting.entry_line(_entry(1250, EntryKind.SAVE, "점심")) == (
            "+ 12.50 [save] 2026-02-21 01:00 - 점심"
        )
        assert formatting.entry_line(_entry(-1250, EntryKind.ARCHIVE)) == (
            "- 12.50 [archive] 2026-02-21 01:00"
        )

    def test_totals(self) -> None:
        entries = [_entry(500, EntryKind.SAVE), _entry(-1000, EntryKind.ARCHIVE)]

        text = formatting.entry_list("Sam", entries, 500, 1000)

        lines = text.split("\n")
        assert lines[0] == "Last 2 entries for Sam:"
        assert lines[-3:] == [
            "Current total: 5.00",
            "History total: 10.00",
            "Grand total: 15.00",
        ]
