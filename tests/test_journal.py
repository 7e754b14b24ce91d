import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

from frkn_trial.database import JournalEntry, TrialJournal
from frkn_trial.services import AdmitResult, IdempotencyGate


T0 = datetime(2026, 1, 5, 10, 0, 0, tzinfo=timezone.utc)


class TrialJournalTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "trials.csv"
        self.journal = TrialJournal(str(self.path))

    def tearDown(self):
        self._tmp.cleanup()

    def test_missing_file_loads_empty_index(self):
        self.assertEqual(self.journal.load(), {})
        self.assertFalse(self.path.exists())

    def test_append_writes_one_line(self):
        self.journal.append(JournalEntry(T0, "a@b.com", "@alice", "sub-1", "dev"))

        lines = self.path.read_text(encoding="utf-8").splitlines()
        self.assertEqual(lines, ["2026-01-05T10:00:00+00:00,a@b.com,@alice,sub-1,dev"])

    def test_missing_telegram_is_empty_field(self):
        self.journal.append(JournalEntry(T0, "a@b.com", "", "sub-1", "dev"))

        fields = self.path.read_text(encoding="utf-8").rstrip("\n").split(",")
        self.assertEqual(fields[2], "")
        self.assertEqual(len(fields), 5)

    def test_commas_and_newlines_are_stripped(self):
        self.journal.append(JournalEntry(T0, "a@b.com", "@ali,ce\nx", "sub-1", "dev"))

        lines = self.path.read_text(encoding="utf-8").splitlines()
        self.assertEqual(len(lines), 1)
        self.assertEqual(lines[0].split(",")[2], "@alicex")

    def test_unencodable_text_is_replaced(self):
        self.journal.append(JournalEntry(T0, "a@b.com", "\ud800x", "sub-1", "dev"))

        lines = self.path.read_text(encoding="utf-8").splitlines()
        self.assertEqual(lines[0].split(",")[2], "?x")

    def test_load_skips_malformed_lines(self):
        self.path.write_text(
            "\n".join([
                "2026-01-05T10:00:00+00:00,a@b.com,,sub-1,dev",
                "garbage",
                "not-a-date,c@d.com,,sub-2,dev",
                "2026-01-06T11:30:00.123456789Z,e@f.com",
                "",
            ]),
            encoding="utf-8",
        )

        index = self.journal.load()

        self.assertEqual(set(index), {"a@b.com", "e@f.com"})
        self.assertEqual(index["a@b.com"], T0)
        self.assertEqual(index["e@f.com"].tzinfo, timezone.utc)

    def test_first_occurrence_wins(self):
        later = datetime(2026, 2, 1, tzinfo=timezone.utc)
        self.journal.append(JournalEntry(T0, "a@b.com", "", "sub-1", "dev"))
        self.journal.append(JournalEntry(later, "a@b.com", "", "sub-2", "dev"))

        self.assertEqual(self.journal.load()["a@b.com"], T0)

    def test_reload_rebuilds_admitted_set(self):
        gate = IdempotencyGate(self.journal.load())
        for email in ("a@b.com", "c@d.com"):
            self.assertIs(gate.try_admit(email, T0), AdmitResult.ADMITTED)
            self.journal.append(JournalEntry(T0, email, "", "sub", "dev"))

        restarted = IdempotencyGate(TrialJournal(str(self.path)).load())

        self.assertEqual(len(restarted), 2)
        self.assertIs(restarted.try_admit("a@b.com", T0), AdmitResult.ALREADY_PRESENT)
        self.assertIs(restarted.try_admit("c@d.com", T0), AdmitResult.ALREADY_PRESENT)


if __name__ == "__main__":
    unittest.main()
