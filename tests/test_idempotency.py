import threading
import unittest
from datetime import datetime, timedelta, timezone

from frkn_trial.services import AdmitResult, IdempotencyGate


T1 = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
T2 = T1 + timedelta(hours=1)


class IdempotencyGateTests(unittest.TestCase):
    def test_second_admission_is_rejected_and_keeps_first_timestamp(self):
        gate = IdempotencyGate()

        self.assertIs(gate.try_admit("a@b.com", T1), AdmitResult.ADMITTED)
        self.assertIs(gate.try_admit("a@b.com", T2), AdmitResult.ALREADY_PRESENT)
        self.assertEqual(gate.first_seen("a@b.com"), T1)

    def test_seeded_index_blocks_admission(self):
        gate = IdempotencyGate({"a@b.com": T1})

        self.assertIn("a@b.com", gate)
        self.assertIs(gate.try_admit("a@b.com", T2), AdmitResult.ALREADY_PRESENT)
        self.assertIs(gate.try_admit("c@d.com", T2), AdmitResult.ADMITTED)
        self.assertEqual(len(gate), 2)

    def test_seed_is_copied(self):
        seed = {}
        gate = IdempotencyGate(seed)
        gate.try_admit("a@b.com", T1)
        self.assertEqual(seed, {})

    def test_concurrent_admissions_yield_one_winner(self):
        gate = IdempotencyGate()
        barrier = threading.Barrier(16)
        results = []
        results_lock = threading.Lock()

        def worker():
            barrier.wait()
            outcome = gate.try_admit("race@b.com", datetime.now(timezone.utc))
            with results_lock:
                results.append(outcome)

        threads = [threading.Thread(target=worker) for _ in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(results.count(AdmitResult.ADMITTED), 1)
        self.assertEqual(results.count(AdmitResult.ALREADY_PRESENT), 15)


if __name__ == "__main__":
    unittest.main()
