import unittest

from pydantic import ValidationError

from frkn_trial.api.models import TrialRequest, TrialResponse
from frkn_trial.services import TrialSource, trial_protocols


class TrialRequestTests(unittest.TestCase):
    def test_valid_iff_exactly_one_of_email_and_source(self):
        cases = [
            ({}, False),
            ({"email": "a@b.com"}, True),
            ({"source": "Mobile"}, True),
            ({"email": "a@b.com", "source": "Site"}, False),
            ({"telegram": "@a", "env": "prod"}, False),
            ({"source": "Site", "telegram": "@a"}, True),
        ]
        for payload, expected in cases:
            with self.subTest(payload=payload):
                self.assertEqual(TrialRequest(**payload).is_valid(), expected)

    def test_email_keeps_submitted_spelling(self):
        self.assertEqual(TrialRequest(email="User@Example.COM").email, "User@Example.COM")

    def test_email_must_be_an_address(self):
        with self.assertRaises(ValidationError):
            TrialRequest(email="not-an-email")

    def test_unknown_source_is_rejected(self):
        with self.assertRaises(ValidationError):
            TrialRequest(source="Desktop")


class TrialResponseTests(unittest.TestCase):
    def test_error_has_null_sub_id(self):
        self.assertEqual(
            TrialResponse.error("Trial already requested").model_dump(),
            {"status": "error", "message": "Trial already requested", "sub_id": None},
        )


class ProtocolTests(unittest.TestCase):
    def test_referral_labels(self):
        self.assertEqual(TrialSource.Mobile.referral_label, "trial-mobile")
        self.assertEqual(TrialSource.Site.referral_label, "trial-site")

    def test_protocol_order_and_tokens(self):
        protocols = trial_protocols()
        self.assertEqual(
            [p.name for p in protocols],
            ["VlessTcpReality", "VlessGrpcReality", "VlessXhttpReality", "Hysteria2"],
        )
        payloads = [p.payload() for p in protocols]
        self.assertEqual([("token" in p) for p in payloads], [False, False, False, True])

    def test_each_trial_gets_a_fresh_hysteria2_token(self):
        first = trial_protocols()[-1].payload()["token"]
        second = trial_protocols()[-1].payload()["token"]
        self.assertNotEqual(first, second)


if __name__ == "__main__":
    unittest.main()
