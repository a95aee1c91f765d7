"""
Tests for validators/email.py
"""

import unittest

from core.constants import ErrorCode
from validators.email import validate_email


class TestValidateEmail(unittest.TestCase):
    """Tests for validate_email."""

    def test_valid_addresses(self):
        """Ordinary project addresses pass without findings."""
        for email in ("security@vinuchain.org", "first.last+tag@sub.example.co.uk", "a_b-c@example.io"):
            with self.subTest(email=email):
                result = validate_email(email)
                self.assertTrue(result.valid)
                self.assertEqual(result.warnings, [])

    def test_invalid_syntax(self):
        """Malformed addresses fail with INVALID_EMAIL."""
        for email in ("", "plainaddress", "@example.com", "user@", "user@example", "us er@example.com",
                      "user@@example.com", ".user@example.com", "user@-example.com",
                      "user@example.com\n"):
            with self.subTest(email=email):
                result = validate_email(email)
                self.assertEqual(result.first_error.code, ErrorCode.INVALID_EMAIL)

    def test_non_string(self):
        self.assertEqual(validate_email(None).first_error.code, ErrorCode.INVALID_EMAIL)

    def test_too_long(self):
        """Local part over 64 chars and total over 254 chars both fail."""
        self.assertFalse(validate_email("a" * 65 + "@example.com").valid)
        self.assertFalse(validate_email("a@" + "b" * 250 + ".com").valid)

    def test_disposable_domain(self):
        """Denylisted domains fail with DISPOSABLE_DOMAIN."""
        for email in ("x@mailinator.com", "x@MAILINATOR.COM", "x@inbox.mailinator.com", "x@yopmail.com"):
            with self.subTest(email=email):
                result = validate_email(email)
                self.assertEqual(result.first_error.code, ErrorCode.DISPOSABLE_DOMAIN)

    def test_similar_domain_not_disposable(self):
        """Suffix match is on whole labels only."""
        self.assertTrue(validate_email("x@notmailinator.com").valid)

    def test_custom_denylist(self):
        result = validate_email("x@corp.example", disposable_domains=frozenset({"corp.example"}))
        self.assertEqual(result.first_error.code, ErrorCode.DISPOSABLE_DOMAIN)
        self.assertTrue(validate_email("x@mailinator.com", disposable_domains=frozenset()).valid)

    def test_free_provider_warns(self):
        """Free webmail is accepted with a warning."""
        result = validate_email("team@gmail.com", context="contact email")
        self.assertTrue(result.valid)
        self.assertEqual(len(result.warnings), 1)
        self.assertEqual(result.warnings[0].code, ErrorCode.FREE_EMAIL_DOMAIN)
        self.assertIn("contact email", result.warnings[0].message)

    def test_context_in_message(self):
        result = validate_email("bad", context="security email")
        self.assertIn("security email", result.first_error.message)


if __name__ == "__main__":
    unittest.main()
