# SPDX-FileCopyrightText: 2026 fundkrawl contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import unittest

from fundkrawl.model.manifest import Manifest
from fundkrawl.validator import is_guid, is_well_known_of
from fundkrawl.validator.v1 import V1Validator
from tests.util import MANIFEST_URL, REPO_URL, REPO_WELL_KNOWN, manifest_dict


def _manifest(raw: dict | None = None, url: str = MANIFEST_URL) -> Manifest:
    manifest = Manifest.from_dict(manifest_dict() if raw is None else raw)
    manifest.url = url
    manifest.body = b"{}"
    return manifest


class TestV1Validator(unittest.TestCase):

    def setUp(self):
        self.validator = V1Validator()

    def assertReason(self, raw: dict, fragment: str, url: str = MANIFEST_URL):
        _manifest_out, reasons = self.validator.validate(_manifest(raw, url))
        self.assertIsNotNone(reasons)
        self.assertTrue(any(fragment in r for r in reasons), f"'{fragment}' not in {reasons}")

    def test_valid(self):
        manifest, reasons = self.validator.validate(_manifest())
        self.assertIsNone(reasons)
        self.assertEqual(manifest.url, MANIFEST_URL)
        self.assertEqual(manifest.body, b"{}")
        self.assertEqual(manifest.projects[0].repository_url.well_known, REPO_WELL_KNOWN)

    def test_normalization(self):
        raw = manifest_dict()
        raw["entity"]["type"] = " Organisation "
        raw["entity"]["name"] = "  Example Org  "
        raw["funding"]["plans"][0]["currency"] = "eur"
        raw["funding"]["plans"][0]["frequency"] = "MONTHLY"
        manifest, reasons = self.validator.validate(_manifest(raw))
        self.assertIsNone(reasons)
        self.assertEqual(manifest.entity.type, "organisation")
        self.assertEqual(manifest.entity.name, "Example Org")
        self.assertEqual(manifest.funding.plans[0].currency, "EUR")
        self.assertEqual(manifest.funding.plans[0].frequency, "monthly")

    def test_invalid_manifest_is_returned_unchanged(self):
        raw = manifest_dict()
        raw["version"] = "v0.9"
        original = _manifest(raw)
        manifest, reasons = self.validator.validate(original)
        self.assertIs(manifest, original)
        self.assertTrue(any("version" in r for r in reasons))

    def test_enumerations(self):
        raw = manifest_dict()
        raw["entity"]["role"] = "benefactor"
        self.assertReason(raw, "entity.role")

        raw = manifest_dict()
        raw["funding"]["channels"][0]["type"] = "crypto"
        self.assertReason(raw, "funding.channels.0.type")

    def test_field_values(self):
        raw = manifest_dict()
        raw["entity"]["email"] = "not-an-address"
        self.assertReason(raw, "entity.email")

        raw = manifest_dict()
        raw["projects"][0]["guid"] = "Widget_1"
        self.assertReason(raw, "projects.0.guid")

        raw = manifest_dict()
        raw["funding"]["plans"][0]["amount"] = -5
        self.assertReason(raw, "funding.plans.0.amount")

        raw = manifest_dict()
        raw["projects"][0]["webpageUrl"]["url"] = "example.org/widget"
        self.assertReason(raw, "projects.0.webpageUrl.url")

    def test_missing_funding(self):
        raw = manifest_dict()
        del raw["funding"]
        self.assertReason(raw, "funding.channels")

    def test_duplicate_guids(self):
        raw = manifest_dict()
        raw["projects"].append(dict(raw["projects"][0]))
        self.assertReason(raw, "duplicate project guid 'widget'")

    def test_unknown_plan_channel(self):
        raw = manifest_dict()
        raw["funding"]["plans"][0]["channels"] = ["bank-transfer", "paypal"]
        self.assertReason(raw, "refers to unknown channel 'paypal'")

    def test_well_known_on_other_host(self):
        raw = manifest_dict()
        raw["projects"][0]["repositoryUrl"]["wellKnown"] = \
            "https://evil.example/.well-known/funding-manifest-urls"
        self.assertReason(raw, "projects.0.repositoryUrl.wellKnown must be on the same host")

    def test_well_known_required_for_foreign_host(self):
        raw = manifest_dict()
        raw["projects"][0]["repositoryUrl"]["wellKnown"] = ""
        self.assertReason(raw, "projects.0.repositoryUrl.wellKnown is required")

        # without knowing where the manifest lives, this can not be decided
        _manifest_out, reasons = self.validator.validate(_manifest(raw, url=""))
        self.assertIsNone(reasons)


class TestValidatorFunctions(unittest.TestCase):

    def test_is_guid(self):
        self.assertTrue(is_guid("my-project-2"))
        self.assertFalse(is_guid("-leading-dash"))
        self.assertFalse(is_guid("UPPER"))
        self.assertFalse(is_guid(None))

    def test_is_well_known_of(self):
        self.assertTrue(is_well_known_of(REPO_WELL_KNOWN, REPO_URL))
        self.assertTrue(is_well_known_of("https://example.org/.well-known/funding-manifest-urls",
                                         "https://example.org/some/page"))
        self.assertFalse(is_well_known_of("https://example.org/funding-manifest-urls", "https://example.org"))
        self.assertFalse(is_well_known_of("https://example.com/.well-known/funding-manifest-urls",
                                          "https://example.org"))
        self.assertFalse(is_well_known_of("", REPO_URL))


if __name__ == '__main__':
    unittest.main()
