"""Tests for the profile, event and vulnerability models."""
import unittest
from datetime import datetime, timezone

from lacework_cli.models.event import Event, EventDetails
from lacework_cli.models.profile import Profile, format_secret
from lacework_cli.models.vulnerability import HostVulnCVE, HostVulnHostAssessment
from lacework_cli.utils.error_utils import ValidationError


class TestProfile(unittest.TestCase):
    """Test case for the Profile model."""

    def test_verify_valid_profile(self):
        Profile("acme", "KEY", "SECRET").verify()

    def test_verify_reports_first_missing_field(self):
        """Fields are checked in the order account, api_key, api_secret."""
        cases = [
            (Profile("", "", ""), "account"),
            (Profile("", "KEY", "SECRET"), "account"),
            (Profile("acme", "", ""), "api_key"),
            (Profile("acme", "", "SECRET"), "api_key"),
            (Profile("acme", "KEY", ""), "api_secret"),
        ]
        for profile, field_name in cases:
            with self.subTest(profile=profile):
                with self.assertRaises(ValidationError) as ctx:
                    profile.verify()
                self.assertEqual(ctx.exception.field, field_name)
                self.assertEqual(ctx.exception.message, f"{field_name} missing")

    def test_from_dict_ignores_unknown_keys(self):
        profile = Profile.from_dict({"account": "a", "api_key": "k", "api_secret": "s", "x": 1})
        self.assertEqual(profile, Profile("a", "k", "s"))

    def test_format_secret(self):
        self.assertEqual(format_secret(4, "_abcd1234"), "*****1234")
        self.assertEqual(format_secret(4, "abc"), "***")

    def test_masked_hides_secret(self):
        masked = Profile("a", "k", "_abcd1234").masked()
        self.assertNotIn("_abcd", masked["api_secret"])


class TestEventModels(unittest.TestCase):
    """Test case for the event models."""

    def test_event_from_dict(self):
        event = Event.from_dict({
            "EVENT_ID": 42,
            "EVENT_TYPE": "NewExternalServerIp",
            "SEVERITY": "3",
            "START_TIME": "2020-04-20T10:00:00.123Z",
            "END_TIME": "2020-04-20T11:00:00Z",
        })

        self.assertEqual(event.event_id, "42")
        self.assertEqual(event.severity, "3")
        self.assertEqual(event.start_time,
                         datetime(2020, 4, 20, 10, 0, 0, 123000, tzinfo=timezone.utc))

    def test_event_details_entity_map(self):
        details = EventDetails.from_dict({
            "EVENT_ID": "7",
            "EVENT_TYPE": "NewUser",
            "EVENT_ACTOR": "User",
            "EVENT_MODEL": "NewUser",
            "ENTITY_MAP": {
                "User": [{"USERNAME": "root", "MACHINE_HOSTNAME": "web-1"}],
                "CT_User": [{"USERNAME": "alice", "MFA": 1, "API_LIST": ["GetObject"]}],
            },
        })

        self.assertEqual(details.entity_map.user[0].username, "root")
        self.assertEqual(details.entity_map.ct_user[0].api_list, ["GetObject"])
        self.assertEqual(details.entity_map.machine, [])

    def test_null_fields_become_empty(self):
        event = Event.from_dict({"EVENT_ID": "1", "EVENT_TYPE": None, "SEVERITY": None,
                                 "START_TIME": None})

        self.assertEqual(event.event_type, "")
        self.assertEqual(event.severity, "")
        self.assertIsNone(event.start_time)

    def test_event_details_without_entity_map(self):
        details = EventDetails.from_dict({"EVENT_ID": "7"})
        self.assertEqual(details.entity_map.process, [])


class TestVulnerabilityModels(unittest.TestCase):
    """Test case for the host vulnerability models."""

    def test_cve_from_dict(self):
        cve = HostVulnCVE.from_dict({
            "cve_id": "CVE-2020-0001",
            "packages": [{"name": "openssl", "severity": "High", "cvss_score": 7.5,
                          "host_count": 3, "status": "Active"}],
        })

        self.assertEqual(cve.id, "CVE-2020-0001")
        self.assertEqual(cve.packages[0].cvss_score, "7.5")
        self.assertEqual(cve.packages[0].host_count, "3")
        self.assertEqual(cve.packages[0].status, "Active")

    def test_cve_with_null_package_fields(self):
        cve = HostVulnCVE.from_dict({"cve_id": "CVE-1", "packages": [
            {"name": None, "severity": "High", "cvss_score": None, "host_count": None},
        ]})

        package = cve.packages[0]
        self.assertEqual(package.name, "")
        self.assertEqual(package.cvss_score, "")
        self.assertEqual(package.host_count, "")

    def test_assessment_from_dict(self):
        assessment = HostVulnHostAssessment.from_dict({
            "host": {"machine_id": 12, "hostname": "web-1",
                     "tags": {"ExternalIp": "1.2.3.4", "os": "linux"}},
            "vulnerabilities": [{"cve_id": "CVE-1", "packages": []}],
        })

        self.assertEqual(assessment.host.machine_id, "12")
        self.assertEqual(assessment.host.tags.external_ip, "1.2.3.4")
        self.assertEqual(assessment.host.tags.os, "linux")
        self.assertEqual(assessment.cves[0].id, "CVE-1")


if __name__ == '__main__':
    unittest.main()
