"""Tests for table projections and output formatters."""
import json
import unittest

import pytest

from lacework_cli.models.event import (
    CustomRuleEntity,
    Event,
    EventDetails,
    EventEntityMap,
    IpAddressEntity,
    UserEntity,
)
from lacework_cli.models.vulnerability import HostVulnCVE, HostVulnHostAssessment
from lacework_cli.presentation.base import CommandResult
from lacework_cli.presentation.events import (
    ENTITY_TABLES,
    IP_ADDRESSES,
    custom_rules_table,
    event_entity_map_tables,
    events_table,
)
from lacework_cli.presentation.factory import create_formatter
from lacework_cli.presentation.interactive import InteractiveFormatter
from lacework_cli.presentation.json_output import JsonFormatter
from lacework_cli.presentation.tables import (
    TableSpec,
    one_line_table,
    render_rows,
    render_table,
    table_rows,
)
from lacework_cli.presentation.vulnerabilities import (
    assessment_cves_table,
    cve_packages,
    cves_table,
    host_details_table,
)
from lacework_cli.utils.error_utils import ProfileNotFoundError, UnsupportedSeverityError


def _cves():
    return [
        HostVulnCVE.from_dict({"cve_id": "CVE-A", "packages": [
            {"name": "pkg1", "severity": "High"},
            {"name": "pkg2", "severity": "Critical"},
        ]}),
        HostVulnCVE.from_dict({"cve_id": "CVE-B", "packages": [
            {"name": "pkg1", "severity": "Medium"},
        ]}),
    ]


class TestTables(unittest.TestCase):
    """Test case for the generic table renderer."""

    def test_empty_input_renders_nothing(self):
        self.assertEqual(render_rows(["A", "B"], []), "")
        self.assertEqual(render_table(IP_ADDRESSES, []), "")

    def test_rows_follow_headers(self):
        spec = TableSpec(headers=["Name", "Count"], extract=lambda r: [r[0], r[1]])
        self.assertEqual(table_rows(spec, [("a", 1), ("b", 2)]), [["a", "1"], ["b", "2"]])

    def test_render_contains_headers_and_cells(self):
        output = render_rows(["Name", "Value"], [["region", "us-west-2"]])
        self.assertIn("Name", output)
        self.assertIn("Value", output)
        self.assertIn("us-west-2", output)

    def test_cells_are_not_markup(self):
        output = render_rows(["Command"], [["echo [bold]hi[/bold]"]])
        self.assertIn("[bold]hi[/bold]", output)

    def test_one_line_table(self):
        output = one_line_table("Display Filter", "x = 1")
        self.assertIn("Display Filter", output)
        self.assertIn("x = 1", output)


class TestVulnerabilityTables(unittest.TestCase):
    """Test case for the CVE projections."""

    def test_packages_ordered_by_severity(self):
        pairs = cve_packages(_cves())
        self.assertEqual(
            [(cve.id, pkg.name) for cve, pkg in pairs],
            [("CVE-A", "pkg2"), ("CVE-A", "pkg1"), ("CVE-B", "pkg1")],
        )

    def test_packages_filtered_by_threshold(self):
        pairs = cve_packages(_cves(), "high")
        self.assertEqual([pkg.name for _, pkg in pairs], ["pkg2", "pkg1"])

    def test_unsupported_threshold(self):
        with self.assertRaises(UnsupportedSeverityError):
            cve_packages(_cves(), "bogus")

    def test_cves_table_row_order(self):
        lines = cves_table(_cves()).splitlines()
        critical = next(i for i, line in enumerate(lines) if "pkg2" in line)
        medium = next(i for i, line in enumerate(lines) if "CVE-B" in line)
        self.assertLess(critical, medium)
        self.assertIn("Critical", lines[critical])

    def test_cves_table_empty_after_filter(self):
        self.assertEqual(cves_table(_cves(), "critical").count("pkg1"), 0)

    def test_assessment_tables(self):
        assessment = HostVulnHostAssessment.from_dict({
            "host": {"machine_id": 12, "hostname": "web-1", "tags": {"os": "linux"}},
            "vulnerabilities": [{"cve_id": "CVE-1", "packages": [
                {"name": "openssl", "severity": "Low", "fixed_version": "1.1.1g"},
            ]}],
        })

        self.assertIn("web-1", host_details_table(assessment))
        output = assessment_cves_table(assessment)
        self.assertIn("Fix Version", output)
        self.assertIn("1.1.1g", output)


class TestEventTables(unittest.TestCase):
    """Test case for the event projections."""

    def test_events_sorted_by_severity(self):
        events = [
            Event.from_dict({"EVENT_ID": "1", "EVENT_TYPE": "Low", "SEVERITY": "4"}),
            Event.from_dict({"EVENT_ID": "2", "EVENT_TYPE": "Crit", "SEVERITY": "1"}),
        ]
        lines = events_table(events).splitlines()
        first = next(i for i, line in enumerate(lines) if "Crit" in line)
        second = next(i for i, line in enumerate(lines) if "Low" in line)
        self.assertLess(first, second)

    def test_entity_tables_cover_every_kind(self):
        attributes = [attribute for attribute, _ in ENTITY_TABLES]
        self.assertEqual(len(attributes), 18)
        for attribute in attributes:
            self.assertTrue(hasattr(EventEntityMap(), attribute))

    def test_empty_entity_kinds_are_skipped(self):
        entity_map = EventEntityMap(user=[UserEntity("root", "web-1")])
        tables = event_entity_map_tables(entity_map)
        self.assertEqual(len(tables), 1)
        self.assertIn("root", tables[0])

    def test_ip_address_cells(self):
        entity_map = EventEntityMap(ip_address=[
            IpAddressEntity(ip_address="10.0.0.1", total_in_bytes=1024,
                            port_list=[443, 80]),
        ])
        table = event_entity_map_tables(entity_map)[0]
        self.assertIn("Outbound Bytes", table)
        self.assertIn("1024.000", table)
        self.assertIn("443, 80", table)

    def test_custom_rule_followed_by_display_filter(self):
        rules = [CustomRuleEntity(rule_guid="RULE_1", display_filter='{"a": 1}')]
        output = custom_rules_table(rules)
        self.assertLess(output.index("RULE_1"), output.index("Display Filter"))

    def test_entities_with_unexpected_values(self):
        details = EventDetails.from_dict({"ENTITY_MAP": {
            "FileDataHash": [{"FILEDATA_HASH": "abc", "MACHINE_COUNT": "n/a"}],
            "User": [{"USERNAME": None, "MACHINE_HOSTNAME": "web-1"}],
        }})

        tables = event_entity_map_tables(details.entity_map)

        self.assertEqual(len(tables), 2)
        self.assertNotIn("None", tables[0])
        self.assertIn("web-1", tables[0])
        self.assertIn("n/a", tables[1])

    def test_event_details_without_entities(self):
        details = EventDetails.from_dict({"EVENT_ID": "7"})
        self.assertEqual(event_entity_map_tables(details.entity_map), [])


def test_create_formatter():
    assert isinstance(create_formatter("json"), JsonFormatter)
    assert isinstance(create_formatter("table"), InteractiveFormatter)
    with pytest.raises(ValueError):
        create_formatter("yaml")


def test_json_formatter_passes_data_through(capsys):
    data = [{"EVENT_ID": "1", "SEVERITY": "2"}]
    JsonFormatter().output_result(CommandResult.ok(data=data, render=lambda: ["ignored"]))

    assert json.loads(capsys.readouterr().out) == data


def test_json_formatter_empty_data(capsys):
    JsonFormatter().output_result(CommandResult.ok(message="nothing here"))

    assert json.loads(capsys.readouterr().out) == []


def test_json_formatter_error_goes_to_stderr(capsys):
    JsonFormatter().output_error("boom")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert json.loads(captured.err) == {"error": "boom"}


def test_json_formatter_exception_details(capsys):
    JsonFormatter().output_exception(ProfileNotFoundError("prod"), "unable to load: ")

    payload = json.loads(capsys.readouterr().err)
    assert payload["error"].startswith("unable to load: ")
    assert "prod" in payload["error"]
    assert payload["details"]["type"] == "ProfileNotFoundError"


def test_json_formatter_exception_not_from_lacework(capsys):
    JsonFormatter().output_exception(ValueError("bad value"))

    assert json.loads(capsys.readouterr().err) == {
        "error": "bad value",
        "details": {"message": "bad value", "type": "ValueError"},
    }


def test_interactive_formatter_output(capsys):
    result = CommandResult.ok(
        message="Listing [things]",
        render=lambda: [render_rows(["Name"], [["alpha"]])],
        notes="see https://example.com",
    )

    InteractiveFormatter().output_result(result)

    out = capsys.readouterr().out
    assert "Listing [things]" in out
    assert "alpha" in out
    assert out.rstrip().endswith("see https://example.com")


def test_interactive_formatter_error(capsys):
    InteractiveFormatter().output_error("profile 'x' not found")

    err = capsys.readouterr().err
    assert "ERROR" in err
    assert "profile 'x' not found" in err


def test_interactive_formatter_exception_shows_message_only(capsys):
    InteractiveFormatter().output_exception(ProfileNotFoundError("prod"))

    err = capsys.readouterr().err
    assert "prod" in err
    assert "ProfileNotFoundError" not in err
