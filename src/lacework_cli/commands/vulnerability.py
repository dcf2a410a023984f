"""Commands for host vulnerability assessments."""
import json
import logging
import os

import click

from lacework_cli.models.vulnerability import (
    HostVulnCVE,
    HostVulnDetail,
    HostVulnHostAssessment,
)
from lacework_cli.presentation.base import CommandResult
from lacework_cli.presentation.json_output import JsonFormatter
from lacework_cli.presentation.vulnerabilities import (
    assessment_cves_table,
    cves_table,
    host_details_table,
    hosts_table,
)
from lacework_cli.state import pass_state
from lacework_cli.utils.error_utils import LaceworkError, ValidationError
from lacework_cli.utils.severity import (
    VALID_SEVERITIES,
    filter_by_severity,
    validate_severity,
)

logger = logging.getLogger(__name__)

SEVERITY_HELP = f"Filter by severity threshold ({', '.join(VALID_SEVERITIES)})"


def load_manifest(manifest: str):
    """Decode a package manifest given inline or as a path to a JSON file."""
    if os.path.isfile(manifest):
        logger.debug("loading package manifest from %s", manifest)
        try:
            with open(manifest, "r", encoding="utf-8") as handle:
                manifest = handle.read()
        except (OSError, UnicodeDecodeError) as err:
            raise ValidationError(
                f"unable to read package manifest {manifest}: {err}", field="manifest"
            ) from err
    try:
        return json.loads(manifest)
    except ValueError as err:
        raise ValidationError(f"invalid package manifest: {err}", field="manifest") from err


def filter_raw_cves(raw_cves, severity=None):
    """Drop packages below the severity threshold, and CVEs left without packages.

    Used for JSON output, which keeps the API's field names and order.
    """
    if not severity:
        return raw_cves

    filtered = []
    for cve in raw_cves:
        packages = filter_by_severity(cve.get("packages") or [], severity,
                                      key=lambda package: package.get("severity"))
        if packages:
            filtered.append(dict(cve, packages=packages))
    return filtered


def list_cves(state, severity=None, formatter=None):
    """Implementation for listing the CVEs found in hosts."""
    if formatter is None:
        formatter = state.formatter()

    if severity:
        validate_severity(severity)

    client = state.api_client()
    with formatter.create_progress("Fetching CVEs..."):
        raw_cves = client.list_host_cves()

    if state.json_output:
        formatter.output_result(CommandResult.ok(data=filter_raw_cves(raw_cves, severity)))
        return

    cves = [HostVulnCVE.from_dict(cve) for cve in raw_cves]
    table = cves_table(cves, severity)
    if not table:
        if severity:
            message = "There are no CVEs in your account with the specified severity."
        else:
            message = "There are no CVEs in your account."
        formatter.output_result(CommandResult.ok(message=message))
        return

    formatter.output_result(CommandResult.ok(data=raw_cves, render=lambda: [table]))


def list_hosts(state, cve_id, formatter=None):
    """Implementation for listing the hosts affected by a CVE."""
    if formatter is None:
        formatter = state.formatter()

    client = state.api_client()
    with formatter.create_progress(f"Fetching hosts with {cve_id}..."):
        raw_hosts = client.list_hosts_with_cve(cve_id)

    if not raw_hosts and not state.json_output:
        formatter.output_result(CommandResult.ok(
            message=f"There are no hosts in your account with CVE id '{cve_id}'"
        ))
        return

    hosts = [HostVulnDetail.from_dict(host) for host in raw_hosts]
    formatter.output_result(CommandResult.ok(data=raw_hosts,
                                             render=lambda: [hosts_table(hosts)]))


def show_assessment(state, machine_id, severity=None, formatter=None):
    """Implementation for showing the vulnerability assessment of a host."""
    if formatter is None:
        formatter = state.formatter()

    if severity:
        validate_severity(severity)

    client = state.api_client()
    with formatter.create_progress(f"Fetching assessment of {machine_id}..."):
        raw_assessment = client.host_assessment(machine_id)

    assessment = HostVulnHostAssessment.from_dict(raw_assessment)

    def render():
        tables = [host_details_table(assessment)]
        cves = assessment_cves_table(assessment, severity)
        if cves:
            tables.append(cves)
        return tables

    data = raw_assessment
    if severity:
        data = dict(raw_assessment, vulnerabilities=filter_raw_cves(
            raw_assessment.get("vulnerabilities") or [], severity))
    formatter.output_result(CommandResult.ok(data=data, render=render))


def scan_pkg_manifest(state, manifest):
    """Request an on-demand assessment. The response is always JSON."""
    payload = load_manifest(manifest)
    client = state.api_client()
    response = client.scan_pkg_manifest(payload)
    JsonFormatter().output_result(CommandResult.ok(data=response))


@click.group()
def vulnerability():
    """Container and host vulnerability assessments."""
    pass


@vulnerability.group()
def host():
    """Host vulnerability assessments."""
    pass


@host.command(name="list-cves")
@click.option("--severity", help=SEVERITY_HELP)
@pass_state
def list_cves_command(state, severity=None):
    """List the CVEs found in the hosts of your environment."""
    formatter = state.formatter()
    try:
        list_cves(state, severity, formatter)
    except LaceworkError as e:
        formatter.output_exception(e, "unable to get CVEs from hosts: ")
        raise click.exceptions.Exit(1)


@host.command(name="list-hosts")
@click.argument("cve_id")
@pass_state
def list_hosts_command(state, cve_id):
    """List the hosts with a common CVE id in your environment.

    To list the CVEs found in the hosts of your environment run:

        lacework vulnerability host list-cves
    """
    formatter = state.formatter()
    try:
        list_hosts(state, cve_id, formatter)
    except LaceworkError as e:
        formatter.output_exception(e, f"unable to get hosts with CVE {cve_id}: ")
        raise click.exceptions.Exit(1)


@host.command(name="show-assessment")
@click.argument("machine_id")
@click.option("--severity", help=SEVERITY_HELP)
@pass_state
def show_assessment_command(state, machine_id, severity=None):
    """Show results of a host vulnerability assessment.

    To find the machine id of a host, grab a CVE id from 'list-cves' and run:

        lacework vulnerability host list-hosts <cve_id>
    """
    formatter = state.formatter()
    try:
        show_assessment(state, machine_id, severity, formatter)
    except LaceworkError as e:
        formatter.output_exception(e, f"unable to get host assessment with id {machine_id}: ")
        raise click.exceptions.Exit(1)


@host.command(name="scan-pkg-manifest")
@click.argument("manifest")
@pass_state
def scan_pkg_manifest_command(state, manifest):
    """Request an on-demand host vulnerability assessment from a package-manifest.

    MANIFEST is a JSON document, inline or as a path to a file:

    \b
        lacework vulnerability host scan-pkg-manifest '{
            "os_pkg_info_list": [
                {"os": "Ubuntu", "os_ver": "18.04",
                 "pkg": "openssl", "pkg_ver": "1.1.1-1ubuntu2.1~18.04.5"}
            ]
        }'

    Calls are rate limited to 10 per hour per access key, and to 1k packages
    per payload.
    """
    formatter = state.formatter()
    try:
        scan_pkg_manifest(state, manifest)
    except LaceworkError as e:
        formatter.output_exception(e, "unable to request an on-demand host vulnerability scan: ")
        raise click.exceptions.Exit(1)
