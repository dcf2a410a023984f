"""Table projections of host vulnerability data.

CVE tables have one row per affected package. Rows are ordered by severity
rank; packages of equal rank keep the order the API returned them in.
"""
from typing import List, Optional, Tuple

from lacework_cli.models.vulnerability import (
    HostDetails,
    HostVulnCVE,
    HostVulnDetail,
    HostVulnHostAssessment,
    HostVulnPackage,
)
from lacework_cli.presentation.tables import TableSpec, render_table
from lacework_cli.utils.severity import filter_by_severity, severity_label, sort_by_severity

CvePackage = Tuple[HostVulnCVE, HostVulnPackage]

HOST_HEADERS = ["Machine ID", "Hostname", "External IP", "Os", "Arch",
                "Provider", "Instance ID", "AMI", "Status"]


def _host_row(host: HostDetails) -> List[str]:
    return [
        host.machine_id,
        host.hostname,
        host.tags.external_ip,
        host.tags.os,
        host.tags.arch,
        host.tags.vm_provider,
        host.tags.instance_id,
        host.tags.ami_id,
        host.machine_status,
    ]


HOSTS = TableSpec(
    headers=HOST_HEADERS,
    extract=lambda h: _host_row(h.details),
    border=False,
)

HOST_DETAILS = TableSpec(headers=HOST_HEADERS, extract=_host_row, border=False)

CVES = TableSpec(
    headers=["CVE", "Severity", "Package", "Pkg Version", "Score", "OS Version",
             "Hosts", "Status"],
    extract=lambda item: [
        item[0].id,
        severity_label(item[1].severity),
        item[1].name,
        item[1].version,
        item[1].cvss_score,
        item[1].namespace,
        item[1].host_count,
        item[1].status,
    ],
    border=False,
)

ASSESSMENT_CVES = TableSpec(
    headers=["CVE", "Severity", "Score", "Package", "Pkg Version", "Fix Version", "Status"],
    extract=lambda item: [
        item[0].id,
        severity_label(item[1].severity),
        item[1].cvss_score,
        item[1].name,
        item[1].version,
        item[1].fixed_version,
        item[1].status,
    ],
    border=False,
)


def cve_packages(cves: List[HostVulnCVE], severity: Optional[str] = None) -> List[CvePackage]:
    """Flatten CVEs into (cve, package) pairs sorted by package severity.

    Args:
        cves: CVEs as returned by the API
        severity: Optional threshold, only packages at least this severe are kept

    Returns:
        List[CvePackage]: One pair per affected package

    Raises:
        UnsupportedSeverityError: If the threshold is not a recognized level
    """
    pairs = [(cve, pkg) for cve in cves for pkg in cve.packages]
    pairs = filter_by_severity(pairs, severity, key=lambda item: item[1].severity)
    return sort_by_severity(pairs, key=lambda item: item[1].severity)


def hosts_table(hosts: List[HostVulnDetail]) -> str:
    return render_table(HOSTS, hosts)


def cves_table(cves: List[HostVulnCVE], severity: Optional[str] = None) -> str:
    return render_table(CVES, cve_packages(cves, severity))


def host_details_table(assessment: HostVulnHostAssessment) -> str:
    return render_table(HOST_DETAILS, [assessment.host])


def assessment_cves_table(assessment: HostVulnHostAssessment,
                          severity: Optional[str] = None) -> str:
    return render_table(ASSESSMENT_CVES, cve_packages(assessment.cves, severity))
