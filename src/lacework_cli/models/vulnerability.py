"""Models for host vulnerability assessments."""
from dataclasses import dataclass, field
from typing import Dict, List, Optional


def _first(data: Dict, *keys, default=""):
    """Return the first key present in ``data``; tag names vary in casing."""
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return default


@dataclass
class HostVulnPackage:
    """A vulnerable package affected by a CVE."""

    name: str = ""
    namespace: str = ""
    severity: str = ""
    status: str = ""
    version: str = ""
    fixed_version: str = ""
    cvss_score: str = ""
    host_count: str = ""

    @classmethod
    def from_dict(cls, data: Dict) -> "HostVulnPackage":
        return cls(
            name=data.get("name") or "",
            namespace=data.get("namespace") or "",
            severity=data.get("severity") or "",
            status=_first(data, "vulnerability_status", "status"),
            version=data.get("version") or "",
            fixed_version=data.get("fixed_version") or "",
            cvss_score=str(_first(data, "cvss_score", "cvss_v3_score", "cvss_v2_score")),
            host_count=str(_first(data, "host_count")),
        )


@dataclass
class HostVulnCVE:
    """A CVE with the packages it affects."""

    id: str
    packages: List[HostVulnPackage] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict) -> "HostVulnCVE":
        return cls(
            id=data.get("cve_id") or "",
            packages=[HostVulnPackage.from_dict(pkg) for pkg in data.get("packages") or []],
        )


@dataclass
class HostTags:
    external_ip: str = ""
    os: str = ""
    arch: str = ""
    vm_provider: str = ""
    instance_id: str = ""
    ami_id: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> "HostTags":
        data = data or {}
        return cls(
            external_ip=_first(data, "ExternalIp", "external_ip"),
            os=_first(data, "os", "Os"),
            arch=_first(data, "arch", "Arch"),
            vm_provider=_first(data, "VmProvider", "vm_provider"),
            instance_id=_first(data, "InstanceId", "instance_id"),
            ami_id=_first(data, "AmiId", "ami_id"),
        )


@dataclass
class HostDetails:
    """Identity and tags of a host."""

    machine_id: str = ""
    hostname: str = ""
    machine_status: str = ""
    tags: HostTags = field(default_factory=HostTags)

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> "HostDetails":
        data = data or {}
        return cls(
            machine_id=str(_first(data, "machine_id")),
            hostname=data.get("hostname") or "",
            machine_status=data.get("machine_status") or "",
            tags=HostTags.from_dict(data.get("tags")),
        )


@dataclass
class HostVulnDetail:
    """A host returned when listing hosts affected by a CVE."""

    details: HostDetails = field(default_factory=HostDetails)

    @classmethod
    def from_dict(cls, data: Dict) -> "HostVulnDetail":
        return cls(details=HostDetails.from_dict(data.get("details")))


@dataclass
class HostVulnHostAssessment:
    """Vulnerability assessment of a single host."""

    host: HostDetails = field(default_factory=HostDetails)
    cves: List[HostVulnCVE] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> "HostVulnHostAssessment":
        data = data or {}
        return cls(
            host=HostDetails.from_dict(data.get("host")),
            cves=[HostVulnCVE.from_dict(cve) for cve in data.get("vulnerabilities") or []],
        )
