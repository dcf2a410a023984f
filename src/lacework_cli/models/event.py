"""Models for Lacework events and their entity maps."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from lacework_cli.utils.formatting import parse_time


def _list(data: Dict, key: str) -> List:
    value = data.get(key)
    return value if isinstance(value, list) else []


@dataclass
class Event:
    """An event as returned by the events list endpoint."""

    event_id: str
    event_type: str
    severity: str
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict) -> "Event":
        return cls(
            event_id=str(data.get("EVENT_ID") or ""),
            event_type=data.get("EVENT_TYPE") or "",
            severity=str(data.get("SEVERITY") or ""),
            start_time=parse_time(data.get("START_TIME")),
            end_time=parse_time(data.get("END_TIME")),
        )


@dataclass
class MachineEntity:
    hostname: str = ""
    external_ip: str = ""
    instance_id: str = ""
    instance_name: str = ""
    cpu_percentage: float = 0.0
    internal_ip_address: str = ""

    @classmethod
    def from_dict(cls, data: Dict) -> "MachineEntity":
        return cls(
            hostname=data.get("HOSTNAME") or "",
            external_ip=data.get("EXTERNAL_IP") or "",
            instance_id=data.get("INSTANCE_ID") or "",
            instance_name=data.get("INSTANCE_NAME") or "",
            cpu_percentage=data.get("CPU_PERCENTAGE") or 0.0,
            internal_ip_address=data.get("INTERNAL_IP_ADDR") or "",
        )


@dataclass
class ContainerEntity:
    image_repo: str = ""
    image_tag: str = ""
    has_external_conns: int = 0
    is_client: int = 0
    is_server: int = 0
    first_seen_time: Optional[datetime] = None
    pod_namespace: str = ""
    pod_ip_address: str = ""

    @classmethod
    def from_dict(cls, data: Dict) -> "ContainerEntity":
        return cls(
            image_repo=data.get("IMAGE_REPO") or "",
            image_tag=data.get("IMAGE_TAG") or "",
            has_external_conns=data.get("HAS_EXTERNAL_CONNS") or 0,
            is_client=data.get("IS_CLIENT") or 0,
            is_server=data.get("IS_SERVER") or 0,
            first_seen_time=parse_time(data.get("FIRST_SEEN_TIME")),
            pod_namespace=data.get("POD_NAMESPACE") or "",
            pod_ip_address=data.get("POD_IP_ADDR") or "",
        )


@dataclass
class ApplicationEntity:
    application: str = ""
    has_external_conns: int = 0
    is_client: int = 0
    is_server: int = 0
    earliest_known_time: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict) -> "ApplicationEntity":
        return cls(
            application=data.get("APPLICATION") or "",
            has_external_conns=data.get("HAS_EXTERNAL_CONNS") or 0,
            is_client=data.get("IS_CLIENT") or 0,
            is_server=data.get("IS_SERVER") or 0,
            earliest_known_time=parse_time(data.get("EARLIEST_KNOWN_TIME")),
        )


@dataclass
class UserEntity:
    username: str = ""
    machine_hostname: str = ""

    @classmethod
    def from_dict(cls, data: Dict) -> "UserEntity":
        return cls(
            username=data.get("USERNAME") or "",
            machine_hostname=data.get("MACHINE_HOSTNAME") or "",
        )


@dataclass
class IpAddressEntity:
    ip_address: str = ""
    total_in_bytes: float = 0.0
    total_out_bytes: float = 0.0
    threat_tags: str = ""
    threat_source: Any = None
    country: str = ""
    region: str = ""
    port_list: List[int] = field(default_factory=list)
    first_seen_time: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict) -> "IpAddressEntity":
        return cls(
            ip_address=data.get("IP_ADDRESS") or "",
            total_in_bytes=data.get("TOTAL_IN_BYTES") or 0.0,
            total_out_bytes=data.get("TOTAL_OUT_BYTES") or 0.0,
            threat_tags=data.get("THREAT_TAGS") or "",
            threat_source=data.get("THREAT_SOURCE"),
            country=data.get("COUNTRY") or "",
            region=data.get("REGION") or "",
            port_list=_list(data, "PORT_LIST"),
            first_seen_time=parse_time(data.get("FIRST_SEEN_TIME")),
        )


@dataclass
class SourceIpAddressEntity:
    ip_address: str = ""
    country: str = ""
    region: str = ""

    @classmethod
    def from_dict(cls, data: Dict) -> "SourceIpAddressEntity":
        return cls(
            ip_address=data.get("IP_ADDRESS") or "",
            country=data.get("COUNTRY") or "",
            region=data.get("REGION") or "",
        )


@dataclass
class DnsNameEntity:
    hostname: str = ""
    port_list: List[int] = field(default_factory=list)
    total_in_bytes: float = 0.0
    total_out_bytes: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict) -> "DnsNameEntity":
        return cls(
            hostname=data.get("HOSTNAME") or "",
            port_list=_list(data, "PORT_LIST"),
            total_in_bytes=data.get("TOTAL_IN_BYTES") or 0.0,
            total_out_bytes=data.get("TOTAL_OUT_BYTES") or 0.0,
        )


@dataclass
class ApiEntity:
    service: str = ""
    api: str = ""

    @classmethod
    def from_dict(cls, data: Dict) -> "ApiEntity":
        return cls(service=data.get("SERVICE") or "", api=data.get("API") or "")


@dataclass
class CTUserEntity:
    """A CloudTrail user."""

    username: str = ""
    account_id: str = ""
    principal_id: str = ""
    mfa: int = 0
    api_list: List[str] = field(default_factory=list)
    region_list: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict) -> "CTUserEntity":
        return cls(
            username=data.get("USERNAME") or "",
            account_id=data.get("ACCOUNT_ID") or "",
            principal_id=data.get("PRINCIPAL_ID") or "",
            mfa=data.get("MFA") or 0,
            api_list=_list(data, "API_LIST"),
            region_list=_list(data, "REGION_LIST"),
        )


@dataclass
class RegionEntity:
    region: str = ""
    account_list: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict) -> "RegionEntity":
        return cls(region=data.get("REGION") or "", account_list=_list(data, "ACCOUNT_LIST"))


@dataclass
class ProcessEntity:
    hostname: str = ""
    process_id: int = 0
    process_start_time: Optional[datetime] = None
    cpu_percentage: float = 0.0
    cmdline: str = ""

    @classmethod
    def from_dict(cls, data: Dict) -> "ProcessEntity":
        return cls(
            hostname=data.get("HOSTNAME") or "",
            process_id=data.get("PROCESS_ID") or 0,
            process_start_time=parse_time(data.get("PROCESS_START_TIME")),
            cpu_percentage=data.get("CPU_PERCENTAGE") or 0.0,
            cmdline=data.get("CMDLINE") or "",
        )


@dataclass
class FileExePathEntity:
    exe_path: str = ""
    first_seen_time: Optional[datetime] = None
    last_filedata_hash: str = ""
    last_package_name: str = ""
    last_version: str = ""
    last_file_owner: str = ""

    @classmethod
    def from_dict(cls, data: Dict) -> "FileExePathEntity":
        return cls(
            exe_path=data.get("EXE_PATH") or "",
            first_seen_time=parse_time(data.get("FIRST_SEEN_TIME")),
            last_filedata_hash=data.get("LAST_FILEDATA_HASH") or "",
            last_package_name=data.get("LAST_PACKAGE_NAME") or "",
            last_version=data.get("LAST_VERSION") or "",
            last_file_owner=data.get("LAST_FILE_OWNER") or "",
        )


@dataclass
class FileDataHashEntity:
    filedata_hash: str = ""
    machine_count: int = 0
    exe_path_list: List[str] = field(default_factory=list)
    first_seen_time: Optional[datetime] = None
    is_known_bad: int = 0

    @classmethod
    def from_dict(cls, data: Dict) -> "FileDataHashEntity":
        return cls(
            filedata_hash=data.get("FILEDATA_HASH") or "",
            machine_count=data.get("MACHINE_COUNT") or 0,
            exe_path_list=_list(data, "EXE_PATH_LIST"),
            first_seen_time=parse_time(data.get("FIRST_SEEN_TIME")),
            is_known_bad=data.get("IS_KNOWN_BAD") or 0,
        )


@dataclass
class CustomRuleEntity:
    rule_guid: str = ""
    last_updated_user: str = ""
    last_updated_time: Optional[datetime] = None
    display_filter: str = ""

    @classmethod
    def from_dict(cls, data: Dict) -> "CustomRuleEntity":
        return cls(
            rule_guid=data.get("RULE_GUID") or "",
            last_updated_user=data.get("LAST_UPDATED_USER") or "",
            last_updated_time=parse_time(data.get("LAST_UPDATED_TIME")),
            display_filter=data.get("DISPLAY_FILTER") or "",
        )


@dataclass
class NewViolationEntity:
    rec_id: str = ""
    reason: str = ""
    resource: str = ""

    @classmethod
    def from_dict(cls, data: Dict) -> "NewViolationEntity":
        return cls(
            rec_id=data.get("RECID") or "",
            reason=data.get("REASON") or "",
            resource=data.get("RESOURCE") or "",
        )


@dataclass
class RecIdEntity:
    """A compliance record referenced by the event."""

    rec_id: str = ""
    account_id: str = ""
    account_alias: str = ""
    title: str = ""
    status: str = ""
    eval_type: str = ""
    eval_guid: str = ""

    @classmethod
    def from_dict(cls, data: Dict) -> "RecIdEntity":
        return cls(
            rec_id=data.get("RECID") or "",
            account_id=data.get("ACCOUNT_ID") or "",
            account_alias=data.get("ACCOUNT_ALIAS") or "",
            title=data.get("TITLE") or "",
            status=data.get("STATUS") or "",
            eval_type=data.get("EVAL_TYPE") or "",
            eval_guid=data.get("EVAL_GUID") or "",
        )


@dataclass
class ViolationReasonEntity:
    rec_id: str = ""
    reason: str = ""

    @classmethod
    def from_dict(cls, data: Dict) -> "ViolationReasonEntity":
        return cls(rec_id=data.get("RECID") or "", reason=data.get("REASON") or "")


@dataclass
class ResourceEntity:
    name: str = ""
    value: Any = None

    @classmethod
    def from_dict(cls, data: Dict) -> "ResourceEntity":
        return cls(name=data.get("NAME") or "", value=data.get("VALUE"))


@dataclass
class EventEntityMap:
    """Entities of every kind attached to one event."""

    machine: List[MachineEntity] = field(default_factory=list)
    container: List[ContainerEntity] = field(default_factory=list)
    application: List[ApplicationEntity] = field(default_factory=list)
    user: List[UserEntity] = field(default_factory=list)
    ip_address: List[IpAddressEntity] = field(default_factory=list)
    source_ip_address: List[SourceIpAddressEntity] = field(default_factory=list)
    dns_name: List[DnsNameEntity] = field(default_factory=list)
    api: List[ApiEntity] = field(default_factory=list)
    ct_user: List[CTUserEntity] = field(default_factory=list)
    region: List[RegionEntity] = field(default_factory=list)
    process: List[ProcessEntity] = field(default_factory=list)
    file_exe_path: List[FileExePathEntity] = field(default_factory=list)
    file_data_hash: List[FileDataHashEntity] = field(default_factory=list)
    custom_rule: List[CustomRuleEntity] = field(default_factory=list)
    new_violation: List[NewViolationEntity] = field(default_factory=list)
    rec_id: List[RecIdEntity] = field(default_factory=list)
    violation_reason: List[ViolationReasonEntity] = field(default_factory=list)
    resource: List[ResourceEntity] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> "EventEntityMap":
        """Create an entity map from the ENTITY_MAP object of an event.

        Args:
            data: Dictionary keyed by entity kind, e.g. "Machine" or "CT_User"

        Returns:
            EventEntityMap: New entity map, missing kinds are empty lists
        """
        data = data or {}

        def build(key, model):
            return [model.from_dict(item) for item in _list(data, key)]

        return cls(
            machine=build("Machine", MachineEntity),
            container=build("Container", ContainerEntity),
            application=build("Application", ApplicationEntity),
            user=build("User", UserEntity),
            ip_address=build("IpAddress", IpAddressEntity),
            source_ip_address=build("SourceIpAddress", SourceIpAddressEntity),
            dns_name=build("DnsName", DnsNameEntity),
            api=build("API", ApiEntity),
            ct_user=build("CT_User", CTUserEntity),
            region=build("Region", RegionEntity),
            process=build("Process", ProcessEntity),
            file_exe_path=build("FileExePath", FileExePathEntity),
            file_data_hash=build("FileDataHash", FileDataHashEntity),
            custom_rule=build("CustomRule", CustomRuleEntity),
            new_violation=build("NewViolation", NewViolationEntity),
            rec_id=build("RecId", RecIdEntity),
            violation_reason=build("ViolationReason", ViolationReasonEntity),
            resource=build("Resource", ResourceEntity),
        )


@dataclass
class EventDetails:
    """Full details of a single event."""

    event_id: str
    event_type: str
    event_actor: str
    event_model: str
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    entity_map: EventEntityMap = field(default_factory=EventEntityMap)

    @classmethod
    def from_dict(cls, data: Dict) -> "EventDetails":
        return cls(
            event_id=str(data.get("EVENT_ID") or ""),
            event_type=data.get("EVENT_TYPE") or "",
            event_actor=data.get("EVENT_ACTOR") or "",
            event_model=data.get("EVENT_MODEL") or "",
            start_time=parse_time(data.get("START_TIME")),
            end_time=parse_time(data.get("END_TIME")),
            entity_map=EventEntityMap.from_dict(data.get("ENTITY_MAP")),
        )
