"""Table projections of events and their entity maps."""
from typing import List

from lacework_cli.models.event import (
    CustomRuleEntity,
    Event,
    EventDetails,
    EventEntityMap,
)
from lacework_cli.presentation.tables import TableSpec, one_line_table, render_table
from lacework_cli.utils.formatting import (
    client_server_label,
    enabled_disabled,
    format_float,
    format_int,
    format_json_string,
    format_time,
    format_value,
    join_values,
    yes_no,
)
from lacework_cli.utils.severity import severity_label, sort_by_severity

EVENTS = TableSpec(
    headers=["Event ID", "Type", "Severity", "Start Time", "End Time"],
    extract=lambda e: [
        e.event_id,
        e.event_type,
        severity_label(e.severity),
        format_time(e.start_time),
        format_time(e.end_time),
    ],
    border=False,
)

EVENT_SUMMARY = TableSpec(
    headers=["Event ID", "Type", "Actor", "Model", "Start Time", "End Time"],
    extract=lambda d: [
        d.event_id,
        d.event_type,
        d.event_actor,
        d.event_model,
        format_time(d.start_time),
        format_time(d.end_time),
    ],
)

MACHINES = TableSpec(
    headers=["Hostname", "External IP", "Instance ID", "Instance Name",
             "CPU Percentage", "Internal Ipaddress"],
    extract=lambda m: [
        m.hostname,
        m.external_ip,
        m.instance_id,
        m.instance_name,
        format_float(m.cpu_percentage),
        m.internal_ip_address,
    ],
)

CONTAINERS = TableSpec(
    headers=["Image Repo", "Image Tag", "External Connections", "Type",
             "First Time Seen", "Pod Namespace", "Pod Ipaddress"],
    extract=lambda c: [
        c.image_repo,
        c.image_tag,
        format_int(c.has_external_conns),
        client_server_label(c.is_client, c.is_server),
        format_time(c.first_seen_time),
        c.pod_namespace,
        c.pod_ip_address,
    ],
)

APPLICATIONS = TableSpec(
    headers=["Application", "External Connections", "Type", "Earliest Known Time"],
    extract=lambda a: [
        a.application,
        format_int(a.has_external_conns),
        client_server_label(a.is_client, a.is_server),
        format_time(a.earliest_known_time),
    ],
)

USERS = TableSpec(
    headers=["Username", "Hostname"],
    extract=lambda u: [u.username, u.machine_hostname],
)

IP_ADDRESSES = TableSpec(
    headers=["IP Address", "Inbound Bytes", "Outbound Bytes", "List of Ports",
             "First Time Seen", "Threat Tags", "Threat Source", "Country", "Region"],
    extract=lambda ip: [
        ip.ip_address,
        format_float(ip.total_in_bytes),
        format_float(ip.total_out_bytes),
        join_values(ip.port_list),
        format_time(ip.first_seen_time),
        ip.threat_tags,
        format_value(ip.threat_source),
        ip.country,
        ip.region,
    ],
)

SOURCE_IP_ADDRESSES = TableSpec(
    headers=["Source IP Address", "Country", "Region"],
    extract=lambda ip: [ip.ip_address, ip.country, ip.region],
)

DNS_NAMES = TableSpec(
    headers=["DNS Hostname", "List of Ports", "Inbound Bytes", "Outbound Bytes"],
    extract=lambda d: [
        d.hostname,
        join_values(d.port_list),
        format_float(d.total_in_bytes),
        format_float(d.total_out_bytes),
    ],
)

APIS = TableSpec(
    headers=["Service", "API"],
    extract=lambda a: [a.service, a.api],
)

CT_USERS = TableSpec(
    headers=["Username", "Account ID", "Principal ID", "MFA", "List of APIs", "Regions"],
    extract=lambda u: [
        u.username,
        u.account_id,
        u.principal_id,
        enabled_disabled(u.mfa),
        join_values(u.api_list),
        join_values(u.region_list),
    ],
)

REGIONS = TableSpec(
    headers=["Region", "Accounts"],
    extract=lambda r: [r.region, join_values(r.account_list)],
)

PROCESSES = TableSpec(
    headers=["Process ID", "Hostname", "Start Time", "CPU Percentage", "Command"],
    extract=lambda p: [
        format_int(p.process_id),
        p.hostname,
        format_time(p.process_start_time),
        format_float(p.cpu_percentage),
        p.cmdline,
    ],
)

FILE_EXE_PATHS = TableSpec(
    headers=["Executable Path", "First Time Seen", "Last File Hash",
             "Last Package Name", "Last Version", "Last File Owner"],
    extract=lambda f: [
        f.exe_path,
        format_time(f.first_seen_time),
        f.last_filedata_hash,
        f.last_package_name,
        f.last_version,
        f.last_file_owner,
    ],
)

FILE_DATA_HASHES = TableSpec(
    headers=["Executable Paths", "File Hash", "Number of Machines",
             "First Time Seen", "Known Bad"],
    extract=lambda f: [
        join_values(f.exe_path_list),
        f.filedata_hash,
        format_int(f.machine_count),
        format_time(f.first_seen_time),
        yes_no(f.is_known_bad),
    ],
)

CUSTOM_RULES = TableSpec(
    headers=["Rule GUID", "Last Updated User", "Last Updated Time"],
    extract=lambda r: [r.rule_guid, r.last_updated_user, format_time(r.last_updated_time)],
)

NEW_VIOLATIONS = TableSpec(
    headers=["Violation ID", "Reason", "Resource"],
    extract=lambda v: [v.rec_id, v.reason, v.resource],
)

REC_IDS = TableSpec(
    headers=["Record ID", "Account ID", "Account Alias", "Description", "Status",
             "Evaluation Type", "Evaluation GUID"],
    extract=lambda r: [
        r.rec_id,
        r.account_id,
        r.account_alias,
        r.title,
        r.status,
        r.eval_type,
        r.eval_guid,
    ],
)

VIOLATION_REASONS = TableSpec(
    headers=["Violation ID", "Reason"],
    extract=lambda r: [r.rec_id, r.reason],
)

RESOURCES = TableSpec(
    headers=["Name", "Value"],
    extract=lambda r: [r.name, format_value(r.value)],
)

# (attribute of EventEntityMap, table spec) in display order
ENTITY_TABLES = [
    ("machine", MACHINES),
    ("container", CONTAINERS),
    ("application", APPLICATIONS),
    ("user", USERS),
    ("ip_address", IP_ADDRESSES),
    ("source_ip_address", SOURCE_IP_ADDRESSES),
    ("dns_name", DNS_NAMES),
    ("api", APIS),
    ("ct_user", CT_USERS),
    ("region", REGIONS),
    ("process", PROCESSES),
    ("file_exe_path", FILE_EXE_PATHS),
    ("file_data_hash", FILE_DATA_HASHES),
    ("custom_rule", CUSTOM_RULES),
    ("new_violation", NEW_VIOLATIONS),
    ("rec_id", REC_IDS),
    ("violation_reason", VIOLATION_REASONS),
    ("resource", RESOURCES),
]


def events_table(events: List[Event]) -> str:
    """Render events ordered from most to least severe."""
    return render_table(EVENTS, sort_by_severity(events, key=lambda e: e.severity))


def event_summary_table(details: EventDetails) -> str:
    return render_table(EVENT_SUMMARY, [details])


def custom_rules_table(rules: List[CustomRuleEntity]) -> str:
    """Each custom rule is shown as its own table followed by its display filter."""
    parts = []
    for rule in rules:
        parts.append(render_table(CUSTOM_RULES, [rule]))
        parts.append(one_line_table("Display Filter", format_json_string(rule.display_filter)))
    return "".join(parts)


def event_entity_map_tables(entity_map: EventEntityMap) -> List[str]:
    """Render one table per entity kind present in the map, skipping empty kinds."""
    tables = []
    for attribute, spec in ENTITY_TABLES:
        records = getattr(entity_map, attribute)
        if attribute == "custom_rule":
            table = custom_rules_table(records)
        else:
            table = render_table(spec, records)
        if table:
            tables.append(table)
    return tables
