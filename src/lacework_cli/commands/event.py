"""Commands for inspecting Lacework events."""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import click

from lacework_cli.models.event import Event, EventDetails
from lacework_cli.presentation.base import CommandResult
from lacework_cli.presentation.events import (
    event_entity_map_tables,
    event_summary_table,
    events_table,
)
from lacework_cli.state import pass_state
from lacework_cli.utils.error_utils import LaceworkError, ValidationError
from lacework_cli.utils.severity import (
    VALID_SEVERITIES,
    filter_by_severity,
    sort_by_severity,
    validate_severity,
)

logger = logging.getLogger(__name__)

DEFAULT_DAYS = 7
MAX_DAYS = 7
TIME_INPUT_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def event_link(account: str, event_id: str) -> str:
    """URL of the event dossier in the Lacework web UI."""
    return (f"https://{account}.lacework.net/ui/investigation/recents/"
            f"EventDossier-{event_id}")


def parse_user_time(value: str, flag: str) -> datetime:
    try:
        return datetime.strptime(value, TIME_INPUT_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        raise ValidationError(
            f"unable to parse {flag} time '{value}' (format: yyyy-MM-ddTHH:mm:ssZ)",
            field=flag, value=value,
        ) from None


def parse_time_range(start: Optional[str], end: Optional[str], days: Optional[int],
                     now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """Work out the time range to request events for.

    An explicit --start/--end wins over --days; a missing end is now and a
    missing start is seven days before the end.

    Raises:
        ValidationError: If a time cannot be parsed or the range is invalid
    """
    now = now or datetime.now(timezone.utc)

    if start or end:
        end_time = parse_user_time(end, "end") if end else now
        start_time = (parse_user_time(start, "start") if start
                      else end_time - timedelta(days=DEFAULT_DAYS))
        if start_time >= end_time:
            raise ValidationError("the start time must be before the end time", field="start")
        return start_time, end_time

    if days is not None:
        if days < 1 or days > MAX_DAYS:
            raise ValidationError(f"--days must be between 1 and {MAX_DAYS}",
                                  field="days", value=days)
        return now - timedelta(days=days), now

    return now - timedelta(days=DEFAULT_DAYS), now


def list_events(state, start=None, end=None, days=None, severity=None, formatter=None):
    """Implementation for listing events.

    Raises:
        LaceworkError: If the request fails or the options are invalid
    """
    if formatter is None:
        formatter = state.formatter()

    # validate every option before talking to the API
    if severity:
        validate_severity(severity)
    start_time, end_time = parse_time_range(start, end, days)

    client = state.api_client()
    logger.info("requesting list of events from %s to %s", start_time, end_time)
    with formatter.create_progress("Fetching events..."):
        raw_events = client.list_events(start_time, end_time)

    def severity_of(raw_event):
        return str(raw_event.get("SEVERITY", ""))

    raw_events = sort_by_severity(filter_by_severity(raw_events, severity, severity_of),
                                  severity_of)
    events = [Event.from_dict(e) for e in raw_events]

    if not events and not state.json_output:
        if severity:
            message = "There are no events with the specified severity."
        else:
            message = "There are no events in your account in the specified time range."
        formatter.output_result(CommandResult.ok(message=message))
        return

    formatter.output_result(CommandResult.ok(
        data=raw_events,
        render=lambda: [events_table(events)],
    ))


def show_event(state, event_id, formatter=None):
    """Implementation for showing details of one event.

    Raises:
        LaceworkError: If the request fails or the event has no details
    """
    if formatter is None:
        formatter = state.formatter()

    client = state.api_client()
    logger.info("requesting event details for %s", event_id)
    with formatter.create_progress(f"Fetching event {event_id}..."):
        response = client.event_details(event_id)

    if not response:
        raise LaceworkError(f"there are no details about the event '{event_id}'")

    # the API answers with a list even when asked about a single event
    raw_details = response[0]
    details = EventDetails.from_dict(raw_details)

    formatter.output_result(CommandResult.ok(
        data=raw_details,
        render=lambda: [event_summary_table(details)]
        + event_entity_map_tables(details.entity_map),
        notes=("\nFor further investigation of this event navigate to "
               f"{event_link(client.account, event_id)}"),
    ))


@click.group(name="event")
def event():
    """Inspect events reported by the Lacework platform."""
    pass


@event.command(name="list")
@click.option("--start", help="Start of the time range in UTC (format: yyyy-MM-ddTHH:mm:ssZ)")
@click.option("--end", help="End of the time range in UTC (format: yyyy-MM-ddTHH:mm:ssZ)")
@click.option("--days", type=int,
              help=f"List events for specified number of days (max: {MAX_DAYS} days)")
@click.option("--severity",
              help=f"Filter events by severity threshold ({', '.join(VALID_SEVERITIES)})")
@pass_state
def list_command(state, start=None, end=None, days=None, severity=None):
    """List all events (default last 7 days).

    Pass --start and --end to specify a custom time period, --days to list
    events for a number of days, or --severity to filter by a severity
    threshold. For example, to list events from the last day with severity
    medium and above (Critical, High and Medium) run:

        lacework event list --severity medium --days 1
    """
    formatter = state.formatter()
    try:
        list_events(state, start, end, days, severity, formatter)
    except LaceworkError as e:
        formatter.output_exception(e, "unable to get events: ")
        raise click.exceptions.Exit(1)


@event.command(name="show")
@click.argument("event_id")
@pass_state
def show_command(state, event_id):
    """Show details about a specific event."""
    formatter = state.formatter()
    try:
        show_event(state, event_id, formatter)
    except LaceworkError as e:
        formatter.output_exception(e, "unable to get event details: ")
        raise click.exceptions.Exit(1)


@event.command(name="open")
@click.argument("event_id")
@pass_state
def open_command(state, event_id):
    """Open a specified event in a web browser."""
    formatter = state.formatter()
    try:
        if not event_id.isdigit():
            raise ValidationError(
                f"invalid event id {event_id}. Event id should be a numeric value",
                field="event_id", value=event_id,
            )
        url = event_link(state.resolve_account(), event_id)
    except LaceworkError as e:
        formatter.output_exception(e)
        raise click.exceptions.Exit(1)

    logger.debug("opening %s", url)
    if click.launch(url) != 0:
        formatter.output_error(f"unable to open web browser\n\nNavigate to {url}")
        raise click.exceptions.Exit(1)
