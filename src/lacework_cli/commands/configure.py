"""Command to configure credential profiles."""
import logging

import click

from lacework_cli.config.store import load_keys_from_json_file
from lacework_cli.models.profile import Profile, format_secret
from lacework_cli.state import DEFAULT_PROFILE, CliState, pass_state
from lacework_cli.utils.error_utils import LaceworkError, ValidationError

logger = logging.getLogger(__name__)

MIN_API_KEY_LENGTH = 55
MIN_API_SECRET_LENGTH = 30


def _required_length(length: int, message: str, allow_empty: bool = False):
    def validate(value: str) -> str:
        value = value.strip()
        if allow_empty and not value:
            return value
        if len(value) < length:
            raise click.UsageError(message)
        return value
    return validate


def prompt_profile(current: Profile) -> Profile:
    """Ask for account, key and secret, offering the current values as defaults.

    Leaving the secret empty keeps the current secret.
    """
    account = click.prompt(
        "Account",
        default=current.account or None,
        value_proc=_required_length(
            1, "The account subdomain of URL is required. (i.e. <ACCOUNT>.lacework.net)"
        ),
    )
    api_key = click.prompt(
        "Access Key ID",
        default=current.api_key or None,
        value_proc=_required_length(
            MIN_API_KEY_LENGTH,
            f"The API access key id must have more than {MIN_API_KEY_LENGTH} characters.",
        ),
    )

    secret_message = "Secret Access Key"
    if current.api_secret:
        secret_message = f"Secret Access Key: ({format_secret(4, current.api_secret)})"
    api_secret = click.prompt(
        secret_message,
        default="" if current.api_secret else None,
        hide_input=True,
        show_default=False,
        value_proc=_required_length(
            MIN_API_SECRET_LENGTH,
            f"The API secret access key must have more than {MIN_API_SECRET_LENGTH} characters.",
            allow_empty=bool(current.api_secret),
        ),
    )

    return Profile(account=account, api_key=api_key,
                   api_secret=api_secret or current.api_secret)


def configure_profile(state: CliState, json_file=None, formatter=None) -> None:
    """Create or update the selected profile and persist the whole config file.

    Args:
        state: Options of the current invocation
        json_file: Optional API key file downloaded from the web UI
        formatter: Output formatter to use

    Raises:
        LaceworkError: If the config cannot be loaded, verified or written
    """
    if formatter is None:
        formatter = state.formatter()

    logger.debug("configuring cli profile %s", state.profile)
    store = state.load_store()
    stored = store.profiles.get(state.profile, Profile())

    current = Profile(
        account=state.account or stored.account,
        api_key=state.api_key or stored.api_key,
        api_secret=state.api_secret or stored.api_secret,
    )

    # a non-default profile is usually named after its account
    if not current.account and state.profile != DEFAULT_PROFILE:
        current.account = state.profile

    if json_file:
        current.api_key, current.api_secret = load_keys_from_json_file(json_file)

    if state.interactive_mode():
        creds = prompt_profile(current)
        formatter.output_message("")
    else:
        creds = current

    try:
        creds.verify()
    except ValidationError as err:
        raise ValidationError(
            f"unable to configure the command-line: {err.message}", field=err.field
        ) from err

    store.put(state.profile, creds)
    path = store.persist(state.config_path)
    logger.debug("stored profile %s in %s", state.profile, path)
    formatter.output_message("You are all set!")


@click.command()
@click.option("-j", "--json_file", "json_file", type=click.Path(exists=True, dir_okay=False),
              help="Loads the generated API key JSON file from the WebUI")
@pass_state
def configure(state, json_file=None):
    """Configure the Lacework CLI.

    Configure settings that the Lacework CLI uses to interact with the Lacework
    platform. These include your Lacework account, API access key and secret.

    Use --json_file to preload the API key file downloaded from the WebUI.

    Settings are stored under the 'default' profile unless --profile is given.
    If the config file (~/.lacework.toml) does not exist it is created.
    """
    formatter = state.formatter()
    try:
        configure_profile(state, json_file, formatter)
    except LaceworkError as e:
        formatter.output_exception(e)
        raise click.exceptions.Exit(1)
