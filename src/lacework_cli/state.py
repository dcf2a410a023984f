"""Per-invocation CLI state, built from global options and passed to every command."""
import logging
from dataclasses import dataclass, field
from typing import Optional

import click

from lacework_cli.api.client import ApiClient
from lacework_cli.config.store import ProfileStore
from lacework_cli.models.profile import Profile
from lacework_cli.presentation.base import OutputFormatter
from lacework_cli.presentation.factory import create_formatter
from lacework_cli.utils.error_utils import (
    ConfigurationError,
    ProfileNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

DEFAULT_PROFILE = "default"


@dataclass
class CliState:
    """Options of one CLI invocation.

    Credentials given as flags or environment variables take precedence over
    the ones stored in the selected profile of the config file.
    """

    profile: str = DEFAULT_PROFILE
    account: Optional[str] = None
    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    config_path: Optional[str] = None
    json_output: bool = False
    noninteractive: bool = False
    debug: bool = False
    _store: Optional[ProfileStore] = field(default=None, repr=False)

    def load_store(self) -> ProfileStore:
        """Load the config file once, falling back to an empty store if it is missing."""
        if self._store is None:
            self._store = ProfileStore.load_or_default(self.config_path)
        return self._store

    def interactive_mode(self) -> bool:
        return not self.noninteractive and not self.json_output

    def resolve_profile(self) -> Profile:
        """Merge flags and environment with the selected profile.

        Returns:
            Profile: Verified credentials

        Raises:
            ProfileNotFoundError: If a non-default profile is selected but not configured
            ConfigurationError: If the merged credentials are incomplete
        """
        store = self.load_store()
        stored = store.profiles.get(self.profile)
        if stored is None:
            if self.profile != DEFAULT_PROFILE and not (self.account and self.api_key
                                                        and self.api_secret):
                raise ProfileNotFoundError(self.profile)
            stored = Profile()

        profile = Profile(
            account=self.account or stored.account,
            api_key=self.api_key or stored.api_key,
            api_secret=self.api_secret or stored.api_secret,
        )
        logger.debug("using profile %s: %s", self.profile, profile.masked())

        try:
            profile.verify()
        except ValidationError as err:
            raise ConfigurationError(
                f"{err.message}, run 'lacework configure' or provide it as a flag "
                f"or environment variable",
                config_key=err.field,
            ) from err
        return profile

    def resolve_account(self) -> str:
        """The account subdomain only, for commands that do not call the API."""
        if self.account:
            return self.account
        stored = self.load_store().profiles.get(self.profile)
        if stored is None or not stored.account:
            raise ConfigurationError(
                "account missing, run 'lacework configure' or use --account",
                config_key="account",
            )
        return stored.account

    def api_client(self) -> ApiClient:
        return ApiClient.from_profile(self.resolve_profile())

    def formatter(self) -> OutputFormatter:
        return create_formatter("json" if self.json_output else "table",
                                use_pager=self.interactive_mode())


pass_state = click.make_pass_decorator(CliState, ensure=True)
