"""Profile store backed by the Lacework TOML configuration file.

The configuration file lives at ``~/.lacework.toml`` by default::

    updates = true

    [profiles.prod]
    account = "prod"
    api_key = "PROD_1234abcd"
    api_secret = "_abcd1234"

    [profiles.default]
    account = "test"
    api_key = "TEST_1234abcd"
    api_secret = "_abcd1234"

The whole file (``updates`` flag and every profile) is rewritten on persist.
"""
import json
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import toml

from lacework_cli.models.profile import Profile
from lacework_cli.utils.error_utils import (
    ConfigDecodeError,
    ConfigNotFoundError,
    ConfigurationError,
    ProfileNotFoundError,
)

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".lacework.toml"
CONFIG_FILE_MODE = 0o600

# profile names are written as bare TOML keys
PROFILE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")

PathLike = Union[str, Path]


def default_config_path() -> Path:
    """Location of the configuration file in the user's home directory."""
    return Path.home() / CONFIG_FILE_NAME


def _resolve(path: Optional[PathLike]) -> Path:
    return Path(path).expanduser() if path else default_config_path()


@dataclass
class ProfileStore:
    """Named credential profiles plus the global ``updates`` flag."""

    updates: bool = True
    profiles: Dict[str, Profile] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Optional[PathLike] = None) -> "ProfileStore":
        """Decode the configuration file at ``path``.

        Args:
            path: Config file location, defaults to ``~/.lacework.toml``

        Returns:
            ProfileStore: The decoded store

        Raises:
            ConfigNotFoundError: If the file does not exist
            ConfigDecodeError: If the file cannot be read or is not valid
        """
        config_path = _resolve(path)
        logger.debug("decoding config file %s", config_path)

        try:
            with open(config_path, "r", encoding="utf-8") as handle:
                data = toml.load(handle)
        except FileNotFoundError:
            raise ConfigNotFoundError(str(config_path)) from None
        except toml.TomlDecodeError as err:
            raise ConfigDecodeError(
                f"unable to decode config {config_path}: {err}", path=str(config_path)
            ) from err
        except UnicodeDecodeError as err:
            raise ConfigDecodeError(
                f"unable to decode config {config_path}: not valid UTF-8 ({err.reason})",
                path=str(config_path),
            ) from err
        except OSError as err:
            raise ConfigDecodeError(
                f"unable to read config {config_path}: {err}", path=str(config_path)
            ) from err

        return cls.from_dict(data, source=str(config_path))

    @classmethod
    def load_or_default(cls, path: Optional[PathLike] = None) -> "ProfileStore":
        """Like ``load`` but return an empty store when the file does not exist."""
        try:
            return cls.load(path)
        except ConfigNotFoundError:
            logger.debug("config file %s not found, using defaults", _resolve(path))
            return cls()

    @classmethod
    def from_dict(cls, data: Dict, source: Optional[str] = None) -> "ProfileStore":
        """Build a store from decoded TOML data, ignoring unknown keys.

        Raises:
            ConfigDecodeError: If ``updates`` or ``profiles`` have the wrong shape
        """
        updates = data.get("updates", True)
        if not isinstance(updates, bool):
            raise ConfigDecodeError(
                f"unable to decode config: 'updates' must be a boolean, got {updates!r}",
                path=source,
            )

        raw_profiles = data.get("profiles", {})
        if not isinstance(raw_profiles, dict):
            raise ConfigDecodeError(
                "unable to decode config: 'profiles' must be a table", path=source
            )

        profiles = {}
        for name, details in raw_profiles.items():
            if not isinstance(details, dict):
                raise ConfigDecodeError(
                    f"unable to decode config: profile '{name}' must be a table", path=source
                )
            profiles[name] = Profile.from_dict(details)

        return cls(updates=updates, profiles=profiles)

    def to_dict(self) -> Dict:
        return {
            "updates": self.updates,
            "profiles": {name: profile.to_dict() for name, profile in self.profiles.items()},
        }

    def get(self, name: str) -> Profile:
        """Return the profile called ``name``.

        Raises:
            ProfileNotFoundError: If there is no such profile
        """
        try:
            return self.profiles[name]
        except KeyError:
            raise ProfileNotFoundError(name) from None

    def put(self, name: str, profile: Profile) -> None:
        """Insert or overwrite a profile. No validation happens here."""
        self.profiles[name] = profile

    def check_encodable(self) -> None:
        """Reject profile names and values that would not load back unchanged.

        Raises:
            ConfigurationError: If a name is not a bare TOML key or a value has
                control characters
        """
        for name, profile in self.profiles.items():
            if not PROFILE_NAME_PATTERN.match(name):
                raise ConfigurationError(
                    f"invalid profile name {name!r}, use only letters, digits, '-' and '_'",
                    config_key="profiles",
                )
            for key, value in profile.to_dict().items():
                if not value.isprintable():
                    raise ConfigurationError(
                        f"invalid {key} in profile '{name}': control characters are not allowed",
                        config_key=key,
                    )

    def encode(self) -> str:
        """Serialize the store to TOML, checking that it decodes to the same data.

        Raises:
            ConfigurationError: If the store cannot be encoded faithfully
        """
        self.check_encodable()
        data = self.to_dict()
        content = toml.dumps(data)
        try:
            decoded = toml.loads(content)
        except toml.TomlDecodeError as err:
            raise ConfigurationError(f"unable to encode config: {err}") from err
        if decoded != data:
            raise ConfigurationError(
                "unable to encode config: profiles would not be stored as given"
            )
        return content

    def persist(self, path: Optional[PathLike] = None) -> Path:
        """Write the full store to ``path``, readable and writable by the owner only.

        Returns:
            Path: The file that was written

        Raises:
            ConfigurationError: If a profile cannot be encoded or the file cannot be written
        """
        config_path = _resolve(path)
        content = self.encode()
        logger.debug("storing %d profiles in %s", len(self.profiles), config_path)

        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(config_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, CONFIG_FILE_MODE)
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(content)
            # O_CREAT only applies the mode to new files
            os.chmod(config_path, CONFIG_FILE_MODE)
        except OSError as err:
            raise ConfigurationError(
                f"unable to write config {config_path}: {err}", config_key="path"
            ) from err

        return config_path


def load_keys_from_json_file(path: PathLike) -> Tuple[str, str]:
    """Read the API key file downloaded from the Lacework web UI.

    Args:
        path: Path of the JSON file with ``keyId`` and ``secret`` keys

    Returns:
        Tuple[str, str]: The API key id and its secret

    Raises:
        ConfigurationError: If the file cannot be read or decoded
    """
    logger.debug("loading API key JSON file %s", path)
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, ValueError) as err:
        raise ConfigurationError(
            f"unable to load keys from the provided json file: {err}", config_key="json_file"
        ) from err

    if not isinstance(data, dict):
        raise ConfigurationError(
            "unable to load keys from the provided json file: expected a JSON object",
            config_key="json_file",
        )

    return str(data.get("keyId", "")), str(data.get("secret", ""))
