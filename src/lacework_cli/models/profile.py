"""Model for Lacework credential profiles."""
from dataclasses import dataclass
from typing import Dict

from lacework_cli.utils.error_utils import ValidationError


def format_secret(show_last: int, secret: str) -> str:
    """Mask a secret, keeping only its last characters visible.

    Args:
        show_last: Number of trailing characters to keep
        secret: The secret to mask

    Returns:
        str: The masked secret, e.g. "****************abcd"
    """
    if len(secret) <= show_last:
        return "*" * len(secret)
    return "*" * (len(secret) - show_last) + secret[-show_last:]


@dataclass
class Profile:
    """A named set of credentials for one Lacework account."""

    account: str = ""
    api_key: str = ""
    api_secret: str = ""

    def verify(self) -> None:
        """Check that every required field is set.

        Fields are checked in the order account, api_key, api_secret and the
        first missing one is reported.

        Raises:
            ValidationError: If a required field is empty
        """
        for field_name in ("account", "api_key", "api_secret"):
            if not getattr(self, field_name):
                raise ValidationError(f"{field_name} missing", field=field_name)

    @classmethod
    def from_dict(cls, data: Dict) -> "Profile":
        """Create a Profile from a config file section, ignoring unknown keys."""
        return cls(
            account=str(data.get("account", "")),
            api_key=str(data.get("api_key", "")),
            api_secret=str(data.get("api_secret", "")),
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "account": self.account,
            "api_key": self.api_key,
            "api_secret": self.api_secret,
        }

    def masked(self) -> Dict[str, str]:
        """Dictionary form that is safe to log or display."""
        return {
            "account": self.account,
            "api_key": self.api_key,
            "api_secret": format_secret(4, self.api_secret),
        }
