"""Main CLI entry point and command groups."""
import click

from lacework_cli.commands.configure import configure
from lacework_cli.commands.event import event
from lacework_cli.commands.vulnerability import vulnerability
from lacework_cli.state import DEFAULT_PROFILE, CliState
from lacework_cli.utils.log_utils import setup_logging


@click.group()
@click.option("-p", "--profile", envvar="LW_PROFILE", default=DEFAULT_PROFILE, show_default=True,
              help="Switch between profiles configured at ~/.lacework.toml")
@click.option("-a", "--account", envvar="LW_ACCOUNT",
              help="Account subdomain of URL (i.e. <ACCOUNT>.lacework.net)")
@click.option("-k", "--api_key", "api_key", envvar="LW_API_KEY", help="Access key id")
@click.option("-s", "--api_secret", "api_secret", envvar="LW_API_SECRET",
              help="Secret access key")
@click.option("--config", "config_path", envvar="LW_CONFIG", type=click.Path(dir_okay=False),
              help="Config file (default is $HOME/.lacework.toml)")
@click.option("--json", "json_output", is_flag=True,
              help="Switch commands output from human-readable to json format")
@click.option("--noninteractive", envvar="LW_NONINTERACTIVE", is_flag=True,
              help="Turn off interactive mode (disable spinners, prompts, etc.)")
@click.option("--debug", envvar="LW_DEBUG", is_flag=True, help="Turn on debug logging")
@click.version_option(package_name="lacework-cli")
@click.pass_context
def cli(ctx, profile, account, api_key, api_secret, config_path, json_output,
        noninteractive, debug):
    """Lacework CLI - Interact with the Lacework platform.

    Credentials are read from the selected profile of the config file and can
    be overridden with flags or the LW_ACCOUNT, LW_API_KEY and LW_API_SECRET
    environment variables.
    """
    setup_logging(debug)
    ctx.obj = CliState(
        profile=profile,
        account=account,
        api_key=api_key,
        api_secret=api_secret,
        config_path=config_path,
        json_output=json_output,
        noninteractive=noninteractive,
        debug=debug,
    )


cli.add_command(configure)
cli.add_command(event)
cli.add_command(vulnerability)


def main():
    cli(prog_name="lacework")


if __name__ == "__main__":
    main()
