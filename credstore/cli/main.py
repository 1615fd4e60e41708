"""CLI for credstore."""

import base64
import binascii
import sys

import click
from dotenv import find_dotenv, load_dotenv

from credstore import __version__

load_dotenv(find_dotenv(usecwd=True))


def identity_options(func):
    """Add --service/--user/--target options to a command."""
    func = click.option("--target", "-t", default=None, help="Optional target")(func)
    func = click.option("--user", "-u", required=True, help="User name")(func)
    func = click.option("--service", "-s", required=True, help="Service name")(func)
    return func


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    raise SystemExit(1)


def _make_entry(ctx: click.Context, service: str, user: str, target):
    from credstore import Entry, KeyringError
    from credstore.config import ConfigError

    registry = ctx.obj["registry"]
    try:
        if target is None:
            return Entry.create(service, user, registry=registry)
        return Entry.create_with_target(target, service, user, registry=registry)
    except (KeyringError, ConfigError) as e:
        _fail(f"Couldn't create entry: {e}")


@click.group()
@click.version_option(version=__version__, prog_name="credstore")
@click.option("--environment", "-e", default=None, help="Config environment")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx: click.Context, environment: str, verbose: bool):
    """Credstore CLI - store and retrieve secrets in the platform keystore."""
    from credstore import CredentialBuilderRegistry
    from credstore.config import ConfigError, load_settings
    from credstore.keystores import default_credential_builder
    from credstore.utils.logging import setup_logging

    try:
        settings = load_settings(environment=environment)
    except ConfigError as e:
        _fail(str(e))

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        format_style=settings.log_format,
        log_file=settings.log_file,
    )

    ctx.obj = {
        "settings": settings,
        "registry": CredentialBuilderRegistry(
            default_factory=lambda: default_credential_builder(settings)
        ),
    }


@cli.command(name="set")
@identity_options
@click.argument("value", required=False)
@click.option("--binary", "-b", is_flag=True, help="VALUE is base64-encoded bytes")
@click.pass_context
def set_(ctx: click.Context, service: str, user: str, target, value, binary: bool):
    """Store a password (or, with --binary, a secret)."""
    from credstore import CredentialPersistence, KeyringError

    if value is None:
        value = click.prompt("Value", hide_input=True, confirmation_prompt=True)

    entry = _make_entry(ctx, service, user, target)

    try:
        if binary:
            try:
                secret = base64.b64decode(value, validate=True)
            except binascii.Error:
                _fail("VALUE is not valid base64")
            entry.set_secret(secret)
        else:
            entry.set_password(value)
    except KeyringError as e:
        _fail(f"Couldn't set value: {e}")

    persistence = ctx.obj["registry"].resolve().persistence()
    if persistence == CredentialPersistence.ENTRY_ONLY:
        click.echo(
            "Warning: the configured store keeps values only for the life "
            "of this command",
            err=True,
        )
    click.echo(f"✓ Stored {'secret' if binary else 'password'} for {service}/{user}")


@cli.command()
@identity_options
@click.option("--binary", "-b", is_flag=True, help="Print the secret as base64")
@click.pass_context
def get(ctx: click.Context, service: str, user: str, target, binary: bool):
    """Print the stored password (or, with --binary, the secret)."""
    from credstore import BadEncodingError, KeyringError

    entry = _make_entry(ctx, service, user, target)

    try:
        if binary:
            click.echo(base64.b64encode(entry.get_secret()).decode("ascii"))
        else:
            click.echo(entry.get_password())
    except BadEncodingError as e:
        _fail(f"{e}; use --binary to read the raw secret")
    except KeyringError as e:
        _fail(str(e))


@cli.command()
@identity_options
@click.pass_context
def delete(ctx: click.Context, service: str, user: str, target):
    """Delete the stored credential."""
    from credstore import KeyringError

    entry = _make_entry(ctx, service, user, target)

    try:
        entry.delete_credential()
    except KeyringError as e:
        _fail(str(e))

    click.echo(f"✓ Deleted credential for {service}/{user}")


@cli.command()
@click.pass_context
def info(ctx: click.Context):
    """Show which keystore backs new entries."""
    from credstore import KeyringError
    from credstore.config import ConfigError
    from credstore.keystores import normalize_platform, select_keystore

    settings = ctx.obj["settings"]

    try:
        builder = ctx.obj["registry"].resolve()
    except (KeyringError, ConfigError) as e:
        _fail(str(e))

    feature = select_keystore(settings.keystore_features)

    click.echo(f"\n{'='*60}")
    click.echo("Credential Store")
    click.echo(f"{'='*60}\n")
    click.echo(f"Platform:    {normalize_platform(sys.platform)}")
    click.echo(f"Features:    {', '.join(settings.keystore_features) or 'none'}")
    click.echo(f"Keystore:    {feature or 'mock'}")
    click.echo(f"Builder:     {builder!r}")
    click.echo(f"Persistence: {builder.persistence().value}")


def main():
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
