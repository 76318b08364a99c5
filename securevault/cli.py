#!/usr/bin/env python3
"""
SecureVault - Encrypted Password Manager CLI
"""
import logging
from typing import Tuple

import click
from tabulate import tabulate

from . import __version__
from .clipboard import ClipboardManager
from .config import VaultConfig
from .exceptions import ConfigurationError, VaultError
from .generator import PasswordConfig, generate, generate_memorable_password
from .manager import CredentialStore
from .strength import PasswordStrength, format_strength_bar

MIN_MASTER_PASSWORD_SCORE = 50

strength_checker = PasswordStrength()


def open_store(config: VaultConfig) -> Tuple[CredentialStore, str]:
    """
    Prompt for the master password and load the vault.

    Gives the user config.max_unlock_attempts tries.

    Returns:
        The loaded store and the master password that opened it
    """
    store = CredentialStore.from_config(config)
    if not store.storage.exists():
        raise click.ClickException("No vault found. Create one with 'securevault init'.")

    attempts = config.max_unlock_attempts
    for attempt in range(1, attempts + 1):
        password = click.prompt("Master password", hide_input=True)
        try:
            if store.load(password):
                return store, password
        except VaultError as e:
            raise click.ClickException(str(e))
        click.echo(f"❌ Invalid password. Attempt {attempt} of {attempts}.", err=True)

    raise click.ClickException("Maximum attempts exceeded. Access denied.")


def save_store(store: CredentialStore, password: str) -> None:
    try:
        store.save(password)
    except VaultError as e:
        raise click.ClickException(f"Failed to save credentials: {e}")


def prompt_new_password(label: str) -> str:
    return click.prompt(label, hide_input=True, confirmation_prompt=True)


@click.group()
@click.version_option(version=__version__, prog_name="SecureVault")
@click.option('--home', type=click.Path(file_okay=False), help='Vault directory (default: ~/.securevault)')
@click.option('--verbose', '-v', is_flag=True, help='Show debug logging')
@click.pass_context
def cli(ctx, home, verbose):
    """SecureVault - A local encrypted password manager

    Credentials are encrypted with AES-256-GCM under a key derived from
    your master password with Argon2id. The master password is never stored.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if ctx.obj is None:
        try:
            ctx.obj = VaultConfig.from_env(home=home)
        except ConfigurationError as e:
            raise click.UsageError(str(e))


@cli.command()
@click.pass_obj
def init(config):
    """Create a new, empty vault"""
    store = CredentialStore.from_config(config)
    if store.storage.exists():
        raise click.ClickException(f"Vault already exists at {config.data_file}")

    click.echo("🔐 Creating a new vault...\n")
    click.echo("Choose a strong master password. It protects everything else and can't be recovered.\n")

    password = prompt_new_password("Master password")
    score = strength_checker.evaluate(password)
    if score < MIN_MASTER_PASSWORD_SCORE:
        click.echo(f"⚠️  Master password strength: {strength_checker.describe(score)}")
        if not click.confirm("Use it anyway?"):
            click.echo("❌ Vault not created.")
            return

    config.ensure_home()
    store.load(password)
    save_store(store, password)
    click.echo(f"\n✅ Vault created: {config.data_file}")


@cli.command()
@click.option('--website', '-w', prompt="Website", help='Website or service name')
@click.option('--username', '-u', prompt="Username", help='Username or email')
@click.option('--generate', '-g', 'use_generator', is_flag=True, help='Generate a secure password')
@click.option('--length', '-l', default=16, help='Generated password length')
@click.option('--no-symbols', is_flag=True, help='Exclude symbols from generated password')
@click.option('--notes', '-n', help='Optional notes about this account')
@click.pass_obj
def add(config, website, username, use_generator, length, no_symbols, notes):
    """Add a credential to the vault"""
    store, master = open_store(config)

    if use_generator:
        try:
            secret = generate(PasswordConfig(
                length=length,
                include_symbols=not no_symbols,
                min_symbols=0 if no_symbols else 1,
            ))
        except ConfigurationError as e:
            raise click.ClickException(str(e))
        click.echo(f"\n🎲 Generated password: {click.style(secret, fg='green', bold=True)}")
    else:
        secret = prompt_new_password("Password")

    if store.find_by_website(website):
        click.echo(f"⚠️  {website} already has a credential; adding another one.")

    store.add_credential(website, username, secret, notes)
    save_store(store, master)
    click.echo(f"✅ Credential for {website} saved!")


@cli.command()
@click.argument('website')
@click.option('--show', '-S', is_flag=True, help='Show password in plain text')
@click.option('--copy', '-c', is_flag=True, help='Copy password to clipboard')
@click.pass_obj
def get(config, website, show, copy):
    """Show the credential stored for WEBSITE"""
    store, _ = open_store(config)

    credential = store.find_by_website(website)
    if credential is None:
        raise click.ClickException(f"No credential found for '{website}'")

    click.echo(f"\n🔐 Credentials for {click.style(credential.website, bold=True)}")
    click.echo(f"👤 Username: {click.style(credential.username, fg='cyan')}")
    if show:
        click.echo(f"🔑 Password: {click.style(credential.password, fg='yellow')}")
    else:
        click.echo(f"🔑 Password: {credential.masked_password()} (use --show to display)")
    if credential.notes:
        click.echo(f"📝 Notes: {credential.notes}")
    click.echo(f"📅 Last modified: {credential.last_modified:%Y-%m-%d %H:%M}")

    if copy:
        _copy_secret(credential.password, config.clipboard_timeout)


def _credential_table(credentials) -> str:
    rows = []
    for c in credentials:
        score = strength_checker.evaluate(c.password)
        rows.append([
            c.website,
            c.username,
            f"{c.last_modified:%Y-%m-%d %H:%M}",
            strength_checker.describe(score),
        ])
    return tabulate(rows, headers=['Website', 'Username', 'Modified', 'Strength'], tablefmt='simple_grid')


@cli.command('list')
@click.pass_obj
def list_credentials(config):
    """List all stored credentials"""
    store, _ = open_store(config)

    credentials = store.get_all_credentials()
    if not credentials:
        click.echo("📭 No credentials stored yet. Add one with 'securevault add'.")
        return

    click.echo()
    click.echo(_credential_table(credentials))
    click.echo(f"\n📊 Total: {len(credentials)} credential(s)")


@cli.command()
@click.argument('term', default="")
@click.pass_obj
def search(config, term):
    """Search websites, usernames and notes for TERM"""
    store, _ = open_store(config)

    results = store.search_credentials(term)
    if not results:
        click.echo(f"🔍 No credentials match '{term}'")
        return

    click.echo(_credential_table(results))
    click.echo(f"\n🔍 {len(results)} match(es)")


@cli.command()
@click.argument('website')
@click.option('--username', '-u', help='New username')
@click.option('--password', '-p', 'change_password', is_flag=True, help='Prompt for a new password')
@click.option('--generate', '-g', 'use_generator', is_flag=True, help='Generate a new password')
@click.option('--length', '-l', default=16, help='Generated password length')
@click.option('--notes', '-n', help='New notes')
@click.pass_obj
def update(config, website, username, change_password, use_generator, length, notes):
    """Update the credential stored for WEBSITE"""
    store, master = open_store(config)

    if store.find_by_website(website) is None:
        raise click.ClickException(f"No credential found for '{website}'")

    new_password = None
    if use_generator:
        try:
            new_password = generate(PasswordConfig(length=length))
        except ConfigurationError as e:
            raise click.ClickException(str(e))
        click.echo(f"🎲 Generated password: {click.style(new_password, fg='green', bold=True)}")
    elif change_password:
        new_password = prompt_new_password("New password")

    if username is None and new_password is None and notes is None:
        click.echo("Nothing to update. Use --username, --password, --generate or --notes.")
        return

    store.update_credential(website, username, new_password, notes)
    save_store(store, master)
    click.echo(f"✅ Credential for {website} updated")


@cli.command()
@click.argument('website')
@click.option('--force', '-f', is_flag=True, help='Skip confirmation prompt')
@click.pass_obj
def delete(config, website, force):
    """Delete every credential stored for WEBSITE"""
    store, master = open_store(config)

    if store.find_by_website(website) is None:
        raise click.ClickException(f"No credential found for '{website}'")

    click.echo(f"⚠️  About to delete credentials for: {website}")
    if not (force or click.confirm("Are you sure?")):
        click.echo("❌ Deletion cancelled")
        return

    store.remove_credential(website)
    save_store(store, master)
    click.echo(f"✅ Credentials for {website} deleted")


def _copy_secret(secret: str, timeout: int) -> None:
    clipboard = ClipboardManager()
    if not clipboard.copy_with_auto_clear(secret, timeout):
        raise click.ClickException("Clipboard is not available on this system")

    click.echo("✅ Password copied to clipboard")
    if timeout > 0:
        click.echo(f"⏱️  Clipboard will auto-clear in {timeout} seconds (Ctrl+C to clear now)...")
        try:
            clipboard.wait()
        except KeyboardInterrupt:
            clipboard.clear_if_unchanged(secret)


@cli.command()
@click.argument('website')
@click.option('--timeout', '-t', type=int, default=None, help="Clear clipboard after N seconds (0 = don't clear)")
@click.pass_obj
def cp(config, website, timeout):
    """Copy the password for WEBSITE to the clipboard without displaying it"""
    store, _ = open_store(config)

    credential = store.find_by_website(website)
    if credential is None:
        raise click.ClickException(f"No credential found for '{website}'")

    _copy_secret(credential.password, config.clipboard_timeout if timeout is None else timeout)


@cli.command('generate')
@click.option('--length', '-l', default=16, type=int, help='Password length')
@click.option('--count', '-c', default=1, type=int, help='Number of passwords to generate')
@click.option('--no-lowercase', is_flag=True, help='Exclude lowercase letters')
@click.option('--no-uppercase', is_flag=True, help='Exclude uppercase letters')
@click.option('--no-digits', is_flag=True, help='Exclude numbers')
@click.option('--no-symbols', is_flag=True, help='Exclude symbols')
@click.option('--min-lowercase', default=1, type=int, help='Minimum lowercase letters')
@click.option('--min-uppercase', default=1, type=int, help='Minimum uppercase letters')
@click.option('--min-digits', default=1, type=int, help='Minimum digits')
@click.option('--min-symbols', default=1, type=int, help='Minimum symbols')
@click.option('--exclude-similar', is_flag=True, help='Exclude look-alike characters (i, l, 1, L, o, 0, O)')
@click.option('--memorable', '-m', is_flag=True, help='Generate a pronounceable password instead')
def generate_command(length, count, no_lowercase, no_uppercase, no_digits, no_symbols,
                     min_lowercase, min_uppercase, min_digits, min_symbols, exclude_similar, memorable):
    """Generate secure passwords without saving them"""
    try:
        if memorable:
            passwords = [generate_memorable_password(length) for _ in range(count)]
        else:
            password_config = PasswordConfig(
                length=length,
                include_lowercase=not no_lowercase,
                include_uppercase=not no_uppercase,
                include_digits=not no_digits,
                include_symbols=not no_symbols,
                min_lowercase=min_lowercase,
                min_uppercase=min_uppercase,
                min_digits=min_digits,
                min_symbols=min_symbols,
                exclude_similar=exclude_similar,
            )
            passwords = [generate(password_config) for _ in range(count)]
    except ConfigurationError as e:
        raise click.ClickException(str(e))

    for i, password in enumerate(passwords, 1):
        styled = click.style(password, fg='green', bold=True)
        click.echo(styled if count == 1 else f"{i}. {styled}")


@cli.command()
@click.argument('password', required=False)
def strength(password):
    """Score a password (prompted if not given)"""
    if password is None:
        password = click.prompt("Password to check", hide_input=True)

    results = strength_checker.analyze(password)
    click.echo(f"Strength: {format_strength_bar(results['score'])}")
    click.echo(f"Level: {results['strength']}")

    if results['suggestions']:
        click.echo("Suggestions:")
        for suggestion in results['suggestions']:
            click.echo(f"  - {suggestion}")


@cli.command('change-master')
@click.pass_obj
def change_master(config):
    """Change the master password and re-encrypt the vault"""
    store, current = open_store(config)

    new_password = prompt_new_password("New master password")
    try:
        changed = store.change_master_password(current, new_password)
    except VaultError as e:
        raise click.ClickException(f"Failed to change master password: {e}")

    if not changed:
        raise click.ClickException("Current master password is incorrect")
    click.echo("✅ Master password changed")


@cli.command()
@click.argument('output', type=click.Path(dir_okay=False))
@click.option('--include-passwords', is_flag=True, help='Include actual passwords (CAREFUL!)')
@click.pass_obj
def export(config, output, include_passwords):
    """Write an unencrypted report of all credentials to OUTPUT"""
    store, _ = open_store(config)

    if include_passwords:
        click.echo("⚠️  The export file will contain your passwords in plain text!")
        if not click.confirm("Continue?"):
            click.echo("❌ Export cancelled")
            return

    if not store.export_to_file(output, include_passwords):
        raise click.ClickException(f"Failed to export credentials to {output}")
    click.echo(f"✅ Exported {store.credential_count} credential(s) to {output}")


@cli.command()
@click.pass_obj
def backups(config):
    """List the automatic backups of the vault file"""
    paths = CredentialStore.from_config(config).list_backups()
    if not paths:
        click.echo("No backups yet. One is created every time the vault is saved.")
        return

    for path in paths:
        click.echo(path)
    click.echo(f"\n💾 {len(paths)} backup(s) in {config.backup_dir}")


if __name__ == '__main__':
    cli()
