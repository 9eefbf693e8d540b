"""Command line interface for AesJson."""

from __future__ import annotations

import getpass
import json
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Callable

import click
from rich.console import Console
from rich.table import Table

from aesjson import __version__
from aesjson.crypto.kdf import DEFAULT_PROFILE, PROFILE_PARAMS, Profile
from aesjson.errors import (
    ConfigurationError,
    CryptographicError,
    DecompressionError,
    SerializationError,
)
from aesjson.pipeline import api

EXIT_SUCCESS = 0
EXIT_USAGE = 1
EXIT_CRYPTO = 2
EXIT_FS = 3
EXIT_CORRUPT = 4

console = Console()

_PROFILE_CHOICE = click.Choice(
    [profile.value for profile in Profile] + [profile.name for profile in Profile],
    case_sensitive=False,
)


def _package_version() -> str:
    try:
        return version("aesjson")
    except PackageNotFoundError:
        return __version__


def _prompt_password(password_opt: str | None) -> str:
    if password_opt is not None:
        return password_opt
    return getpass.getpass("Password: ")


def _ensure_output(path: Path, overwrite: bool) -> None:
    if path.exists() and not overwrite:
        raise FileExistsError(f"Refusing to overwrite existing file: {path}")


def _handle_action(action: Callable[[], None]) -> int:
    try:
        action()
    except ConfigurationError as exc:
        console.print(f"[red]Invalid configuration:[/red] {exc}")
        return EXIT_USAGE
    except CryptographicError:
        console.print("[red]Wrong password, salt or profile[/red]")
        return EXIT_CRYPTO
    except (DecompressionError, SerializationError):
        console.print("[red]Error: file is corrupted or was written with different settings[/red]")
        return EXIT_CORRUPT
    except FileExistsError as exc:
        console.print(f"[red]{exc}. Use --overwrite to replace.[/red]")
        return EXIT_FS
    except FileNotFoundError as exc:
        console.print(f"[red]File not found:[/red] {exc}")
        return EXIT_FS
    except PermissionError as exc:
        console.print(f"[red]Permission denied:[/red] {exc}")
        return EXIT_FS
    except OSError as exc:  # noqa: BLE001
        console.print(f"[red]Filesystem error:[/red] {exc}")
        return EXIT_FS
    return EXIT_SUCCESS


def _password_options(func: Callable[..., None]) -> Callable[..., None]:
    func = click.option(
        "--profile",
        type=_PROFILE_CHOICE,
        default=DEFAULT_PROFILE.value,
        show_default=True,
        help="Argon2id cost preset used to derive the key (value or member name).",
    )(func)
    func = click.option("--salt", required=True, help="Salt (at least 8 bytes).")(func)
    func = click.option("--password", "password_opt", help="Password (will prompt if omitted).")(func)
    return func


@click.group(
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=False,
)
@click.version_option(version=_package_version(), prog_name="AesJson")
def cli() -> None:
    """Store JSON documents as gzipped, AES-encrypted files."""


@cli.command(
    help="Encrypt a JSON document into OUTPUT.",
    epilog="Example:\n  aesjson write save.json save.dat --salt 'any salt'",
)
@click.argument("input_path", type=click.Path(path_type=Path))
@click.argument("output_path", type=click.Path(path_type=Path))
@_password_options
@click.option(
    "--overwrite/--no-overwrite",
    default=False,
    help="Overwrite output if it already exists.",
)
@click.pass_context
def write(
    ctx: click.Context,
    input_path: Path,
    output_path: Path,
    password_opt: str | None,
    salt: str,
    profile: str,
    overwrite: bool,
) -> None:
    try:
        document = json.loads(input_path.read_text(encoding="utf-8"))
    except OSError as exc:
        console.print(f"[red]Cannot read input:[/red] {exc}")
        ctx.exit(EXIT_FS)
        return
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        console.print(f"[red]Input is not valid JSON:[/red] {exc}")
        ctx.exit(EXIT_USAGE)
        return

    password = _prompt_password(password_opt)

    def _run() -> None:
        _ensure_output(output_path, overwrite)
        api.write_file(document, output_path, password, salt, profile)

    code = _handle_action(_run)
    if code == EXIT_SUCCESS:
        console.print(f"[green]Encrypted to[/green] {output_path} ({output_path.stat().st_size} bytes).")
    ctx.exit(code)


@cli.command(
    help="Decrypt FILE and print its JSON document.",
    epilog="Examples:\n  aesjson read save.dat --salt 'any salt'\n  aesjson read save.dat --salt 'any salt' --output save.json",
)
@click.argument("file_path", type=click.Path(path_type=Path))
@_password_options
@click.option("--output", "output_path", type=click.Path(path_type=Path), help="Write JSON here instead of printing.")
@click.option(
    "--overwrite/--no-overwrite",
    default=False,
    help="Overwrite --output if it already exists.",
)
@click.pass_context
def read(
    ctx: click.Context,
    file_path: Path,
    password_opt: str | None,
    salt: str,
    profile: str,
    output_path: Path | None,
    overwrite: bool,
) -> None:
    password = _prompt_password(password_opt)

    def _run() -> None:
        document = api.read_file(file_path, password, salt, profile)
        if output_path is not None:
            _ensure_output(output_path, overwrite)
            output_path.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")
            console.print(f"[green]Decrypted to[/green] {output_path}.")
        elif document is None:
            console.print("[yellow]File contains no data.[/yellow]")
        else:
            console.print_json(data=document)

    ctx.exit(_handle_action(_run))


@cli.command(help="List key derivation profiles and their Argon2id costs.")
def profiles() -> None:
    table = Table(title="Argon2id profiles")
    table.add_column("Profile")
    table.add_column("Parallelism", justify="right")
    table.add_column("Iterations", justify="right")
    table.add_column("Memory", justify="right")
    for profile, params in PROFILE_PARAMS.items():
        name = f"{profile.value} (default)" if profile is DEFAULT_PROFILE else profile.value
        table.add_row(
            name,
            str(params.parallelism),
            str(params.time_cost),
            f"{params.mem_cost_kib // 1024} MiB",
        )
    console.print(table)


@cli.command(name="version", help="Show the AesJson version.")
def version_command() -> None:
    console.print(f"AesJson {_package_version()}")


def main(argv: list[str] | None = None) -> int:
    try:
        return cli.main(args=argv, prog_name="aesjson", standalone_mode=False) or EXIT_SUCCESS
    except SystemExit as exc:  # noqa: TRY003
        code = exc.code if isinstance(exc.code, int) else EXIT_USAGE
        return code


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
