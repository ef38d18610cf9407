from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from xor_sleuth.attack.repeating_key_xor import encrypt_repeating_key_xor
from xor_sleuth.attack.single_byte_xor import (
    DEFAULT_MIN_LETTER_RATIO,
    Candidate,
    NoValidCandidateError,
    attack_single_byte_xor,
    detect_single_byte_xor,
)
from xor_sleuth.log import configure_logging
from xor_sleuth.models.byte_sequence import ByteSequence, DecodingError, LengthMismatchError
from xor_sleuth.utils import CiphertextFormat, hex_to_base64, load_ciphertext_lines

min_letter_ratio_option = click.option(
    "--min-letter-ratio",
    "-r",
    type=click.FloatRange(0.0, 1.0),
    default=DEFAULT_MIN_LETTER_RATIO,
    show_default=True,
    envvar="XOR_SLEUTH_MIN_LETTER_RATIO",
    help="Reject plaintexts whose share of letters and spaces is not above this.",
)
workers_option = click.option(
    "--workers",
    "-w",
    type=click.IntRange(min=1),
    default=None,
    envvar="XOR_SLEUTH_WORKERS",
    help="Score the 256 key guesses on this many threads.",
)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log attack progress to stderr.")
def cli(verbose: bool):
    configure_logging(verbose)


def render_candidate(candidate: Candidate, title: str, line_index: Optional[int] = None) -> Table:
    """Build a results table for a recovered key."""
    table = Table(title=title, show_header=False)
    table.add_column("field", style="bold cyan")
    table.add_column("value")
    if line_index is not None:
        table.add_row("line", str(line_index))
    table.add_row("key", f"{candidate.key} (0x{candidate.key:02x})")
    table.add_row("distance", f"{candidate.distance:.4f}")
    table.add_row("letter ratio", f"{candidate.letter_ratio:.4f}")
    table.add_row("plaintext", escape(render_plaintext(candidate.plaintext)))
    return table


def render_plaintext(plaintext: ByteSequence) -> str:
    try:
        return plaintext.to_text()
    except DecodingError:
        return plaintext.pretty()


def decode_hex_argument(value: str) -> ByteSequence:
    try:
        return ByteSequence.from_hex(value)
    except DecodingError as e:
        raise click.BadParameter(str(e)) from e


@cli.command()
@click.argument("ciphertext_hex")
@min_letter_ratio_option
@workers_option
def crack(ciphertext_hex: str, min_letter_ratio: float, workers: Optional[int]):
    """Recover the key of a hex encoded single-byte XOR ciphertext."""
    ciphertext = decode_hex_argument(ciphertext_hex)
    try:
        candidate = attack_single_byte_xor(ciphertext, min_letter_ratio, workers=workers)
    except NoValidCandidateError as e:
        raise click.ClickException(str(e)) from e
    Console().print(render_candidate(candidate, "Single-byte XOR"))


@cli.command()
@click.option("--ciphertext-path", "-c", required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--ciphertext-format", "-f", type=click.Choice(["hex", "b64"]), default="hex", show_default=True)
@min_letter_ratio_option
@workers_option
def detect(ciphertext_path: str, ciphertext_format: CiphertextFormat, min_letter_ratio: float, workers: Optional[int]):
    """Find the line of a file that was single-byte XOR encrypted."""
    try:
        ciphertexts = load_ciphertext_lines(ciphertext_path, ciphertext_format)
    except DecodingError as e:
        raise click.ClickException(f"{ciphertext_path}: {e}") from e

    console = Console()
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Scoring lines", total=len(ciphertexts))
        try:
            best_index, best = detect_single_byte_xor(
                ciphertexts,
                min_letter_ratio,
                workers=workers,
                on_progress=lambda _: progress.advance(task),
            )
        except NoValidCandidateError as e:
            raise click.ClickException(str(e)) from e

    console.print(render_candidate(best, "Detected single-byte XOR", line_index=best_index))


@cli.command("xor")
@click.argument("left_hex")
@click.argument("right_hex")
def xor_command(left_hex: str, right_hex: str):
    """XOR two equal-length hex strings."""
    left = decode_hex_argument(left_hex)
    right = decode_hex_argument(right_hex)
    try:
        result = left ^ right
    except LengthMismatchError as e:
        raise click.ClickException(str(e)) from e
    click.echo(result.to_hex())


@cli.command("repeat-xor")
@click.option("--key", "-k", required=True, help="Repeating key, as ASCII text.")
@click.argument("plaintext")
def repeat_xor(key: str, plaintext: str):
    """Encrypt ASCII text with a repeating XOR key and print it as hex."""
    try:
        message = ByteSequence.from_text(plaintext)
        key_bytes = ByteSequence.from_text(key)
        ciphertext = encrypt_repeating_key_xor(message, key_bytes)
    except ValueError as e:
        raise click.ClickException(str(e)) from e
    click.echo(ciphertext.to_hex())


@cli.command("hex-to-b64")
@click.argument("hex_string")
def hex_to_b64(hex_string: str):
    """Re-encode hex digits as base64 digits, three hex to two base64."""
    try:
        click.echo(hex_to_base64(hex_string))
    except DecodingError as e:
        raise click.BadParameter(str(e)) from e


if __name__ == "__main__":
    cli()
