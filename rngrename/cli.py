"""CLI entrypoints."""

import random

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from tqdm import tqdm

from rngrename.errors import RngRenameError
from rngrename.logging_setup import configure_logging
from rngrename.models.namespace import PRESET_ALPHABETS, SUPPORTED_CASES, CaseMode, CharSetSelection
from rngrename.models.rename import STRATEGY_RATIO_THRESHOLD, ExtensionMode, RenameConfig, RenamePair, StrategyKind
from rngrename.processors.assembler import BatchAssembler, chunk_pairs
from rngrename.processors.executor import (
    BatchResponse,
    ConfirmMode,
    ErrorHandlingMode,
    ErrorResponse,
    RenameExecutor,
    UserHalt,
)


console = Console()


def _choices(enum_cls) -> click.Choice:
    return click.Choice([member.value for member in enum_cls])


def _prompt_on_error(pair: RenamePair, error: OSError) -> ErrorResponse:
    console.print(f"[bold red]Failed to rename[/bold red] [cyan]{escape(str(pair.source_path))}[/cyan]: {error}")
    answer = click.prompt(
        "What to do with this file?",
        type=_choices(ErrorResponse),
        default=ErrorResponse.SKIP.value,
    )
    return ErrorResponse(answer)


def _print_batch(batch: list[RenamePair], batch_idx: int, batch_count: int, dry_run: bool) -> None:
    title = f"Batch #{batch_idx + 1}/{batch_count}" + (" (DRY RUN)" if dry_run else "")
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Original", style="cyan")
    table.add_column("New Name", style="green")
    for pair in batch:
        table.add_row(escape(str(pair.source_path)), escape(pair.destination_path.name))
    console.print(table)


@click.group(context_settings=dict(show_default=True))
def cli() -> None:
    """rng-rename - Rename files to random names."""
    pass


@cli.command("rename")
@click.argument("input_files", type=click.Path(exists=True, dir_okay=False), nargs=-1, required=True)
@click.option(
    "-c",
    "--confirm",
    "confirm_mode",
    type=_choices(ConfirmMode),
    default=ConfirmMode.BATCH.value,
    help="Confirm before renaming: skip confirmation, confirm several at a time, or each one individually.",
)
@click.option(
    "--confirm-batch",
    "confirm_batch_size",
    type=click.IntRange(min=0),
    default=10,
    help="Number of files to confirm at once with '--confirm batch'. 0 confirms all at once.",
)
@click.option("-d", "--dry-run", is_flag=True, default=False, help="Preview renames without touching any file.")
@click.option(
    "-x",
    "--ext-mode",
    type=_choices(ExtensionMode),
    default=ExtensionMode.KEEP.value,
    help="How to handle the original extension. For 'tarball.tar.xz': keep = .xz, keep_all = .tar.xz.",
)
@click.option("--forced-ext", type=str, default=None, help="Extension to use with '--ext-mode force'.")
@click.option(
    "-e",
    "--error-handling-mode",
    "err_mode",
    type=_choices(ErrorHandlingMode),
    default=ErrorHandlingMode.WARN.value,
    help="What to do when a rename fails: ignore it, prompt, or stop immediately.",
)
@click.option(
    "--force-generation-strategy",
    type=_choices(StrategyKind),
    default=None,
    hidden=True,
    help="Force a name generation strategy. Useful for testing performance.",
)
@click.option(
    "--strategy-threshold",
    type=click.FloatRange(min=0.0, min_open=True, max=1.0),
    default=STRATEGY_RATIO_THRESHOLD,
    hidden=True,
    help="Ratio of files to naming space at which names are enumerated instead of drawn.",
)
@click.option("-l", "--length", type=int, default=8, help="Number of random characters in each name.")
@click.option("--prefix", type=str, default="", help="Static text placed before each name.")
@click.option("--suffix", type=str, default="", help="Static text placed after each name, before the extension.")
@click.option(
    "-s",
    "--char-set",
    type=_choices(CharSetSelection),
    default=CharSetSelection.BASE16.value,
    help="Characters to draw names from. 'custom' requires --custom-chars.",
)
@click.option("--custom-chars", type=str, default=None, help="Characters to use with '--char-set custom'.")
@click.option("--case", "case_mode", type=_choices(CaseMode), default=None, help="Letter case, where supported.")
@click.option(
    "--case-insensitive-fs",
    is_flag=True,
    default=False,
    help="Treat names differing only in case as colliding.",
)
@click.option("--seed", type=int, default=None, hidden=True, help="Seed the random generator.")
@click.option("-v", "--verbose", count=True, help="Increase logging verbosity. Repeat for more detail.")
def rename(
    input_files: tuple[str, ...],
    confirm_mode: str,
    confirm_batch_size: int,
    dry_run: bool,
    ext_mode: str,
    forced_ext: str | None,
    err_mode: str,
    force_generation_strategy: str | None,
    strategy_threshold: float,
    length: int,
    prefix: str,
    suffix: str,
    char_set: str,
    custom_chars: str | None,
    case_mode: str | None,
    case_insensitive_fs: bool,
    seed: int | None,
    verbose: int,
) -> None:
    """Rename files to randomly generated names.

    Names never collide with each other or with files already present in
    the target directories. Nothing is renamed until every name is planned.

    Examples:

        rng-rename rename --length 12 *.jpg

        rng-rename rename -s letters --case mixed --prefix img_ -c none photos/*
    """
    configure_logging(verbose)

    try:
        config = RenameConfig(
            char_set=char_set,
            custom_chars=custom_chars,
            case_mode=case_mode,
            length=length,
            prefix=prefix,
            suffix=suffix,
            ext_mode=ext_mode,
            forced_extension=forced_ext,
            forced_strategy=force_generation_strategy,
            strategy_threshold=strategy_threshold,
            case_insensitive=case_insensitive_fs,
        )
        assembler = BatchAssembler(config, rng=random.Random(seed) if seed is not None else None)
        pairs = assembler.assemble(input_files)
    except (RngRenameError, ValidationError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise SystemExit(1) from e

    if dry_run:
        console.print("You are in [bold red]DRY RUN MODE[/bold red]. Your files will not be touched.")

    executor = RenameExecutor(dry_run=dry_run)
    mode = ErrorHandlingMode(err_mode)
    halted = False

    try:
        if ConfirmMode(confirm_mode) is ConfirmMode.NONE:
            executor.apply_all(tqdm(pairs, desc="Renaming files..."), err_mode=mode, on_error=_prompt_on_error)
        else:
            batch_size = 1 if ConfirmMode(confirm_mode) is ConfirmMode.EACH else confirm_batch_size
            batches = chunk_pairs(pairs, batch_size)
            for batch_idx, batch in enumerate(batches):
                _print_batch(batch, batch_idx, len(batches), dry_run)
                response = BatchResponse(
                    click.prompt("Confirm batch?", type=_choices(BatchResponse), default=BatchResponse.PROCEED.value)
                )
                if response is BatchResponse.SKIP:
                    continue
                if response is BatchResponse.HALT:
                    raise UserHalt()
                executor.apply_all(batch, err_mode=mode, on_error=_prompt_on_error)
    except UserHalt:
        halted = True
    except OSError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        console.print(f"Renamed [green]{executor.renamed_count}[/green] files before stopping.")
        raise SystemExit(1) from e

    dry_run_note = " ([bold red]DRY RUN[/bold red])" if dry_run else ""
    console.print(f"Renamed [bold green]{executor.renamed_count}[/bold green] files{dry_run_note}. Done.")
    if halted:
        console.print("[yellow]Halted by user.[/yellow]")
        raise SystemExit(1)


@cli.command("charsets")
def charsets() -> None:
    """List the preset character sets."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Name", style="cyan")
    table.add_column("Symbols", style="green")
    table.add_column("Cases")
    table.add_column("Count", justify="right")

    for selection in CharSetSelection:
        alphabet = PRESET_ALPHABETS.get(selection)
        cases = ", ".join(case.value for case in SUPPORTED_CASES[selection]) or "-"
        table.add_row(
            selection.value,
            escape(alphabet) if alphabet else "(--custom-chars)",
            cases,
            str(len(alphabet)) if alphabet else "-",
        )

    console.print(table)


def main() -> None:
    cli(auto_envvar_prefix="RNG_RENAME")
