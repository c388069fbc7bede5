import asyncio
from pathlib import Path

import click

from Dir_Digest.cli.settings import apply_overrides, load_settings
from Dir_Digest.core.errors import DigestError
from Dir_Digest.core.logger import RunLogger
from Dir_Digest.core.models import HashSettings
from Dir_Digest.core.pipeline import DigestRun
from Dir_Digest.core.progress import ClickProgress, NullProgress


# ----------------------------
# CLI Orchestrator
# ----------------------------

@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog='Usage example: "dir-digest ."',
)
@click.argument("folder", type=click.Path(path_type=Path))
@click.option(
    "-t",
    "--threads",
    type=click.IntRange(min=1),
    default=None,
    metavar="COUNT",
    help="Number of threads, by default equals to cpu count",
)
@click.option("-q", "--quiet", is_flag=True, help="Quiet mode, only prints resulting digest")
@click.option("-v", "--verbose", is_flag=True, help="Log skipped entries and per-file digests")
@click.option("-a", "--algorithm", default=None, help="hashlib algorithm name (default: md5)")
@click.option("--chunk-size", type=click.IntRange(min=1), default=None, help="Read size in bytes")
@click.option(
    "--follow-symlinks/--no-follow-symlinks",
    default=None,
    help="Descend into symlinked directories and hash symlinked files",
)
@click.option("-i", "--ignore", multiple=True, metavar="PATTERN", help="Glob of entries to leave out")
@click.option(
    "-c",
    "--config",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="JSON settings file",
)
def main(folder, threads, quiet, verbose, algorithm, chunk_size, follow_symlinks, ignore, config):
    """Print one digest for the contents of FOLDER."""
    try:
        settings = apply_overrides(
            load_settings(config),
            algorithm=algorithm,
            chunk_size=chunk_size,
            workers=threads,
            follow_symlinks=follow_symlinks,
            ignore=ignore,
            quiet=quiet,
        )
        hash_settings = HashSettings.from_dict(settings)
    except DigestError as e:
        raise click.ClickException(str(e))

    quiet = bool(settings["output"].get("quiet"))
    show_progress = not quiet and bool(settings["output"].get("progress", True))

    logger = RunLogger.for_console(quiet=quiet, verbose=verbose)
    progress = ClickProgress() if show_progress else NullProgress()
    run = DigestRun(hash_settings, logger=logger, progress=progress)

    logger.log(
        "INFO",
        "cli",
        f"Running in folder {folder} with {hash_settings.workers} threads",
    )

    try:
        result = asyncio.run(run.execute(folder))
    except DigestError as e:
        raise click.ClickException(str(e))

    label = f"{result.label}: " if not quiet else ""
    click.echo(f"{label}{result.hexdigest()}")
