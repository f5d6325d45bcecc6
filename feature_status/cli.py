from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from feature_status.errors import FeatureStatusError
from feature_status.infra.config_loader import load_config
from feature_status.infra.logging_config import setup_logging
from feature_status.pipeline import run_from_config


@click.group()
def cli() -> None:
    """Solana feature status CLI"""


@cli.command()
@click.option("-a", "--agave-version", required=True, help="Upstream release, e.g. 2.1.0")
@click.option("-n", "--no-fetch", is_flag=True, help="Reuse the saved network status documents")
@click.option("--config", "config_path", type=click.Path(path_type=Path), help="YAML config file")
@click.option("--output", "output_path", type=click.Path(path_type=Path), help="Artifact path")
@click.option("--data-dir", type=click.Path(path_type=Path), help="Status documents directory")
@click.option(
    "--source-file",
    type=click.Path(path_type=Path),
    help="Local copy of the upstream feature set source (skips the download)",
)
def status(
    agave_version: str,
    no_fetch: bool,
    config_path: Optional[Path],
    output_path: Optional[Path],
    data_dir: Optional[Path],
    source_file: Optional[Path],
) -> None:
    """Classify upstream features by cluster activation and emit the list"""
    try:
        config = load_config(config_path)
    except FeatureStatusError as e:
        raise click.ClickException(f"{e.stage} failed: {e}") from e

    setup_logging(config.logging.level, config.logging.format)

    # copies, the loaded config is cached per process
    if output_path is not None:
        config = config.model_copy(
            update={"output": config.output.model_copy(update={"path": output_path})}
        )
    if data_dir is not None:
        config = config.model_copy(
            update={"solana": config.solana.model_copy(update={"data_dir": data_dir})}
        )

    try:
        summary = run_from_config(
            config, agave_version, no_fetch=no_fetch, source_file=source_file
        )
    except FeatureStatusError as e:
        raise click.ClickException(f"{e.stage} failed: {e}") from e

    click.echo(f"Artifact written to {summary.output}")
    for bucket, count in summary.counts().items():
        click.echo(f"  {bucket}: {count}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
