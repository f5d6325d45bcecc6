from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from feature_status.classifier import Bucket, ClassificationResult, classify
from feature_status.emit import render, write_artifact
from feature_status.errors import FeatureStatusError
from feature_status.extractor import extract_features
from feature_status.infra.config_loader import AppConfig
from feature_status.infra.logging_config import get_logger
from feature_status.sources import (
    FileFetcher,
    ReportLoader,
    SourceFetcher,
    StatusDownloader,
    StatusSource,
    UpstreamFetcher,
    load_reports,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class RunSummary:
    version: str
    output: Path
    result: ClassificationResult

    def counts(self) -> Dict[str, int]:
        return {bucket.value: len(labels) for bucket, labels in self.result.groups()}


def run(
    version: str,
    *,
    fetcher: SourceFetcher,
    status_source: StatusSource,
    output: Path,
    client: str = "agave",
    static_name: str = "AGAVE_FEATURES",
) -> RunSummary:
    """
    One full run: fetch + extract, load the three reports, classify, render,
    write. Any error aborts the run before the artifact is written.
    """
    ctx = {"version": version}
    try:
        text = fetcher.fetch(version)
        features = extract_features(text)
        logger.info("Features extracted", extra={"extra_data": {**ctx, "count": len(features)}})

        reports = load_reports(status_source)
        logger.info("Status reports loaded", extra={"extra_data": {**ctx, "networks": len(reports)}})

        result = classify(features, reports)
        logger.info(
            "Features classified",
            extra={"extra_data": {**ctx, **{b.value: len(result.bucket(b)) for b in Bucket}}},
        )

        artifact = render(result, version, client=client, static_name=static_name)
        path = write_artifact(artifact, output)
    except FeatureStatusError as exc:
        logger.error(
            "Run failed",
            extra={"extra_data": {**ctx, "stage": exc.stage, "error": str(exc)}},
        )
        raise

    return RunSummary(version=version, output=path, result=result)


def run_from_config(
    config: AppConfig,
    version: str,
    *,
    no_fetch: bool = False,
    source_file: Optional[Path] = None,
) -> RunSummary:
    if source_file is not None:
        fetcher: SourceFetcher = FileFetcher(source_file)
    else:
        fetcher = UpstreamFetcher(
            url_template=config.upstream.url_template,
            timeout_s=config.upstream.timeout_s,
        )

    downloader = StatusDownloader(data_dir=config.solana.data_dir, binary=config.solana.binary)
    return run(
        version,
        fetcher=fetcher,
        status_source=ReportLoader(downloader, no_fetch=no_fetch),
        output=config.artifact_path,
        client=config.upstream.client_name,
        static_name=config.output.static_name,
    )
