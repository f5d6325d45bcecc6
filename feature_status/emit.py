"""
Artifact renderer.

Turns a ClassificationResult into the static feature list consumed by the
client crate, one comment-labelled group per bucket.
"""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Tuple, Union

import deal

from feature_status.classifier import Bucket, ClassificationResult
from feature_status.errors import WriteError
from feature_status.infra.logging_config import get_logger

logger = get_logger(__name__)

INDENT = "    "

GROUP_COMMENTS: Dict[Bucket, str] = {
    Bucket.INACTIVE: "Inactive on all clusters.",
    Bucket.ACTIVE_TESTNET: "Active on testnet.",
    Bucket.ACTIVE_DEVNET: "Active on devnet.",
    Bucket.ACTIVE_MAINNET: "Active on mainnet-beta.",
}


def _group_lines(bucket: Bucket, labels: Tuple[str, ...], *, final: bool) -> List[str]:
    lines = [f"{INDENT}// {GROUP_COMMENTS[bucket]}"]
    for i, label in enumerate(labels):
        last = i == len(labels) - 1
        sep = "" if (final and last) else ","
        lines.append(f"{INDENT}{label}{sep}")
    return lines


@deal.post(lambda result: result.endswith("];\n"), message="listing is closed")
@deal.safe
def render(
    result: ClassificationResult,
    version: str,
    *,
    client: str = "agave",
    static_name: str = "AGAVE_FEATURES",
) -> str:
    groups = result.groups()

    lines = [
        "",
        f"// List of {client} supported feature flags.",
        f"// As of `{version}`.",
        f"static {static_name}: &[Pubkey] = &[",
    ]
    for i, (bucket, labels) in enumerate(groups):
        lines.extend(_group_lines(bucket, labels, final=i == len(groups) - 1))
    lines.append("];")

    return "\n".join(lines) + "\n"


def write_artifact(text: str, out_file: Union[str, Path]) -> Path:
    path = Path(out_file)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise WriteError(f"unable to write artifact: {exc}", subject=str(path)) from exc

    logger.info(
        "Artifact written",
        extra={"extra_data": {"path": str(path), "bytes": len(text.encode("utf-8"))}},
    )
    return path
