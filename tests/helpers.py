from __future__ import annotations

import base58


def key(n: int) -> str:
    """Deterministic valid base-58 id for tests."""
    return base58.b58encode(bytes([n]) * 32).decode("ascii")


def declaration(name: str, ident: str) -> str:
    return f'pub mod {name} {{\n    solana_sdk::declare_id!("{ident}");\n}}\n'


def report_doc(active=(), inactive=(), **overrides):
    doc = {
        "features": [
            {"id": i, "description": "test feature", "status": "active", "sinceSlot": 100}
            for i in active
        ]
        + [
            {"id": i, "description": "test feature", "status": "inactive", "sinceSlot": None}
            for i in inactive
        ],
        "featureActivationAllowed": True,
        "clusterFeatureSets": {
            "toolFeatureSet": 3469865029,
            "featureSets": [
                {
                    "softwareVersions": ["2.1.0"],
                    "featureSet": 3469865029,
                    "stakePercent": 98.5,
                    "rpcPercent": 90.0,
                }
            ],
        },
        "clusterSoftwareVersions": {
            "toolSoftwareVersion": "2.1.0",
            "softwareVersions": [
                {"softwareVersion": "2.1.0", "stakePercent": 98.5, "rpcPercent": 90.0}
            ],
        },
    }
    doc.update(overrides)
    return doc
