"""Shared fixtures: a small two-branch network inside one group.

Layout:
    group-1 (labeledGroup, ambientTemperature=15.0, region="north-sea")
      branch-4 (Compressor x2, Pipe) -> branch-5
    branch-5 (Source, Sink), no parent
    anchor-1 (geographicAnchor)

Global properties live in ``config.toml``; ``pressure`` skips the branch scope
and ``ambientTemperature`` on Compressor blocks skips block and branch.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict

import pytest

from netpath.dsl.loader import load_network_from_files
from netpath.model.network import Network
from netpath.scope.config import Config
from netpath.scope.resolver import ScopeResolver

BRANCH_4 = """
type = "branch"
label = "Compression train"
parentId = "group-1"
position = { x = 100, y = 200 }
ambientTemperature = 18.0
pressure = 8.0
operator = "north"

[[block]]
type = "Compressor"
quantity = 2
pressure = 12.5
efficiency = 0.85

[[block]]
type = "Pipe"
length = 400
insulated = true

[[outgoing]]
target = "branch-5"
weight = 2
"""

BRANCH_5 = """
type = "branch"
label = "Export line"
position = { x = 300, y = 200 }

[[block]]
type = "Source"

[[block]]
type = "Sink"
quantity = 1
"""

GROUP_1 = """
type = "labeledGroup"
label = "Site A"
position = { x = 0, y = 0 }
width = 600
height = 400
ambientTemperature = 15.0
region = "north-sea"
"""

ANCHOR_1 = """
type = "geographicAnchor"
position = { x = -10.5, y = 42.0 }
"""

CONFIG = """
[properties]
ambientTemperature = 20.0
pressure = 1.0
region = "default"

[inheritance]
general = ["block", "branch", "group", "global"]

[inheritance.rules]
pressure = ["block", "global"]

[inheritance.rules.ambientTemperature]
inheritance = ["block", "branch", "group", "global"]

[inheritance.rules.ambientTemperature.overrides]
Compressor = ["group", "global"]
"""


@pytest.fixture
def network_files() -> Dict[str, str]:
    return {
        "branch-4.toml": BRANCH_4,
        "branch-5.toml": BRANCH_5,
        "group-1.toml": GROUP_1,
        "anchor-1.toml": ANCHOR_1,
    }


@pytest.fixture
def sample_network(network_files: Dict[str, str]) -> Network:
    network, validation = load_network_from_files(network_files, network_id="plant")
    assert validation.is_valid(), str(validation)
    return network


@pytest.fixture
def sample_config() -> Config:
    return Config.from_toml(CONFIG)


@pytest.fixture
def resolver(sample_config: Config) -> ScopeResolver:
    return ScopeResolver(sample_config)


@pytest.fixture
def network_dir(tmp_path: Path, network_files: Dict[str, str]) -> Path:
    """On-disk copy of the sample network, including ``config.toml``."""
    directory = tmp_path / "plant"
    directory.mkdir()
    for name, content in network_files.items():
        (directory / name).write_text(content, encoding="utf-8")
    (directory / "config.toml").write_text(CONFIG, encoding="utf-8")
    return directory
