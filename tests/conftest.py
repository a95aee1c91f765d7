"""
Pytest configuration and fixtures for registry validation tests.
"""

import json
import sys
from pathlib import Path
from typing import Any, Iterable, Optional, Tuple

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


# EIP-55 reference vectors (canonical casing)
CHECKSUMMED_ADDRESSES = (
    "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
    "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359",
    "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB",
    "0xD1220A0cf47c7B9Be7A2E6BA89F429762e7b9aDb",
    "0x82aF49447D8a07e3bd95BD0d56f35241523fBab1",
    "0xaf88d065e77c8cC2239327C5EDb3A432268e5831",
)

PNG_HEADER = bytes([0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A, 0x1A, 0x0A, 0x00, 0x00, 0x00, 0x0D, 0x49, 0x48, 0x44, 0x52])
JPEG_HEADER = bytes([0xFF, 0xD8, 0xFF, 0xE0])
WEBP_HEADER = b"RIFF\x00\x00\x00\x00WEBP"

VALID_SOLIDITY = """// SPDX-License-Identifier: MIT
pragma solidity ^0.8.20;

contract {name} {{
    uint256 public value;

    function set(uint256 v) external {{
        value = v;
    }}
}}
"""

VALID_ABI = [
    {
        "type": "function",
        "name": "set",
        "inputs": [{"name": "v", "type": "uint256"}],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "value",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
]


def make_image(header: bytes, size: int) -> bytes:
    """Header followed by zero padding up to size bytes."""
    return header + b"\x00" * max(0, size - len(header))


class RegistryBuilder:
    """Writes a registry tree (tokens/ and contracts/) under root."""

    def __init__(self, root: Path):
        self.root = root
        self.tokens_dir = root / "tokens"
        self.contracts_dir = root / "contracts"
        self.tokens_dir.mkdir(parents=True, exist_ok=True)
        self.contracts_dir.mkdir(parents=True, exist_ok=True)

    def add_token(
        self,
        address: str,
        symbol: str = "TKN",
        name: str = "Test Token",
        decimals: int = 18,
        dir_name: Optional[str] = None,
        logo_ext: Optional[str] = ".png",
        logo_header: bytes = PNG_HEADER,
        logo_size: int = 1024,
        **extra: Any,
    ) -> Path:
        dir_name = dir_name or address
        token_dir = self.tokens_dir / dir_name
        token_dir.mkdir(parents=True, exist_ok=True)

        data = {"symbol": symbol, "name": name, "address": address, "decimals": decimals, **extra}
        (token_dir / f"{dir_name}.json").write_text(json.dumps(data, indent=2), encoding="utf-8")

        if logo_ext:
            (token_dir / f"{dir_name}{logo_ext}").write_bytes(make_image(logo_header, logo_size))

        return token_dir

    def add_project(
        self,
        slug: str,
        contracts: Iterable[Tuple[str, str]] = (),
        contract_type: str = "token",
        write_files: bool = True,
        **extra: Any,
    ) -> Path:
        project_dir = self.contracts_dir / slug
        project_dir.mkdir(parents=True, exist_ok=True)

        contracts = list(contracts)
        data = {
            "name": extra.pop("name", slug.title()),
            "website": extra.pop("website", "https://example.org"),
            "description": extra.pop("description", "Test project"),
            "contracts": [
                {
                    "name": name,
                    "address": address,
                    "type": contract_type,
                    "description": f"{name} contract",
                }
                for name, address in contracts
            ],
            **extra,
        }
        (project_dir / "info.json").write_text(json.dumps(data, indent=2), encoding="utf-8")

        if write_files:
            for name, _ in contracts:
                (project_dir / f"{name}.sol").write_text(VALID_SOLIDITY.format(name=name), encoding="utf-8")
                (project_dir / f"{name}_abi.json").write_text(json.dumps(VALID_ABI), encoding="utf-8")

        return project_dir


@pytest.fixture
def addresses() -> Tuple[str, ...]:
    return CHECKSUMMED_ADDRESSES


@pytest.fixture
def registry(tmp_path) -> RegistryBuilder:
    return RegistryBuilder(tmp_path / "registry")


@pytest.fixture
def schemas():
    from registry.schema_loader import load_schemas
    return load_schemas()
