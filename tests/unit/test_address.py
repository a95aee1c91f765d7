"""
Tests for validators/address.py
"""

import pytest

from core.constants import ErrorCode
from validators.address import (
    ZERO_ADDRESS,
    is_valid_address,
    to_checksum_address,
    validate_address_directory,
    validate_eip55_checksum,
    validate_token_address,
)

CHECKSUMMED_ADDRESSES = (
    "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
    "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359",
    "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB",
    "0xD1220A0cf47c7B9Be7A2E6BA89F429762e7b9aDb",
)

# Reference vectors where the canonical casing is all upper / all lower
ALL_CAPS = ("0x52908400098527886E0F7030069857D2E4169EE7", "0x8617E340B3D01FA5F11F306F4090FD50E238070D")
ALL_LOWER = ("0xde709f2102306220921060314715629080e2fb77", "0x27b1fdb04752bbc536007a920d24acb045561c26")


def _flip(ch: str) -> str:
    return ch.lower() if ch.isupper() else ch.upper()


class TestToChecksumAddress:
    """Tests for to_checksum_address."""

    @pytest.mark.parametrize("address", CHECKSUMMED_ADDRESSES + ALL_CAPS + ALL_LOWER)
    def test_reference_vectors(self, address):
        """Lowercased input maps back to the reference casing."""
        assert to_checksum_address(address.lower()) == address
        assert to_checksum_address(address.upper().replace("0X", "0x")) == address

    def test_rejects_malformed(self):
        with pytest.raises(ValueError):
            to_checksum_address("0x1234")

    def test_rejects_trailing_newline(self):
        """A trailing newline must not be hashed into a new casing."""
        with pytest.raises(ValueError):
            to_checksum_address(CHECKSUMMED_ADDRESSES[0].lower() + "\n")



class TestValidateEip55Checksum:
    """Tests for validate_eip55_checksum."""

    @pytest.mark.parametrize("address", CHECKSUMMED_ADDRESSES + ALL_CAPS + ALL_LOWER)
    def test_canonical_accepted(self, address):
        result = validate_eip55_checksum(address)
        assert result.valid
        assert result.warnings == []

    def test_every_single_letter_flip_rejected(self):
        """Changing the case of any one hex letter breaks the checksum."""
        address = CHECKSUMMED_ADDRESSES[0]
        for i, ch in enumerate(address):
            if i < 2 or not ch.isalpha():
                continue
            mutated = address[:i] + _flip(ch) + address[i + 1:]
            result = validate_eip55_checksum(mutated)
            assert not result.valid, mutated
            assert result.first_error.code == ErrorCode.BAD_CHECKSUM
            assert result.first_error.details["expected"] == address

    def test_lowercase_of_mixed_address_rejected(self):
        """An all-lowercase form is rejected when the canonical form is mixed."""
        address = CHECKSUMMED_ADDRESSES[1]
        result = validate_eip55_checksum(address.lower())
        assert result.first_error.code == ErrorCode.BAD_CHECKSUM

    def test_zero_address(self):
        result = validate_eip55_checksum(ZERO_ADDRESS)
        assert result.first_error.code == ErrorCode.ZERO_ADDRESS

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "0x",
            "5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
            "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAe",
            "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAedd",
            "0xZaAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
            "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed\n",
            " 0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
            None,
            12345,
        ],
    )
    def test_bad_format(self, value):
        result = validate_eip55_checksum(value)
        assert result.first_error.code == ErrorCode.BAD_FORMAT

    def test_context_in_message(self):
        result = validate_eip55_checksum(CHECKSUMMED_ADDRESSES[0].lower(), context="WETH")
        assert result.first_error.message.startswith("WETH: ")

    def test_is_valid_address(self):
        assert is_valid_address(CHECKSUMMED_ADDRESSES[0].lower())
        assert not is_valid_address("0x123")
        assert not is_valid_address(CHECKSUMMED_ADDRESSES[0] + "\n")


class TestValidateAddressDirectory:
    """Tests for validate_address_directory."""

    def test_valid_directory(self, tmp_path):
        assert validate_address_directory(CHECKSUMMED_ADDRESSES[0], tmp_path).valid

    def test_traversal_name(self, tmp_path):
        """Names that are not addresses fail on format before any path is built."""
        result = validate_address_directory("../../etc", tmp_path)
        assert result.first_error.code == ErrorCode.BAD_FORMAT

    def test_bad_checksum_directory(self, tmp_path):
        result = validate_address_directory(CHECKSUMMED_ADDRESSES[0].lower(), tmp_path)
        assert result.first_error.code == ErrorCode.BAD_CHECKSUM


class TestValidateTokenAddress:
    """Tests for validate_token_address."""

    def test_matching(self):
        address = CHECKSUMMED_ADDRESSES[0]
        assert validate_token_address(address, address, "TKN").valid

    def test_mismatch_names_both_and_symbol(self):
        json_address, dir_name = CHECKSUMMED_ADDRESSES[0], CHECKSUMMED_ADDRESSES[1]
        result = validate_token_address(json_address, dir_name, "WETH")

        assert result.first_error.code == ErrorCode.ADDRESS_MISMATCH
        message = result.first_error.message
        assert "WETH" in message
        assert json_address in message
        assert dir_name in message

    def test_bad_json_checksum_reported_first(self):
        address = CHECKSUMMED_ADDRESSES[0]
        result = validate_token_address(address.lower(), address, "TKN")
        assert result.first_error.code == ErrorCode.BAD_CHECKSUM

    def test_same_address_different_case_is_checksum_error(self):
        """Case-only differences surface as checksum errors, not mismatches."""
        address = CHECKSUMMED_ADDRESSES[2]
        result = validate_token_address(address, address.lower(), "TKN")
        assert result.first_error.code == ErrorCode.BAD_CHECKSUM
