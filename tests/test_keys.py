# tests/test_keys.py
import ecdsa
import pytest

from chainwallet.exceptions import InvalidKeyEncoding, KeyGenerationError
from chainwallet.wallet.keys import (
    KeyPair,
    derive_address,
    is_valid_address,
    parse_public_key,
    parse_secret_key,
)

ORDER_HEX = format(ecdsa.SECP256k1.order, "064x")


class TestKeyPair:
    @pytest.fixture
    def key_pair(self):
        return KeyPair.generate()

    def test_generate(self, key_pair):
        assert len(key_pair.secret_key) == 32
        assert len(key_pair.public_key) == 33
        assert key_pair.public_key[0] in (2, 3)
        assert len(key_pair.address) == 66
        assert len(key_pair.secret_key_hex) == 64

    def test_generated_keys_differ(self, key_pair):
        assert KeyPair.generate().secret_key != key_pair.secret_key

    def test_address_is_stable(self, key_pair):
        assert derive_address(key_pair.public_key) == derive_address(key_pair.public_key)
        assert derive_address(key_pair.public_key) == key_pair.address
        assert derive_address(key_pair.verifying_key) == key_pair.address

    def test_address_from_uncompressed_key(self, key_pair):
        uncompressed = key_pair.verifying_key.to_string("uncompressed")
        assert len(uncompressed) == 65
        assert derive_address(uncompressed) == key_pair.address

    def test_secret_key_round_trip(self, key_pair):
        restored = parse_secret_key(key_pair.secret_key_hex)
        assert restored.secret_key == key_pair.secret_key
        assert restored.address == key_pair.address
        assert restored == key_pair

    def test_uppercase_secret_accepted(self, key_pair):
        assert parse_secret_key(key_pair.secret_key_hex.upper()) == key_pair

    def test_repr_hides_secret(self, key_pair):
        assert key_pair.secret_key_hex not in repr(key_pair)
        assert key_pair.address in repr(key_pair)

    def test_entropy_failure(self, mocker):
        mocker.patch(
            "chainwallet.wallet.keys.ecdsa.SigningKey.generate",
            side_effect=OSError("no entropy")
        )
        with pytest.raises(KeyGenerationError):
            KeyPair.generate()


class TestParseSecretKey:
    @pytest.mark.parametrize("secret_hex", [
        "",
        "ab" * 31,
        "ab" * 33,
        "zz" * 32,
        "0" * 64,
        ORDER_HEX,
        "f" * 64,
    ])
    def test_invalid_secret_keys(self, secret_hex):
        with pytest.raises(InvalidKeyEncoding):
            parse_secret_key(secret_hex)

    def test_largest_valid_scalar(self):
        largest = format(ecdsa.SECP256k1.order - 1, "064x")
        assert len(parse_secret_key(largest).address) == 66

    def test_smallest_valid_scalar(self):
        # 1 * G is the generator point
        key_pair = parse_secret_key("0" * 63 + "1")
        generator = ecdsa.SECP256k1.generator
        assert key_pair.public_key[1:] == generator.x().to_bytes(32, "big")


class TestParsePublicKey:
    def test_compressed_and_uncompressed(self):
        key_pair = KeyPair.generate()
        uncompressed_hex = key_pair.verifying_key.to_string("uncompressed").hex()
        assert parse_public_key(key_pair.address) == key_pair.verifying_key
        assert parse_public_key(uncompressed_hex) == key_pair.verifying_key

    @pytest.mark.parametrize("public_hex", [
        "",
        "abc",
        "not hex at all",
        "05" + "11" * 32,          # bad prefix
        "04" + "00" * 64,          # not on the curve
    ])
    def test_invalid_public_keys(self, public_hex):
        with pytest.raises(InvalidKeyEncoding):
            parse_public_key(public_hex)

    def test_raw_64_byte_key_rejected(self):
        raw = KeyPair.generate().verifying_key.to_string("raw").hex()
        assert not is_valid_address(raw)

    def test_is_valid_address(self):
        assert is_valid_address(KeyPair.generate().address)
        assert not is_valid_address("bob")
