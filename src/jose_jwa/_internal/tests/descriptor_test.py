"""Tests for jose_jwa.descriptor."""
import sys
import unittest

import pytest


class AlgorithmDescriptorTest(unittest.TestCase):
    """Tests for jose_jwa.descriptor.AlgorithmDescriptor."""

    def setUp(self):
        from jose_jwa.descriptor import AlgorithmDescriptor
        self.descriptor = AlgorithmDescriptor(name='RSASSA-PKCS1-v1_5', hash='SHA-256')

    def test_update_returns_copy(self):
        updated = self.descriptor.update(modulus_length=4096)
        assert updated.modulus_length == 4096
        assert self.descriptor.modulus_length is None
        assert updated.hash == 'SHA-256'

    def test_update_unknown_field(self):
        with pytest.raises(ValueError):
            self.descriptor.update(curve='P-256')

    def test_immutable(self):
        with pytest.raises(AttributeError):
            self.descriptor.hash = 'SHA-512'  # type: ignore[misc]

    def test_to_partial_json(self):
        assert self.descriptor.to_partial_json() == {
            'name': 'RSASSA-PKCS1-v1_5', 'hash': 'SHA-256'}

    def test_to_partial_json_omits_call_data(self):
        from jose_jwa.descriptor import AlgorithmDescriptor
        descriptor = AlgorithmDescriptor(
            name='AES-GCM', length=128, iv=b'\x00' * 12, additional_data=b'aad')
        assert descriptor.to_partial_json() == {'name': 'AES-GCM', 'length': 128}

    def test_repr(self):
        assert repr(self.descriptor) == (
            "AlgorithmDescriptor(name='RSASSA-PKCS1-v1_5', hash='SHA-256')")

    def test_eq_hash(self):
        from jose_jwa.descriptor import AlgorithmDescriptor
        other = AlgorithmDescriptor(name='RSASSA-PKCS1-v1_5', hash='SHA-256')
        assert self.descriptor == other
        assert hash(self.descriptor) == hash(other)


if __name__ == '__main__':
    sys.exit(pytest.main(sys.argv[1:] + [__file__]))  # pragma: no cover
