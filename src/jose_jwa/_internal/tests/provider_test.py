"""Tests for jose_jwa.provider."""
import sys
import unittest

import pytest

from jose_jwa import encoding
from jose_jwa import errors
from jose_jwa._internal.tests import test_util
from jose_jwa.descriptor import AlgorithmDescriptor

HS256 = AlgorithmDescriptor(name='HMAC', hash='SHA-256')
ES256 = AlgorithmDescriptor(name='ECDSA', named_curve='P-256', hash='SHA-256')
RS256 = AlgorithmDescriptor(name='RSASSA-PKCS1-v1_5', hash='SHA-256')
A128GCM = AlgorithmDescriptor(name='AES-GCM', length=128, tag_length=128)

RSA_PRIVATE = test_util.load_jwk('rsa2048_private.json')
RSA_PUBLIC = test_util.load_jwk('rsa2048_public.json')
EC_PRIVATE = test_util.load_jwk('ec_p256_private.json')
EC_PUBLIC = test_util.load_jwk('ec_p256_public.json')
RS256_SIGNATURE = encoding.b64decode(test_util.load_vector('rs256_signature.txt').strip())
MESSAGE = b'signed with Chrome webcrypto'


class CryptoKeyTest(unittest.TestCase):
    """Tests for jose_jwa.provider.CryptoKey."""

    def test_repr_hides_material(self):
        from jose_jwa.provider import CryptoKey
        key = CryptoKey('secret', True, HS256, ['sign'], b'super secret')
        assert 'super secret' not in repr(key)
        assert "type='secret'" in repr(key)

    def test_usages_tuple(self):
        from jose_jwa.provider import CryptoKey
        key = CryptoKey('secret', True, HS256, ['sign', 'verify'], b'k')
        assert key.usages == ('sign', 'verify')


class CryptographyProviderTest(unittest.IsolatedAsyncioTestCase):
    """Tests for jose_jwa.provider.CryptographyProvider."""

    def setUp(self):
        from jose_jwa.provider import CryptographyProvider
        self.provider = CryptographyProvider()

    def test_get_random_bytes(self):
        assert len(self.provider.get_random_bytes(12)) == 12
        assert self.provider.get_random_bytes(16) != self.provider.get_random_bytes(16)

    async def test_hmac_generate_default_length(self):
        key = await self.provider.generate_key(HS256, True, ['sign', 'verify'])
        assert key.type == 'secret'
        assert key.algorithm.length == 512
        assert len(await self.provider.export_key('raw', key)) == 64

    async def test_hmac_round_trip(self):
        key = await self.provider.generate_key(HS256, True, ['sign', 'verify'])
        signature = await self.provider.sign(HS256, key, b'foo')
        assert len(signature) == 32
        assert await self.provider.verify(HS256, key, signature, b'foo')
        assert not await self.provider.verify(HS256, key, signature, b'bar')
        assert not await self.provider.verify(HS256, key, signature + b'!', b'foo')

    async def test_hmac_known_value(self):
        key = await self.provider.import_key(
            'raw', b'some key', HS256, True, ['sign', 'verify'])
        assert await self.provider.sign(HS256, key, b'foo') == (
            b"\xceR\xea\xcd\x94\xab\xcf\xfb\xe0\xacA.:\x1a'\x08i\xe2\xc4"
            b"\r\x85+\x0e\x85\xaeUZ\xd4\xb3\x97zO")

    async def test_invalid_usages(self):
        with pytest.raises(errors.ProviderError):
            await self.provider.generate_key(HS256, True, ['encrypt'])
        with pytest.raises(errors.ProviderError):
            await self.provider.generate_key(A128GCM, True, ['sign'])

    async def test_missing_usage(self):
        key = await self.provider.generate_key(HS256, True, ['verify'])
        with pytest.raises(errors.ProviderError) as error:
            await self.provider.sign(HS256, key, b'foo')
        assert 'sign' in str(error.value)

    async def test_algorithm_mismatch(self):
        key = await self.provider.generate_key(A128GCM, True, ['encrypt', 'decrypt'])
        with pytest.raises(errors.ProviderError):
            await self.provider.sign(HS256, key, b'foo')

    async def test_curve_mismatch_on_use(self):
        ks256 = ES256.update(named_curve='K-256')
        pair = await self.provider.generate_key(ES256, True, ['sign', 'verify'])
        with pytest.raises(errors.ProviderError):
            await self.provider.sign(ks256, pair.private_key, b'foo')
        signature = await self.provider.sign(ES256, pair.private_key, b'foo')
        with pytest.raises(errors.ProviderError):
            await self.provider.verify(ks256, pair.public_key, signature, b'foo')

    async def test_hash_mismatch_on_use(self):
        key = await self.provider.generate_key(
            HS256.update(hash='SHA-512'), True, ['sign', 'verify'])
        with pytest.raises(errors.ProviderError):
            await self.provider.sign(HS256, key, b'foo')

    async def test_length_mismatch_on_use(self):
        key = await self.provider.generate_key(
            A128GCM.update(length=256), True, ['encrypt', 'decrypt'])
        with pytest.raises(errors.ProviderError):
            await self.provider.encrypt(A128GCM.update(iv=b'\x01' * 12), key, b'foo')

    async def test_not_a_key(self):
        with pytest.raises(errors.ProviderError):
            await self.provider.sign(HS256, b'raw secret', b'foo')

    async def test_aes_round_trip(self):
        key = await self.provider.generate_key(A128GCM, True, ['encrypt', 'decrypt'])
        assert key.algorithm.length == 128
        descriptor = A128GCM.update(iv=b'\x01' * 12, additional_data=b'header')
        output = await self.provider.encrypt(descriptor, key, b'hello')
        assert len(output) == len(b'hello') + 16
        assert await self.provider.decrypt(descriptor, key, output) == b'hello'

    async def test_aes_tag_mismatch(self):
        key = await self.provider.generate_key(A128GCM, True, ['encrypt', 'decrypt'])
        descriptor = A128GCM.update(iv=b'\x01' * 12)
        output = await self.provider.encrypt(descriptor, key, b'hello')
        tampered = output[:-1] + bytes([output[-1] ^ 1])
        with pytest.raises(errors.ProviderError) as error:
            await self.provider.decrypt(descriptor, key, tampered)
        assert 'Authentication tag mismatch' == str(error.value)

    async def test_aes_short_tag(self):
        key = await self.provider.generate_key(A128GCM, True, ['encrypt', 'decrypt'])
        descriptor = A128GCM.update(iv=b'\x01' * 12, tag_length=96)
        output = await self.provider.encrypt(descriptor, key, b'hello')
        assert len(output) == len(b'hello') + 12
        assert await self.provider.decrypt(descriptor, key, output) == b'hello'

    async def test_aes_requires_iv(self):
        key = await self.provider.generate_key(A128GCM, True, ['encrypt', 'decrypt'])
        with pytest.raises(errors.ProviderError):
            await self.provider.encrypt(A128GCM, key, b'hello')

    async def test_aes_invalid_length(self):
        with pytest.raises(errors.ProviderError):
            await self.provider.generate_key(A128GCM.update(length=100), True, ['encrypt'])
        with pytest.raises(errors.ProviderError):
            await self.provider.import_key('raw', b'short', A128GCM, True, ['encrypt'])

    async def test_ec_key_pair(self):
        pair = await self.provider.generate_key(ES256, False, ['sign', 'verify'])
        assert pair.public_key.type == 'public'
        assert pair.public_key.usages == ('verify',)
        assert pair.public_key.extractable
        assert pair.private_key.type == 'private'
        assert pair.private_key.usages == ('sign',)
        assert not pair.private_key.extractable
        assert pair.private_key.algorithm.named_curve == 'P-256'

    async def test_ec_round_trip(self):
        pair = await self.provider.generate_key(ES256, True, ['sign', 'verify'])
        signature = await self.provider.sign(ES256, pair.private_key, b'foo')
        assert len(signature) == 64
        assert await self.provider.verify(ES256, pair.public_key, signature, b'foo')
        assert not await self.provider.verify(ES256, pair.public_key, signature, b'bar')
        assert not await self.provider.verify(
            ES256, pair.public_key, signature[:-1], b'foo')

    async def test_ec_curve_mismatch(self):
        with pytest.raises(errors.ProviderError):
            await self.provider.import_key(
                'jwk', EC_PUBLIC, ES256.update(named_curve='P-384'), True, ['verify'])

    async def test_ec_secp256k1_alias(self):
        descriptor = ES256.update(named_curve='K-256')
        pair = await self.provider.generate_key(descriptor, True, ['sign', 'verify'])
        jwk = await self.provider.export_key('jwk', pair.public_key)
        assert jwk['crv'] == 'K-256'
        key = await self.provider.import_key(
            'jwk', dict(jwk, crv='secp256k1'), descriptor, True, ['verify'])
        assert key.algorithm.named_curve == 'K-256'

    async def test_ec_export_jwk(self):
        key = await self.provider.import_key('jwk', EC_PRIVATE, ES256, True, ['sign'])
        jwk = await self.provider.export_key('jwk', key)
        for name in ('kty', 'crv', 'x', 'y', 'd'):
            assert jwk[name] == EC_PRIVATE[name]
        assert jwk['key_ops'] == ['sign']
        assert jwk['ext'] is True

    async def test_ec_raw_public(self):
        key = await self.provider.import_key('jwk', EC_PUBLIC, ES256, True, ['verify'])
        raw = await self.provider.export_key('raw', key)
        assert raw[0] == 4 and len(raw) == 65
        imported = await self.provider.import_key('raw', raw, ES256, True, ['verify'])
        assert imported.type == 'public'

    async def test_ec_pkcs8(self):
        der = test_util.load_private_key_der('ec_p256_key.pem')
        private = await self.provider.import_key('pkcs8', der, ES256, True, ['sign'])
        public = await self.provider.import_key('jwk', EC_PUBLIC, ES256, True, ['verify'])
        signature = await self.provider.sign(ES256, private, MESSAGE)
        assert await self.provider.verify(ES256, public, signature, MESSAGE)
        spki = await self.provider.export_key('spki', public)
        imported = await self.provider.import_key('spki', spki, ES256, True, ['verify'])
        assert await self.provider.verify(ES256, imported, signature, MESSAGE)

    async def test_rsa_known_signature(self):
        key = await self.provider.import_key('jwk', RSA_PRIVATE, RS256, True, ['sign'])
        assert key.type == 'private'
        assert key.algorithm.modulus_length == 2048
        assert key.algorithm.public_exponent == 65537
        assert await self.provider.sign(RS256, key, MESSAGE) == RS256_SIGNATURE

    async def test_rsa_verify(self):
        key = await self.provider.import_key('jwk', RSA_PUBLIC, RS256, True, ['verify'])
        assert await self.provider.verify(RS256, key, RS256_SIGNATURE, MESSAGE)
        assert not await self.provider.verify(RS256, key, RS256_SIGNATURE, b'tampered')

    async def test_rsa_pkcs8(self):
        der = test_util.load_private_key_der('rsa2048_key.pem')
        key = await self.provider.import_key('pkcs8', der, RS256, True, ['sign'])
        assert await self.provider.sign(RS256, key, MESSAGE) == RS256_SIGNATURE
        assert await self.provider.export_key('pkcs8', key) == der
        with pytest.raises(errors.ProviderError):
            await self.provider.export_key('spki', key)

    async def test_rsa_without_crt_params(self):
        jwk = {name: RSA_PRIVATE[name] for name in ('kty', 'n', 'e', 'd')}
        key = await self.provider.import_key('jwk', jwk, RS256, True, ['sign'])
        assert await self.provider.sign(RS256, key, MESSAGE) == RS256_SIGNATURE

    async def test_rsa_partial_crt_params(self):
        jwk = dict(RSA_PRIVATE)
        del jwk['qi']
        with pytest.raises(errors.ProviderError):
            await self.provider.import_key('jwk', jwk, RS256, True, ['sign'])

    async def test_rsa_export_jwk(self):
        key = await self.provider.import_key('jwk', RSA_PUBLIC, RS256, True, ['verify'])
        jwk = await self.provider.export_key('jwk', key)
        assert jwk['n'] == RSA_PUBLIC['n']
        assert jwk['e'] == 'AQAB'
        assert jwk['alg'] == 'RS256'

    async def test_public_key_cannot_sign(self):
        with pytest.raises(errors.ProviderError):
            await self.provider.import_key('jwk', RSA_PUBLIC, RS256, True, ['sign'])

    async def test_kty_mismatch(self):
        with pytest.raises(errors.ProviderError):
            await self.provider.import_key('jwk', EC_PUBLIC, RS256, True, ['verify'])

    async def test_missing_member(self):
        jwk = dict(EC_PUBLIC)
        del jwk['y']
        with pytest.raises(errors.ProviderError):
            await self.provider.import_key('jwk', jwk, ES256, True, ['verify'])

    async def test_non_extractable_jwk(self):
        jwk = dict(EC_PUBLIC, ext=False)
        with pytest.raises(errors.ProviderError):
            await self.provider.import_key('jwk', jwk, ES256, True, ['verify'])
        key = await self.provider.import_key('jwk', jwk, ES256, False, ['verify'])
        with pytest.raises(errors.ProviderError):
            await self.provider.export_key('jwk', key)

    async def test_unsupported_format(self):
        with pytest.raises(errors.ProviderError):
            await self.provider.import_key('pem', b'foo', HS256, True, ['sign'])
        key = await self.provider.generate_key(HS256, True, ['sign'])
        with pytest.raises(errors.ProviderError):
            await self.provider.export_key('pem', key)


if __name__ == '__main__':
    sys.exit(pytest.main(sys.argv[1:] + [__file__]))  # pragma: no cover
