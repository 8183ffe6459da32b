"""Cryptographic providers.

A provider performs the primitive computations behind every JWA
operation. It receives a normalized `.AlgorithmDescriptor` and opaque
`CryptoKey` handles, and knows nothing about JOSE identifiers, JWK
``use``/``key_ops`` semantics or base64url.

"""
import abc
import asyncio
import logging
import secrets
from typing import Any
from typing import Callable
from typing import Iterable
from typing import Mapping
from typing import NamedTuple
from typing import Optional
from typing import Tuple
from typing import TypeVar
from typing import Union

import cryptography.exceptions
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import hmac
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.asymmetric import utils as asym_utils
from cryptography.hazmat.primitives.ciphers import Cipher
from cryptography.hazmat.primitives.ciphers import algorithms
from cryptography.hazmat.primitives.ciphers import modes

from jose_jwa import constants
from jose_jwa import encoding
from jose_jwa import errors
from jose_jwa.descriptor import AlgorithmDescriptor

logger = logging.getLogger(__name__)

T = TypeVar('T')

KeyMaterial = Union[Mapping[str, Any], bytes]
ExportedKey = Union[dict[str, Any], bytes]


class CryptoKey:
    """Opaque key handle issued by a provider.

    :ivar str type: ``secret``, ``public`` or ``private``.
    :ivar bool extractable: Whether `CryptoProvider.export_key` may
        reveal the key.
    :ivar algorithm: `.AlgorithmDescriptor` describing the key.
    :ivar tuple usages: Operations the key may be used for.

    """
    __slots__ = ('type', 'extractable', 'algorithm', 'usages', '_key')

    def __init__(self, type_: str, extractable: bool, algorithm: AlgorithmDescriptor,
                 usages: Iterable[str], key: Any) -> None:
        self.type = type_
        self.extractable = extractable
        self.algorithm = algorithm
        self.usages = tuple(usages)
        self._key = key

    def __repr__(self) -> str:
        return '<{0}(type={1!r}, algorithm={2!r}, usages={3!r})>'.format(
            self.__class__.__name__, self.type, self.algorithm, self.usages)


class CryptoKeyPair(NamedTuple):
    """Asymmetric key pair."""
    public_key: CryptoKey
    private_key: CryptoKey


GeneratedKey = Union[CryptoKey, CryptoKeyPair]


class CryptoProvider(abc.ABC):
    """Cryptographic provider interface."""

    @abc.abstractmethod
    async def sign(self, descriptor: AlgorithmDescriptor, key: CryptoKey,
                   data: bytes) -> bytes:  # pragma: no cover
        """Sign ``data`` with ``key``."""
        raise NotImplementedError()

    @abc.abstractmethod
    async def verify(self, descriptor: AlgorithmDescriptor, key: CryptoKey,
                     signature: bytes, data: bytes) -> bool:  # pragma: no cover
        """Verify ``signature`` over ``data``."""
        raise NotImplementedError()

    @abc.abstractmethod
    async def encrypt(self, descriptor: AlgorithmDescriptor, key: CryptoKey,
                      data: bytes) -> bytes:  # pragma: no cover
        """Encrypt ``data``; AEAD output is ``ciphertext || tag``."""
        raise NotImplementedError()

    @abc.abstractmethod
    async def decrypt(self, descriptor: AlgorithmDescriptor, key: CryptoKey,
                      data: bytes) -> bytes:  # pragma: no cover
        """Decrypt ``data`` produced by :meth:`encrypt`."""
        raise NotImplementedError()

    @abc.abstractmethod
    async def generate_key(self, descriptor: AlgorithmDescriptor, extractable: bool,
                           usages: Iterable[str]) -> GeneratedKey:  # pragma: no cover
        """Generate a key or key pair."""
        raise NotImplementedError()

    @abc.abstractmethod
    async def import_key(self, format: str, material: KeyMaterial,  # pylint: disable=redefined-builtin
                         descriptor: AlgorithmDescriptor, extractable: bool,
                         usages: Iterable[str]) -> CryptoKey:  # pragma: no cover
        """Import key ``material`` serialized in ``format``."""
        raise NotImplementedError()

    @abc.abstractmethod
    async def export_key(self, format: str,  # pylint: disable=redefined-builtin
                         key: CryptoKey) -> ExportedKey:  # pragma: no cover
        """Export ``key`` in ``format``."""
        raise NotImplementedError()

    @abc.abstractmethod
    def get_random_bytes(self, size: int) -> bytes:  # pragma: no cover
        """Return ``size`` cryptographically secure random bytes."""
        raise NotImplementedError()


_HASHES = {
    'SHA-256': hashes.SHA256,
    'SHA-384': hashes.SHA384,
    'SHA-512': hashes.SHA512,
}

_CURVES = {
    'P-256': ec.SECP256R1,
    'P-384': ec.SECP384R1,
    'P-521': ec.SECP521R1,
    'K-256': ec.SECP256K1,
}

_CURVE_NAMES = {curve.name: name for name, curve in _CURVES.items()}

_JWK_TYPES = {
    constants.HMAC: 'oct',
    constants.AES_GCM: 'oct',
    constants.RSASSA_PKCS1_V1_5: 'RSA',
    constants.ECDSA: 'EC',
}

_RSA_PRIVATE_PARAMS = ('p', 'q', 'dp', 'dq', 'qi')

_KEY_PARAMS = ('hash', 'named_curve', 'length')
"""Descriptor parameters a key must match when set on the descriptor."""


def _hash(descriptor: AlgorithmDescriptor) -> hashes.HashAlgorithm:
    try:
        return _HASHES[descriptor.hash]()  # type: ignore[index]
    except KeyError:
        raise errors.ProviderError('Unsupported hash: {0!r}'.format(descriptor.hash))


def _curve(name: str) -> ec.EllipticCurve:
    try:
        return _CURVES[name]()
    except KeyError:
        raise errors.ProviderError('Unsupported curve: {0!r}'.format(name))


def _curve_name(curve: ec.EllipticCurve) -> str:
    try:
        return _CURVE_NAMES[curve.name]
    except KeyError:
        raise errors.ProviderError('Unsupported curve: {0!r}'.format(curve.name))


def _coordinate_size(curve: ec.EllipticCurve) -> int:
    return (curve.key_size + 7) // 8


def _tag_size(descriptor: AlgorithmDescriptor) -> int:
    bits = descriptor.tag_length or constants.DEFAULT_TAG_LENGTH
    if bits % 8 or not 32 <= bits <= 128:
        raise errors.ProviderError('Unsupported tag length: {0}'.format(bits))
    return bits // 8


def _check_usages(descriptor: AlgorithmDescriptor, usages: Tuple[str, ...]) -> None:
    if descriptor.name == constants.AES_GCM:
        allowed = constants.ENCRYPTION_USAGES
    else:
        allowed = constants.SIGNATURE_USAGES
    invalid = [usage for usage in usages if usage not in allowed]
    if invalid:
        raise errors.ProviderError('Invalid key usages for {0}: {1}'.format(
            descriptor.name, invalid))


def _key_algorithm(descriptor: AlgorithmDescriptor) -> AlgorithmDescriptor:
    # keys never carry per-call AEAD parameters
    return descriptor.update(iv=None, additional_data=None)


def _describe(descriptor: AlgorithmDescriptor, key: Any) -> Tuple[str, AlgorithmDescriptor]:
    """Check ``key`` suits ``descriptor`` and work out its type and parameters."""
    name = descriptor.name
    algorithm = _key_algorithm(descriptor)

    if isinstance(key, bytes):
        if name == constants.AES_GCM:
            if len(key) * 8 not in constants.AES_KEY_LENGTHS:
                raise errors.ProviderError(
                    'Invalid AES key length: {0} bits'.format(len(key) * 8))
        elif name != constants.HMAC:
            raise errors.ProviderError('{0} requires an asymmetric key'.format(name))
        if not key:
            raise errors.ProviderError('Empty secret key')
        return 'secret', algorithm.update(length=len(key) * 8)

    if isinstance(key, (rsa.RSAPrivateKey, rsa.RSAPublicKey)):
        if name != constants.RSASSA_PKCS1_V1_5:
            raise errors.ProviderError('RSA key cannot be used with {0}'.format(name))
        public = key if isinstance(key, rsa.RSAPublicKey) else key.public_key()
        algorithm = algorithm.update(
            modulus_length=public.key_size,
            public_exponent=public.public_numbers().e)
        return ('public' if key is public else 'private'), algorithm

    if isinstance(key, (ec.EllipticCurvePrivateKey, ec.EllipticCurvePublicKey)):
        if name != constants.ECDSA:
            raise errors.ProviderError('EC key cannot be used with {0}'.format(name))
        curve = _curve_name(key.curve)
        if descriptor.named_curve is not None and curve != descriptor.named_curve:
            raise errors.ProviderError('Curve mismatch: expected {0}, got {1}'.format(
                descriptor.named_curve, curve))
        key_type = 'public' if isinstance(key, ec.EllipticCurvePublicKey) else 'private'
        return key_type, algorithm.update(named_curve=curve)

    raise errors.ProviderError('Unsupported key type: {0}'.format(type(key).__name__))


def _rsa_from_jwk(jobj: Mapping[str, Any]) -> Union[rsa.RSAPrivateKey, rsa.RSAPublicKey]:
    n, e = (encoding.b64_to_int(jobj[x]) for x in ('n', 'e'))
    public_numbers = rsa.RSAPublicNumbers(e=e, n=n)
    if 'd' not in jobj:
        return public_numbers.public_key()

    d = encoding.b64_to_int(jobj['d'])
    if any(param in jobj for param in _RSA_PRIVATE_PARAMS + ('oth',)):
        # "If the producer includes any of the other private key
        # parameters, then all of the others MUST be present, with the
        # exception of "oth", which MUST only be present when more than
        # two prime factors were used."
        all_params = tuple(jobj.get(x) for x in _RSA_PRIVATE_PARAMS)
        if any(param is None for param in all_params):
            raise errors.ProviderError(
                'Some private parameters are missing: {0}'.format(
                    [x for x, param in zip(_RSA_PRIVATE_PARAMS, all_params)
                     if param is None]))
        if 'oth' in jobj:
            raise errors.ProviderError('Multi-prime RSA keys are not supported')
        p, q, dp, dq, qi = (encoding.b64_to_int(x) for x in all_params)
    else:
        p, q = rsa.rsa_recover_prime_factors(n, e, d)
        dp = rsa.rsa_crt_dmp1(d, p)
        dq = rsa.rsa_crt_dmq1(d, q)
        qi = rsa.rsa_crt_iqmp(p, q)

    return rsa.RSAPrivateNumbers(p, q, d, dp, dq, qi, public_numbers).private_key()


def _rsa_to_jwk(key: Union[rsa.RSAPrivateKey, rsa.RSAPublicKey]) -> dict[str, Any]:
    if isinstance(key, rsa.RSAPublicKey):
        numbers = key.public_numbers()
        params = {
            'n': numbers.n,
            'e': numbers.e,
        }
    else:
        private = key.private_numbers()
        public = private.public_numbers
        params = {
            'n': public.n,
            'e': public.e,
            'd': private.d,
            'p': private.p,
            'q': private.q,
            'dp': private.dmp1,
            'dq': private.dmq1,
            'qi': private.iqmp,
        }
    jwk: dict[str, Any] = {'kty': 'RSA'}
    jwk.update((name, encoding.int_to_b64(value)) for name, value in params.items())
    return jwk


def _ec_from_jwk(jobj: Mapping[str, Any]) -> Union[ec.EllipticCurvePrivateKey,
                                                   ec.EllipticCurvePublicKey]:
    crv = constants.CURVE_ALIASES.get(jobj['crv'], jobj['crv'])
    public_numbers = ec.EllipticCurvePublicNumbers(
        x=encoding.b64_to_int(jobj['x']),
        y=encoding.b64_to_int(jobj['y']),
        curve=_curve(crv),
    )
    if 'd' not in jobj:
        return public_numbers.public_key()
    return ec.EllipticCurvePrivateNumbers(
        encoding.b64_to_int(jobj['d']), public_numbers).private_key()


def _ec_to_jwk(key: Union[ec.EllipticCurvePrivateKey,
                          ec.EllipticCurvePublicKey]) -> dict[str, Any]:
    size = _coordinate_size(key.curve)
    if isinstance(key, ec.EllipticCurvePublicKey):
        public = key.public_numbers()
        private_value = None
    else:
        private = key.private_numbers()
        public = private.public_numbers
        private_value = private.private_value
    jwk = {
        'kty': 'EC',
        'crv': _curve_name(key.curve),
        'x': encoding.int_to_b64(public.x, size),
        'y': encoding.int_to_b64(public.y, size),
    }
    if private_value is not None:
        jwk['d'] = encoding.int_to_b64(private_value, size)
    return jwk


def _jwk_alg(algorithm: AlgorithmDescriptor) -> Optional[str]:
    """Derive the JWK ``alg`` member for an exported key, if any."""
    if algorithm.name == constants.AES_GCM and algorithm.length:
        return 'A{0}GCM'.format(algorithm.length)
    bits = constants.HASH_SIZES.get(algorithm.hash)  # type: ignore[arg-type]
    if bits is None:
        return None
    if algorithm.name == constants.HMAC:
        return 'HS{0}'.format(bits)
    if algorithm.name == constants.RSASSA_PKCS1_V1_5:
        return 'RS{0}'.format(bits)
    return None


class CryptographyProvider(CryptoProvider):
    """Provider backed by the ``cryptography`` package.

    Primitives run in a worker thread (:func:`asyncio.to_thread`), so RSA
    key generation or signing never stalls the event loop. Failures of the
    underlying primitives are reported as `.ProviderError`.

    """

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        try:
            return await asyncio.to_thread(func, *args)
        except (KeyError, TypeError, ValueError, errors.DataError,
                cryptography.exceptions.UnsupportedAlgorithm) as error:
            logger.debug(error, exc_info=True)
            raise errors.ProviderError(str(error) or repr(error), error)

    @classmethod
    def _check_key(cls, descriptor: AlgorithmDescriptor, key: CryptoKey, usage: str) -> None:
        if not isinstance(key, CryptoKey):
            raise errors.ProviderError(
                'Expected a CryptoKey, got {0}'.format(type(key).__name__))
        if key.algorithm.name != descriptor.name:
            raise errors.ProviderError('{0} key cannot be used with {1}'.format(
                key.algorithm.name, descriptor.name))
        for param in _KEY_PARAMS:
            expected = getattr(descriptor, param)
            actual = getattr(key.algorithm, param)
            if expected is not None and actual != expected:
                raise errors.ProviderError('Key {0} {1!r} does not match {2!r}'.format(
                    param, actual, expected))
        if usage not in key.usages:
            raise errors.ProviderError(
                'Key usages {0} do not permit {1}'.format(list(key.usages), usage))

    async def sign(self, descriptor: AlgorithmDescriptor, key: CryptoKey,
                   data: bytes) -> bytes:
        self._check_key(descriptor, key, 'sign')
        if key.type == 'public':
            raise errors.ProviderError('Public key cannot be used for signing')
        return await self._run(self._sign, descriptor, key._key, data)  # pylint: disable=protected-access

    @classmethod
    def _sign(cls, descriptor: AlgorithmDescriptor, key: Any, data: bytes) -> bytes:
        if descriptor.name == constants.HMAC:
            signer = hmac.HMAC(key, _hash(descriptor))
            signer.update(data)
            return signer.finalize()
        if descriptor.name == constants.ECDSA:
            r, s = asym_utils.decode_dss_signature(
                key.sign(data, ec.ECDSA(_hash(descriptor))))
            size = _coordinate_size(key.curve)
            return r.to_bytes(size, 'big') + s.to_bytes(size, 'big')
        if descriptor.name == constants.RSASSA_PKCS1_V1_5:
            return key.sign(data, padding.PKCS1v15(), _hash(descriptor))
        raise errors.ProviderError('{0} does not support sign'.format(descriptor.name))

    async def verify(self, descriptor: AlgorithmDescriptor, key: CryptoKey,
                     signature: bytes, data: bytes) -> bool:
        self._check_key(descriptor, key, 'verify')
        return await self._run(
            self._verify, descriptor, key._key, signature, data)  # pylint: disable=protected-access

    @classmethod
    def _verify(cls, descriptor: AlgorithmDescriptor, key: Any,
                signature: bytes, data: bytes) -> bool:
        try:
            if descriptor.name == constants.HMAC:
                verifier = hmac.HMAC(key, _hash(descriptor))
                verifier.update(data)
                verifier.verify(signature)
            elif descriptor.name == constants.ECDSA:
                public = key if isinstance(key, ec.EllipticCurvePublicKey) else key.public_key()
                size = _coordinate_size(public.curve)
                if len(signature) != 2 * size:
                    logger.debug('ECDSA signature of unexpected length %d', len(signature))
                    return False
                der = asym_utils.encode_dss_signature(
                    int.from_bytes(signature[:size], 'big'),
                    int.from_bytes(signature[size:], 'big'))
                public.verify(der, data, ec.ECDSA(_hash(descriptor)))
            elif descriptor.name == constants.RSASSA_PKCS1_V1_5:
                public = key if isinstance(key, rsa.RSAPublicKey) else key.public_key()
                public.verify(signature, data, padding.PKCS1v15(), _hash(descriptor))
            else:
                raise errors.ProviderError(
                    '{0} does not support verify'.format(descriptor.name))
        except cryptography.exceptions.InvalidSignature as error:
            logger.debug(error, exc_info=True)
            return False
        return True

    async def encrypt(self, descriptor: AlgorithmDescriptor, key: CryptoKey,
                      data: bytes) -> bytes:
        self._check_key(descriptor, key, 'encrypt')
        return await self._run(self._encrypt, descriptor, key._key, data)  # pylint: disable=protected-access

    @classmethod
    def _encrypt(cls, descriptor: AlgorithmDescriptor, key: bytes, data: bytes) -> bytes:
        if descriptor.name != constants.AES_GCM:
            raise errors.ProviderError('{0} does not support encrypt'.format(descriptor.name))
        if descriptor.iv is None:
            raise errors.ProviderError('AES-GCM requires an initialization vector')
        tag_size = _tag_size(descriptor)
        encryptor = Cipher(algorithms.AES(key), modes.GCM(descriptor.iv)).encryptor()
        if descriptor.additional_data is not None:
            encryptor.authenticate_additional_data(descriptor.additional_data)
        ciphertext = encryptor.update(data) + encryptor.finalize()
        return ciphertext + encryptor.tag[:tag_size]

    async def decrypt(self, descriptor: AlgorithmDescriptor, key: CryptoKey,
                      data: bytes) -> bytes:
        self._check_key(descriptor, key, 'decrypt')
        return await self._run(self._decrypt, descriptor, key._key, data)  # pylint: disable=protected-access

    @classmethod
    def _decrypt(cls, descriptor: AlgorithmDescriptor, key: bytes, data: bytes) -> bytes:
        if descriptor.name != constants.AES_GCM:
            raise errors.ProviderError('{0} does not support decrypt'.format(descriptor.name))
        if descriptor.iv is None:
            raise errors.ProviderError('AES-GCM requires an initialization vector')
        tag_size = _tag_size(descriptor)
        if len(data) < tag_size:
            raise errors.ProviderError('Ciphertext is shorter than the authentication tag')
        ciphertext, tag = data[:-tag_size], data[-tag_size:]
        decryptor = Cipher(
            algorithms.AES(key),
            modes.GCM(descriptor.iv, tag, min_tag_length=tag_size),
        ).decryptor()
        if descriptor.additional_data is not None:
            decryptor.authenticate_additional_data(descriptor.additional_data)
        try:
            return decryptor.update(ciphertext) + decryptor.finalize()
        except cryptography.exceptions.InvalidTag as error:
            logger.debug('AES-GCM authentication failed', exc_info=True)
            raise errors.ProviderError('Authentication tag mismatch', error)

    async def generate_key(self, descriptor: AlgorithmDescriptor, extractable: bool,
                           usages: Iterable[str]) -> GeneratedKey:
        usages = tuple(usages)
        _check_usages(descriptor, usages)
        algorithm = _key_algorithm(descriptor)

        if descriptor.name == constants.AES_GCM:
            if descriptor.length not in constants.AES_KEY_LENGTHS:
                raise errors.ProviderError(
                    'Invalid AES key length: {0}'.format(descriptor.length))
            return CryptoKey('secret', extractable, algorithm, usages,
                             self.get_random_bytes(descriptor.length // 8))

        if descriptor.name == constants.HMAC:
            _hash(descriptor)
            length = descriptor.length or constants.HASH_BLOCK_SIZES[descriptor.hash]  # type: ignore[index]
            return CryptoKey('secret', extractable, algorithm.update(length=length),
                             usages, self.get_random_bytes((length + 7) // 8))

        if descriptor.name == constants.ECDSA:
            private = await self._run(ec.generate_private_key, _curve(descriptor.named_curve))  # type: ignore[arg-type]
            return self._key_pair(algorithm, extractable, usages, private)

        if descriptor.name == constants.RSASSA_PKCS1_V1_5:
            _hash(descriptor)
            algorithm = algorithm.update(
                modulus_length=descriptor.modulus_length or constants.DEFAULT_MODULUS_LENGTH,
                public_exponent=descriptor.public_exponent or constants.DEFAULT_PUBLIC_EXPONENT)
            private = await self._run(
                rsa.generate_private_key, algorithm.public_exponent, algorithm.modulus_length)
            return self._key_pair(algorithm, extractable, usages, private)

        raise errors.ProviderError('{0} does not support generateKey'.format(descriptor.name))

    @classmethod
    def _key_pair(cls, algorithm: AlgorithmDescriptor, extractable: bool,
                  usages: Tuple[str, ...], private: Any) -> CryptoKeyPair:
        return CryptoKeyPair(
            public_key=CryptoKey('public', True, algorithm,
                                 [usage for usage in usages if usage == 'verify'],
                                 private.public_key()),
            private_key=CryptoKey('private', extractable, algorithm,
                                  [usage for usage in usages if usage == 'sign'],
                                  private),
        )

    async def import_key(self, format: str, material: KeyMaterial,  # pylint: disable=redefined-builtin
                         descriptor: AlgorithmDescriptor, extractable: bool,
                         usages: Iterable[str]) -> CryptoKey:
        usages = tuple(usages)
        _check_usages(descriptor, usages)
        key = await self._run(self._load, format, material, descriptor, extractable)
        key_type, algorithm = _describe(descriptor, key)
        if key_type == 'public' and 'sign' in usages:
            raise errors.ProviderError('Public key cannot be used for signing')
        return CryptoKey(key_type, extractable, algorithm, usages, key)

    @classmethod
    def _load(cls, format: str, material: KeyMaterial,  # pylint: disable=redefined-builtin
              descriptor: AlgorithmDescriptor, extractable: bool) -> Any:
        if format == 'jwk':
            return cls._load_jwk(material, descriptor, extractable)  # type: ignore[arg-type]
        if not isinstance(material, (bytes, bytearray, memoryview)):
            raise errors.ProviderError('{0} key material must be bytes'.format(format))
        material = bytes(material)
        if format == 'raw':
            if descriptor.name == constants.ECDSA:
                return ec.EllipticCurvePublicKey.from_encoded_point(
                    _curve(descriptor.named_curve), material)  # type: ignore[arg-type]
            if descriptor.name in (constants.HMAC, constants.AES_GCM):
                return material
            raise errors.ProviderError('raw format is not supported for {0}'.format(
                descriptor.name))
        if format == 'spki':
            return serialization.load_der_public_key(material)
        if format == 'pkcs8':
            return serialization.load_der_private_key(material, password=None)
        raise errors.ProviderError('Unsupported key format: {0!r}'.format(format))

    @classmethod
    def _load_jwk(cls, jwk: Mapping[str, Any], descriptor: AlgorithmDescriptor,
                  extractable: bool) -> Any:
        if not isinstance(jwk, Mapping):
            raise errors.ProviderError('JWK must be a mapping')
        if jwk.get('ext') is False and extractable:
            raise errors.ProviderError('Cannot import a non-extractable JWK as extractable')
        expected = _JWK_TYPES.get(descriptor.name)
        if jwk.get('kty') != expected:
            raise errors.ProviderError('{0} requires a {1!r} JWK, got {2!r}'.format(
                descriptor.name, expected, jwk.get('kty')))
        if expected == 'oct':
            return encoding.b64decode(jwk['k'])
        if expected == 'RSA':
            return _rsa_from_jwk(jwk)
        return _ec_from_jwk(jwk)

    async def export_key(self, format: str, key: CryptoKey) -> ExportedKey:  # pylint: disable=redefined-builtin
        if not isinstance(key, CryptoKey):
            raise errors.ProviderError(
                'Expected a CryptoKey, got {0}'.format(type(key).__name__))
        if not key.extractable:
            raise errors.ProviderError('Key is not extractable')
        return await self._run(self._export, format, key)

    @classmethod
    def _export(cls, format: str, key: CryptoKey) -> ExportedKey:  # pylint: disable=redefined-builtin
        material = key._key  # pylint: disable=protected-access
        if format == 'jwk':
            if key.type == 'secret':
                jwk: dict[str, Any] = {'kty': 'oct', 'k': encoding.b64encode(material)}
            elif isinstance(material, (rsa.RSAPrivateKey, rsa.RSAPublicKey)):
                jwk = _rsa_to_jwk(material)
            else:
                jwk = _ec_to_jwk(material)
            alg = _jwk_alg(key.algorithm)
            if alg is not None:
                jwk['alg'] = alg
            jwk['key_ops'] = list(key.usages)
            jwk['ext'] = key.extractable
            return jwk
        if format == 'raw':
            if key.type == 'secret':
                return material
            if key.type == 'public' and isinstance(material, ec.EllipticCurvePublicKey):
                return material.public_bytes(
                    serialization.Encoding.X962,
                    serialization.PublicFormat.UncompressedPoint)
            raise errors.ProviderError('raw export is not supported for this key')
        if format == 'spki':
            if key.type != 'public':
                raise errors.ProviderError('spki export requires a public key')
            return material.public_bytes(
                serialization.Encoding.DER,
                serialization.PublicFormat.SubjectPublicKeyInfo)
        if format == 'pkcs8':
            if key.type != 'private':
                raise errors.ProviderError('pkcs8 export requires a private key')
            return material.private_bytes(
                serialization.Encoding.DER,
                serialization.PrivateFormat.PKCS8,
                serialization.NoEncryption())
        raise errors.ProviderError('Unsupported key format: {0!r}'.format(format))

    def get_random_bytes(self, size: int) -> bytes:
        return secrets.token_bytes(size)
