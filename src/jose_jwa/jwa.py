"""JSON Web Algorithm.

https://tools.ietf.org/html/rfc7518

Each handler owns one immutable `.AlgorithmDescriptor` and implements the
subset of operations listed in its ``operations`` attribute; the remaining
capabilities raise `.NotSupportedError`. Handlers never keep keys or other
per-call state.

"""
import enum
import logging
from typing import Any
from typing import ClassVar
from typing import FrozenSet
from typing import List
from typing import Mapping
from typing import Optional
from typing import TypedDict

from jose_jwa import constants
from jose_jwa import encoding
from jose_jwa import errors
from jose_jwa.descriptor import AlgorithmDescriptor
from jose_jwa.jwk import JWK
from jose_jwa.jwk import key_operations
from jose_jwa.jwk import signature_usages
from jose_jwa.provider import CryptoKey
from jose_jwa.provider import CryptoProvider
from jose_jwa.provider import GeneratedKey

logger = logging.getLogger(__name__)


class OperationKind(enum.Enum):
    """Operations a JWA identifier can be registered for."""
    SIGN = 'sign'
    VERIFY = 'verify'
    ENCRYPT = 'encrypt'
    DECRYPT = 'decrypt'
    ENCRYPT_KEY = 'encryptKey'
    DECRYPT_KEY = 'decryptKey'
    AGREE_KEY = 'agreeKey'
    GENERATE_KEY = 'generateKey'
    IMPORT_KEY = 'importKey'
    EXPORT_KEY = 'exportKey'


class _EncryptionResult(TypedDict):
    ciphertext: str
    iv: str
    tag: str


class EncryptionResult(_EncryptionResult, total=False):
    """Base64url encoded AEAD output; ``aad`` only if it was supplied."""
    aad: str


class JWAAlgorithm:
    """JSON Web Algorithm handler.

    :ivar str name: JOSE identifier, e.g. ``RS256``.
    :ivar descriptor: `.AlgorithmDescriptor` handed to the provider.

    """
    operations: ClassVar[FrozenSet[OperationKind]] = frozenset()

    def __init__(self, name: str, descriptor: AlgorithmDescriptor) -> None:
        self.name = name
        self.descriptor = descriptor

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, JWAAlgorithm):
            return NotImplemented
        return (type(self) is type(other) and self.name == other.name and
                self.descriptor == other.descriptor)

    def __hash__(self) -> int:
        return hash((self.__class__, self.name))

    def __repr__(self) -> str:
        return self.name

    def supports(self, operation: OperationKind) -> bool:
        """Whether this handler implements ``operation``."""
        return operation in self.operations

    def _unsupported(self, operation: OperationKind) -> errors.NotSupportedError:
        return errors.NotSupportedError(self.name, operation.value)

    async def sign(self, provider: CryptoProvider, key: CryptoKey,
                   data: encoding.Input) -> str:
        """Sign ``data`` and return the base64url signature."""
        raise self._unsupported(OperationKind.SIGN)

    async def verify(self, provider: CryptoProvider, key: CryptoKey,
                     signature: encoding.Input, data: encoding.Input) -> bool:
        """Verify a (base64url or raw) ``signature`` over ``data``."""
        raise self._unsupported(OperationKind.VERIFY)

    async def encrypt(self, provider: CryptoProvider, key: CryptoKey, data: encoding.Input,
                      aad: Optional[encoding.Input] = None) -> EncryptionResult:
        """Encrypt ``data``, authenticating ``aad``."""
        raise self._unsupported(OperationKind.ENCRYPT)

    async def decrypt(self, provider: CryptoProvider, key: CryptoKey,
                      ciphertext: encoding.Input, iv: encoding.Input, tag: encoding.Input,
                      aad: Optional[encoding.Input] = None) -> str:
        """Decrypt and authenticate, returning the plaintext as text."""
        raise self._unsupported(OperationKind.DECRYPT)

    async def encrypt_key(self, provider: CryptoProvider, *args: Any) -> Any:
        """Wrap a content encryption key."""
        raise self._unsupported(OperationKind.ENCRYPT_KEY)

    async def decrypt_key(self, provider: CryptoProvider, *args: Any) -> Any:
        """Unwrap a content encryption key."""
        raise self._unsupported(OperationKind.DECRYPT_KEY)

    async def agree_key(self, provider: CryptoProvider, *args: Any) -> Any:
        """Agree upon a key."""
        raise self._unsupported(OperationKind.AGREE_KEY)

    async def generate_key(self, provider: CryptoProvider, extractable: bool,
                           key_ops: List[str],
                           options: Optional[Mapping[str, Any]] = None) -> GeneratedKey:
        """Generate a key or key pair for this algorithm."""
        raise self._unsupported(OperationKind.GENERATE_KEY)

    async def import_key(self, provider: CryptoProvider, jwk: Mapping[str, Any]) -> JWK:
        """Import ``jwk`` and attach the provider's key handle."""
        raise self._unsupported(OperationKind.IMPORT_KEY)

    async def _import_jwk(self, provider: CryptoProvider, jwk: Mapping[str, Any],
                          usages: List[str]) -> JWK:
        crypto_key = await provider.import_key(
            'jwk', jwk, self.descriptor, jwk.get('ext') is not False, usages)
        return JWK(jwk, crypto_key)


class _JWASignature(JWAAlgorithm):
    """JSON Web Signature algorithm."""
    operations = frozenset([
        OperationKind.SIGN,
        OperationKind.VERIFY,
        OperationKind.GENERATE_KEY,
        OperationKind.IMPORT_KEY,
    ])

    def _check_signing_key(self, key: CryptoKey) -> None:
        """Reject keys too weak for this algorithm."""

    async def sign(self, provider: CryptoProvider, key: CryptoKey,
                   data: encoding.Input) -> str:
        self._check_signing_key(key)
        signature = await provider.sign(self.descriptor, key, encoding.to_bytes(data))
        return encoding.b64encode(signature)

    async def verify(self, provider: CryptoProvider, key: CryptoKey,
                     signature: encoding.Input, data: encoding.Input) -> bool:
        return await provider.verify(
            self.descriptor, key,
            encoding.to_bytes(signature, text=encoding.Base64UrlText),
            encoding.to_bytes(data))

    async def generate_key(self, provider: CryptoProvider, extractable: bool,
                           key_ops: List[str],
                           options: Optional[Mapping[str, Any]] = None) -> GeneratedKey:
        return await provider.generate_key(self.descriptor, extractable, key_ops)

    async def import_key(self, provider: CryptoProvider, jwk: Mapping[str, Any]) -> JWK:
        return await self._import_jwk(provider, jwk, signature_usages(jwk))


class _JWAHS(_JWASignature):
    """HMAC with SHA-2."""

    def __init__(self, name: str, hash_: str) -> None:
        super().__init__(name, AlgorithmDescriptor(name=constants.HMAC, hash=hash_))

    def _check_signing_key(self, key: CryptoKey) -> None:
        # "A key of the same size as the hash output (for instance, 256
        # bits for "HS256") or larger MUST be used with this algorithm."
        minimum = constants.HASH_SIZES[self.descriptor.hash]  # type: ignore[index]
        if isinstance(key, CryptoKey) and (key.algorithm.length or minimum) < minimum:
            raise errors.DataError('{0} requires a key of at least {1} bits'.format(
                self.name, minimum))

    async def import_key(self, provider: CryptoProvider, jwk: Mapping[str, Any]) -> JWK:
        # usages are exactly the declared key_ops
        return await self._import_jwk(provider, jwk, key_operations(jwk))


class _JWAES(_JWASignature):
    """ECDSA with SHA-2; signatures are the JOSE ``R || S`` octets."""

    def __init__(self, name: str, curve: str, hash_: str) -> None:
        super().__init__(name, AlgorithmDescriptor(
            name=constants.ECDSA, named_curve=curve, hash=hash_))


class _JWARS(_JWASignature):
    """RSASSA-PKCS1-v1_5 with SHA-2."""

    def __init__(self, name: str, hash_: str) -> None:
        super().__init__(name, AlgorithmDescriptor(
            name=constants.RSASSA_PKCS1_V1_5, hash=hash_))

    def _check_signing_key(self, key: CryptoKey) -> None:
        modulus_length = key.algorithm.modulus_length if isinstance(key, CryptoKey) else None
        if modulus_length is not None and modulus_length < constants.MIN_MODULUS_LENGTH:
            raise errors.DataError(
                'A key size of {0} bits or larger must be used with {1}'.format(
                    constants.MIN_MODULUS_LENGTH, self.name))

    async def generate_key(self, provider: CryptoProvider, extractable: bool,
                           key_ops: List[str],
                           options: Optional[Mapping[str, Any]] = None) -> GeneratedKey:
        descriptor = self.descriptor
        modulus_length = (options or {}).get('modulusLength')
        if modulus_length is not None:
            if (not isinstance(modulus_length, int) or isinstance(modulus_length, bool) or
                    modulus_length <= 0):
                raise errors.DataError('Invalid modulusLength: {0!r}'.format(modulus_length))
            descriptor = descriptor.update(modulus_length=modulus_length)
        return await provider.generate_key(descriptor, extractable, key_ops)


class _JWAGCM(JWAAlgorithm):
    """AES in Galois/Counter Mode.

    Key wrapping is not implemented; `encrypt_key` and `decrypt_key` raise
    `.NotSupportedError`.

    .. todo:: Implement key wrapping (A128GCMKW, A192GCMKW, A256GCMKW,
       RFC 7518 section 4.7) and register those identifiers.

    """
    operations = frozenset([
        OperationKind.ENCRYPT,
        OperationKind.DECRYPT,
        OperationKind.GENERATE_KEY,
        OperationKind.IMPORT_KEY,
    ])

    def __init__(self, name: str, length: int,
                 tag_length: int = constants.DEFAULT_TAG_LENGTH) -> None:
        super().__init__(name, AlgorithmDescriptor(
            name=constants.AES_GCM, length=length, tag_length=tag_length))

    @property
    def tag_size(self) -> int:
        """Authentication tag size in bytes."""
        return (self.descriptor.tag_length or constants.DEFAULT_TAG_LENGTH) // 8

    async def encrypt(self, provider: CryptoProvider, key: CryptoKey, data: encoding.Input,
                      aad: Optional[encoding.Input] = None) -> EncryptionResult:
        # every encryption gets a fresh iv
        descriptor = self.descriptor.update(
            iv=provider.get_random_bytes(constants.GCM_IV_SIZE))
        if aad is not None:
            descriptor = descriptor.update(additional_data=encoding.to_bytes(aad))

        output = await provider.encrypt(descriptor, key, encoding.to_bytes(data))
        split = len(output) - self.tag_size
        result = EncryptionResult(
            ciphertext=encoding.b64encode(output[:split]),
            iv=encoding.b64encode(descriptor.iv),  # type: ignore[arg-type]
            tag=encoding.b64encode(output[split:]),
        )
        if descriptor.additional_data is not None:
            result['aad'] = encoding.b64encode(descriptor.additional_data)
        return result

    async def decrypt(self, provider: CryptoProvider, key: CryptoKey,
                      ciphertext: encoding.Input, iv: encoding.Input, tag: encoding.Input,
                      aad: Optional[encoding.Input] = None) -> str:
        descriptor = self.descriptor.update(
            iv=encoding.to_bytes(iv, text=encoding.Base64UrlText))
        if aad is not None:
            # text aad is read the same way encrypt reads it
            descriptor = descriptor.update(additional_data=encoding.to_bytes(aad))

        data = (encoding.to_bytes(ciphertext, text=encoding.Base64UrlText) +
                encoding.to_bytes(tag, text=encoding.Base64UrlText))
        plaintext = await provider.decrypt(descriptor, key, data)
        return encoding.to_text(plaintext)

    async def generate_key(self, provider: CryptoProvider, extractable: bool,
                           key_ops: List[str],
                           options: Optional[Mapping[str, Any]] = None) -> GeneratedKey:
        return await provider.generate_key(self.descriptor, extractable, key_ops)

    async def import_key(self, provider: CryptoProvider, jwk: Mapping[str, Any]) -> JWK:
        if jwk.get('key_ops') is None:
            usages = list(constants.DEFAULT_AES_USAGES)
        else:
            usages = key_operations(jwk)
        return await self._import_jwk(provider, jwk, usages)


class _JWANone(JWAAlgorithm):
    """Unsecured JWS (RFC 7518, section 3.6).

    .. warning:: Only ever used when a caller names ``none`` explicitly.
       Token verifiers must refuse ``none`` unless it was deliberately
       enabled.

    """
    operations = frozenset([OperationKind.SIGN, OperationKind.VERIFY])

    def __init__(self) -> None:
        super().__init__(constants.NONE, AlgorithmDescriptor(name=constants.NONE))

    async def sign(self, provider: CryptoProvider, key: CryptoKey,
                   data: encoding.Input) -> str:
        logger.warning('Producing an unsecured JWS signature (alg "none")')
        return ''

    async def verify(self, provider: CryptoProvider, key: CryptoKey,
                     signature: encoding.Input, data: encoding.Input) -> bool:
        logger.warning('Verifying an unsecured JWS signature (alg "none")')
        # the signature MUST be the empty octet sequence
        if isinstance(signature, (str, bytes, bytearray, memoryview)):
            return len(signature) == 0
        return encoding.to_bytes(signature, text=encoding.Base64UrlText) == b''


HS256 = _JWAHS('HS256', 'SHA-256')
HS384 = _JWAHS('HS384', 'SHA-384')
HS512 = _JWAHS('HS512', 'SHA-512')

RS256 = _JWARS('RS256', 'SHA-256')
RS384 = _JWARS('RS384', 'SHA-384')
RS512 = _JWARS('RS512', 'SHA-512')

ES256 = _JWAES('ES256', 'P-256', 'SHA-256')
ES384 = _JWAES('ES384', 'P-384', 'SHA-384')
ES512 = _JWAES('ES512', 'P-521', 'SHA-512')
KS256 = _JWAES(constants.KS256, 'K-256', 'SHA-256')

A128GCM = _JWAGCM('A128GCM', 128)
A192GCM = _JWAGCM('A192GCM', 192)
A256GCM = _JWAGCM('A256GCM', 256)

NONE = _JWANone()
