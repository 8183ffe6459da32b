"""JWA facade.

`JWA` is the public entry point: it resolves the handler registered for
the requested algorithm and operation, checks facade-level arguments and
hands the call over. Every method is a coroutine::

  jwa = JWA()
  key = await jwa.generate_key('ES256', {'key_ops': ['sign', 'verify']})
  signature = await jwa.sign('ES256', key.private_key, 'payload')
  assert await jwa.verify('ES256', key.public_key, signature, 'payload')

"""
import logging
from typing import Any
from typing import List
from typing import Mapping
from typing import Optional
from typing import Union

from jose_jwa import encoding
from jose_jwa import errors
from jose_jwa import registry as registry_mod
from jose_jwa.jwa import EncryptionResult
from jose_jwa.jwa import JWAAlgorithm
from jose_jwa.jwa import OperationKind
from jose_jwa.jwk import JWK
from jose_jwa.provider import CryptographyProvider
from jose_jwa.provider import CryptoKey
from jose_jwa.provider import CryptoProvider
from jose_jwa.provider import ExportedKey
from jose_jwa.provider import GeneratedKey

logger = logging.getLogger(__name__)

Key = Union[CryptoKey, JWK]


def _unwrap(key: Any) -> Any:
    """Return the provider handle of an imported `.JWK`."""
    if isinstance(key, JWK):
        return key.crypto_key
    return key


def _key_ops(options: Mapping[str, Any]) -> List[str]:
    key_ops = options.get('key_ops')
    if (not isinstance(key_ops, (list, tuple)) or not key_ops or
            not all(isinstance(op, str) for op in key_ops)):
        raise errors.DataError('Invalid or missing key_ops')
    return list(key_ops)


class JWA:
    """JSON Web Algorithms.

    :param provider: `.CryptoProvider` performing the primitives,
        `.CryptographyProvider` by default.
    :param registry: `.AlgorithmRegistry` to resolve identifiers with,
        `.REGISTRY` by default.

    """

    def __init__(self, provider: Optional[CryptoProvider] = None,
                 registry: Optional[registry_mod.AlgorithmRegistry] = None) -> None:
        self.provider = CryptographyProvider() if provider is None else provider
        self.registry = registry_mod.REGISTRY if registry is None else registry

    def normalize(self, operation: Union[OperationKind, str], alg: Any) -> JWAAlgorithm:
        """Resolve the handler for ``alg`` and ``operation``.

        :raises errors.NotSupportedError: if none is registered.

        """
        try:
            return self.registry.normalize(operation, alg)
        except errors.NotSupportedError as error:
            logger.debug('No handler: %s', error)
            raise

    async def sign(self, alg: str, key: Key, data: encoding.Input) -> str:
        """Sign ``data``.

        :returns: Base64url signature.

        """
        handler = self.normalize(OperationKind.SIGN, alg)
        return await handler.sign(self.provider, _unwrap(key), data)

    async def verify(self, alg: str, key: Key, signature: encoding.Input,
                     data: encoding.Input) -> bool:
        """Verify ``signature`` (base64url text or raw bytes) over ``data``."""
        handler = self.normalize(OperationKind.VERIFY, alg)
        return await handler.verify(self.provider, _unwrap(key), signature, data)

    async def encrypt(self, alg: str, key: Key, data: encoding.Input,
                      aad: Optional[encoding.Input] = None) -> EncryptionResult:
        """Encrypt ``data`` with a fresh IV, authenticating ``aad``."""
        handler = self.normalize(OperationKind.ENCRYPT, alg)
        return await handler.encrypt(self.provider, _unwrap(key), data, aad)

    async def decrypt(self, alg: str, key: Key, ciphertext: encoding.Input,
                      iv: encoding.Input, tag: encoding.Input,
                      aad: Optional[encoding.Input] = None) -> str:
        """Authenticate and decrypt; returns the plaintext as text."""
        handler = self.normalize(OperationKind.DECRYPT, alg)
        return await handler.decrypt(
            self.provider, _unwrap(key), ciphertext, iv, tag, aad)

    async def encrypt_key(self, alg: str, key: Key, wrapping_key: Key) -> Any:
        """Wrap ``key`` with ``wrapping_key``."""
        handler = self.normalize(OperationKind.ENCRYPT_KEY, alg)
        return await handler.encrypt_key(
            self.provider, _unwrap(key), _unwrap(wrapping_key))

    async def decrypt_key(self, alg: str, wrapped_key: Any, unwrapping_key: Key,
                          unwrapped_alg: Optional[str] = None) -> Any:
        """Unwrap ``wrapped_key`` with ``unwrapping_key``."""
        handler = self.normalize(OperationKind.DECRYPT_KEY, alg)
        return await handler.decrypt_key(
            self.provider, wrapped_key, _unwrap(unwrapping_key), unwrapped_alg)

    async def agree_key(self, alg: str, *args: Any) -> Any:
        """Derive a shared key."""
        handler = self.normalize(OperationKind.AGREE_KEY, alg)
        return await handler.agree_key(self.provider, *[_unwrap(arg) for arg in args])

    async def generate_key(self, alg: str,
                           options: Optional[Mapping[str, Any]] = None) -> GeneratedKey:
        """Generate a key or key pair.

        :param options: ``key_ops`` (required, non-empty list of usages),
            ``extractable`` (bool, default ``True``) and, for RSA,
            ``modulusLength``.

        :raises errors.DataError: if ``options`` are invalid.

        """
        handler = self.normalize(OperationKind.GENERATE_KEY, alg)
        if options is None:
            options = {}
        if not isinstance(options, Mapping):
            raise errors.DataError('Key generation options must be a mapping')
        key_ops = _key_ops(options)
        extractable = options.get('extractable', True)
        if not isinstance(extractable, bool):
            raise errors.DataError('extractable must be a boolean')
        return await handler.generate_key(self.provider, extractable, key_ops, options)

    async def import_key(self, jwk: Mapping[str, Any]) -> JWK:
        """Import ``jwk`` using the algorithm named by its ``alg`` member.

        :returns: `.JWK` with every input member and a ``crypto_key``.

        """
        if not isinstance(jwk, Mapping):
            raise errors.DataError('JWK must be a JSON object')
        handler = self.normalize(OperationKind.IMPORT_KEY, jwk.get('alg'))
        return await handler.import_key(self.provider, jwk)

    async def export_key(self, format: str, key: Key) -> ExportedKey:  # pylint: disable=redefined-builtin
        """Export ``key`` in ``format`` (``jwk``, ``raw``, ``spki`` or ``pkcs8``)."""
        return await self.provider.export_key(format, _unwrap(key))
