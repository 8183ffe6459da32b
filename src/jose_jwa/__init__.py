"""JSON Web Algorithms.

This package implements the JOSE `JSON Web Algorithms`_ on top of a
pluggable cryptographic provider: signing and verification (HMAC, ECDSA,
RSASSA-PKCS1-v1_5), AES-GCM authenticated encryption, and key generation
and import from `JSON Web Keys`_.

.. _`JSON Web Algorithms`: https://datatracker.ietf.org/doc/html/rfc7518
.. _`JSON Web Keys`: https://datatracker.ietf.org/doc/html/rfc7517

"""
from jose_jwa.api import JWA
from jose_jwa.descriptor import AlgorithmDescriptor
from jose_jwa.encoding import Base64UrlText
from jose_jwa.encoding import RawBytes
from jose_jwa.encoding import Utf8Text
from jose_jwa.errors import DataError
from jose_jwa.errors import Error
from jose_jwa.errors import NotSupportedError
from jose_jwa.errors import ProviderError
from jose_jwa.errors import ValidationError
from jose_jwa.jwa import EncryptionResult
from jose_jwa.jwa import JWAAlgorithm
from jose_jwa.jwa import OperationKind
from jose_jwa.jwk import JWK
from jose_jwa.provider import CryptographyProvider
from jose_jwa.provider import CryptoKey
from jose_jwa.provider import CryptoKeyPair
from jose_jwa.provider import CryptoProvider
from jose_jwa.registry import REGISTRY
from jose_jwa.registry import AlgorithmRegistry
from jose_jwa.registry import RegistryBuilder
