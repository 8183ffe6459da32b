"""JWA constants."""
from jose.constants import ALGORITHMS

KS256 = 'KS256'
"""ECDSA over secp256k1 with SHA-256 (not part of RFC 7518)."""

NONE = ALGORITHMS.NONE
"""Unsecured JWS identifier (RFC 7518, section 3.6)."""

HMAC = 'HMAC'
ECDSA = 'ECDSA'
RSASSA_PKCS1_V1_5 = 'RSASSA-PKCS1-v1_5'
AES_GCM = 'AES-GCM'
"""Algorithm family names carried by `.AlgorithmDescriptor.name`."""

HASH_SIZES = {
    'SHA-256': 256,
    'SHA-384': 384,
    'SHA-512': 512,
}
"""Digest size in bits for each supported hash."""

HASH_BLOCK_SIZES = {
    'SHA-256': 512,
    'SHA-384': 1024,
    'SHA-512': 1024,
}
"""Block size in bits, used as the default generated HMAC key length."""

CURVE_ALIASES = {
    'secp256k1': 'K-256',
}
"""JWK ``crv`` values accepted in place of the canonical curve name."""

DEFAULT_TAG_LENGTH = 128
"""AES-GCM authentication tag length in bits when none is configured."""

GCM_IV_SIZE = 12
"""Size in bytes of the random AES-GCM initialization vector (96 bits)."""

AES_KEY_LENGTHS = (128, 192, 256)

DEFAULT_AES_USAGES = ('encrypt', 'decrypt')
"""Usages for an imported AES-GCM JWK without ``key_ops``."""

DEFAULT_MODULUS_LENGTH = 2048
"""RSA modulus length in bits for generated keys."""

MIN_MODULUS_LENGTH = 2048
"""Smallest RSA modulus accepted for signing (RFC 7518, section 3.3)."""

DEFAULT_PUBLIC_EXPONENT = 65537

SIGNATURE_USAGES = frozenset(['sign', 'verify'])
ENCRYPTION_USAGES = frozenset(['encrypt', 'decrypt', 'wrapKey', 'unwrapKey'])
"""Key usages a provider accepts for each family."""
