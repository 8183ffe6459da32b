"""JSON Web Key view and key usage rules.

An imported key is returned as a `JWK`: a read-only mapping over the JWK
members exactly as they were supplied, plus a separate `JWK.crypto_key`
attribute holding the provider's `.CryptoKey`. The handle is not a
member, so it never reaches :meth:`JWK.to_json` or :meth:`JWK.json_dumps`.

"""
import json
import logging
from typing import Any
from typing import Iterator
from typing import List
from typing import Mapping
from typing import Optional

from jose_jwa import errors
from jose_jwa.provider import CryptoKey

logger = logging.getLogger(__name__)


class JWK(Mapping[str, Any]):
    """Imported JSON Web Key.

    Compares equal to the mapping it was built from::

      >>> JWK({'kty': 'oct', 'k': 'c2VjcmV0'}) == {'kty': 'oct', 'k': 'c2VjcmV0'}
      True

    :ivar crypto_key: Provider `.CryptoKey`, or ``None`` before import.

    """
    __slots__ = ('_fields', 'crypto_key')

    def __init__(self, fields: Mapping[str, Any], crypto_key: Optional[CryptoKey] = None) -> None:
        self._fields = dict(fields)
        self.crypto_key = crypto_key

    def __getitem__(self, name: str) -> Any:
        return self._fields[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return '{0}({1!r})'.format(self.__class__.__name__, self._fields)

    def to_json(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible `dict`, without the key handle."""
        return dict(self._fields)

    def json_dumps(self, **kwargs: Any) -> str:
        """Dump to JSON string."""
        return json.dumps(self.to_json(), **kwargs)

    @classmethod
    def from_json(cls, jobj: Mapping[str, Any]) -> 'JWK':
        """Build a JWK view (without key handle) from ``jobj``."""
        if not isinstance(jobj, Mapping):
            raise errors.DataError('JWK must be a JSON object')
        return cls(jobj)

    def with_key(self, crypto_key: CryptoKey) -> 'JWK':
        """Return a copy attached to ``crypto_key``."""
        return type(self)(self._fields, crypto_key)


def key_operations(jwk: Mapping[str, Any]) -> List[str]:
    """Return a fresh list of the ``key_ops`` declared by ``jwk``.

    :raises errors.ValidationError: if ``key_ops`` is not a list of
        strings or contains duplicates (RFC 7517, section 4.3).

    """
    key_ops = jwk.get('key_ops')
    if key_ops is None:
        return []
    if (not isinstance(key_ops, (list, tuple)) or
            not all(isinstance(op, str) for op in key_ops)):
        raise errors.ValidationError('Invalid key operations key parameter')
    # duplicate key operation values MUST NOT be present
    if len(set(key_ops)) != len(key_ops):
        raise errors.ValidationError('Invalid key operations key parameter')
    return list(key_ops)


def has_private_component(jwk: Mapping[str, Any]) -> bool:
    """Whether ``jwk`` carries the private ``d`` member, even if empty."""
    return 'd' in jwk


def _ensure(usages: List[str], usage: str) -> None:
    if usage not in usages:
        usages.append(usage)


def signature_usages(jwk: Mapping[str, Any]) -> List[str]:
    """Infer the usages of an asymmetric signature JWK.

    Starts from ``key_ops``; ``use: "sig"`` adds ``verify``; a private key
    adds ``sign``, a public key ``verify``.

    :raises errors.ValidationError: on duplicate ``key_ops`` or
        ``use: "enc"``, which signature keys cannot declare.

    """
    usages = key_operations(jwk)
    use = jwk.get('use')
    if use == 'sig':
        _ensure(usages, 'verify')
    elif use == 'enc':
        raise errors.ValidationError('Invalid use key parameter')

    if has_private_component(jwk):
        _ensure(usages, 'sign')
    else:
        _ensure(usages, 'verify')
    logger.debug('Inferred usages %s for %s JWK', usages, jwk.get('kty'))
    return usages
