"""Input normalization and JOSE Base64.

Every value entering a handler passes through :func:`to_bytes`. A bare
:class:`str` is ambiguous (it may be text or base64url), so each call site
states how it reads one; callers can override that by tagging the value
explicitly::

  to_bytes('hello')                        # b'hello'
  to_bytes('aGVsbG8', text=Base64UrlText)  # b'hello'
  to_bytes(Utf8Text('aGVsbG8'), text=Base64UrlText)  # b'aGVsbG8'

.. Do NOT try to call this module "base64", as it will "shadow" the
   standard library.

"""
import re
from typing import NamedTuple
from typing import Type
from typing import Union

from jose import utils as jose_utils

from jose_jwa import errors


class Utf8Text(NamedTuple):
    """Text to be encoded as UTF-8."""
    value: str


class RawBytes(NamedTuple):
    """Bytes used verbatim."""
    value: bytes


class Base64UrlText(NamedTuple):
    """JOSE Base64 (URL-safe, unpadded) text."""
    value: str


Tagged = Union[Utf8Text, RawBytes, Base64UrlText]
BytesLike = Union[bytes, bytearray, memoryview]
Input = Union[str, BytesLike, Tagged]

_B64URL_RE = re.compile(r'[A-Za-z0-9_-]*')


def b64encode(data: BytesLike) -> str:
    """JOSE Base64 encode.

    :param data: Data to be encoded.
    :returns: Unpadded URL-safe Base64 text.
    :rtype: str

    """
    return jose_utils.base64url_encode(bytes(data)).decode('ascii')


def b64decode(data: Union[str, bytes]) -> bytes:
    """JOSE Base64 decode.

    Only the URL-safe alphabet is accepted; padding, whitespace and any
    other character are rejected.

    :raises errors.DataError: if ``data`` is not valid JOSE Base64.

    """
    try:
        if not isinstance(data, str):
            data = bytes(data).decode('ascii')
    except (TypeError, ValueError) as error:
        raise errors.DataError('Invalid base64url value: {0}'.format(error))
    if not _B64URL_RE.fullmatch(data):
        raise errors.DataError('Invalid base64url value: unexpected character')
    try:
        return jose_utils.base64url_decode(data.encode('ascii'))
    except (TypeError, ValueError) as error:
        raise errors.DataError('Invalid base64url value: {0}'.format(error))


def to_bytes(data: Input, text: Type[Tagged] = Utf8Text) -> bytes:
    """Normalize ``data`` to canonical bytes.

    :param data: Tagged value, bytes-like object, or ``str``.
    :param text: Tag applied to a bare ``str``.

    :raises errors.DataError: if ``data`` cannot be decoded or is of an
        unsupported type.

    """
    if isinstance(data, str):
        data = text(data)

    if isinstance(data, Utf8Text):
        try:
            return data.value.encode('utf-8')
        except UnicodeEncodeError as error:
            raise errors.DataError('Invalid text: {0}'.format(error))
    elif isinstance(data, Base64UrlText):
        return b64decode(data.value)
    elif isinstance(data, RawBytes):
        return bytes(data.value)
    elif isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise errors.DataError(
        'Expected text or bytes, got {0}'.format(type(data).__name__))


def to_text(data: bytes) -> str:
    """Decode UTF-8 ``data`` recovered from the provider."""
    try:
        return data.decode('utf-8')
    except UnicodeDecodeError as error:
        raise errors.DataError('Plaintext is not valid UTF-8: {0}'.format(error))


def int_to_b64(value: int, size: int = 0) -> str:
    """Encode a JWK Base64urlUInt, left-padded to ``size`` bytes."""
    return jose_utils.long_to_base64(value, size).decode('ascii')


def b64_to_int(data: str) -> int:
    """Decode a JWK Base64urlUInt."""
    return int.from_bytes(b64decode(data), 'big')
