"""Algorithm descriptors."""
from typing import Any
from typing import NamedTuple
from typing import Optional


class AlgorithmDescriptor(NamedTuple):
    """Normalized algorithm parameters handed to the provider.

    Instances are immutable and shared by every call going through the
    handler that owns them. Per-call values (an AES-GCM ``iv``, a RSA
    ``modulus_length`` override) are applied with :meth:`update`, which
    returns a copy.

    """
    name: str
    hash: Optional[str] = None
    named_curve: Optional[str] = None
    length: Optional[int] = None
    tag_length: Optional[int] = None
    modulus_length: Optional[int] = None
    public_exponent: Optional[int] = None
    iv: Optional[bytes] = None
    additional_data: Optional[bytes] = None

    def update(self, **kwargs: Any) -> 'AlgorithmDescriptor':
        """Return a copy with ``kwargs`` replaced."""
        return self._replace(**kwargs)

    def to_partial_json(self) -> dict[str, Any]:
        """Serialize the parameters that are set, omitting per-call data."""
        return {key: value for key, value in self._asdict().items()
                if value is not None and key not in ('iv', 'additional_data')}

    def __repr__(self) -> str:
        params = ', '.join('{0}={1!r}'.format(key, value)
                           for key, value in self.to_partial_json().items())
        return '{0}({1})'.format(self.__class__.__name__, params)
