"""Algorithm registry.

Maps ``(OperationKind, identifier)`` pairs to `.JWAAlgorithm` handlers.
A registry is assembled once with `RegistryBuilder` and is read-only
afterwards, so it can be shared between threads and event loops.

"""
import logging
import types
from typing import Dict
from typing import FrozenSet
from typing import Iterable
from typing import Iterator
from typing import Tuple
from typing import Union

from jose_jwa import errors
from jose_jwa import jwa
from jose_jwa.jwa import JWAAlgorithm
from jose_jwa.jwa import OperationKind

logger = logging.getLogger(__name__)

_Key = Tuple[OperationKind, str]


def _operation(operation: Union[OperationKind, str]) -> OperationKind:
    if isinstance(operation, OperationKind):
        return operation
    try:
        return OperationKind(operation)
    except ValueError:
        raise errors.NotSupportedError(None, operation)


class AlgorithmRegistry:
    """Immutable mapping of operations and identifiers to handlers."""

    def __init__(self, entries: Dict[_Key, JWAAlgorithm]) -> None:
        self._entries = types.MappingProxyType(dict(entries))

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[_Key]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return '{0}({1} entries)'.format(self.__class__.__name__, len(self))

    def normalize(self, operation: Union[OperationKind, str],
                  identifier: str) -> JWAAlgorithm:
        """Resolve the handler registered for ``identifier`` and ``operation``.

        Identifiers are matched exactly (case-sensitive).

        :raises errors.NotSupportedError: if nothing is registered for the
            pair, or either value is not a valid operation or identifier.

        """
        kind = _operation(operation)
        if not isinstance(identifier, str):
            raise errors.NotSupportedError(identifier, kind.value)
        try:
            return self._entries[(kind, identifier)]
        except KeyError:
            raise errors.NotSupportedError(identifier, kind.value)

    def identifiers(self, operation: Union[OperationKind, str]) -> FrozenSet[str]:
        """Identifiers registered for ``operation``."""
        kind = _operation(operation)
        return frozenset(name for op, name in self._entries if op is kind)


class RegistryBuilder:
    """Collects registrations and produces an `AlgorithmRegistry`.

    >>> builder = RegistryBuilder()
    >>> builder.define('HS256', 'sign', jwa.HS256)
    >>> registry = builder.build()

    """

    def __init__(self) -> None:
        self._entries: Dict[_Key, JWAAlgorithm] = {}
        self._built = False

    def define(self, identifier: str, operation: Union[OperationKind, str],
               handler: JWAAlgorithm) -> None:
        """Register ``handler`` for ``identifier`` and ``operation``.

        :raises ValueError: if the pair is already defined or ``handler``
            does not implement ``operation``.
        :raises RuntimeError: if the registry was already built.

        """
        if self._built:
            raise RuntimeError('Registry already built')
        try:
            kind = OperationKind(operation)
        except ValueError:
            raise ValueError('Unknown operation: {0!r}'.format(operation))
        if not handler.supports(kind):
            raise ValueError('{0!r} does not implement {1}'.format(handler, kind.value))
        key = (kind, identifier)
        if key in self._entries:
            raise ValueError('{0} already defined for {1}'.format(identifier, kind.value))
        self._entries[key] = handler

    def define_all(self, handlers: Iterable[JWAAlgorithm]) -> None:
        """Register every operation of each handler under its own name."""
        for handler in handlers:
            for kind in sorted(handler.operations, key=lambda op: op.value):
                self.define(handler.name, kind, handler)

    def build(self) -> AlgorithmRegistry:
        """Freeze the collected registrations."""
        if self._built:
            raise RuntimeError('Registry already built')
        self._built = True
        registry = AlgorithmRegistry(self._entries)
        logger.debug('Built %r', registry)
        return registry


DEFAULT_ALGORITHMS = (
    jwa.HS256, jwa.HS384, jwa.HS512,
    jwa.RS256, jwa.RS384, jwa.RS512,
    jwa.ES256, jwa.ES384, jwa.ES512,
    jwa.KS256,
    jwa.A128GCM, jwa.A192GCM, jwa.A256GCM,
    jwa.NONE,
)
"""Handlers registered by `build_default_registry`."""


def build_default_registry() -> AlgorithmRegistry:
    """Build the registry of every supported JWA identifier."""
    builder = RegistryBuilder()
    builder.define_all(DEFAULT_ALGORITHMS)
    return builder.build()


REGISTRY = build_default_registry()
"""Default, process-wide registry."""
