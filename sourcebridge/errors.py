"""Error hierarchy for sourcebridge.

- Protocol errors: the request cannot be interpreted (UnsupportedOperationError).
- Codec errors: a descriptor cannot be encoded or decoded, or decodes to an
  invalid source.
- Split errors: a valid source produced an invalid bundle.
- Reading errors: I/O failure inside a reading session, or a caller reading
  past the end of one.
"""

from __future__ import annotations


class SourceBridgeError(Exception):
    """Base class for all sourcebridge errors."""


class ConfigError(SourceBridgeError):
    pass


class UnsupportedOperationError(SourceBridgeError):
    """Operation request kind (or reader capability) is not supported."""


class SourceValidationError(SourceBridgeError, ValueError):
    """Raised by Source.validate() implementations."""


class SourceEncodeError(SourceBridgeError):
    pass


class SourceDecodeError(SourceBridgeError):
    """Descriptor blob is malformed or names an unknown source type."""


class InvalidSourceError(SourceDecodeError):
    """Descriptor decoded to a source that fails its own validation."""


class InvalidBundleError(SourceBridgeError, ValueError):
    def __init__(self, source: object, bundle: object) -> None:
        self.source = source
        self.bundle = bundle
        super().__init__(
            "Splitting a valid source produced an invalid bundle."
            f"\nOriginal source: {source!r}"
            f"\nInvalid bundle: {bundle!r}"
        )


class SourcePluginError(SourceBridgeError, RuntimeError):
    pass


class ReadingSessionError(SourceBridgeError, IOError):
    """I/O failure while starting or advancing a source reader."""


class ReaderExhaustedError(SourceBridgeError, LookupError):
    """next() was called on a reading session with no remaining elements."""
