"""Custom exception classes for the Fragments service."""


class FragmentsError(Exception):
    """
    Base exception class for all fragment-related errors.
    """
    pass


class InvalidArgumentError(FragmentsError):
    """
    Raised when a fragment is constructed or mutated with bad input.
    """
    pass


class UnsupportedTypeError(InvalidArgumentError):
    """
    Raised when a media type is not in the supported set.
    """
    pass


class FragmentTypeMismatchError(InvalidArgumentError):
    """
    Raised when new data is declared with a type other than the fragment's own.
    """
    pass


class UnsupportedConversionError(FragmentsError):
    """
    Raised when a fragment cannot be converted to the requested type.
    """
    pass


class ConversionError(UnsupportedConversionError):
    """
    Raised when the source bytes cannot be decoded for conversion.
    """
    pass


class FragmentNotFoundError(FragmentsError):
    """
    Raised when no fragment exists for the requested (owner, id).
    """
    pass


class StorageError(FragmentsError):
    """
    Raised when a storage backend operation fails.

    The original backend error is chained as __cause__ and never included
    in the message.
    """
    pass


class AuthenticationError(FragmentsError):
    """
    Raised when request credentials are missing or invalid.
    """
    pass


class FragmentTooLargeError(InvalidArgumentError):
    """
    Raised when a request body exceeds the configured fragment size limit.
    """
    pass
