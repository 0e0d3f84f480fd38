"""Content integrity verification for downloaded assets.

Assets are content addressed: the index hash of every object is the
SHA-1 of its bytes. Verification is optional and runs over the same
chunks that are written to the output archive, so nothing is buffered.
"""

from __future__ import annotations

import hashlib

import structlog

from mcasset_tools.core.errors import MCAssetError

logger = structlog.get_logger()


class IntegrityError(MCAssetError):
    """Raised when content verification fails.

    Attributes:
        expected: Expected hash as hex string
        actual: Actual hash as hex string
        path: Asset path being verified
    """

    def __init__(
        self,
        message: str,
        *,
        expected: str | None = None,
        actual: str | None = None,
        path: str | None = None,
    ):
        self.expected = expected
        self.actual = actual
        self.path = path
        super().__init__(message)


class HashVerifier:
    """Incremental SHA-1 check against an expected hex digest."""

    def __init__(self, expected_hash: str, path: str | None = None):
        self.expected_hash = expected_hash.lower()
        self.path = path
        self._digest = hashlib.sha1()

    def update(self, chunk: bytes) -> None:
        self._digest.update(chunk)

    def verify(self) -> bool:
        """Compare the accumulated digest with the expected hash.

        Returns:
            True if the digests match

        Raises:
            IntegrityError: If the hash does not match
        """
        actual = self._digest.hexdigest()
        if actual != self.expected_hash:
            logger.error(
                "integrity_mismatch",
                path=self.path,
                expected=self.expected_hash,
                actual=actual,
            )
            raise IntegrityError(
                f"Content hash mismatch for {self.path or 'asset'}: "
                f"expected {self.expected_hash}, got {actual}",
                expected=self.expected_hash,
                actual=actual,
                path=self.path,
            )
        return True
