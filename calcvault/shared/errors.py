"""
Vault error taxonomy.

Everything derives from ValueError so the route layer can keep turning
service errors into 400s the same way it does for upload validation.
Per-file errors (OversizeFile, DecodeFailure) are recovered inside the
ingestion batch; QuotaExceeded ends the batch; PersistenceFailure reaches
the caller.
"""


class VaultError(ValueError):
    code = "vault_error"

    def __init__(self, message: str, filename: str | None = None):
        super().__init__(message)
        self.message = message
        self.filename = filename


class OversizeFile(VaultError):
    code = "oversize_file"


class QuotaExceeded(VaultError):
    code = "quota_exceeded"


class DecodeFailure(VaultError):
    code = "decode_failure"


class PersistenceFailure(VaultError):
    code = "persistence_failure"
