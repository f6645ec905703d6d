"""Exception hierarchy for tofuverify

Every error is terminal for a verification attempt. The CLI reports the
message and exits with status 1.
"""


class TofuVerifyError(Exception):
    """Base class for all tofuverify errors"""


class InvalidInvocation(TofuVerifyError):
    """The tool was pointed at something that is not a verifiable artifact"""


class NoEvidenceFound(TofuVerifyError):
    """No signature or signed checksum manifest covers the artifact"""


class VerificationFailed(TofuVerifyError):
    """Evidence was found but the signature did not verify"""


class TrustBootstrapIOFailure(TofuVerifyError):
    """The per-package trust store could not be created or accessed"""


class CryptoBackendError(TofuVerifyError):
    """gpg is missing, unusable, or failed for reasons unrelated to the signature"""
