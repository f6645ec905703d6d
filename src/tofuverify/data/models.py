"""Data models for artifacts, evidence, trust state and verification reports"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Union

from tofuverify.errors import VerificationFailed


class TrustState(str, Enum):
    """Lifecycle state of a package's trust store"""

    ABSENT = "absent"
    PENDING = "pending"
    BOOTSTRAPPED = "bootstrapped"


class TrustPolicy(str, Enum):
    """How gpg is allowed to treat keys for one verification"""

    AUTO_KEY_RETRIEVE = "auto-key-retrieve"
    ALWAYS_TRUST_PINNED = "always-trust-pinned"


class VerificationOutcome(str, Enum):
    """Final result of a completed verification"""

    VERIFIED = "VERIFIED"
    NOT_VERIFIED = "NOT VERIFIED"


@dataclass(frozen=True)
class Artifact:
    """The downloaded file being verified"""

    path: Path
    directory: Path
    base_name: str

    @classmethod
    def from_path(cls, path: Path | str) -> "Artifact":
        path = Path(path)
        return cls(path=path, directory=path.parent, base_name=path.name)


@dataclass(frozen=True)
class ManifestEntry:
    """One line of a checksum manifest"""

    algorithm: str
    digest: str
    filename: str

    @property
    def base_name(self) -> str:
        """Last path component of the referenced filename"""
        return self.filename.replace("\\", "/").rsplit("/", 1)[-1]


@dataclass(frozen=True)
class DirectSignature:
    """A detached signature over the artifact itself"""

    signature_path: Path

    kind = "signature"

    def target_path(self, artifact: Artifact) -> Path:
        return artifact.path


@dataclass(frozen=True)
class ManifestChain:
    """A checksum manifest listing the artifact, plus the manifest's own signature"""

    manifest_path: Path
    signature_path: Path
    algorithm: str

    kind = "manifest"

    def target_path(self, artifact: Artifact) -> Path:
        # The signature covers the manifest, not the artifact
        return self.manifest_path


Evidence = Union[DirectSignature, ManifestChain]


@dataclass
class VerificationReport:
    """Everything known about one verification attempt"""

    artifact: Artifact
    package_id: str
    evidence: Evidence
    policy: TrustPolicy
    bootstrapped: bool
    outcome: VerificationOutcome
    gpg_status: str
    gpg_output: str = ""
    notes: list[str] = field(default_factory=list)

    @property
    def verified(self) -> bool:
        return self.outcome is VerificationOutcome.VERIFIED

    def raise_for_outcome(self) -> None:
        """Raise VerificationFailed unless the signature verified"""
        if not self.verified:
            raise VerificationFailed(
                f"Signature {self.evidence.signature_path} did not verify "
                f"{self.evidence.target_path(self.artifact)} ({self.gpg_status})"
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serialisable dictionary"""
        evidence: dict[str, Any] = {
            "kind": self.evidence.kind,
            "signature": str(self.evidence.signature_path),
        }
        if isinstance(self.evidence, ManifestChain):
            evidence["manifest"] = str(self.evidence.manifest_path)
            evidence["algorithm"] = self.evidence.algorithm

        return {
            "artifact": str(self.artifact.path),
            "package": self.package_id,
            "evidence": evidence,
            "policy": self.policy.value,
            "bootstrapped": self.bootstrapped,
            "outcome": self.outcome.value,
            "verified": self.verified,
            "gpg_status": self.gpg_status,
            "gpg_output": self.gpg_output,
            "notes": list(self.notes),
        }
