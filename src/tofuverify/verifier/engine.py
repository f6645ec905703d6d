"""Verification engine: ties identity, evidence, trust store and gpg together"""

from pathlib import Path

from tofuverify.config import Config
from tofuverify.core.package import derive_package_id, resolve_artifact
from tofuverify.data.models import TrustPolicy, VerificationOutcome, VerificationReport
from tofuverify.errors import CryptoBackendError
from tofuverify.utils.logging import get_logger
from tofuverify.verifier.evidence import EvidenceLocator
from tofuverify.verifier.provenance.gpg import GPGVerifier
from tofuverify.verifier.provenance.hash import HashVerifier
from tofuverify.verifier.trust import FAILED_BOOTSTRAP_POLICIES, TrustStore

logger = get_logger(__name__)

NOT_VERIFIED_STATUSES = ("verification_failed", "timeout")


class SignatureVerifier:
    """Verifies a downloaded artifact under a per-package TOFU policy"""

    def __init__(self, config: Config | None = None, trust_root: Path | str | None = None):
        self.config = config or Config()
        self.trust_root = Path(trust_root).expanduser() if trust_root else self.config.trust_root
        self.on_failed_bootstrap = self.config.get("policy", "on_failed_bootstrap", "pin")
        if self.on_failed_bootstrap not in FAILED_BOOTSTRAP_POLICIES:
            raise ValueError(f"Unknown failed-bootstrap policy: {self.on_failed_bootstrap}")

        self.hash_verifier = HashVerifier(match_mode=self.config.get("policy", "manifest_match", "exact"))
        self.evidence_locator = EvidenceLocator(self.hash_verifier)
        self.gpg_verifier = GPGVerifier(
            binary=self.config.get("gpg", "binary", "gpg"),
            keyserver=self.config.get("keyserver", "url"),
            ca_cert_file=self.config.ca_cert_file,
            timeout=self.config.get("gpg", "timeout", 120),
        )

    def trust_store(self, package_id: str) -> TrustStore:
        return TrustStore.open(self.trust_root, package_id, self.on_failed_bootstrap)

    def verify_artifact(self, artifact_path: Path | str) -> VerificationReport:
        """Verify an artifact, bootstrapping its package's trust store if new

        Raises InvalidInvocation, NoEvidenceFound, TrustBootstrapIOFailure or
        CryptoBackendError. A completed but failing signature check is
        reported, not raised.
        """
        # Identity first: rejects signature files before touching the disk
        package_id = derive_package_id(artifact_path)
        artifact = resolve_artifact(artifact_path)
        evidence = self.evidence_locator.locate(artifact)
        target_path = evidence.target_path(artifact)

        # A broken gpg must not create (and so pin) an empty keyring
        unavailable = self.gpg_verifier.check_available()
        if unavailable:
            raise CryptoBackendError(unavailable["note"])

        store = self.trust_store(package_id)
        with store.session() as policy:
            bootstrapped = policy is TrustPolicy.AUTO_KEY_RETRIEVE
            result = self.gpg_verifier.verify(
                evidence.signature_path,
                target_path,
                policy,
                store.store_directory,
            )
            status = result["status"]

            if status == "verified":
                outcome = VerificationOutcome.VERIFIED
            elif status in NOT_VERIFIED_STATUSES:
                outcome = VerificationOutcome.NOT_VERIFIED
            else:
                raise CryptoBackendError(f"{result['note']}: {result.get('error', status)}")

            store.record_outcome(outcome is VerificationOutcome.VERIFIED)

        logger.info("%s: %s (%s, %s)", artifact.base_name, outcome.value, evidence.kind, policy.value)

        notes = [result["note"]]
        if bootstrapped:
            notes.append(f"Trusted the signing key on first use for package {package_id!r}")

        return VerificationReport(
            artifact=artifact,
            package_id=package_id,
            evidence=evidence,
            policy=policy,
            bootstrapped=bootstrapped,
            outcome=outcome,
            gpg_status=status,
            gpg_output=result.get("output", ""),
            notes=notes,
        )
