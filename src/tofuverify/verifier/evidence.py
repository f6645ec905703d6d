"""Discovery of verification evidence next to a downloaded artifact

Evidence is looked up only in the artifact's own directory, in priority
order:

1. ``<artifact>.sig``
2. ``<artifact>.asc``
3. a checksum manifest (``SHA512SUMS``, ``SHA256SUMS.txt``, ``MD5SUMS``, ...)
   that lists the artifact with a matching digest and has a detached
   signature of its own. Stronger algorithms are tried first.
"""

from collections.abc import Iterator
from pathlib import Path

from tofuverify.core.package import is_signature_file
from tofuverify.data.models import Artifact, DirectSignature, Evidence, ManifestChain
from tofuverify.errors import NoEvidenceFound
from tofuverify.utils.hashing import HASH_ALGORITHMS
from tofuverify.utils.logging import get_logger
from tofuverify.verifier.provenance.hash import HashVerifier

logger = get_logger(__name__)


def manifest_signature_candidates(manifest_path: Path) -> list[Path]:
    """Possible detached signatures for a manifest, in lookup order"""
    candidates = [
        manifest_path.with_name(manifest_path.name + ".sig"),
        manifest_path.with_name(manifest_path.name + ".asc"),
    ]
    if manifest_path.name.endswith(".txt"):
        stem = manifest_path.name[: -len(".txt")]
        candidates += [
            manifest_path.with_name(stem + ".sig"),
            manifest_path.with_name(stem + ".asc"),
        ]
    return candidates


def manifest_candidates(directory: Path, algorithm: str) -> list[Path]:
    """Files in a directory that may be manifests for one algorithm

    The name must start with the upper-case algorithm name. Signature files
    are excluded since they are never manifests themselves.
    """
    return sorted(
        path
        for path in directory.iterdir()
        if path.name.startswith(algorithm) and path.is_file() and not is_signature_file(path.name)
    )


def iter_candidates(artifact: Artifact) -> Iterator[tuple[str | None, Path]]:
    """Yield ``(algorithm, path)`` evidence candidates in priority order

    Direct signatures come first with ``algorithm`` set to None, followed
    by manifests grouped by algorithm strength.
    """
    for suffix in (".sig", ".asc"):
        yield None, artifact.path.with_name(artifact.base_name + suffix)

    for algorithm in HASH_ALGORITHMS:
        for manifest_path in manifest_candidates(artifact.directory, algorithm):
            yield algorithm, manifest_path


class EvidenceLocator:
    """Finds the signature, or signed manifest, that covers an artifact"""

    def __init__(self, hash_verifier: HashVerifier | None = None):
        self.hash_verifier = hash_verifier or HashVerifier()

    def locate(self, artifact: Artifact) -> Evidence:
        """Return the first usable evidence for the artifact"""
        for algorithm, path in iter_candidates(artifact):
            if algorithm is None:
                evidence = self._check_signature(path)
            else:
                evidence = self._check_manifest(artifact, algorithm, path)

            if evidence is not None:
                logger.info("Using %s evidence %s", evidence.kind, evidence.signature_path)
                return evidence

        raise NoEvidenceFound(
            f"Didn't find a signature for {artifact.base_name} or a signed "
            "SHA*SUMS/MD5SUMS manifest listing it in "
            f"{artifact.directory}. Need to download it?"
        )

    def _check_signature(self, signature_path: Path) -> DirectSignature | None:
        if signature_path.is_file():
            return DirectSignature(signature_path=signature_path)
        return None

    def _check_manifest(self, artifact: Artifact, algorithm: str, manifest_path: Path) -> ManifestChain | None:
        text = manifest_path.read_text(encoding="utf-8", errors="replace")
        if artifact.base_name not in text:
            return None

        if not self.hash_verifier.verify(algorithm, manifest_path, artifact.path):
            logger.info("%s lists %s but the %s digest does not match", manifest_path.name, artifact.base_name, algorithm)
            return None

        for signature_path in manifest_signature_candidates(manifest_path):
            if signature_path.is_file():
                return ManifestChain(
                    manifest_path=manifest_path,
                    signature_path=signature_path,
                    algorithm=algorithm,
                )

        logger.warning("%s matches %s but has no .sig or .asc signature", manifest_path.name, artifact.base_name)
        return None
