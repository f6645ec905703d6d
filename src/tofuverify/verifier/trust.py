"""Per-package Trust-On-First-Use keyrings

Each package gets its own gpg home directory under the trust root. The first
verification of a package creates that directory and lets gpg fetch and
trust whatever key signed the artifact. From then on, gpg may only use the
keys already in that keyring. Store directories are never deleted or reset.
"""

import contextlib
import fcntl
import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from tofuverify.data.models import TrustPolicy, TrustState
from tofuverify.errors import TrustBootstrapIOFailure
from tofuverify.utils.logging import get_logger

logger = get_logger(__name__)

STORE_MODE = 0o700
PENDING_MARKER = ".bootstrap-pending"
FAILED_BOOTSTRAP_POLICIES = ("pin", "retry")


def list_packages(trust_root: Path | str) -> list[str]:
    """Package ids that have a trust store under the root"""
    trust_root = Path(trust_root).expanduser()
    if not trust_root.is_dir():
        return []
    return sorted(path.name for path in trust_root.iterdir() if path.is_dir())


@dataclass(frozen=True)
class TrustStore:
    """The keyring directory trusted for one package"""

    trust_root: Path
    package_id: str
    on_failed_bootstrap: str = "pin"

    @classmethod
    def open(cls, trust_root: Path | str, package_id: str, on_failed_bootstrap: str = "pin") -> "TrustStore":
        if on_failed_bootstrap not in FAILED_BOOTSTRAP_POLICIES:
            raise ValueError(f"Unknown failed-bootstrap policy: {on_failed_bootstrap}")
        return cls(Path(trust_root).expanduser(), package_id, on_failed_bootstrap)

    @property
    def store_directory(self) -> Path:
        return self.trust_root / self.package_id

    @property
    def lock_path(self) -> Path:
        return self.trust_root / f"{self.package_id}.lock"

    @property
    def state(self) -> TrustState:
        if not self.store_directory.is_dir():
            return TrustState.ABSENT
        if (self.store_directory / PENDING_MARKER).exists():
            return TrustState.PENDING
        return TrustState.BOOTSTRAPPED

    @contextlib.contextmanager
    def session(self) -> Iterator[TrustPolicy]:
        """Hold the package lock and yield the policy for this verification

        Creating the store directory is the bootstrap: it happens before gpg
        runs, so under the ``pin`` policy even a failed first verification
        leaves the package pinned.
        """
        try:
            self.trust_root.mkdir(mode=STORE_MODE, parents=True, exist_ok=True)
            lock_file = open(self.lock_path, "a")
        except OSError as e:
            raise TrustBootstrapIOFailure(f"Cannot open trust root {self.trust_root}: {e}") from e

        with lock_file:
            try:
                fcntl.flock(lock_file, fcntl.LOCK_EX)
            except OSError as e:
                raise TrustBootstrapIOFailure(f"Cannot lock {self.lock_path}: {e}") from e
            try:
                yield self._select_policy()
            finally:
                fcntl.flock(lock_file, fcntl.LOCK_UN)

    def _select_policy(self) -> TrustPolicy:
        if self._create_if_absent():
            logger.warning(
                "First verification for package %r: the signing key will be fetched and trusted automatically",
                self.package_id,
            )
            return TrustPolicy.AUTO_KEY_RETRIEVE

        if self.state is TrustState.PENDING:
            logger.warning("Previous bootstrap of %r did not verify; retrying key retrieval", self.package_id)
            return TrustPolicy.AUTO_KEY_RETRIEVE

        logger.info("Package %r is pinned to the keys in %s", self.package_id, self.store_directory)
        return TrustPolicy.ALWAYS_TRUST_PINNED

    def _create_if_absent(self) -> bool:
        """Atomically create the store directory; False if it already existed"""
        try:
            os.mkdir(self.store_directory, STORE_MODE)
        except FileExistsError:
            if not self.store_directory.is_dir():
                raise TrustBootstrapIOFailure(f"{self.store_directory} exists and is not a directory")
            return False
        except OSError as e:
            raise TrustBootstrapIOFailure(f"Cannot create trust store {self.store_directory}: {e}") from e

        try:
            # mkdir's mode is filtered by the umask
            os.chmod(self.store_directory, STORE_MODE)
            if self.on_failed_bootstrap == "retry":
                (self.store_directory / PENDING_MARKER).touch()
        except OSError as e:
            raise TrustBootstrapIOFailure(f"Cannot prepare trust store {self.store_directory}: {e}") from e
        return True

    def record_outcome(self, verified: bool) -> None:
        """Settle a pending bootstrap once a verification has succeeded"""
        marker = self.store_directory / PENDING_MARKER
        if verified and marker.exists():
            try:
                marker.unlink()
            except OSError as e:
                raise TrustBootstrapIOFailure(f"Cannot finalise trust store {self.store_directory}: {e}") from e
            logger.info("Package %r is now pinned", self.package_id)
