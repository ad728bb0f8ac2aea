"""
Install reconciliation.

Decides, for one validated app and one resolved device, whether to skip,
install, or uninstall-then-install, and drives the bridge accordingly.

The uninstall-then-install pair is not atomic. If the process is interrupted
between the two calls the app is left uninstalled; nothing restores the
previous installation.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..bundles.app import App
from ..bundles.digest import directory_digest
from ..core.logging import ProcessingTimer, get_logger, set_request_context
from ..core.protocols import DigestProvider, InstallBridge
from ..devices.device import Device

logger = get_logger(__name__)


class InstallOutcome(Enum):
    """What a reconciliation did."""

    INSTALLED_FRESH = "installed-fresh"
    REINSTALLED_FORCED = "reinstalled-forced"
    SKIPPED_UP_TO_DATE = "skipped-up-to-date"
    REINSTALLED_STALE = "reinstalled-stale"


@dataclass(frozen=True)
class InstallResult:
    """Outcome of one reconciliation plus timing and the digests compared."""

    outcome: InstallOutcome
    duration_s: float
    local_digest: Optional[str] = None
    installed_digest: Optional[str] = None

    @property
    def changed(self) -> bool:
        return self.outcome is not InstallOutcome.SKIPPED_UP_TO_DATE


class InstallReconciler:
    """Brings the app installed on a device in line with a local bundle."""

    def __init__(
        self,
        digest: DigestProvider = directory_digest,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.digest = digest
        self.clock = clock

    def reconcile(
        self,
        app: App,
        device: Device,
        bridge: InstallBridge,
        force_reinstall: bool = False,
    ) -> InstallResult:
        """Skip, install, or reinstall ``app`` on ``device`` through ``bridge``.

        Errors from the bridge or the digest provider propagate unchanged. A
        failure while fetching the installed copy happens before any
        destructive call.
        """
        start = self.clock()
        bundle_id = app.bundle_identifier
        set_request_context(device_id=device.udid, bundle_id=bundle_id)

        if not bridge.is_installed(bundle_id):
            bridge.install(app)
            return self._finish(InstallOutcome.INSTALLED_FRESH, start)

        logger.debug("App is already installed")

        if force_reinstall:
            logger.debug("Forcing a re-install")
            bridge.uninstall(bundle_id)
            bridge.install(app)
            return self._finish(InstallOutcome.REINSTALLED_FORCED, start)

        with ProcessingTimer(logger, "digest", "reconciler", side="local"):
            local_digest = self.digest(app.path)
        logger.debug("Local bundle digest", digest=local_digest)

        installed_copy = bridge.fetch_installed_bundle(bundle_id)
        with ProcessingTimer(logger, "digest", "reconciler", side="installed"):
            installed_digest = self.digest(installed_copy)
        logger.debug("Installed bundle digest", digest=installed_digest)

        if local_digest == installed_digest:
            logger.debug("Digests match, not re-installing")
            return self._finish(
                InstallOutcome.SKIPPED_UP_TO_DATE, start, local_digest, installed_digest
            )

        logger.debug("Digests differ, re-installing")
        bridge.uninstall(bundle_id)
        bridge.install(app)
        return self._finish(
            InstallOutcome.REINSTALLED_STALE, start, local_digest, installed_digest
        )

    def _finish(
        self,
        outcome: InstallOutcome,
        start: float,
        local_digest: Optional[str] = None,
        installed_digest: Optional[str] = None,
    ) -> InstallResult:
        duration_s = self.clock() - start
        logger.log_processing_step(
            "reconcile",
            "reconciler",
            duration_ms=duration_s * 1000,
            outcome=outcome.value,
        )
        return InstallResult(outcome, duration_s, local_digest, installed_digest)


def reconcile(
    app: App,
    device: Device,
    bridge: InstallBridge,
    force_reinstall: bool = False,
) -> InstallResult:
    """Reconcile with the default digest provider."""
    return InstallReconciler().reconcile(app, device, bridge, force_reinstall)
