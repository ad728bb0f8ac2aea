"""Selects one device out of an already-fetched device list."""

import logging
from typing import Optional, Sequence

from ..core.exceptions import NoMatchingDeviceError
from .device import Device

logger = logging.getLogger(__name__)


def resolve_device(
    requested_id: Optional[str],
    devices: Sequence[Device],
    default_identifier: Optional[str] = None,
) -> Device:
    """Resolve ``requested_id`` (or the default) to exactly one device.

    Without ``requested_id`` the default identifier is matched against each
    device's instruments identifier. With it, either the UDID or the
    instruments identifier may match. Matching is exact; the first match in
    enumeration order wins, even when several devices would match.

    Raises:
        NoMatchingDeviceError: if nothing matches.
    """
    if requested_id is None:
        for device in devices:
            if default_identifier and device.instruments_identifier == default_identifier:
                logger.debug(f"Resolved default '{default_identifier}' to {device.udid}")
                return device
        raise NoMatchingDeviceError(
            "default", identifier=default_identifier, is_default=True
        )

    for device in devices:
        if requested_id in (device.udid, device.instruments_identifier):
            logger.debug(f"Resolved '{requested_id}' to {device.udid}")
            return device
    raise NoMatchingDeviceError(requested_id, identifier=requested_id)


def find_booted_device(devices: Sequence[Device]) -> Optional[Device]:
    """First booted device in enumeration order, or None."""
    for device in devices:
        if device.is_booted:
            return device
    return None
