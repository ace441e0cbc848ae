"""Shared-secret check in front of the kitchen display."""

from __future__ import annotations

import hmac
import logging

logger = logging.getLogger(__name__)


class StaffGate:
    def __init__(self, secret: str) -> None:
        self._secret = secret

    def admit(self, candidate: str) -> bool:
        if not self._secret:
            logger.warning("staff_gate_denied reason=no_secret_configured")
            return False
        admitted = hmac.compare_digest(candidate.encode("utf-8"), self._secret.encode("utf-8"))
        if not admitted:
            logger.warning("staff_gate_denied reason=wrong_secret")
        return admitted
