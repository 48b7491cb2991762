"""Services module - Business logic layer.

This module provides the main service class for the application:
- RosterService: Enrollment, k-NN star awards and undo over one roster

Submodules:
- audio: Clip decoding, MFCC extraction, clip capture
- voice: Vector helpers, fingerprint store, classifier, enrollment workflow
- session: Identity roster and undo history
- interfaces: Service interfaces
"""

from services.roster_service import RosterService

__all__ = [
    "RosterService",
]
