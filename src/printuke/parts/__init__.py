"""Instrument parts, each a pure function of :class:`~printuke.params.InstrumentParams`."""

from __future__ import annotations

from .accessories import bridge_height, make_bridge, make_nut, make_tailpiece, nut_height
from .body import body_min_wall, body_outline, body_registration, make_body, split_body, validate_sound_hole
from .fingerboard import fingerboard_registration, make_fingerboard, split_fingerboard
from .hardware import RegistrationFeature
from .neck import make_neck, neck_envelope, neck_registration, split_neck, validate_truss_rod

__all__ = [
    "RegistrationFeature",
    "body_min_wall",
    "body_outline",
    "body_registration",
    "bridge_height",
    "fingerboard_registration",
    "make_body",
    "make_bridge",
    "make_fingerboard",
    "make_neck",
    "make_nut",
    "make_tailpiece",
    "neck_envelope",
    "neck_registration",
    "nut_height",
    "split_body",
    "split_fingerboard",
    "split_neck",
    "validate_sound_hole",
    "validate_truss_rod",
]
