"""Named easing curves.

Identifiers follow the "family.variant" convention used by keyframe data
(e.g. "power2.inOut", "bounce.out"). A bare family name means ".out";
"none" and "linear" are the identity curve.
"""
from __future__ import annotations

import logging
import math
from typing import Callable, Dict, List, Optional

from choreo.config import runtime_config

logger = logging.getLogger(__name__)

EaseFn = Callable[[float], float]

_BACK_OVERSHOOT = 1.70158
_ELASTIC_PERIOD = (2 * math.pi) / 3


def _power_out(power: int) -> EaseFn:
    return lambda p: 1 - (1 - p) ** power


def _sine_out(p: float) -> float:
    return math.sin(p * math.pi / 2)


def _expo_out(p: float) -> float:
    return 1.0 if p >= 1 else 1 - 2 ** (-10 * p)


def _circ_out(p: float) -> float:
    return math.sqrt(1 - (p - 1) ** 2)


def _back_out(p: float) -> float:
    c3 = _BACK_OVERSHOOT + 1
    return 1 + c3 * (p - 1) ** 3 + _BACK_OVERSHOOT * (p - 1) ** 2


def _elastic_out(p: float) -> float:
    if p <= 0:
        return 0.0
    if p >= 1:
        return 1.0
    return 2 ** (-10 * p) * math.sin((p * 10 - 0.75) * _ELASTIC_PERIOD) + 1


def _bounce_out(p: float) -> float:
    n1, d1 = 7.5625, 2.75
    if p < 1 / d1:
        return n1 * p * p
    if p < 2 / d1:
        p -= 1.5 / d1
        return n1 * p * p + 0.75
    if p < 2.5 / d1:
        p -= 2.25 / d1
        return n1 * p * p + 0.9375
    p -= 2.625 / d1
    return n1 * p * p + 0.984375


def _mirror_in(out: EaseFn) -> EaseFn:
    return lambda p: 1 - out(1 - p)


def _mirror_in_out(out: EaseFn) -> EaseFn:
    def ease(p: float) -> float:
        if p < 0.5:
            return (1 - out(1 - 2 * p)) / 2
        return (1 + out(2 * p - 1)) / 2
    return ease


def linear(p: float) -> float:
    return p


_OUT_CURVES: Dict[str, EaseFn] = {
    "power1": _power_out(2),
    "power2": _power_out(3),
    "power3": _power_out(4),
    "power4": _power_out(5),
    "sine": _sine_out,
    "expo": _expo_out,
    "circ": _circ_out,
    "back": _back_out,
    "elastic": _elastic_out,
    "bounce": _bounce_out,
}

_FAMILY_ALIASES = {
    "quad": "power1",
    "cubic": "power2",
    "quart": "power3",
    "quint": "power4",
    "strong": "power4",
}


def _build_registry() -> Dict[str, EaseFn]:
    registry: Dict[str, EaseFn] = {"none": linear, "linear": linear, "power0": linear}
    for variant in ("in", "out", "inOut"):
        registry[f"power0.{variant}"] = linear
    for family, out in _OUT_CURVES.items():
        registry[family] = out
        registry[f"{family}.out"] = out
        registry[f"{family}.in"] = _mirror_in(out)
        registry[f"{family}.inOut"] = _mirror_in_out(out)
    for alias, family in _FAMILY_ALIASES.items():
        for suffix in ("", ".in", ".out", ".inOut"):
            registry[f"{alias}{suffix}"] = registry[f"{family}{suffix}"]
    return registry


EASES: Dict[str, EaseFn] = _build_registry()


def ease_names() -> List[str]:
    return sorted(EASES)


def get_ease(name: Optional[str]) -> Optional[EaseFn]:
    if not name:
        return None
    return EASES.get(name)


def resolve_ease(name: Optional[str]) -> EaseFn:
    """Look up a curve, falling back to the configured default for unknown names."""
    ease = get_ease(name)
    if ease is not None:
        return ease
    default_name = runtime_config.get_default_ease()
    if name:
        logger.warning("Unknown easing %r; using %s", name, default_name)
    return EASES.get(default_name, EASES["power2.inOut"])
