"""Action registry with the built-in fight moves."""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from choreo.choreography.action import Action
from choreo.choreography.schemas import ActionData


def _kf(time, pose, easing):
    return {"time": time, "pose": pose, "easing": easing}


def _strike(name, duration, pose, peak, ease_in="power2.in", ease_peak="power3.out", category="attack"):
    """guard -> pose at peak -> guard, the shape shared by most single moves."""
    return ActionData(
        name=name,
        duration=duration,
        category=category,
        keyframes=[
            _kf(0, "guard", ease_in),
            _kf(peak, pose, ease_peak),
            _kf(1, "guard", "power2.inOut"),
        ],
    )


DEFAULT_ACTIONS: List[ActionData] = [
    # Attacks
    _strike("jab", 0.3, "punch_extend_left", 0.4, ease_peak="power2.out"),
    _strike("cross", 0.4, "punch_extend_right", 0.5),
    ActionData(name="hook", duration=0.45, category="attack", keyframes=[
        _kf(0, "guard", "power2.in"),
        _kf(0.25, "hook_windup_left", "power2.in"),
        _kf(0.6, "hook_extend_left", "power3.out"),
        _kf(1, "guard", "power2.inOut"),
    ]),
    ActionData(name="hook_right", duration=0.45, category="attack", keyframes=[
        _kf(0, "guard", "power2.in"),
        _kf(0.25, "hook_windup_right", "power2.in"),
        _kf(0.6, "hook_extend_right", "power3.out"),
        _kf(1, "guard", "power2.inOut"),
    ]),
    ActionData(name="uppercut", duration=0.5, category="attack", keyframes=[
        _kf(0, "guard", "power2.in"),
        _kf(0.3, "uppercut_windup_right", "power2.in"),
        _kf(0.6, "uppercut_extend_right", "power4.out"),
        _kf(1, "guard", "power2.inOut"),
    ]),
    _strike("front_kick", 0.5, "kick_extend_right", 0.4),
    ActionData(name="roundhouse", duration=0.6, category="attack", keyframes=[
        _kf(0, "guard", "power2.in"),
        _kf(0.25, "roundhouse_windup_right", "power2.in"),
        _kf(0.55, "roundhouse_extend_right", "power4.out"),
        _kf(1, "guard", "power2.inOut"),
    ]),
    # Defense
    _strike("block_high", 0.2, "block_high", 0.4, ease_in="power3.out", ease_peak="power2.out", category="defense"),
    _strike("block_low", 0.2, "block_low", 0.4, ease_in="power3.out", ease_peak="power2.out", category="defense"),
    _strike("parry", 0.25, "parry_left", 0.4, category="defense"),
    _strike("dodge_back", 0.35, "dodge_back", 0.4, category="defense"),
    _strike("dodge_left", 0.3, "dodge_left", 0.4, category="defense"),
    _strike("dodge_right", 0.3, "dodge_right", 0.4, category="defense"),
    # Reactions
    *[
        ActionData(name=name, duration=0.4, category="reaction", keyframes=[
            _kf(0, "guard", "power2.in"),
            _kf(0.3, name, "power2.out"),
            _kf(1, "guard", "power1.inOut"),
        ])
        for name in ("stagger_back", "stagger_left", "stagger_right")
    ],
    ActionData(name="knockdown", duration=0.8, category="reaction", keyframes=[
        _kf(0, "guard", "power2.in"),
        _kf(0.35, "knockdown_falling", "power2.in"),
        _kf(0.7, "knockdown_ground", "bounce.out"),
        _kf(1, "knockdown_ground", "none"),
    ]),
    ActionData(name="get_up", duration=0.7, category="reaction", keyframes=[
        _kf(0, "knockdown_ground", "power1.in"),
        _kf(0.5, "getup_crouch", "power2.inOut"),
        _kf(1, "guard", "power2.out"),
    ]),
    # Combos
    ActionData(name="one_two", duration=0.6, category="attack", keyframes=[
        _kf(0, "guard", "power2.in"),
        _kf(0.2, "punch_extend_left", "power2.out"),
        _kf(0.4, "guard", "power2.in"),
        _kf(0.7, "punch_extend_right", "power3.out"),
        _kf(1, "guard", "power2.inOut"),
    ]),
    ActionData(name="counter_hook", duration=0.35, category="attack", keyframes=[
        _kf(0, "parry_left", "power3.in"),
        _kf(0.5, "hook_extend_right", "power4.out"),
        _kf(1, "guard", "power2.inOut"),
    ]),
    # Transitions
    ActionData(name="ready", duration=0.3, category="transition", keyframes=[
        _kf(0, "idle", "power2.inOut"),
        _kf(1, "guard", "power2.out"),
    ]),
    ActionData(name="relax", duration=0.4, category="transition", keyframes=[
        _kf(0, "guard", "power1.inOut"),
        _kf(1, "idle", "power1.out"),
    ]),
]


class ActionLibrary:
    def __init__(self, actions: Optional[Iterable[Action]] = None):
        self._actions: Dict[str, Action] = {}
        for action in actions or []:
            self.add(action)

    @classmethod
    def with_defaults(cls) -> ActionLibrary:
        return cls(Action.from_data(data) for data in DEFAULT_ACTIONS)

    def add(self, action: Action) -> None:
        self._actions[action.name] = action

    def get(self, name: str) -> Optional[Action]:
        return self._actions.get(name)

    def has(self, name: str) -> bool:
        return name in self._actions

    def remove(self, name: str) -> bool:
        return self._actions.pop(name, None) is not None

    @property
    def names(self) -> List[str]:
        return list(self._actions.keys())

    def __len__(self) -> int:
        return len(self._actions)

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def get_by_category(self, category: str) -> List[Action]:
        return [action for action in self._actions.values() if action.category == category]

    def categories(self) -> List[str]:
        seen: List[str] = []
        for action in self._actions.values():
            if action.category not in seen:
                seen.append(action.category)
        return seen

    def load_from_data(self, data: Iterable[ActionData]) -> None:
        for action_data in data:
            self.add(Action.from_data(ActionData.model_validate(action_data)))

    def to_data(self) -> List[ActionData]:
        return [action.to_data() for action in self._actions.values()]


_default_library: Optional[ActionLibrary] = None


def get_action_library() -> ActionLibrary:
    global _default_library
    if _default_library is None:
        _default_library = ActionLibrary.with_defaults()
    return _default_library


def set_action_library(library: Optional[ActionLibrary]) -> None:
    global _default_library
    _default_library = library
