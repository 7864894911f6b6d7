"""Sentinel values for optional configuration arguments.

Adapted from RLLib's _NotProvided:
https://github.com/ray-project/ray/rllib/utils/from_config.py#L261
"""

from __future__ import annotations


class _NotProvided:
    """Marks a builder argument the caller did not pass.

    ``None`` is a meaningful value for several settings (e.g. an unset
    host), so it cannot double as "leave unchanged".
    """

    class __NotProvided:
        pass

    instance = None

    def __init__(self):
        if _NotProvided.instance is None:
            _NotProvided.instance = _NotProvided.__NotProvided()

    def __repr__(self):
        return "NotProvided"


NotProvided = _NotProvided
