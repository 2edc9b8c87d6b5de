"""Segmentation of a position trace into flight legs."""

from __future__ import annotations

import logging
from typing import Iterable

from flights.errors import InvariantError
from flights.models import Flying, Grounded, Leg, is_flying

logger = logging.getLogger("flights.services.legs")


def legs(
    positions: Iterable[Grounded | Flying], *, allow_unterminated: bool = False
) -> list[Leg]:
    """Split a chronologically sorted trace into legs.

    A leg opens on a grounded-to-flying transition and closes on the next
    flying-to-grounded transition. A trace that starts airborne opens its
    first leg at the first sample; a trace that ends airborne extends its
    last leg to the final sample.

    A non-empty trace without any leg means the aircraft was airborne for the
    whole window (or never moved). That raises ``InvariantError`` unless
    ``allow_unterminated`` is set, in which case an airborne-only trace yields
    a single leg spanning the window and a grounded-only trace yields none.
    """

    iterator = iter(positions)
    try:
        first = next(iterator)
    except StopIteration:
        return []

    previous = first
    result: list[Leg] = []
    for current in iterator:
        was_flying, now_flying = is_flying(previous), is_flying(current)
        if not was_flying and now_flying:
            # "to" is a placeholder until the landing is observed
            result.append(Leg(from_=previous, to=previous))
        elif was_flying and not now_flying:
            if result:
                result[-1].to = current
            else:
                result.append(Leg(from_=first, to=current))
        previous = current

    if not result:
        if not allow_unterminated:
            raise InvariantError(
                "Trace produced no legs; aircraft never changed vertical state"
            )
        if is_flying(first):
            logger.warning("Trace airborne for the whole window; using an open leg")
            return [Leg(from_=first, to=previous)]
        return []

    if is_flying(previous):
        result[-1].to = previous

    return result


__all__ = ["legs"]
