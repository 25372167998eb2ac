"""Domain model for quizwar.

This package hosts every game rule.  It exposes:

* Dataclasses describing the game entities (see :mod:`models`).
* Enumerations and strongly-typed identifiers used across the rules layer.
* Rule configuration objects (see :mod:`rules_config`).
* The static officer and stage catalogs (see :mod:`catalog`).
* Pure rule functions for quizzes, battles and the shop.

Everything operates in memory on a :class:`models.ResourceLedger` passed in
by the caller.
"""

from . import battle, catalog, enums, models, quiz, rules_config, shop

__all__ = [
    "battle",
    "catalog",
    "enums",
    "models",
    "quiz",
    "rules_config",
    "shop",
]
