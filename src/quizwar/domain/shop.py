"""Shop rules converting currency into troops, rations and officers."""

from __future__ import annotations

from dataclasses import dataclass

from .enums import SupplyKind
from .models import Officer, ResourceLedger
from .rules_config import DEFAULT_RULES, RulesConfig, SupplyOffer


@dataclass(frozen=True, slots=True)
class PurchaseResult:
    """Returned by every purchase attempt."""

    success: bool
    detail: str
    spent: int = 0


def find_offer(offer_id: str, *, rules: RulesConfig = DEFAULT_RULES) -> SupplyOffer:
    for offer in rules.economy.offers:
        if offer.id == offer_id:
            return offer
    raise ValueError(f"unknown supply offer '{offer_id}'")


def purchase_supplies(
    ledger: ResourceLedger,
    offer_id: str,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> PurchaseResult:
    """Buy one troop or ration bundle if the ledger can afford it."""

    offer = find_offer(offer_id, rules=rules)
    if not ledger.spend_currency(offer.price):
        return PurchaseResult(False, f"{offer.name} costs {offer.price} IP")

    if offer.kind is SupplyKind.TROOPS:
        ledger.add_troops(offer.amount)
    else:
        ledger.add_rations(offer.amount)
    return PurchaseResult(True, f"+{offer.amount} {offer.kind}", spent=offer.price)


def purchase_officer(ledger: ResourceLedger, officer: Officer) -> PurchaseResult:
    """Recruit an officer permanently.  Owned officers are never charged twice."""

    if ledger.has_officer(officer.id):
        return PurchaseResult(False, f"{officer.name} already serves you")
    if not ledger.spend_currency(officer.price):
        return PurchaseResult(False, f"{officer.name} costs {officer.price} IP")
    ledger.own_officer(officer.id)
    return PurchaseResult(True, f"{officer.name} joins your army", spent=officer.price)
