"""Holding classification.

Each raw holding is matched against an ordered rule list; the first rule for
the holding's account whose pattern is a substring of the fund name decides
whether it is kept and under which asset class. Holdings with no matching
rule are dropped.
"""

import json
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from folio.errors import ConfigInvalidError
from folio.models.fund import Account, AssetClass, RawHolding, StoredFund

logger = logging.getLogger(__name__)


class RuleAction(str, Enum):
    INCLUDE = "include"
    DROP = "drop"


@dataclass(frozen=True)
class ClassificationRule:
    account: Account
    pattern: str | None  # None matches any name
    asset_class: AssetClass | None
    action: RuleAction = RuleAction.INCLUDE

    def matches(self, account: Account, name: str) -> bool:
        if account != self.account:
            return False
        return self.pattern is None or self.pattern in name


DEFAULT_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(Account.EQUITY, None, AssetClass.EQUITY),
    ClassificationRule(Account.DEBT, "LIQUID FUND", AssetClass.DEBT),
    ClassificationRule(Account.DEBT, "GOLD ETF FUND", AssetClass.GOLD),
    ClassificationRule(Account.DEBT, None, None, RuleAction.DROP),
)


def classify(
    account: Account,
    holdings: Iterable[RawHolding],
    rules: Sequence[ClassificationRule] = DEFAULT_RULES,
) -> list[StoredFund]:
    funds = []
    for h in holdings:
        rule = next((r for r in rules if r.matches(account, h.fund)), None)
        if rule is None or rule.action is RuleAction.DROP:
            logger.debug(f"Dropping {h.fund!r} from {account.value} account")
            continue
        funds.append(
            StoredFund(
                asset_class=rule.asset_class,
                name=h.fund,
                symbol=h.tradingsymbol,
                quantity=h.quantity,
            )
        )
    return funds


def load_rules(path: Path) -> tuple[ClassificationRule, ...]:
    """Read an ordered rule list from a JSON file.

    Format: ``[{"account": "debt", "pattern": "LIQUID FUND",
    "class": "debt", "action": "include"}, ...]``. ``pattern`` and
    ``action`` are optional; ``class`` is required for include rules.
    """
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigInvalidError(f"cannot read rules file {path}: {e}") from e

    if not isinstance(raw, list):
        raise ConfigInvalidError(f"rules file {path} must contain a JSON list")

    rules = []
    for i, item in enumerate(raw):
        try:
            action = RuleAction(item.get("action", RuleAction.INCLUDE.value))
            asset_class = item.get("class")
            rule = ClassificationRule(
                account=Account(item["account"]),
                pattern=item.get("pattern"),
                asset_class=AssetClass(asset_class) if asset_class else None,
                action=action,
            )
        except (AttributeError, KeyError, ValueError) as e:
            raise ConfigInvalidError(f"invalid rule #{i} in {path}: {e}") from e
        if rule.pattern is not None and not isinstance(rule.pattern, str):
            raise ConfigInvalidError(f"rule #{i} in {path} has a non-string pattern")
        if rule.action is RuleAction.INCLUDE and rule.asset_class is None:
            raise ConfigInvalidError(f"rule #{i} in {path} includes without a class")
        rules.append(rule)

    logger.info(f"Loaded {len(rules)} classification rules from {path}")
    return tuple(rules)
