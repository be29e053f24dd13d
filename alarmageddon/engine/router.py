"""Alert router deciding whether and where an alert is delivered."""

from collections import Counter
from dataclasses import dataclass
from typing import Callable

from alarmageddon.core.config import Settings, get_settings
from alarmageddon.core.logging import get_logger
from alarmageddon.models.alert import Alert
from alarmageddon.models.routing import RoutingAction, RoutingDecision, RoutingStats
from alarmageddon.observability.metrics import ROUTING_DECISIONS
from alarmageddon.storage.routing_store import RoutingDecisionStore

logger = get_logger(__name__)

DEFAULT_REASON = "Default routing (no matching rules)"


@dataclass(frozen=True)
class RoutingRule:
    """Content based routing rule."""

    name: str
    action: RoutingAction
    destination: str | None
    reason: str
    predicate: Callable[[Alert], bool]

    def matches(self, alert: Alert) -> bool:
        return self.predicate(alert)


def is_database_alert(alert: Alert) -> bool:
    """Check whether an alert's service or title points at a database."""
    service = alert.field("service").lower()
    title = alert.field("title").lower()
    return service == "database" or "database" in title or "db" in title


def default_rules(settings: Settings) -> list[RoutingRule]:
    """Build the routing rules, highest priority first."""
    return [
        RoutingRule(
            name="database",
            action=RoutingAction.REDIRECT,
            destination=settings.db_channel_id or settings.default_channel_id or None,
            reason="Matched database routing rule",
            predicate=is_database_alert,
        ),
    ]


class AlertRouter:
    """Routes alerts to chat channels and keeps an audit log of decisions."""

    def __init__(
        self,
        store: RoutingDecisionStore,
        settings: Settings | None = None,
        rules: list[RoutingRule] | None = None,
    ):
        """Initialize router.

        Args:
            store: Routing decision storage
            settings: Application settings
            rules: Routing rules in priority order (defaults to default_rules)
        """
        self._store = store
        self._settings = settings or get_settings()
        self._rules = rules if rules is not None else default_rules(self._settings)
        self._default_destination = self._settings.default_channel_id or None

    def evaluate(self, alert: Alert) -> RoutingDecision:
        """Compute a routing decision without recording it.

        The first matching rule wins; otherwise the alert passes to the
        default channel.

        Args:
            alert: Alert to route

        Returns:
            Routing decision
        """
        for rule in self._rules:
            if rule.matches(alert):
                return RoutingDecision(
                    alert_id=alert.id,
                    action=rule.action,
                    destination=rule.destination if rule.action != RoutingAction.DROP else None,
                    reason=rule.reason,
                )

        return RoutingDecision(
            alert_id=alert.id,
            action=RoutingAction.PASS,
            destination=self._default_destination,
            reason=DEFAULT_REASON,
        )

    async def route(self, alert: Alert) -> RoutingDecision:
        """Route an alert and record the decision.

        Args:
            alert: Alert to route

        Returns:
            The recorded routing decision
        """
        decision = await self._store.save(self.evaluate(alert))
        ROUTING_DECISIONS.labels(action=decision.action.value).inc()

        logger.debug(
            "Routing decision made",
            alert_id=alert.id,
            action=decision.action.value,
            destination=decision.destination,
            reason=decision.reason,
            severity=alert.field("severity", "info"),
            title=alert.field("title", "Alert"),
        )
        return decision

    async def get_recent_decisions(self, limit: int | None = None) -> list[RoutingDecision]:
        """Get recent routing decisions, newest first."""
        return await self._store.list_recent(limit or self._settings.routing_history_limit)

    async def get_stats(self, limit: int | None = None) -> RoutingStats:
        """Count recent decisions by action and by destination."""
        decisions = await self.get_recent_decisions(limit)
        by_action = Counter(decision.action.value for decision in decisions)
        by_destination = Counter(decision.destination or "none" for decision in decisions)
        return RoutingStats(
            total_decisions=len(decisions),
            by_action=dict(by_action),
            by_destination=dict(by_destination),
        )
