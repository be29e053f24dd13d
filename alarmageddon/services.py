"""Service container wiring stores, engines and the chat client together."""

from dataclasses import dataclass

from redis.asyncio import Redis

from alarmageddon.core.config import Settings, get_settings
from alarmageddon.engine.acknowledgment import AcknowledgmentEngine
from alarmageddon.engine.lifecycle import AlertOrchestrator
from alarmageddon.engine.router import AlertRouter, RoutingRule
from alarmageddon.engine.silences import SilenceRegistry
from alarmageddon.notification.channels.base import ChatClient
from alarmageddon.storage.alert_store import AlertStore
from alarmageddon.storage.retention import RetentionSweeper
from alarmageddon.storage.routing_store import RoutingDecisionStore
from alarmageddon.storage.silence_store import SilenceStore


@dataclass
class Services:
    """Explicitly constructed services shared by request handlers."""

    settings: Settings
    chat: ChatClient
    alerts: AlertStore
    routing_store: RoutingDecisionStore
    silence_store: SilenceStore
    silences: SilenceRegistry
    router: AlertRouter
    orchestrator: AlertOrchestrator
    acknowledgments: AcknowledgmentEngine
    sweeper: RetentionSweeper


def build_services(
    redis: Redis,
    chat: ChatClient,
    settings: Settings | None = None,
    rules: list[RoutingRule] | None = None,
) -> Services:
    """Build the service graph.

    Args:
        redis: Redis client backing every store
        chat: Chat client used for delivery and message updates
        settings: Application settings
        rules: Routing rules overriding the defaults

    Returns:
        Service container
    """
    settings = settings or get_settings()

    alerts = AlertStore(redis)
    routing_store = RoutingDecisionStore(redis)
    silence_store = SilenceStore(redis)

    silences = SilenceRegistry(silence_store)
    router = AlertRouter(routing_store, settings, rules)

    return Services(
        settings=settings,
        chat=chat,
        alerts=alerts,
        routing_store=routing_store,
        silence_store=silence_store,
        silences=silences,
        router=router,
        orchestrator=AlertOrchestrator(alerts, silences, router, chat),
        acknowledgments=AcknowledgmentEngine(alerts, chat, settings),
        sweeper=RetentionSweeper(alerts, silence_store, routing_store, settings),
    )
