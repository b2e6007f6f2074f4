"""Synchronous event bus and the events published by the population engine.

Handlers run immediately, in registration order, on the caller's thread.
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Type, TypeVar

if TYPE_CHECKING:
    from .models.allele import Allele, Gene
    from .models.bunny import Bunny, CauseOfDeath

T = TypeVar('T')


@dataclass(frozen=True)
class BunnyCreated:
    """A bunny was born (or created for generation zero)."""
    bunny: 'Bunny'


@dataclass(frozen=True)
class BunnyDied:
    """A live bunny died."""
    bunny: 'Bunny'
    cause: 'CauseOfDeath'


@dataclass(frozen=True)
class AllBunniesDied:
    """The last live bunny died."""
    dead_count: int


@dataclass(frozen=True)
class PopulationMaxed:
    """The live population reached the configured maximum."""
    live_count: int


@dataclass(frozen=True)
class MutationApplied:
    """Newborn bunnies received a scheduled mutation."""
    gene: 'Gene'
    dominant_allele: 'Allele'
    count: int  # number of bunnies that received it


class EventBus:
    """
    Synchronous publish/subscribe dispatch keyed by event type.
    
    Example:
        bus = EventBus()
        bus.subscribe(BunnyDied, lambda event: print(event.cause))
        bus.emit(BunnyDied(bunny=bunny, cause=CauseOfDeath.OLD_AGE))
    """
    
    def __init__(self) -> None:
        self._handlers: Dict[type, List[Callable]] = defaultdict(list)
    
    def emit(self, event: object) -> None:
        """Dispatch an event to every handler subscribed to its type."""
        handlers = self._handlers.get(type(event))
        if handlers:
            for handler in list(handlers):
                handler(event)
    
    def subscribe(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        self._handlers[event_type].append(handler)
    
    def unsubscribe(self, event_type: Type[T], handler: Callable[[T], None]) -> bool:
        """
        Remove a handler.
        
        Returns:
            True if the handler was registered and has been removed
        """
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)
            return True
        return False


class EventRecorder:
    """Collects every event of the given types, in order. Used by callers that poll."""
    
    def __init__(self, bus: EventBus, *event_types: type):
        self.events: List[object] = []
        for event_type in event_types:
            bus.subscribe(event_type, self.events.append)
    
    def of_type(self, event_type: Type[T]) -> List[T]:
        return [e for e in self.events if isinstance(e, event_type)]
    
    def last(self, event_type: Type[T]) -> Optional[T]:
        matching = self.of_type(event_type)
        return matching[-1] if matching else None
