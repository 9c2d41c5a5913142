from bursar_core.events.domain_events import DomainEvents, domain_events
from bursar_core.events.signal import Signal

__all__ = ["Signal", "DomainEvents", "domain_events"]
