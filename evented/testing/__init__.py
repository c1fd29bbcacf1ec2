from .event_scenario import EventScenario

__all__ = [
    "EventScenario",
]
