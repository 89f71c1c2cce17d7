"""Domain layer for tillbook application."""

__all__ = [
    "CounterService",
    "CarryForwardResolver",
    "DayEntryService",
    "SummaryService",
    "EntryActions",
]


# Services import the database layer, which imports domain entities, so
# they are resolved lazily to avoid circular imports.
def __getattr__(name):
    if name == "CounterService":
        from tillbook.domain.counter import CounterService
        return CounterService
    if name == "CarryForwardResolver":
        from tillbook.domain.carry_forward import CarryForwardResolver
        return CarryForwardResolver
    if name == "DayEntryService":
        from tillbook.domain.day_entry import DayEntryService
        return DayEntryService
    if name == "SummaryService":
        from tillbook.domain.summary import SummaryService
        return SummaryService
    if name == "EntryActions":
        from tillbook.domain.actions import EntryActions
        return EntryActions
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
