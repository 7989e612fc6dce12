"""PlanIt: Notion task database -> flat task list."""

__version__ = "0.1.0"
