"""Scheduler — drives the pipeline over a rotating set of instruments."""

from trading_agent.scheduler.scheduler import Scheduler, SchedulerState

__all__ = ["Scheduler", "SchedulerState"]
