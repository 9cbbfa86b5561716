"""Scenario driver for demo traffic."""

from .sim import SCENARIO, ISim, Sim

__all__ = ["SCENARIO", "ISim", "Sim"]
