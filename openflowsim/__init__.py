"""Discrete-event model of OpenFlow switches, controllers, Kandoo agents and topology tools."""

__version__ = "0.1.0"