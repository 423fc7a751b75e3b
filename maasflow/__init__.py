"""maas-flow: drive MAAS nodes through their lifecycle toward a target state."""
__version__ = "0.1.0"
