"""agentloop - bounded ReAct control loop over pluggable capabilities."""

__version__ = "0.2.0"
