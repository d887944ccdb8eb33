"""dxbench - score how well an LLM agent can use a tool catalog."""

__version__ = "0.1.0"
