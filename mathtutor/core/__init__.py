"""Core pipeline: providers, gateway, agents, oracle and orchestration."""
