"""
pokertable Agents - decision policies for automated seats

This module provides the base agent interface, the local fallback agents
and the remote chat-model agent.
"""

from pokertable.agents.base import BaseAgent
from pokertable.agents.heuristic_agent import CallAgent, HeuristicAgent
from pokertable.agents.llm_agent import LLMAgent

__all__ = ["BaseAgent", "HeuristicAgent", "CallAgent", "LLMAgent"]
