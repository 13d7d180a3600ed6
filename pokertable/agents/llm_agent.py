"""
LLM Agent: decisions from a remote OpenAI-compatible chat model.

The model is shown the seat's view of the table and asked for a JSON
object ``{"action": ..., "amount": ..., "reasoning": ...}``. Any transport
error or unparseable reply raises ``DecisionPolicyFailure`` so the table
falls back to its local policy; implausible but parseable replies are left
for the table to coerce.
"""

import json
import logging
from typing import Any, Optional

from openai import AsyncOpenAI, OpenAIError

from pokertable.agents.base import BaseAgent
from pokertable.config import DEFAULT_LLM_BASE_URL, DEFAULT_LLM_MODEL, TableConfig
from pokertable.core.errors import DecisionPolicyFailure
from pokertable.core.policy import Decision, parse_decision_action
from pokertable.core.rules import ACTION_LABELS, PHASE_LABELS
from pokertable.core.state import TableState


logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a poker AI assistant. Always respond with valid JSON only, "
    "no markdown or extra text."
)

PROMPT_TEMPLATE = """
You are playing Texas Hold'em Poker at a table with {table_size} players.
You are {name}.

Current Game State:
- Phase: {phase}
- Pot Size: {pot}
- Community Cards: {board}
- Your Hand: {hand}
- Your Chips: {stack}
- Cost to Call: {call_cost}
- Minimum Raise: {min_raise}
- Players Active: {active} / {table_size}
- Your Position: {position} of {active} active players

Opponent Summary (Active):
{opponents}

Decide your move:
1. FOLD: If chances are low or bet is too high.
2. CHECK: If cost to call is 0.
3. CALL: To match the highest bet.
4. RAISE: To increase the stakes (specify amount above the current bet).

Return ONLY a JSON object with this exact format, no other text:
{{"action": "FOLD|CHECK|CALL|RAISE", "amount": number_or_null, "reasoning": "brief explanation"}}
"""


def strip_code_fence(content: str) -> str:
    """Remove a markdown ``` / ```json wrapper around a reply."""
    text = content.strip()
    if text.startswith("```"):
        text = text[3:]
        if text.lower().startswith("json"):
            text = text[4:]
        if text.endswith("```"):
            text = text[:-3]
    return text.strip()


def parse_reply(content: Optional[str]) -> Decision:
    """
    Parse a model reply into a Decision.

    Raises:
        DecisionPolicyFailure: Empty reply, invalid JSON or not an object
    """
    if not content:
        raise DecisionPolicyFailure("Empty reply from model")

    try:
        data = json.loads(strip_code_fence(content))
    except json.JSONDecodeError as e:
        raise DecisionPolicyFailure(f"Reply is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise DecisionPolicyFailure(f"Reply is not a JSON object: {data!r}")

    amount: Any = data.get("amount")
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        amount = None
    elif amount != amount or amount in (float("inf"), float("-inf")):
        amount = None
    else:
        amount = int(amount)

    return Decision(
        action=parse_decision_action(data.get("action")),
        amount=amount,
        rationale=str(data.get("reasoning") or "Strategic play"),
    )


class LLMAgent(BaseAgent):
    """
    Agent backed by a chat-completion endpoint.

    Args:
        name: Optional name
        client: Preconfigured ``AsyncOpenAI`` client (built from the other
            arguments when omitted)
        api_key: API key; without one every decision fails over
        base_url: OpenAI-compatible endpoint
        model: Model name
        temperature: Sampling temperature
        max_tokens: Reply length limit
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        name: Optional[str] = None,
        client: Optional[AsyncOpenAI] = None,
        api_key: Optional[str] = None,
        base_url: str = DEFAULT_LLM_BASE_URL,
        model: str = DEFAULT_LLM_MODEL,
        temperature: float = 0.7,
        max_tokens: int = 200,
        timeout: float = 8.0,
    ):
        super().__init__(name)
        if client is None and api_key:
            client = AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout)
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    @classmethod
    def from_config(cls, config: TableConfig, name: Optional[str] = None) -> "LLMAgent":
        return cls(
            name=name,
            api_key=config.llm_api_key,
            base_url=config.llm_base_url,
            model=config.llm_model,
            temperature=config.llm_temperature,
            max_tokens=config.llm_max_tokens,
            timeout=config.decision_timeout,
        )

    def build_prompt(self, state: TableState, seat_id: str) -> str:
        """Describe the table from the seat's point of view."""
        seat = state.seat(seat_id)
        position, active = self.position(state, seat_id)

        opponents = []
        for other in state.seats_in_hand:
            if other.seat_id == seat_id:
                continue
            last = ACTION_LABELS[other.last_action] if other.last_action else "None"
            opponents.append(
                f"- {other.name}: Stack {other.stack}, Bet {other.current_bet}, Last Action: {last}"
            )

        return PROMPT_TEMPLATE.format(
            table_size=len(state.seats),
            name=seat.name,
            phase=PHASE_LABELS[state.phase],
            pot=state.pot,
            board=", ".join(c.short_str for c in state.community_cards) or "None",
            hand=", ".join(c.short_str for c in seat.hole_cards),
            stack=seat.stack,
            call_cost=self.call_cost(state, seat_id),
            min_raise=max(state.last_raise_size, state.min_bet),
            active=active,
            position=position,
            opponents="\n".join(opponents) or "- None",
        )

    async def decide(self, state: TableState, seat_id: str) -> Decision:
        if self.client is None:
            raise DecisionPolicyFailure("API key not configured")

        prompt = self.build_prompt(state, seat_id)
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except OpenAIError as e:
            raise DecisionPolicyFailure(f"Model request failed: {e}") from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError) as e:
            raise DecisionPolicyFailure(f"Malformed model response: {e}") from e

        decision = parse_reply(content)
        logger.debug(f"{self.name} decided {decision.action.value} for {seat_id}: {decision.rationale}")
        return decision
