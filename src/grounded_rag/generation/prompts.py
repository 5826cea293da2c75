"""Prompt template for grounded answering.

The wording is fixed configuration, not computed: one instruction line,
one line naming the exact phrase the model must use when the context is
insufficient, then the context block and the question, separated by
blank lines.
"""

from __future__ import annotations

DEFAULT_INSTRUCTION = "基于以下提供的上下文信息，请用中文简洁地回答用户的问题。"

FALLBACK_ANSWER = "根据我所掌握的资料，我无法回答这个问题"

FALLBACK_RULE = "如果上下文中没有足够的信息来回答，请明确说明“{fallback}”，不要尝试编造答案。"

PROMPT_TEMPLATE = """\
{instruction}
{fallback_rule}

上下文:
{context}

问题: {query}"""


def build_prompt(
    context: str,
    query: str,
    *,
    instruction: str = DEFAULT_INSTRUCTION,
    fallback: str = FALLBACK_ANSWER,
) -> str:
    """Render the grounding prompt sent to the generation service.

    An empty *context* is valid; the fallback rule is always present so
    the model states that it cannot answer instead of inventing one.
    """
    for name, value in (("context", context), ("query", query)):
        if not isinstance(value, str):
            raise TypeError(f"{name} must be str, got {type(value).__name__}")

    return PROMPT_TEMPLATE.format(
        instruction=instruction,
        fallback_rule=FALLBACK_RULE.format(fallback=fallback),
        context=context,
        query=query,
    )
