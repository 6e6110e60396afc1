"""Persona conditioning prompts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .models import Persona, ProductContext


@dataclass(frozen=True, slots=True)
class ResponseStyle:
    tone: str
    length: str
    example_phrases: List[str] = field(default_factory=list)


DEFAULT_STYLE = ResponseStyle(tone="natural and conversational", length="1-3 sentences")

PERSONALITY_STYLES: Dict[str, ResponseStyle] = {
    "Analytical and detail-oriented": ResponseStyle(
        tone="logical, precise, and thorough",
        length="2-3 sentences with specific details",
        example_phrases=[
            "The main factor here is...",
            "Specifically, I noticed that...",
            "Comparing the options...",
        ],
    ),
    "Creative and imaginative": ResponseStyle(
        tone="expressive, colorful, and original",
        length="2-3 sentences",
        example_phrases=[
            "What really stands out is...",
            "It's refreshing to see...",
            "This feels like...",
        ],
    ),
    "Practical and grounded": ResponseStyle(
        tone="direct, no-nonsense, and utilitarian",
        length="1-2 short sentences",
        example_phrases=["Works well.", "Gets the job done.", "Good value for money."],
    ),
    "Outgoing and energetic": ResponseStyle(
        tone="enthusiastic, warm, and engaging",
        length="2-3 sentences",
        example_phrases=[
            "I love how...",
            "My friends and I always...",
            "This is exactly what...",
        ],
    ),
    "Reserved and thoughtful": ResponseStyle(
        tone="measured, reflective, and considered",
        length="1-2 sentences",
        example_phrases=[
            "In my experience...",
            "I tend to prefer...",
            "After some thought...",
        ],
    ),
    "Optimistic and enthusiastic": ResponseStyle(
        tone="positive, hopeful, and appreciative",
        length="2-3 sentences",
        example_phrases=[
            "I really appreciate...",
            "The great thing is...",
            "It's wonderful that...",
        ],
    ),
    "Cautious and risk-averse": ResponseStyle(
        tone="careful, questioning, and hedged",
        length="2-3 sentences",
        example_phrases=[
            "I'm not entirely sure...",
            "It seems okay, but...",
            "I'd want to know more about...",
        ],
    ),
    "Spontaneous and adventurous": ResponseStyle(
        tone="casual, bold, and open",
        length="1-2 sentences",
        example_phrases=["Why not?", "I'd try it.", "Sounds fun to me."],
    ),
    "Organized and methodical": ResponseStyle(
        tone="structured, systematic, and clear",
        length="2-3 sentences",
        example_phrases=[
            "First of all...",
            "The key points are...",
            "To summarize...",
        ],
    ),
    "Flexible and adaptable": ResponseStyle(
        tone="balanced, open-minded, and moderate",
        length="2-3 sentences",
        example_phrases=[
            "It depends on...",
            "I can see both sides...",
            "Generally speaking...",
        ],
    ),
    "Ambitious and driven": ResponseStyle(
        tone="confident, goal-focused, and decisive",
        length="2-3 sentences",
        example_phrases=[
            "What matters most is...",
            "The bottom line is...",
            "I look for...",
        ],
    ),
    "Relaxed and easy-going": ResponseStyle(
        tone="laid-back, casual, and unbothered",
        length="1-2 short sentences",
        example_phrases=["It's fine.", "No complaints.", "Works for me."],
    ),
}


def get_response_style(personality: str) -> ResponseStyle:
    """Return the communication style for a personality, or the default."""

    return PERSONALITY_STYLES.get(personality, DEFAULT_STYLE)


def _profile_lines(persona: Persona) -> List[str]:
    demo = persona.demographics
    psycho = persona.psychographics
    ctx = persona.context

    lines = [
        "You are a survey respondent with the following characteristics:",
        "",
        "DEMOGRAPHICS:",
        f"- Age: {demo.age} years old",
        f"- Gender: {demo.gender}",
        f"- Location: {demo.location}",
        f"- Income level: {demo.income}",
        f"- Education: {demo.education}",
        f"- Occupation: {demo.occupation}",
        "",
        "PSYCHOGRAPHICS:",
        f"- Core values: {', '.join(psycho.values)}",
        f"- Lifestyle: {psycho.lifestyle}",
        f"- Interests: {', '.join(psycho.interests)}",
        f"- Personality: {psycho.personality}",
    ]

    context_lines: List[str] = []
    if ctx.industry:
        context_lines.append(f"- Industry: {ctx.industry}")
    if ctx.role:
        context_lines.append(f"- Role: {ctx.role}")
    if ctx.product_experience:
        context_lines.append(f"- Product Experience: {ctx.product_experience}")
    if ctx.brand_affinity:
        context_lines.append(f"- Brand preferences: {', '.join(ctx.brand_affinity)}")
    if context_lines:
        lines.extend(["", "CONTEXT:", *context_lines])
    return lines


def _product_lines(product: ProductContext) -> List[str]:
    lines = ["", "PRODUCT/SERVICE BEING EVALUATED:"]
    if product.brand_name:
        lines.append(f"- Brand: {product.brand_name}")
    if product.product_name:
        lines.append(f"- Product/Service: {product.product_name}")
    if product.industry:
        lines.append(f"- Industry: {product.industry}")
    if product.product_category:
        lines.append(f"- Category: {product.product_category}")
    if product.product_description:
        lines.append(f"- Description: {product.product_description}")
    return lines


def _guideline_lines(style: ResponseStyle) -> List[str]:
    lines = [
        "",
        "RESPONSE GUIDELINES:",
        f"Your communication style is {style.tone}. Keep responses {style.length}.",
        "",
        "CRITICAL - DO NOT:",
        '- Start with "As a [age]-year-old..." or "Being a [occupation]..."',
        "- Mention your age, gender, income, or location in responses",
        '- Use the phrase "As someone who..."',
        '- Give generic responses like "I think it\'s good/bad"',
        "- Repeat information from your profile - it's context, not content",
        "",
        "DO:",
        "- Answer directly as if someone asked you in casual conversation",
        "- Use specific details from your actual experience/perspective",
        "- Show your personality through word choice and tone, not self-description",
        "- It's fine to be brief, uncertain, or have mixed feelings",
    ]
    if style.example_phrases:
        phrases = '", "'.join(style.example_phrases)
        lines.append(f'- Example phrases that fit your style: "{phrases}"')
    return lines


def build_persona_prompt(
    persona: Persona, product_context: Optional[ProductContext] = None
) -> str:
    """Describe a persona as conditioning text for the generative backend.

    Optional context fields only appear when set, and the product block only
    when the product has a name or description.
    """

    lines = _profile_lines(persona)
    if product_context is not None and product_context.has_product():
        lines.extend(_product_lines(product_context))

    lines.extend(_guideline_lines(get_response_style(persona.psychographics.personality)))

    if product_context is not None and product_context.custom_context_instructions:
        lines.extend(
            ["", "ADDITIONAL CONTEXT:", product_context.custom_context_instructions]
        )
    return "\n".join(lines)


__all__ = [
    "DEFAULT_STYLE",
    "PERSONALITY_STYLES",
    "ResponseStyle",
    "build_persona_prompt",
    "get_response_style",
]
