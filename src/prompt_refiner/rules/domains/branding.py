"""
Branding and marketing rule set.
"""

import re

from ...models.enums import PromptDomain, RuleCategory
from ...models.refinement import Example
from ..base import DomainRule, DomainRuleSet, EnhancementRule, bullet_block, regex

D = PromptDomain.BRANDING
VAGUE = RuleCategory.VAGUE_TERMS
STRUCTURE = RuleCategory.STRUCTURE
CONTEXT = RuleCategory.CONTEXT


RULES = [
    # Vague terms
    DomainRule("branding_nice_brand", D, regex(r"\bbonit[oa]s?\s+(marca|brand)\b"),
               "compelling and memorable brand identity", VAGUE,
               "Describe the brand by its effect instead of its looks", priority=9),
    DomainRule("branding_good_copy", D, regex(r"\bbuen[oa]s?\s+(copy|texto)\b"),
               "engaging, conversion-focused copy", VAGUE,
               "Tie copy quality to conversion", priority=8),
    DomainRule("branding_nice_logo", D, regex(r"\bnice\s+(logo|design)\b"),
               "professional, brand-aligned visual identity", VAGUE,
               "Replace 'nice' with brand alignment", priority=8),
    DomainRule("branding_attract", D, regex(r"\battract\s+(people|customers)\b"),
               "engage target audience and drive conversion", VAGUE,
               "Name the audience and the desired outcome", priority=7),
    DomainRule("branding_viral", D, regex(r"\b(viral|popular)\b"),
               "shareable and engaging", VAGUE,
               "Replace hype words with measurable qualities", priority=6),
    DomainRule("branding_catchy_slogan", D, regex(r"\bcatchy\s+slogan\b"),
               "memorable slogan that reinforces brand values", VAGUE,
               "Anchor the slogan to brand values", priority=6),

    # Structure
    DomainRule("branding_create_opener", D, regex(r"^(make|create|design)\s+(a\s+|an\s+)?(brand|logo|campaign)(\s+for)?\b"),
               "Develop a comprehensive brand strategy for", STRUCTURE,
               "Reframe a deliverable request as a strategy task", priority=9),
    DomainRule("branding_need_opener", D, regex(r"^(need|want|require)\s+(some\s+)?(marketing|branding)(\s+for)?\b"),
               "Seeking strategic marketing consultation for", STRUCTURE,
               "Reframe a need statement as a consultation request", priority=9),
    DomainRule("branding_sell_more", D, regex(r"\bsell\s+more(\s+(products|stuff))?\b"),
               "increase conversion rates and customer engagement", STRUCTURE,
               "Express sales goals as conversion metrics", priority=6),
    DomainRule("branding_get_famous", D, regex(r"\bget\s+(famous|known)\b"),
               "build brand awareness and market recognition", STRUCTURE,
               "Express fame as awareness", priority=6),

    # Enhancement blocks
    EnhancementRule("branding_audience", D, regex(r"\b(brand|marketing|campaign)"),
                    bullet_block("Target Audience Considerations:", [
                        "Define primary and secondary audience segments",
                        "Describe demographics, psychographics and pain points",
                        "Map the customer journey stages to address",
                        "State how the audience should perceive the brand",
                    ]),
                    "Add audience framework", guard=regex(r"\b(audience|target|demographic)")),
    EnhancementRule("branding_voice", D, regex(r"\b(brand|messaging|copy)\b"),
                    bullet_block("Brand Voice Guidelines:", [
                        "Describe the brand personality in three adjectives",
                        "Set the tone for each communication channel",
                        "List vocabulary to use and to avoid",
                        "Keep the voice consistent across touchpoints",
                    ]),
                    "Add brand voice guidelines", guard=regex(r"\b(voice|tone|personality)\b")),
    EnhancementRule("branding_positioning", D, regex(r"\b(brand|product|launch)"),
                    bullet_block("Competitive Positioning:", [
                        "Identify the main competitors and their positioning",
                        "State the unique value proposition",
                        "Explain the key differentiators",
                        "Define the desired market position",
                    ]),
                    "Add competitive positioning", guard=regex(r"\b(competitor|differentiat|position)")),
    EnhancementRule("branding_objectives", D, regex(r"\b(campaign|marketing)\b"),
                    bullet_block("Campaign Objectives:", [
                        "Set SMART goals for the campaign",
                        "Define the KPIs used to measure success",
                        "State the budget and timeline constraints",
                        "Describe the expected return on investment",
                    ]),
                    "Add measurable objectives", guard=regex(r"\b(objective|goal|metric|kpi)")),
    EnhancementRule("branding_channels", D, regex(r"\b(marketing|campaign|content)\b"),
                    bullet_block("Channel Strategy:", [
                        "Select the channels where the audience is most active",
                        "Adapt content formats to each platform",
                        "Plan publishing frequency and timing",
                        "Coordinate paid, owned and earned media",
                    ]),
                    "Add channel strategy", guard=regex(r"\b(channel|platform|distribution)")),
    EnhancementRule("branding_guidelines", D, regex(r"\b(brand|visual|design)"),
                    bullet_block("Brand Guidelines:", [
                        "Specify logo usage and clear space rules",
                        "Define the color palette and typography",
                        "Describe imagery and illustration style",
                        "Document do and don't examples for consistency",
                    ]),
                    "Add brand guideline checklist", guard=regex(r"\b(guideline|standard|consistency)")),

    # Industry specifics
    EnhancementRule("branding_industry_tech", D, regex(r"\b(tech|technology|software|startup|saas)\b"),
                    bullet_block("TECH Industry Considerations:", [
                        "Target Audience: early adopters, developers and technology decision makers",
                        "Brand Tone: innovative, clear and credible",
                        "Key Messaging: product capabilities, reliability and integration",
                    ]),
                    "Add technology industry context", category=CONTEXT),
    EnhancementRule("branding_industry_health", D, regex(r"\b(health|healthcare|medical|wellness|clinic)\b"),
                    bullet_block("HEALTH Industry Considerations:", [
                        "Target Audience: patients, caregivers and healthcare professionals",
                        "Brand Tone: trustworthy, empathetic and reassuring",
                        "Key Messaging: safety, evidence-based outcomes and compliance",
                    ]),
                    "Add healthcare industry context", category=CONTEXT),
    EnhancementRule("branding_industry_luxury", D, regex(r"\b(luxury|premium|exclusive|high-end)\b"),
                    bullet_block("LUXURY Industry Considerations:", [
                        "Target Audience: affluent consumers who value exclusivity",
                        "Brand Tone: refined, sophisticated and understated",
                        "Key Messaging: craftsmanship, heritage and scarcity",
                    ]),
                    "Add luxury industry context", category=CONTEXT),
]


SYSTEM_PROMPT = (
    "You are a senior brand strategist and creative director with extensive "
    "experience building memorable brands, positioning products in competitive "
    "markets and running multichannel marketing campaigns. Ground every "
    "recommendation in the target audience, measurable objectives and a "
    "consistent brand voice."
)

COMPLEXITY_NOTE = (
    "Note: This is a complex branding request. Structure the answer into strategy, "
    "creative direction and execution phases."
)

EXAMPLES = [
    Example(
        title="Vague brand request",
        before="create brand for my coffee shop, something viral",
        after=(
            "Develop a comprehensive brand strategy for my coffee shop, something shareable "
            "and engaging.\n\nTarget Audience Considerations:\n- Define primary and secondary "
            "audience segments"
        ),
        explanation="Turns a deliverable into a strategy brief and adds an audience framework.",
    ),
    Example(
        title="Sales goal",
        before="need marketing for my bakery to sell more products",
        after=(
            "Seeking strategic marketing consultation for my bakery to increase conversion rates "
            "and customer engagement.\n\nCampaign Objectives:\n- Set SMART goals for the campaign"
        ),
        explanation="Expresses the sales goal as conversion metrics and asks for KPIs.",
    ),
]

BRANDING_RULES = DomainRuleSet(
    domain=D,
    description="Brand identity, marketing campaigns, copywriting and positioning",
    rules=RULES,
    weights={"clarity": 0.25, "specificity": 0.3, "structure": 0.25, "completeness": 0.2},
    system_prompt=SYSTEM_PROMPT,
    complexity_note=COMPLEXITY_NOTE,
    focus_terms=frozenset({"seo", "social", "instagram", "tiktok", "linkedin", "ads"}),
    focus_clause=(
        "Digital Focus: Include channel-specific recommendations and the metrics "
        "used to evaluate each channel."
    ),
    examples=EXAMPLES,
    detection_patterns=[
        re.compile(r"\b(brand|identity|logo|visual)", re.IGNORECASE),
        re.compile(r"\b(campaign|marketing|promotion|advertising)\b", re.IGNORECASE),
        re.compile(r"\b(content|copy|messaging|communication)\b", re.IGNORECASE),
        re.compile(r"\b(audience|target|customer|demographic)", re.IGNORECASE),
    ],
)
