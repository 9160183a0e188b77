"""
SaaS product rule set.
"""

import re

from ...models.enums import PromptDomain, RuleCategory
from ...models.refinement import Example
from ..base import DomainRule, DomainRuleSet, EnhancementRule, bullet_block, regex

D = PromptDomain.SAAS
VAGUE = RuleCategory.VAGUE_TERMS
STRUCTURE = RuleCategory.STRUCTURE
CONTEXT = RuleCategory.CONTEXT


RULES = [
    # Vague terms
    DomainRule("saas_nice_app", D, regex(r"\bbonit[oa]s?\s+(app|aplicaci[oó]n)\b"),
               "intuitive, user-friendly application", VAGUE,
               "Describe the app by usability", priority=9),
    DomainRule("saas_good_feature", D, regex(r"\bbuen[oa]s?\s+(feature|funcionalidad)\b"),
               "high-value feature that solves a core user problem", VAGUE,
               "Tie the feature to user value", priority=8),
    DomainRule("saas_cool_dashboard", D, regex(r"\bcool\s+dashboard\b"),
               "actionable analytics dashboard with key metrics", VAGUE,
               "Describe the dashboard by the decisions it supports", priority=8),
    DomainRule("saas_easy_interface", D, regex(r"\beasy\s+(interface|ui)\b"),
               "intuitive interface with minimal learning curve", VAGUE,
               "Define ease of use", priority=7),
    DomainRule("saas_simple_workflow", D, regex(r"\bsimple\s+workflow\b"),
               "streamlined workflow with minimal steps", VAGUE,
               "Define simplicity by number of steps", priority=7),
    DomainRule("saas_powerful_tool", D, regex(r"\bpowerful\s+tool\b"),
               "feature-rich platform with advanced capabilities", VAGUE,
               "Replace 'powerful' with concrete capabilities", priority=6),

    # Structure
    DomainRule("saas_build_opener", D, regex(r"^(build|create|make)\s+(a\s+|an\s+)?(app|software|platform)(\s+(that|to))?\b"),
               "Design and develop a SaaS platform that", STRUCTURE,
               "Reframe the request as platform design", priority=9),
    DomainRule("saas_need_system", D, regex(r"^(need|want|require)\s+(a\s+)?system(\s+(that|to))?\b"),
               "Seeking development of a scalable system that", STRUCTURE,
               "Reframe a need as a scalable system request", priority=9),
    DomainRule("saas_for_users", D, regex(r"\bfor\s+users\b"),
               "for target users", STRUCTURE,
               "Point at the target user segment", priority=5),
    DomainRule("saas_manage_data", D, regex(r"\bmanage\s+(the\s+)?data\b"),
               "efficiently organize and leverage business data", STRUCTURE,
               "Describe data management by outcome", priority=5),

    # Enhancement blocks
    EnhancementRule("saas_ux_general", D, regex(r"\b(ux|user\s+experience|onboarding)\b"),
                    bullet_block("User Experience Requirements:", [
                        "Map the primary user journeys end to end",
                        "Design onboarding that reaches first value quickly",
                        "Keep navigation consistent and predictable",
                        "Meet WCAG accessibility standards",
                    ]),
                    "Add user experience requirements", guard=regex(r"\b(journey|accessibility)\b")),
    EnhancementRule("saas_ux_dashboard", D, regex(r"\bdashboards?\b"),
                    bullet_block("Dashboard Design Requirements:", [
                        "Show the three to five metrics users act on",
                        "Support filtering by date range and segment",
                        "Provide drill-down from summary to detail",
                        "Allow export of data and reports",
                    ]),
                    "Add dashboard requirements", guard=regex(r"\b(kpis?|drill-down)\b")),
    EnhancementRule("saas_core_ux", D, regex(r"\b(app|platform|software|interface)\b"),
                    bullet_block("Core UX Principles:", [
                        "Prioritize the most frequent user tasks",
                        "Give clear feedback for every action",
                        "Prevent errors and make recovery easy",
                        "Implement accessibility standards from the start",
                    ]),
                    "Add core UX principles", guard=regex(r"user\s+experience|usability")),
    EnhancementRule("saas_foundation", D, regex(r"\b(platform|system|software|saas)\b"),
                    bullet_block("Technical Foundation:", [
                        "Multi-tenant architecture with tenant data isolation",
                        "Horizontal scalability for growing usage",
                        "RESTful API for integrations",
                        "Authentication with SSO and role-based access control",
                    ]),
                    "Add technical foundation", guard=regex(r"\b(architecture|infrastructure)\b")),
    EnhancementRule("saas_business_model", D, regex(r"\b(saas|platform|subscription|business)\b"),
                    bullet_block("SaaS Business Model:", [
                        "Define pricing tiers and what each includes",
                        "Plan a free trial or freemium conversion path",
                        "Track MRR, churn and customer lifetime value",
                        "Design upgrade paths between tiers",
                    ]),
                    "Add business model considerations",
                    guard=regex(r"\b(revenue|pricing|customer)")),

    # Architecture and business specifics
    EnhancementRule("saas_arch_scalable", D, regex(r"\b(scal(e|able|ability)|growth|millions)\b"),
                    bullet_block("Technical Architecture - SCALABLE:", [
                        "Stateless services behind a load balancer",
                        "Caching layer for hot data",
                        "Asynchronous job queues for heavy work",
                        "Database read replicas and partitioning strategy",
                    ]),
                    "Add scalability architecture", category=CONTEXT),
    EnhancementRule("saas_arch_integration", D, regex(r"\b(integrat\w*|api|webhooks?|third-party)\b"),
                    bullet_block("Technical Architecture - INTEGRATION:", [
                        "Versioned public API with documentation",
                        "Webhooks for key events",
                        "OAuth 2.0 for third-party access",
                        "Rate limiting per client",
                    ]),
                    "Add integration architecture", category=CONTEXT),
    EnhancementRule("saas_arch_security", D, regex(r"\b(secur\w*|gdpr|compliance|privacy)\b"),
                    bullet_block("Technical Architecture - SECURITY:", [
                        "Encryption in transit and at rest",
                        "Audit logging of sensitive operations",
                        "GDPR and SOC 2 compliance controls",
                        "Regular penetration testing",
                    ]),
                    "Add security architecture", category=CONTEXT),
    EnhancementRule("saas_business_subscription", D, regex(r"\b(subscriptions?|billing|plans?)\b"),
                    bullet_block("Business Strategy - SUBSCRIPTION:", [
                        "Monthly and annual billing options",
                        "Self-service plan changes and cancellation",
                        "Dunning process for failed payments",
                        "Usage-based add-ons where relevant",
                    ]),
                    "Add subscription strategy", category=CONTEXT),
    EnhancementRule("saas_business_customer", D, regex(r"\b(customers?|clients?|retention|churn)\b"),
                    bullet_block("Business Strategy - CUSTOMER:", [
                        "Customer success playbook for onboarding",
                        "Health scores to detect churn risk",
                        "In-app feedback and support channels",
                        "Expansion revenue through upsell paths",
                    ]),
                    "Add customer strategy", category=CONTEXT),
]


SYSTEM_PROMPT = (
    "You are a SaaS product strategist and software architect who has launched "
    "multiple B2B and B2C platforms. You balance user experience, scalable "
    "multi-tenant architecture and sustainable subscription business models, "
    "and you frame every recommendation around customer value."
)

COMPLEXITY_NOTE = (
    "Note: This is a complex product request. Separate the answer into product "
    "requirements, technical architecture and go-to-market considerations."
)

EXAMPLES = [
    Example(
        title="Vague app request",
        before="build app to manage data with a cool dashboard",
        after=(
            "Design and develop a SaaS platform that efficiently organize and leverage business "
            "data with a actionable analytics dashboard with key metrics."
        ),
        explanation="Frames the app as a platform and defines the dashboard by metrics.",
    ),
    Example(
        title="System need",
        before="need system for users with easy interface",
        after=(
            "Seeking development of a scalable system that for target users with intuitive "
            "interface with minimal learning curve."
        ),
        explanation="Names target users and defines ease of use.",
    ),
]

SAAS_RULES = DomainRuleSet(
    domain=D,
    description="SaaS products, platform architecture and subscription businesses",
    rules=RULES,
    weights={"clarity": 0.25, "specificity": 0.3, "structure": 0.25, "completeness": 0.2},
    system_prompt=SYSTEM_PROMPT,
    complexity_note=COMPLEXITY_NOTE,
    focus_terms=frozenset({"user", "users", "ux", "onboarding", "customer", "customers"}),
    focus_clause=(
        "User Focus: Prioritize user experience, customer value, and adoption "
        "optimization in all solution recommendations."
    ),
    examples=EXAMPLES,
    detection_patterns=[
        re.compile(r"\b(saas|platform|subscription|tenant)s?\b", re.IGNORECASE),
        re.compile(r"\b(app|dashboard|feature|workflow)s?\b", re.IGNORECASE),
        re.compile(r"\b(users?|onboarding|churn|pricing)\b", re.IGNORECASE),
    ],
)
