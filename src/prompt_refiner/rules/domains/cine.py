"""
Film and screenwriting rule set.

Besides the vague-term and structure rewrites, genre and format blocks
are chosen by keyword (action, drama, comedy, horror, romance, sci-fi;
feature, short film, series, treatment).
"""

import re

from ...models.enums import PromptDomain, RuleCategory
from ...models.refinement import Example
from ..base import DomainRule, DomainRuleSet, EnhancementRule, bullet_block, regex

D = PromptDomain.CINE
VAGUE = RuleCategory.VAGUE_TERMS
STRUCTURE = RuleCategory.STRUCTURE
CONTEXT = RuleCategory.CONTEXT

GENRES = {
    "action": (
        r"\baction\b",
        "High-stakes set pieces, clear physical goals, escalating obstacles",
        "Three-act structure with an action beat every 10-15 pages",
        "Kinetic, tense, with brief moments of relief",
    ),
    "drama": (
        r"\bdrama(tic)?\b",
        "Emotional conflict, character flaws, meaningful choices",
        "Character-driven arcs with a clear turning point",
        "Grounded, intimate, emotionally honest",
    ),
    "comedy": (
        r"\bcomed(y|ia)\b|\bfunny\b",
        "Comic premise, running gags, character-based humor",
        "Setups and payoffs distributed across the acts",
        "Light, playful, with well-timed escalation",
    ),
    "horror": (
        r"\bhorror\b|\bterror\b|\bscary\b",
        "Dread, an unknown threat, vulnerable characters",
        "Slow build of tension towards escalating scares",
        "Ominous, claustrophobic, unsettling",
    ),
    "romance": (
        r"\broman(ce|tic)\b|\blove\s+story\b",
        "Chemistry, obstacles to the relationship, emotional stakes",
        "Meet, conflict, separation and resolution beats",
        "Warm, hopeful, emotionally resonant",
    ),
    "scifi": (
        r"\bsci-?fi\b|\bscience\s+fiction\b",
        "A speculative premise with consistent world rules",
        "World introduction, escalation of the premise, thematic resolution",
        "Wondrous or cautionary, intellectually engaging",
    ),
}

FORMATS = [
    ("feature", r"\bfeature(\s+film)?\b", "Feature Film Format:", [
        "Target length of 90-120 pages",
        "Three-act structure with clear act breaks",
        "Subplots that support the main story",
        "Standard screenplay formatting",
    ]),
    ("short", r"\bshort\s+film\b|\bcortometraje\b", "Short Film Format:", [
        "Target length of 5-20 pages",
        "A single focused conflict",
        "Limited locations and characters",
        "A strong visual ending",
    ]),
    ("series", r"\b(series|episode|pilot)\b", "Series Format:", [
        "Pilot structure with teaser and act breaks",
        "Season-long arc and episode arcs",
        "An ensemble with room to grow",
        "Hooks that carry into the next episode",
    ]),
    ("treatment", r"\btreatment\b", "Treatment Format:", [
        "Present-tense prose summary of the story",
        "Key scenes and turning points",
        "Main characters and their arcs",
        "Tone and visual style notes",
    ]),
]


def _genre_rules():
    rules = []
    for name, (pattern, elements, structure, tone) in GENRES.items():
        label = "SCI-FI" if name == "scifi" else name.upper()
        rules.append(EnhancementRule(
            f"cine_genre_{name}", D, regex(pattern),
            bullet_block(f"{label} Genre Specifications:", [
                f"Key Elements: {elements}",
                f"Structure: {structure}",
                f"Tone: {tone}",
            ]),
            f"Add {name} genre specifications", category=CONTEXT,
        ))
    return rules


def _format_rules():
    return [
        EnhancementRule(f"cine_format_{name}", D, regex(pattern), bullet_block(heading, lines),
                        f"Add {name} format requirements", category=CONTEXT)
        for name, pattern, heading, lines in FORMATS
    ]


RULES = [
    # Vague terms
    DomainRule("cine_nice_film", D, regex(r"\bbonit[oa]s?\s+(pel[ií]cula|film|movie|script|gui[oó]n)\b"),
               "visually compelling and emotionally resonant film", VAGUE,
               "Describe the film by its intended effect", priority=9),
    DomainRule("cine_good_script", D, regex(r"\bbuen\s+gui[oó]n\b"),
               "well-structured screenplay with strong character arcs", VAGUE,
               "Define a good script by structure and arcs", priority=8),
    DomainRule("cine_interesting_story", D, regex(r"\binteresting\s+story\b"),
               "compelling narrative with clear conflict and stakes", VAGUE,
               "Name what makes the story engaging", priority=8),
    DomainRule("cine_cool_character", D, regex(r"\bcool\s+character\b"),
               "multi-dimensional character with a clear motivation and arc", VAGUE,
               "Describe the character by depth and motivation", priority=7),
    DomainRule("cine_exciting_scene", D, regex(r"\bexciting\s+scene\b"),
               "high-tension sequence with escalating stakes", VAGUE,
               "Describe the scene by tension and stakes", priority=7),
    DomainRule("cine_good_dialogue", D, regex(r"\bgood\s+dialogue\b"),
               "natural, subtext-rich dialogue that reveals character", VAGUE,
               "Define good dialogue by subtext", priority=6),

    # Structure
    DomainRule("cine_write_opener", D, regex(r"^(write|create|make)\s+(a\s+|an\s+)?(movie|film|script)(\s+about)?\b"),
               "Develop a screenplay for a story about", STRUCTURE,
               "Reframe the request as screenplay development", priority=9),
    DomainRule("cine_need_story", D, regex(r"^(need|want|require)\s+(a\s+)?story\b"),
               "Seeking narrative development for a story", STRUCTURE,
               "Reframe a need as narrative development", priority=9),
    DomainRule("cine_about_character", D, regex(r"\babout\s+(a\s+)?(character|person)\s+(who|that)\b"),
               "featuring a protagonist who", STRUCTURE,
               "Frame the subject as a protagonist", priority=6),
    DomainRule("cine_with_genre", D,
               regex(r"\bwith\s+(action|drama|comedy|horror|romance|thriller)\b"),
               lambda m: f"in the {m.group(1).lower()} genre with elements of {m.group(1).lower()}",
               STRUCTURE, "Name the genre explicitly", priority=5),

    # Enhancement blocks
    EnhancementRule("cine_characters", D, regex(r"\b(character|protagonist|hero|villain|personaje)s?\b"),
                    bullet_block("Character Development Framework:", [
                        "Give the protagonist a clear want and a deeper need",
                        "Define backstory and motivation for the main characters",
                        "Describe each main character's arc",
                        "Design an antagonist whose goals oppose the protagonist",
                    ]),
                    "Add character development framework",
                    guard=regex(r"\b(backstory|motivation|arc)\b")),
    EnhancementRule("cine_visuals", D, regex(r"\b(scene|shot|visual|cinematic|film|movie)s?\b"),
                    bullet_block("Visual Storytelling Elements:", [
                        "Show rather than tell through action and imagery",
                        "Describe key shots, framing and camera movement",
                        "Use lighting and color to support mood",
                        "Use recurring visual motifs",
                    ]),
                    "Add visual storytelling guidance",
                    guard=regex(r"visual\s+storytelling")),
    EnhancementRule("cine_theme", D, regex(r"\b(story|narrative|script|screenplay)\b"),
                    bullet_block("Thematic Development:", [
                        "State the central theme in one sentence",
                        "Let subtext carry the theme through conflict",
                        "Reflect the theme in the protagonist's arc",
                        "Resolve the theme in the climax",
                    ]),
                    "Add thematic development",
                    guard=regex(r"\b(theme|subtext|meaning)")),
    EnhancementRule("cine_formatting", D, regex(r"\b(script|screenplay|gui[oó]n)\b"),
                    bullet_block("Industry Formatting Standards:", [
                        "Use standard screenplay format (Courier 12pt, one page per minute)",
                        "Write scene headings as INT./EXT. LOCATION - DAY/NIGHT",
                        "Keep action lines short and in present tense",
                        "Center character names above dialogue",
                    ]),
                    "Add screenplay formatting standards",
                    guard=regex(r"\b(format|standard|industry)")),
] + _genre_rules() + _format_rules()


SYSTEM_PROMPT = (
    "You are an award-winning screenwriter and script consultant experienced in "
    "feature films, short films and television. You understand story structure, "
    "character development, visual storytelling and industry formatting standards, "
    "and you give concrete, scene-level guidance."
)

COMPLEXITY_NOTE = (
    "Note: This is a complex creative request. Develop the story in stages: "
    "premise, characters, structure, then key scenes."
)

EXAMPLES = [
    Example(
        title="Vague movie idea",
        before="write movie about a character who finds a cool character in the woods",
        after=(
            "Develop a screenplay for a story featuring a protagonist who finds a "
            "multi-dimensional character with a clear motivation and arc in the woods."
        ),
        explanation="Frames the idea as screenplay development and deepens the character.",
    ),
    Example(
        title="Genre request",
        before="need story with action and one exciting scene on a train",
        after=(
            "Seeking narrative development for a story in the action genre with elements of "
            "action and one high-tension sequence with escalating stakes on a train."
        ),
        explanation="Names the genre and describes the scene by tension.",
    ),
]

CINE_RULES = DomainRuleSet(
    domain=D,
    description="Screenwriting, film development and story structure",
    rules=RULES,
    weights={"clarity": 0.2, "specificity": 0.35, "structure": 0.3, "completeness": 0.15},
    system_prompt=SYSTEM_PROMPT,
    complexity_note=COMPLEXITY_NOTE,
    focus_terms=frozenset({"action", "thriller", "horror"}),
    focus_clause=(
        "Genre Focus: Emphasize pacing, tension building, and visual storytelling "
        "techniques appropriate for high-energy cinematic experiences."
    ),
    examples=EXAMPLES,
    detection_patterns=[
        re.compile(r"\b(movie|film|cinema|pel[ií]cula)s?\b", re.IGNORECASE),
        re.compile(r"\b(script|screenplay|gui[oó]n|scene)s?\b", re.IGNORECASE),
        re.compile(r"\b(character|protagonist|plot|story)s?\b", re.IGNORECASE),
        re.compile(r"\b(genre|drama|comedy|horror|thriller)\b", re.IGNORECASE),
    ],
)
