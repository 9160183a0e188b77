"""
Fixed vocabularies and pattern batteries used by the analyzer.

All lists are lowercase unless noted. Changing any list changes analyzer
output and requires bumping ANALYZER_VERSION.
"""

import re

# ============================================================================
# STOPWORDS & SENTIMENT
# ============================================================================

STOPWORDS = frozenset({
    "a", "an", "and", "are", "as", "at", "be", "by", "for", "from",
    "has", "he", "in", "is", "it", "its", "of", "on", "that", "the",
    "to", "was", "will", "with",
    # Spanish
    "el", "la", "los", "las", "de", "en",
})

# Token-level polarity (-1 / +1)
POSITIVE_TOKENS = frozenset({"good", "great", "awesome", "excellent", "nice", "wonderful"})
NEGATIVE_TOKENS = frozenset({"bad", "terrible", "awful", "horrible", "wrong", "error"})

# AFINN-style valence lexicon (-5..5) for document sentiment
SENTIMENT_LEXICON = {
    "good": 3, "great": 3, "awesome": 4, "excellent": 3, "nice": 3, "wonderful": 4,
    "amazing": 4, "best": 3, "better": 2, "love": 3, "like": 2, "happy": 3,
    "clean": 2, "clear": 1, "easy": 1, "fast": 1, "improve": 2, "improved": 2,
    "robust": 2, "secure": 2, "efficient": 2, "effective": 2, "elegant": 2,
    "success": 2, "successful": 3, "helpful": 2, "perfect": 3, "reliable": 2,
    "bad": -3, "terrible": -3, "awful": -3, "horrible": -3, "wrong": -2,
    "error": -2, "errors": -2, "bug": -2, "bugs": -2, "broken": -1, "fail": -2,
    "failed": -2, "failure": -2, "slow": -1, "ugly": -3, "hate": -3, "worst": -3,
    "problem": -2, "problems": -2, "issue": -1, "crash": -2, "difficult": -1,
    "hard": -1, "poor": -2, "messy": -2, "confusing": -2, "annoying": -2,
}

# ============================================================================
# INTENT
# ============================================================================

# Declaration order breaks confidence ties
INTENT_PATTERNS = [
    ("create", ["create", "generate", "make", "build", "write", "develop", "design"]),
    ("modify", ["update", "change", "modify", "edit", "alter", "adjust", "improve"]),
    ("analyze", ["analyze", "examine", "review", "assess", "evaluate", "check"]),
    ("explain", ["explain", "describe", "tell", "show", "help", "guide"]),
    ("debug", ["fix", "debug", "solve", "troubleshoot", "error", "issue"]),
    ("optimize", ["optimize", "improve", "enhance", "refactor", "performance"]),
]

INTENT_SUBCATEGORIES = {
    "create": ["table", "function", "class", "component", "api", "query", "script"],
    "modify": ["refactor", "update", "style", "structure", "logic"],
    "analyze": ["performance", "security", "quality", "code", "data"],
    "explain": ["concept", "code", "process", "algorithm", "pattern"],
    "debug": ["error", "bug", "issue", "performance", "logic"],
    "optimize": ["performance", "memory", "speed", "efficiency", "size"],
}

# ============================================================================
# AMBIGUITY
# ============================================================================

VAGUE_TERMS = frozenset({
    "good", "bad", "nice", "bonito", "bonita", "bueno", "malo",
    "stuff", "things", "something", "anything", "some", "many",
    "big", "small", "fast", "slow", "easy", "hard", "simple",
})
INDEFINITE_PRONOUNS = frozenset({"it", "this", "that", "these", "those", "they"})
MODAL_VERBS = frozenset({"might", "could", "should", "would", "may"})
HEDGE_WORDS = frozenset({"probably", "maybe", "perhaps", "possibly", "somewhat"})

# Weights of the ambiguity components (sum to 1.0)
AMBIGUITY_WEIGHTS = {
    "vague": 0.4,
    "pronoun": 0.3,
    "modal": 0.2,
    "hedge": 0.1,
}

# ============================================================================
# COMPLEXITY
# ============================================================================

# Weights of the complexity components (sum to 1.0)
COMPLEXITY_WEIGHTS = {
    "length": 0.35,
    "sentence": 0.25,
    "vocabulary": 0.15,
    "technical": 0.15,
    "syntactic": 0.10,
}

# Penn tags counted as conjunctions/prepositions
CONNECTIVE_TAGS = frozenset({"CC", "IN"})

# Heuristic tags for the regex tokenizer
CONJUNCTIONS = frozenset({"and", "or", "but", "nor", "yet", "so", "y", "o", "pero"})
PREPOSITIONS = frozenset({
    "in", "on", "at", "to", "for", "of", "with", "by", "from", "into", "about",
    "over", "under", "between", "through", "after", "before", "without", "within",
    "de", "en", "con", "por", "para",
})
DETERMINERS = frozenset({"the", "a", "an", "this", "that", "these", "those", "el", "la", "los", "las", "un", "una"})
PRONOUNS = frozenset({"i", "you", "he", "she", "it", "we", "they", "me", "us", "them"})
MODALS_AUX = frozenset({"can", "could", "should", "would", "may", "might", "must", "will", "shall"})

# ============================================================================
# VARIABLES & LANGUAGE
# ============================================================================

VARIABLE_PATTERNS = [
    re.compile(r"\{\{\s*\w+\s*\}\}"),  # {{variable}}
    re.compile(r"\$\w+"),              # $variable
    re.compile(r":\w+"),               # :variable
    re.compile(r"%\w+%"),              # %variable%
    re.compile(r"\[[\w\s]+\]"),        # [placeholder]
    re.compile(r"<[\w\s]+>"),          # <placeholder>
]

SPANISH_FUNCTION_WORDS = re.compile(
    r"\b(el|la|los|las|un|una|de|del|en|con|por|para|que|es|son|esta|muy|bonit[ao]|bueno|malo)\b",
    re.IGNORECASE,
)
ENGLISH_FUNCTION_WORDS = re.compile(
    r"\b(the|a|an|and|or|but|in|on|at|to|for|of|with|by|is|are|was|were|good|bad|nice)\b",
    re.IGNORECASE,
)

# ============================================================================
# DOMAIN HINTS
# ============================================================================

DOMAIN_KEYWORDS = {
    "sql": ["table", "query", "database", "select", "insert", "update", "delete", "join", "sql", "db", "schema"],
    "branding": ["brand", "marketing", "campaign", "logo", "copy", "audience", "message", "slogan"],
    "cine": ["script", "screenplay", "film", "movie", "cinema", "character", "scene", "dialogue"],
    "saas": ["app", "application", "feature", "user", "dashboard", "api", "integration", "subscription"],
    "devops": ["deploy", "deployment", "docker", "kubernetes", "aws", "cloud", "pipeline", "infrastructure"],
}

# ============================================================================
# TECHNICAL TERMS
# ============================================================================

TECHNICAL_TERM_PATTERNS = [
    re.compile(r"^[A-Z]{2,}$"),  # Acronyms (case-sensitive)
    re.compile(r"^\w+\.(js|ts|py|sql|html|css|java)$", re.IGNORECASE),
    re.compile(r"^(API|HTTP|JSON|XML|CSS|HTML|SQL|NoSQL|REST|GraphQL)$", re.IGNORECASE),
    re.compile(r"^(React|Vue|Angular|Node|Express|Django|Flask)$", re.IGNORECASE),
    re.compile(r"^(Docker|Kubernetes|AWS|GCP|Azure)$", re.IGNORECASE),
    re.compile(r"^(OAuth2?|JWT|SAML|SSO|2FA|MFA)$", re.IGNORECASE),
    re.compile(r"^(PostgreSQL|MySQL|MongoDB|Redis|SQLite)$", re.IGNORECASE),
    re.compile(r"^(JavaScript|TypeScript|Python|Java|PHP|Ruby|Go|Rust)$", re.IGNORECASE),
    re.compile(r"^(function|class|interface|component|method|endpoint|database|schema|table)$", re.IGNORECASE),
]


def is_technical_term(word: str) -> bool:
    """True if the word matches any technical-term pattern."""
    return any(pattern.match(word) for pattern in TECHNICAL_TERM_PATTERNS)
