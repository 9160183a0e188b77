"""
SQL / database design rule set.

Upgrades colloquial database requests (English and Spanish) into precise
schema and query-design language, then appends guidance blocks for sample
data, indexing, constraints, data types, naming, normalization and
deployment.
"""

import re

from ...models.enums import PromptDomain, RuleCategory
from ...models.refinement import Example
from ..base import DomainRule, DomainRuleSet, EnhancementRule, bullet_block, regex

D = PromptDomain.SQL
VAGUE = RuleCategory.VAGUE_TERMS
STRUCTURE = RuleCategory.STRUCTURE


RULES = [
    # Vague terms
    DomainRule("sql_nice_table", D, regex(r"\bbonit[oa]s?\s+(tabla|table)\b"),
               "well-structured, normalized database table", VAGUE,
               "Replace informal table description with normalized schema terminology", priority=9),
    DomainRule("sql_good_query", D, regex(r"\bbuen[oa]s?\s+(query|consulta)\b"),
               "optimized SQL query with proper indexing", VAGUE,
               "Specify what makes a query good", priority=8),
    DomainRule("sql_bad_query", D, regex(r"\bmal[oa]s?\s+(query|consulta)\b"),
               "inefficient query that needs optimization", VAGUE,
               "Name the actual problem with the query", priority=8),
    DomainRule("sql_table_sql", D, regex(r"\btabla\s+sql\b"),
               "database table schema", VAGUE,
               "Use standard schema terminology", priority=7),
    DomainRule("sql_database", D, regex(r"\bbd\b|\bbase\s+de\s+datos\b"),
               "relational database", VAGUE,
               "Use standard database terminology", priority=6),
    DomainRule("sql_do_query", D, regex(r"\bhacer\s+(una\s+)?(query|consulta)\b"),
               "execute SQL query", VAGUE,
               "Use precise query execution wording", priority=6),

    # Structure
    DomainRule("sql_request_opener", D, regex(r"^(hazme|dame|necesito)(\s+(una?|el|la|los|las))?\b"),
               "Generate a database schema for", STRUCTURE,
               "Reframe an informal request as a schema design task", priority=9),
    DomainRule("sql_create_table_opener", D, regex(r"^(create|make|build)\s+(a\s+)?table\b"),
               "Design a database table", STRUCTURE,
               "Reframe table creation as a design task", priority=9),
    DomainRule("sql_make_query_fast", D,
               regex(r"^(make|get)\s+(the\s+|a\s+|my\s+)?(sql\s+)?query\s+(fast|faster|quick|quicker)\b"),
               "Optimize the SQL query for performance", STRUCTURE,
               "Turn a speed request into an explicit optimization task", priority=8),
    DomainRule("sql_with_join", D, regex(r"\bcon\s+join\b"),
               "including appropriate JOIN operations", STRUCTURE,
               "Make join requirements explicit", priority=6),
    DomainRule("sql_optimized", D, regex(r"\boptimizad[oa]s?\b"),
               "with performance optimizations including indexes", STRUCTURE,
               "Define what optimized means", priority=5),
    DomainRule("sql_fast_query", D, regex(r"\b(fast|quick)\s+query\b|\bquery\s+(fast|quick)\b"),
               "performance-optimized query with appropriate indexes", STRUCTURE,
               "Define what a fast query means", priority=5),

    # Enhancement blocks
    EnhancementRule("sql_sample_data", D, regex(r"\b(table|tabla|schema)s?\b"),
                    "Please include sample data (5-10 rows) to illustrate the table structure.",
                    "Request sample data for table designs", guard=regex(r"\b(sample|example)")),
    EnhancementRule("sql_query_performance", D, regex(r"\b(query|queries|select|performance)\b"),
                    bullet_block("Query Performance:", [
                        "Review the query execution plan (EXPLAIN / EXPLAIN ANALYZE) before and after changes",
                        "Add or adjust indexes on filtered, joined and sorted columns",
                        "Avoid SELECT * and return only the required columns",
                        "Report the expected row counts and target response time",
                    ]),
                    "Add query performance checklist", guard=regex(r"execution\s+plan")),
    EnhancementRule("sql_indexes", D, regex(r"\b(performance|fast|slow|optimi[sz]e\w*)\b"),
                    "Consider appropriate indexes for performance optimization.",
                    "Request an indexing strategy", guard=regex(r"\bindex")),
    EnhancementRule("sql_constraints", D, regex(r"\b(join|relationship|foreign|key)s?\b"),
                    "Include foreign key constraints and relationship definitions.",
                    "Request relational constraints", guard=regex(r"\bconstraint")),
    EnhancementRule("sql_data_types", D, regex(r"\b(create|table|tabla|schema)s?\b"),
                    "Specify appropriate data types for each column (VARCHAR, INTEGER, TIMESTAMP, etc.).",
                    "Request explicit column data types", guard=regex(r"data\s+type")),
    EnhancementRule("sql_naming", D, regex(r"\b(table|tabla|column|field)s?\b"),
                    "Use snake_case naming convention for tables and columns.",
                    "Request a naming convention", guard=regex(r"\bnaming\b")),
    EnhancementRule("sql_comments", D, regex(r"\b(complex|multiple|join|subquery)\b"),
                    "Include explanatory comments for complex queries and table structures.",
                    "Request comments for complex SQL", guard=regex(r"\bcomments?\b")),
    EnhancementRule("sql_normalization", D, regex(r"\b(database|schema|design|table)s?\b"),
                    "Ensure proper database normalization (3NF) while considering performance trade-offs.",
                    "Request normalization guidance", guard=regex(r"\bnormali[sz]")),
    EnhancementRule("sql_deployment", D, regex(r"\b(production|deploy|migration|update)s?\b"),
                    "Consider migration scripts and rollback procedures for production deployment.",
                    "Request migration and rollback planning", guard=regex(r"\brollback\b")),
]


SYSTEM_PROMPT = (
    "You are a senior database architect and SQL expert with deep knowledge of "
    "relational design, normalization, indexing strategies and query optimization "
    "across PostgreSQL, MySQL and SQL Server. Provide production-ready SQL with "
    "clear explanations, appropriate constraints and performance considerations."
)

COMPLEXITY_NOTE = (
    "Note: This is a complex request. Break down the solution into logical "
    "components and provide step-by-step explanations."
)

EXAMPLES = [
    Example(
        title="Informal table request",
        before="hazme una bonita tabla para usuarios",
        after=(
            "Generate a database schema for well-structured, normalized database table "
            "para usuarios.\n\nPlease include sample data (5-10 rows) to illustrate the table structure."
        ),
        explanation="Replaces vague wording with schema terminology and asks for sample data.",
    ),
    Example(
        title="Query speed request",
        before="make fast query for sales data",
        after=(
            "Make performance-optimized query with appropriate indexes for sales data.\n\n"
            "Query Performance:\n- Review the query execution plan (EXPLAIN / EXPLAIN ANALYZE) "
            "before and after changes"
        ),
        explanation="Defines 'fast' in terms of indexes and execution plans.",
    ),
]

SQL_RULES = DomainRuleSet(
    domain=D,
    description="Relational database design, SQL queries and query optimization",
    rules=RULES,
    weights={"clarity": 0.3, "specificity": 0.35, "structure": 0.2, "completeness": 0.15},
    system_prompt=SYSTEM_PROMPT,
    complexity_note=COMPLEXITY_NOTE,
    focus_terms=frozenset({"postgresql", "mysql", "sqlite", "oracle", "index", "indexes"}),
    focus_clause=(
        "Database Focus: Prefer standard SQL, state the target engine explicitly and "
        "justify every index you propose."
    ),
    examples=EXAMPLES,
    detection_patterns=[
        re.compile(r"\b(create|table|schema)s?\b", re.IGNORECASE),
        re.compile(r"\b(select|query|queries|performance|optimi[sz]e)\b", re.IGNORECASE),
        re.compile(r"\b(join|foreign|key|relationship)s?\b", re.IGNORECASE),
        re.compile(r"\b(sql|database|tabla|consulta)\b", re.IGNORECASE),
    ],
)
