"""
DevOps and cloud infrastructure rule set.
"""

import re

from ...models.enums import PromptDomain, RuleCategory
from ...models.refinement import Example
from ..base import DomainRule, DomainRuleSet, EnhancementRule, bullet_block, regex

D = PromptDomain.DEVOPS
VAGUE = RuleCategory.VAGUE_TERMS
STRUCTURE = RuleCategory.STRUCTURE
CONTEXT = RuleCategory.CONTEXT

CLOUDS = {
    "AWS": (r"\b(aws|amazon\s+web\s+services|ec2|s3|lambda)\b", [
        "Services: ECS or EKS for containers, RDS for databases, S3 for storage",
        "Patterns: multi-AZ deployment, auto scaling groups, least-privilege IAM",
        "Monitoring: CloudWatch metrics, alarms and centralized logs",
    ]),
    "GCP": (r"\b(gcp|google\s+cloud|gke|bigquery)\b", [
        "Services: GKE or Cloud Run for containers, Cloud SQL, Cloud Storage",
        "Patterns: regional deployments, managed instance groups, workload identity",
        "Monitoring: Cloud Monitoring and Cloud Logging dashboards",
    ]),
    "AZURE": (r"\b(azure|aks)\b", [
        "Services: AKS or App Service, Azure SQL, Blob Storage",
        "Patterns: availability zones, scale sets, managed identities",
        "Monitoring: Azure Monitor and Application Insights",
    ]),
}


def _cloud_rules():
    return [
        EnhancementRule(f"devops_cloud_{name.lower()}", D, regex(pattern),
                        bullet_block(f"{name} Cloud Services:", lines),
                        f"Add {name} service recommendations", category=CONTEXT)
        for name, (pattern, lines) in CLOUDS.items()
    ]


RULES = [
    # Vague terms
    DomainRule("devops_nice_deploy", D, regex(r"\bbonit[oa]s?\s+(deploy|despliegue)\b"),
               "reliable, automated deployment", VAGUE,
               "Describe deployment quality by reliability", priority=9),
    DomainRule("devops_good_pipeline", D, regex(r"\bbuen[oa]s?\s+pipeline\b"),
               "robust CI/CD pipeline with automated testing", VAGUE,
               "Define a good pipeline by its stages", priority=8),
    DomainRule("devops_fast_deploy", D, regex(r"\bfast\s+(deploy|deployment|build)s?\b"),
               "optimized deployment with minimal downtime", VAGUE,
               "Define speed in terms of downtime", priority=8),
    DomainRule("devops_secure_server", D, regex(r"\bsecure\s+server\b"),
               "hardened server following security best practices", VAGUE,
               "Define security by hardening", priority=7),
    DomainRule("devops_scalable_infra", D, regex(r"\bscalable\s+infrastructure\b"),
               "auto-scaling cloud infrastructure", VAGUE,
               "Define scalability by auto scaling", priority=7),
    DomainRule("devops_monitoring", D, regex(r"\bmonitoring\s+system\b"),
               "observability stack with metrics, logs and alerts", VAGUE,
               "Define monitoring by its signals", priority=6),

    # Structure
    DomainRule("devops_setup_opener", D, regex(r"^(setup|set\s+up|configure|create)\s+(a\s+|an\s+|the\s+)?(server|infrastructure)(\s+for)?\b"),
               "Design and provision cloud infrastructure for", STRUCTURE,
               "Reframe server setup as infrastructure provisioning", priority=9),
    DomainRule("devops_automate_opener", D, regex(r"^automate\s+(the\s+)?deploy(ment)?s?(\s+(for|of))?\b"),
               "Implement automated deployment pipeline for", STRUCTURE,
               "Reframe automation as a pipeline task", priority=9),
    DomainRule("devops_monitor_opener", D, regex(r"^monitor\s+(the\s+|my\s+)?app(lication)?\b"),
               "Establish comprehensive observability for the application", STRUCTURE,
               "Reframe monitoring as observability", priority=9),
    DomainRule("devops_docker_container", D, regex(r"\bdocker\s+containers?\b"),
               "containerized application with Docker orchestration", STRUCTURE,
               "Name the container strategy", priority=5),

    # Enhancement blocks
    EnhancementRule("devops_cicd_pipeline", D, regex(r"\b(pipelines?|ci/cd|continuous)\b"),
                    bullet_block("CI/CD Pipeline Requirements:", [
                        "Stages for build, test, security scan and deploy",
                        "Automated rollback on failed health checks",
                        "Environment promotion from staging to production",
                        "Pipeline as code stored with the application",
                    ]),
                    "Add pipeline requirements", guard=regex(r"\b(rollback|stages?)\b")),
    EnhancementRule("devops_cicd_build", D, regex(r"\b(builds?|compil\w*|artifacts?)\b"),
                    bullet_block("Build Automation Requirements:", [
                        "Reproducible builds with pinned dependencies",
                        "Build caching to shorten feedback loops",
                        "Versioned artifacts pushed to a registry",
                        "Fail fast on lint and unit test errors",
                    ]),
                    "Add build automation requirements", guard=regex(r"\b(reproducible|registry)\b")),
    EnhancementRule("devops_best_practices", D, regex(r"\b(deploy\w*|pipelines?|automat\w*|devops)\b"),
                    bullet_block("DevOps Best Practices:", [
                        "Infrastructure as code (Terraform, CloudFormation)",
                        "Automated testing at every stage",
                        "Blue-green or canary deployments",
                        "Monitoring and alerting on key service metrics",
                    ]),
                    "Add DevOps best practices", guard=regex(r"\b(testing|quality|monitoring)\b")),
    EnhancementRule("devops_security", D, regex(r"\b(infrastructure|servers?|deploy\w*|production)\b"),
                    bullet_block("Security Considerations:", [
                        "Secrets management with a vault service",
                        "Network segmentation and least-privilege access",
                        "Vulnerability scanning of images and dependencies",
                        "Audit logging for infrastructure changes",
                    ]),
                    "Add security considerations", guard=regex(r"\b(security|secure|compliance)\b")),

    # Platform specifics
    EnhancementRule("devops_kubernetes", D, regex(r"\b(kubernetes|k8s|helm)\b"),
                    bullet_block("Container Orchestration - KUBERNETES:", [
                        "Deployments with resource requests and limits",
                        "Horizontal pod autoscaling",
                        "Liveness and readiness probes",
                        "Helm charts for configuration management",
                    ]),
                    "Add Kubernetes guidance", category=CONTEXT),
    EnhancementRule("devops_docker", D, regex(r"\b(docker\w*|containers?|containeri[sz]ed)\b"),
                    bullet_block("Container Orchestration - DOCKER:", [
                        "Multi-stage builds for small images",
                        "Non-root users inside containers",
                        "Pinned base image versions",
                        "Health checks defined in the image",
                    ]),
                    "Add Docker guidance", category=CONTEXT),
    EnhancementRule("devops_security_compliance", D, regex(r"\b(compliance|audit|hipaa|pci|soc\s*2)\b"),
                    bullet_block("Security & Compliance - SECURITY:", [
                        "Map controls to the applicable compliance framework",
                        "Encrypt data in transit and at rest",
                        "Centralize audit logs with retention policies",
                        "Automate compliance checks in the pipeline",
                    ]),
                    "Add compliance guidance", category=CONTEXT),
    EnhancementRule("devops_backup", D, regex(r"\b(backups?|disaster|recovery|restore)\b"),
                    bullet_block("Security & Compliance - BACKUP:", [
                        "Define RPO and RTO targets",
                        "Automated, encrypted backups in a separate region",
                        "Regular restore drills",
                        "Documented disaster recovery runbook",
                    ]),
                    "Add backup and recovery guidance", category=CONTEXT),
] + _cloud_rules()


SYSTEM_PROMPT = (
    "You are a senior DevOps engineer and cloud architect with hands-on experience "
    "in CI/CD, containers, Kubernetes, infrastructure as code and observability on "
    "AWS, GCP and Azure. Provide production-grade, secure and automated solutions "
    "with concrete configuration examples."
)

COMPLEXITY_NOTE = (
    "Note: This is a complex infrastructure request. Describe the target "
    "architecture first, then the rollout plan and operational runbooks."
)

EXAMPLES = [
    Example(
        title="Server setup",
        before="setup server for my app with a secure server config",
        after=(
            "Design and provision cloud infrastructure for my app with a hardened server "
            "following security best practices config."
        ),
        explanation="Frames the setup as provisioning and defines security by hardening.",
    ),
    Example(
        title="Deployment automation",
        before="automate deploy of the api using docker container",
        after=(
            "Implement automated deployment pipeline for the api using containerized "
            "application with Docker orchestration."
        ),
        explanation="Turns automation into a pipeline task with a container strategy.",
    ),
]

DEVOPS_RULES = DomainRuleSet(
    domain=D,
    description="CI/CD, containers, cloud infrastructure and observability",
    rules=RULES,
    weights={"clarity": 0.2, "specificity": 0.4, "structure": 0.25, "completeness": 0.15},
    system_prompt=SYSTEM_PROMPT,
    complexity_note=COMPLEXITY_NOTE,
    focus_terms=frozenset({"aws", "gcp", "azure", "cloud"}),
    focus_clause=(
        "Cloud Focus: Recommend managed cloud services where they reduce operational "
        "burden and state the cost implications."
    ),
    examples=EXAMPLES,
    detection_patterns=[
        re.compile(r"\b(deploy\w*|pipelines?|ci/cd|build)\b", re.IGNORECASE),
        re.compile(r"\b(docker|kubernetes|k8s|containers?)\b", re.IGNORECASE),
        re.compile(r"\b(servers?|infrastructure|cloud|aws|gcp|azure)\b", re.IGNORECASE),
        re.compile(r"\b(monitor\w*|observability|terraform)\b", re.IGNORECASE),
    ],
)
