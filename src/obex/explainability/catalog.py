"""Paragraph catalog for insight enrichment.

Plain data: lookups keyed by category and severity. The engine picks
entries; nothing here inspects insights or contexts.
"""

from __future__ import annotations

from obex.constants import InsightCategory, InsightLevel, InsightSeverity

GENERAL = "General"

SEVERITY_PARAGRAPHS: dict[str, dict[InsightSeverity, str]] = {
    InsightCategory.SECURITY: {
        InsightSeverity.HIGH: (
            "This is classified as a high severity security concern"
            " because it could lead to unauthorized access, code"
            " execution, or data exposure if exploited."
        ),
        InsightSeverity.MEDIUM: (
            "This is classified as a medium severity security concern"
            " because it is a weakness that could be exploited under"
            " specific circumstances, or that needs additional factors"
            " to become a critical vulnerability."
        ),
        InsightSeverity.LOW: (
            "This is classified as a low severity security concern."
            " Addressing it follows security best practices, but the"
            " risk of exploitation is limited."
        ),
    },
    InsightCategory.EFFICIENCY: {
        InsightSeverity.HIGH: (
            "This efficiency issue may significantly slow your workflow,"
            " potentially adding minutes to build times or consuming"
            " excessive resources."
        ),
        InsightSeverity.MEDIUM: (
            "This efficiency issue could moderately slow your workflow,"
            " potentially adding seconds to build times or increasing"
            " resource consumption."
        ),
        InsightSeverity.LOW: (
            "This efficiency issue has a minor performance impact but is"
            " an opportunity to optimize your workflow."
        ),
    },
    InsightCategory.MAINTENANCE: {
        InsightSeverity.HIGH: (
            "This maintenance issue needs prompt attention as it may"
            " cause immediate failures or become incompatible soon."
        ),
        InsightSeverity.MEDIUM: (
            "This maintenance issue should be addressed in your regular"
            " update cycle to prevent future problems."
        ),
        InsightSeverity.LOW: (
            "This maintenance issue is a technical debt item that can be"
            " addressed when convenient to keep configurations current."
        ),
    },
    GENERAL: {
        InsightSeverity.HIGH: (
            "This issue is categorized as high severity and should be"
            " addressed promptly as it may significantly affect your"
            " project."
        ),
        InsightSeverity.MEDIUM: (
            "This issue is categorized as medium severity and should be"
            " addressed as part of your regular maintenance cycle."
        ),
        InsightSeverity.LOW: (
            "This issue is categorized as low severity and is an"
            " opportunity for improvement when convenient."
        ),
    },
}

INJECTION_PARAGRAPH = (
    'This issue relates to the OWASP category "Injection", where'
    " untrusted data is sent to an interpreter as part of a command or"
    " query."
)
LEAST_PRIVILEGE_PARAGRAPH = (
    "This issue relates to the principle of least privilege: grant only"
    " the minimum access rights needed to perform the required work."
)
CACHE_PARAGRAPH = (
    "Caching typically cuts build times by 30-70% for steps that"
    " install dependencies, depending on project and dependency size."
)
CHECKOUT_PARAGRAPH = (
    "Optimizing git checkout saves bandwidth and checkout time,"
    " especially in repositories with long histories."
)
VERSION_PARAGRAPH = (
    "Keeping dependencies and actions current brings the latest fixes,"
    " performance improvements and security patches, and avoids"
    " compatibility breaks when other components update."
)

PROJECT_TEMPLATE = (
    "For a project like '{name}', addressing this issue is particularly"
    " important for maintaining a robust CI/CD pipeline."
)
MAIN_BRANCH_TEMPLATE = (
    "Since this was detected on your '{branch}' branch, it may affect"
    " all derived branches and your production deployments."
)
FEATURE_BRANCH_TEMPLATE = (
    "Since this was detected on a feature branch ('{branch}'),"
    " addressing it now keeps it out of your main branch."
)
RELEASE_BRANCH_TEMPLATE = (
    "This issue was detected on what appears to be a release branch"
    " ('{branch}'). Address it before finalizing the release."
)

LEVEL_PARAGRAPHS: dict[InsightLevel, str] = {
    InsightLevel.MICRO: (
        "This local branch-level issue should be addressed before"
        " pushing your changes or opening a pull request."
    ),
    InsightLevel.MESO: (
        "This integration-level issue may affect how your changes"
        " interact with the broader codebase and CI/CD pipeline."
    ),
    InsightLevel.MACRO: (
        "This production-level issue may impact your deployed"
        " applications and services."
    ),
}

IMPACT_MARKER = "Potential impact:"

IMPACT_TEMPLATES: dict[str, str] = {
    InsightCategory.SECURITY: (
        "This security issue could {verb} your system's security posture."
    ),
    InsightCategory.EFFICIENCY: (
        "This efficiency issue could {verb} your build times and"
        " resource usage."
    ),
    InsightCategory.MAINTENANCE: (
        "This maintenance issue could {verb} in your project."
    ),
}

IMPACT_VERBS: dict[str, dict[InsightSeverity, str]] = {
    InsightCategory.SECURITY: {
        InsightSeverity.HIGH: "significantly compromise",
        InsightSeverity.MEDIUM: "potentially expose",
        InsightSeverity.LOW: "slightly weaken",
    },
    InsightCategory.EFFICIENCY: {
        InsightSeverity.HIGH: "substantially increase",
        InsightSeverity.MEDIUM: "moderately extend",
        InsightSeverity.LOW: "slightly lengthen",
    },
    InsightCategory.MAINTENANCE: {
        InsightSeverity.HIGH: "cause immediate failures",
        InsightSeverity.MEDIUM: "lead to future compatibility problems",
        InsightSeverity.LOW: "contribute to technical debt",
    },
}

GENERAL_IMPACT = (
    "Addressing this issue will improve the overall health and"
    " reliability of your project."
)

CONFIDENCE_MARKER = "Confidence:"

CONFIDENCE_TEMPLATE = (
    "This insight is provided with {confidence}% confidence based on"
    " clearly identified patterns and well-established industry"
    " practice."
)
