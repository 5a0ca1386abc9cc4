"""
Static fallback data.

Served whenever a live feed can't be reached so the dashboard always has
something to render. Every record is tagged source="Synthetic" so the UI
can tell it apart from live data.
"""

from datetime import datetime, timezone


def now_iso():
    return datetime.now(timezone.utc).isoformat()


# ─────────────────────────────────────────
# OWASP TOP 10 FOR LLM APPLICATIONS (v1.1)
# Static list, never fetched or cached
# Source: https://owasp.org/www-project-top-10-for-large-language-model-applications/
# ─────────────────────────────────────────
OWASP_VERSION   = "1.1"
OWASP_PUBLISHED = "2023-10-01"

OWASP_LLM_TOP10 = [
    {
        "rank": 1,
        "id": "LLM01",
        "name": "Prompt Injection",
        "severity": "CRITICAL",
        "description": "Crafted inputs manipulate LLM behavior, bypass safeguards, or extract sensitive information",
        "impact": "Unauthorized data access, malicious code execution, system compromise",
        "mitigation": "Input validation, output filtering, privilege minimization, human oversight",
        "cweId": "CWE-74",
        "source": "OWASP"
    },
    {
        "rank": 2,
        "id": "LLM02",
        "name": "Insecure Output Handling",
        "severity": "HIGH",
        "description": "LLM outputs used downstream without validation enable XSS, CSRF, or code injection",
        "impact": "System compromise, data breaches, privilege escalation",
        "mitigation": "Output encoding, content security policies, zero-trust validation",
        "cweId": "CWE-20",
        "source": "OWASP"
    },
    {
        "rank": 3,
        "id": "LLM03",
        "name": "Training Data Poisoning",
        "severity": "HIGH",
        "description": "Manipulated training data introduces backdoors, biases, or vulnerabilities",
        "impact": "Model bias, compromised predictions, data exfiltration",
        "mitigation": "Data validation, anomaly detection, secure supply chain",
        "cweId": "CWE-502",
        "source": "OWASP"
    },
    {
        "rank": 4,
        "id": "LLM04",
        "name": "Model Denial of Service",
        "severity": "MEDIUM",
        "description": "Resource-intensive operations cause service degradation or financial impact",
        "impact": "Service unavailability, cost escalation, resource exhaustion",
        "mitigation": "Rate limiting, input validation, resource quotas, monitoring",
        "cweId": "CWE-400",
        "source": "OWASP"
    },
    {
        "rank": 5,
        "id": "LLM05",
        "name": "Supply Chain Vulnerabilities",
        "severity": "HIGH",
        "description": "Third-party datasets, pre-trained models, or plugins introduce vulnerabilities",
        "impact": "Data breaches, biased outputs, system compromise",
        "mitigation": "Vendor assessment, SBOM tracking, model validation, signing",
        "cweId": "CWE-829",
        "source": "OWASP"
    },
    {
        "rank": 6,
        "id": "LLM06",
        "name": "Sensitive Information Disclosure",
        "severity": "CRITICAL",
        "description": "LLMs inadvertently reveal PII, proprietary data, or confidential information",
        "impact": "Privacy violations, regulatory non-compliance, reputation damage",
        "mitigation": "Data sanitization, output filtering, access controls, encryption",
        "cweId": "CWE-200",
        "source": "OWASP"
    },
    {
        "rank": 7,
        "id": "LLM07",
        "name": "Insecure Plugin Design",
        "severity": "HIGH",
        "description": "LLM plugins lack input validation, authorization, or access controls",
        "impact": "Remote code execution, unauthorized access, data exfiltration",
        "mitigation": "Strict input validation, least privilege, plugin sandboxing",
        "cweId": "CWE-284",
        "source": "OWASP"
    },
    {
        "rank": 8,
        "id": "LLM08",
        "name": "Excessive Agency",
        "severity": "HIGH",
        "description": "LLM systems given unconstrained autonomy make damaging or unintended actions",
        "impact": "Unauthorized transactions, system changes, data loss",
        "mitigation": "Human-in-the-loop, action boundaries, audit logging, rollback",
        "cweId": "CWE-862",
        "source": "OWASP"
    },
    {
        "rank": 9,
        "id": "LLM09",
        "name": "Overreliance",
        "severity": "MEDIUM",
        "description": "Users or systems trust LLM outputs without verification",
        "impact": "Misinformation propagation, flawed decisions, hallucination risks",
        "mitigation": "Output validation, cross-referencing, user education, transparency",
        "cweId": "CWE-1021",
        "source": "OWASP"
    },
    {
        "rank": 10,
        "id": "LLM10",
        "name": "Model Theft",
        "severity": "MEDIUM",
        "description": "Unauthorized access or extraction of proprietary models",
        "impact": "Intellectual property loss, competitive disadvantage, adversarial analysis",
        "mitigation": "Access controls, model encryption, API rate limiting, watermarking",
        "cweId": "CWE-693",
        "source": "OWASP"
    }
]


def owasp_top10():
    """OWASP LLM Top 10 with a severity summary."""
    return {
        "data":      OWASP_LLM_TOP10,
        "source":    "OWASP",
        "version":   OWASP_VERSION,
        "published": OWASP_PUBLISHED,
        "timestamp": now_iso(),
        "summary": {
            "critical": sum(1 for i in OWASP_LLM_TOP10 if i["severity"] == "CRITICAL"),
            "high":     sum(1 for i in OWASP_LLM_TOP10 if i["severity"] == "HIGH"),
            "medium":   sum(1 for i in OWASP_LLM_TOP10 if i["severity"] == "MEDIUM"),
            "total":    len(OWASP_LLM_TOP10),
        }
    }


# ─────────────────────────────────────────
# SYNTHETIC FEED RECORDS
# Same shape as the live normalized records
# ─────────────────────────────────────────
def fallback_nvd():
    ts = now_iso()
    return [
        {"id": "CVE-2024-1234", "description": "AI model vulnerability in inference pipeline", "severity": "HIGH", "score": 7.5, "published": ts, "source": "Synthetic"},
        {"id": "CVE-2024-5678", "description": "Prompt injection vulnerability in LLM system", "severity": "CRITICAL", "score": 9.1, "published": ts, "source": "Synthetic"},
        {"id": "CVE-2024-9012", "description": "Data leakage in ML training pipeline", "severity": "MEDIUM", "score": 5.3, "published": ts, "source": "Synthetic"},
    ]


def fallback_cisa():
    ts = now_iso()
    return [
        {"cveID": "CVE-2024-0001", "vendorProject": "AI Vendor", "product": "ML Platform", "vulnerabilityName": "Model Poisoning", "dateAdded": ts, "shortDescription": "Adversarial manipulation", "requiredAction": "Apply patches", "source": "Synthetic"},
        {"cveID": "CVE-2024-0002", "vendorProject": "Cloud Provider", "product": "AI Service", "vulnerabilityName": "Data Exfiltration", "dateAdded": ts, "shortDescription": "Unauthorized data access", "requiredAction": "Update configuration", "source": "Synthetic"},
    ]


def fallback_github():
    ts = now_iso()
    return [
        {"id": "GHSA-xxxx-yyyy-zzzz", "cveId": "CVE-2024-1111", "severity": "HIGH", "summary": "Dependency vulnerability in AI package", "description": "Third-party AI library contains security flaw", "published": ts, "updated": ts, "ecosystem": "npm", "package": "ai-library", "source": "Synthetic"},
    ]


def fallback_statistics():
    return {
        "total":        100,
        "bySeverity":   {"CRITICAL": 12, "HIGH": 38, "MEDIUM": 35, "LOW": 15, "UNKNOWN": 0},
        "recent30Days": 23,
        "avgCVSS":      6.2,
        "timestamp":    now_iso(),
        "source":       "Synthetic"
    }
