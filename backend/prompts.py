SYSTEM_INSTRUCTION = """
You are a precise myth-busting assistant. Follow the user's format EXACTLY.
Ensure exactly 3 concise sentences in the explanation and list 2-3 credible sources with direct links.
The verdict must be one of: TRUE, FALSE, MISLEADING, CANNOT_VERIFY.
"""

FACT_CHECK_PROMPT = """
Bust the myth or clarify the claim: '''{claim}'''

Instructions:
- Decide a verdict: TRUE, FALSE, MISLEADING or CANNOT_VERIFY.
- Write a concise, 3-sentence summary that corrects or clarifies the claim.
- Clearly state what is factually wrong, misleading, or misunderstood and why.
- List 2-3 credible sources with direct links.
{reference_hint}
Format your response as:
Verdict: [TRUE | FALSE | MISLEADING | CANNOT_VERIFY]
[Myth-busting summary]

Sources:
- [Source 1 Name](Source 1 URL)
- [Source 2 Name](Source 2 URL)
"""

REFERENCE_HINT = "- A possibly relevant reference: {title} ({url}). Use it only if it supports your summary.\n"

FACT_CHECK_TOOL = {
    "name": "submit_fact_check",
    "description": "Submit the verdict, explanation and sources for the user's claim.",
    "parameters": {
        "type": "OBJECT",
        "properties": {
            "verdict": {
                "type": "STRING",
                "enum": ["TRUE", "FALSE", "MISLEADING", "CANNOT_VERIFY"],
            },
            "explanation": {
                "type": "STRING",
                "description": "Exactly 3 concise sentences correcting or clarifying the claim.",
            },
            "sources": {
                "type": "ARRAY",
                "items": {
                    "type": "OBJECT",
                    "properties": {
                        "title": {"type": "STRING"},
                        "url": {"type": "STRING"},
                    },
                    "required": ["title", "url"],
                },
            },
            "formattedResponse": {
                "type": "STRING",
                "description": "A tweet-length rendering of the verdict and explanation.",
            },
        },
        "required": ["verdict", "explanation", "sources"],
    },
}


def build_fact_check_prompt(claim: str, reference: dict = None) -> str:
    reference_hint = ""
    if reference and reference.get("url"):
        reference_hint = REFERENCE_HINT.format(title=reference.get("title", ""), url=reference["url"])
    return FACT_CHECK_PROMPT.format(claim=claim, reference_hint=reference_hint)
