from __future__ import annotations

import json
from typing import List

from decisionsherlock.schemas import ContentPart, DecisionSpec, ModelMessage, ModelRequest

RESULT_MARKER = "###RESULT_JSON###"

EXAMPLE_JSON = {
    "analysis": [
        {
            "optionId": "o1",
            "criteriaAnalysis": [
                {"criteriaId": "c1", "score": 88, "reasoning": "Good rent vs size ratio"},
                {"criteriaId": "c2", "score": 70, "reasoning": "Slightly farther from work"},
            ],
            "pros": ["Great location", "Newly renovated"],
            "cons": ["A bit small"],
        }
    ],
    "verdict": "Option 1 is preferred because ...",
    "winnerId": "o1",
    "recommendation": "Take Option 1 and renegotiate the lease",
}

FINAL_INSTRUCTION = (
    "Analyze all evidence and score each option (0-100) for each criterion. "
    "Provide short reasoning per score. "
    f"Return exactly ONE JSON object prefixed by the line {RESULT_MARKER} "
    "with the structure in the system message. No other text."
)


def build_system_prompt() -> str:
    return (
        "You are Decision Sherlock, a strictly structured multimodal decision analyst.\n"
        "Follow these rules exactly:\n"
        f"1) Output ONLY one JSON object that matches the schema below. "
        f"Start with the exact marker {RESULT_MARKER} on its own line.\n"
        "2) Do NOT include any markdown, code fences, or additional text outside the JSON block.\n"
        "3) JSON schema:\n"
        "{\n"
        '  "analysis": [\n'
        "    {\n"
        '      "optionId": "...",\n'
        '      "criteriaAnalysis": [\n'
        '        { "criteriaId": "...", "score": 0-100, "reasoning": "...", "confidence": optional_number }\n'
        "      ],\n"
        '      "pros": ["..."],\n'
        '      "cons": ["..."]\n'
        "    }\n"
        "  ],\n"
        '  "verdict": "...",\n'
        '  "winnerId": "...",\n'
        '  "recommendation": "..."\n'
        "}\n"
        '4) "analysis" MUST be an array. Each option MUST have optionId, criteriaAnalysis, pros, cons.\n'
        "5) If attachments (images/pdf) are provided, extract short facts from them and use them in scoring.\n"
        "6) Give an integer score between 0 and 100 for every criterion, with short reasoning.\n"
        "7) You may include a confidence value (0-100) for each criterion score.\n"
        "8) Be concise and objective.\n"
        "\n"
        "Example JSON output (for reference):\n"
        f"{json.dumps(EXAMPLE_JSON, indent=2)}\n"
        "\n"
        f'Remember: output must begin with the line "{RESULT_MARKER}" followed immediately by the JSON object.\n'
    )


def build_user_prompt(spec: DecisionSpec) -> str:
    lines: List[str] = []
    lines.append(f"Decision: {spec.title or 'Untitled decision'}")
    lines.append(f"Context: {spec.description or 'No additional context provided.'}")
    lines.append("")
    lines.append("Criteria (ID | Name | Weight 1-10):")
    for c in spec.criteria:
        lines.append(f"- {c.id} | {c.name} | {c.weight}")
    lines.append("")
    lines.append("Options:")
    for opt in spec.options:
        lines.append(f"--- Option ID: {opt.id} ---")
        lines.append(f"Name: {opt.name}")
        lines.append(f"Description: {opt.description or ''}")
        for att in opt.attachments:
            lines.append(f"(Attachment: {att.name or 'file'}, type: {att.mime_type})")
        lines.append("")

    lines.append(
        "Task: Score each option against each criterion (0-100). "
        "Provide short reasoning for each score. "
        f"Return only the JSON as described in the system instructions (prefix with {RESULT_MARKER})."
    )
    return "\n".join(lines)


def build_request(spec: DecisionSpec, model: str, temperature: float | None = 0.15) -> ModelRequest:
    """
    System text, user text, one block per attachment (payload + short note),
    then the closing instruction. Attachment bytes are never inlined as text.
    """
    messages: List[ModelMessage] = [
        ModelMessage(role="system", parts=[ContentPart(text=build_system_prompt())]),
        ModelMessage(role="user", parts=[ContentPart(text=build_user_prompt(spec))]),
    ]

    for opt in spec.options:
        for att in opt.attachments:
            label = att.name or "attachment"
            messages.append(
                ModelMessage(
                    role="user",
                    parts=[
                        ContentPart(mime_type=att.mime_type, data=att.data, name=label),
                        ContentPart(text=f"(Attachment for option {opt.id}: {label})"),
                    ],
                )
            )

    messages.append(ModelMessage(role="user", parts=[ContentPart(text=FINAL_INSTRUCTION)]))

    return ModelRequest(
        model=model,
        messages=messages,
        temperature=temperature,
        response_mime_type="text/plain",
    )
