from __future__ import annotations

PROMPT_TEMPLATE = "Document content from {filename}:\n\n{text}\n\nQuestion: {question}\n\nAnswer:"


def build_prompt(filename: str, text: str, question: str) -> str:
    # No truncation: the upload cap is the only bound on document size.
    return PROMPT_TEMPLATE.format(filename=filename, text=text, question=question)
