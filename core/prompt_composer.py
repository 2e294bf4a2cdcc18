# core/prompt_composer.py
from typing import Final, Sequence
from core.entities import DocumentChunk

# Each placeholder is substituted at its FIRST occurrence only. Templates are
# expected to use each one once; a repeated placeholder is left as-is.
RETRIEVED_CONTEXT: Final[str] = "{RETRIEVED_CONTEXT}"
USER_INPUT: Final[str] = "{USER_INPUT}"

NO_CONTEXT: Final[str] = "No relevant context found"
NO_HAZARD_DESCRIPTION: Final[str] = "No hazard description provided"


def build_context_text(chunks: Sequence[DocumentChunk]) -> str:
    """
    "Context 1: ...\n\nContext 2: ..." in retrieval order.
    """
    return "\n\n".join(
        f"Context {i}: {chunk.text}" for i, chunk in enumerate(chunks, start=1)
    )


def compose(template: str, context: str, user_input: str) -> str:
    return template.replace(RETRIEVED_CONTEXT, context, 1).replace(
        USER_INPUT, user_input, 1
    )
