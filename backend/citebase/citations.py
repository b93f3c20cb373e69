"""
Grounded prompt assembly with numbered citations.
"""

from typing import Dict, Sequence

from .models.queries import GroundedPrompt, RetrievedChunk

UNKNOWN_SOURCE = "Unknown Source"

CANNOT_ANSWER = "I cannot answer this question based on the provided context."

SYSTEM_PROMPT_TEMPLATE = """You're an AI assistant answering questions about the user's own documents.

You will be given context chunks retrieved from those documents. ONLY answer using the provided CONTEXT. Each chunk has its source noted at the end.

NEVER fabricate information. If the answer cannot be found in the CONTEXT, say:
"{cannot_answer}"

When answering:
- Keep it brief and directly relevant to the question.
- DO NOT repeat the question in your response.

For every factual statement you make, cite the chunk source like this: [1].

At the end of your response, include a source list with the number and file name, like so: [1] report.pdf.

CONTEXT:
---
{context}
{sources}"""


class CitationAssembler:
    """Number the sources of a set of chunks and render them into a prompt."""

    def number_sources(self, chunks: Sequence[RetrievedChunk]) -> Dict[str, int]:
        """Map each distinct source label to its citation number, in first-seen order."""
        table: Dict[str, int] = {}
        for chunk in chunks:
            label = chunk.source_id or UNKNOWN_SOURCE
            if label not in table:
                table[label] = len(table) + 1
        return table

    def assemble(self, chunks: Sequence[RetrievedChunk]) -> GroundedPrompt:
        table = self.number_sources(chunks)

        context = "".join(
            f"Chunk:\n{chunk.text}\nSource: [{table[chunk.source_id or UNKNOWN_SOURCE]}]\n---\n"
            for chunk in chunks
        )
        sources = ""
        if table:
            # dicts keep insertion order, which is citation order
            sources = "\nSources:\n" + "".join(f"[{n}] {label}\n" for label, n in table.items())

        body = SYSTEM_PROMPT_TEMPLATE.format(
            cannot_answer=CANNOT_ANSWER,
            context=context,
            sources=sources,
        )
        return GroundedPrompt(body=body, context=context, sources=table)
