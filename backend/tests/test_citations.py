"""
Tests for source numbering and grounded prompt assembly.
"""
import re

from citebase.citations import CANNOT_ANSWER, UNKNOWN_SOURCE, CitationAssembler
from citebase.models.queries import RetrievedChunk


def chunk(text, source):
    return RetrievedChunk(text=text, source_id=source)


class TestCitationAssembler:
    def test_first_seen_numbering(self):
        chunks = [chunk("a1", "A"), chunk("b1", "B"), chunk("a2", "A"), chunk("c1", "C")]
        prompt = CitationAssembler().assemble(chunks)

        assert prompt.sources == {"A": 1, "B": 2, "C": 3}
        assert set(re.findall(r"\[(\d+)\]", prompt.body)) == {"1", "2", "3"}
        assert "a1\nSource: [1]" in prompt.context
        assert "a2\nSource: [1]" in prompt.context
        assert "b1\nSource: [2]" in prompt.context
        assert "c1\nSource: [3]" in prompt.context

    def test_numbering_ignores_lexical_order(self):
        prompt = CitationAssembler().assemble([chunk("z", "zeta.pdf"), chunk("a", "alpha.pdf")])
        assert prompt.sources == {"zeta.pdf": 1, "alpha.pdf": 2}

    def test_source_list_rendered_in_citation_order(self):
        prompt = CitationAssembler().assemble([chunk("x", "B.txt"), chunk("y", "A.txt")])
        assert "Sources:\n[1] B.txt\n[2] A.txt\n" in prompt.body

    def test_missing_source_uses_unknown_label(self):
        prompt = CitationAssembler().assemble([chunk("x", None), chunk("y", None)])
        assert prompt.sources == {UNKNOWN_SOURCE: 1}
        assert f"[1] {UNKNOWN_SOURCE}" in prompt.body

    def test_no_chunks_gives_empty_context(self):
        prompt = CitationAssembler().assemble([])
        assert prompt.context == ""
        assert prompt.sources == {}
        assert "Sources:" not in prompt.body

    def test_template_instructions(self):
        body = CitationAssembler().assemble([chunk("x", "a.pdf")]).body
        assert "ONLY answer using the provided CONTEXT" in body
        assert CANNOT_ANSWER in body
        assert "NEVER fabricate" in body
