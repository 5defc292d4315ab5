"""Tests for the text segmenter."""

import pytest

from text2podcast.errors import ErrorKind, SegmentationError
from text2podcast.segmenter import require_text, segment

SENTENCE = "The quick brown fox jumps over the lazy dog near the river. "


def _normalized(text: str) -> str:
    return " ".join(text.split())


def _joined(chunks) -> str:
    return " ".join(c.text for c in chunks)


class TestSegment:
    def test_empty_text_yields_no_chunks(self):
        assert segment("") == []
        assert segment("   \n\n  \t") == []

    def test_require_text_rejects_empty(self):
        with pytest.raises(SegmentationError) as exc:
            require_text("  \n ")
        assert exc.value.kind is ErrorKind.EMPTY_TEXT

    def test_short_text_is_single_chunk(self):
        chunks = segment("Hello there. How are you?")
        assert len(chunks) == 1
        assert chunks[0].index == 1
        assert chunks[0].text == "Hello there. How are you?"

    def test_nine_thousand_chars_make_three_chunks(self):
        text = SENTENCE * 150
        assert len(text) == 9000

        chunks = segment(text, ceiling=3800)

        assert len(chunks) == 3
        assert [c.index for c in chunks] == [1, 2, 3]
        assert all(c.length <= 3800 for c in chunks)
        assert _joined(chunks) == _normalized(text)

    def test_chunks_end_on_sentence_boundaries(self):
        chunks = segment(SENTENCE * 150, ceiling=3800)
        for chunk in chunks:
            assert chunk.text.endswith("river.")

    def test_paragraph_that_fits_is_kept_whole(self):
        first = "A" * 50 + " " + "first paragraph. " * 10
        second = "Second paragraph sentence. " * 10
        chunks = segment(f"{first}\n\n{second}", ceiling=500)
        assert [c.text for c in chunks] == [_normalized(first), _normalized(second)]

    def test_small_paragraphs_are_merged(self):
        text = "Title\n\nBy Someone\n\n" + "Body sentence here. " * 10
        chunks = segment(text, ceiling=3800)
        assert len(chunks) == 1
        assert chunks[0].text.startswith("Title By Someone Body")

    def test_final_small_remainder_is_flushed(self):
        text = ("Long sentence number one is here. " * 5) + "\n\nEnd."
        chunks = segment(text, ceiling=180, min_size=100)
        assert chunks[-1].text.endswith("End.")
        assert _joined(chunks) == _normalized(text)

    def test_oversized_sentence_splits_at_clauses(self):
        clause = "this clause keeps going for a while"
        sentence = ", ".join([clause] * 20) + "."
        chunks = segment(sentence, ceiling=200, min_size=10)

        assert len(chunks) > 1
        assert all(c.length <= 200 for c in chunks)
        for chunk in chunks[:-1]:
            assert chunk.text.endswith(",")
        assert _joined(chunks) == sentence

    def test_conjunctions_are_clause_boundaries(self):
        sentence = " and ".join(["word " * 15] * 6).strip()
        chunks = segment(sentence, ceiling=120, min_size=10)
        assert all(c.length <= 120 for c in chunks)
        assert any(c.text.startswith("and ") for c in chunks[1:])
        assert _joined(chunks) == _normalized(sentence)

    def test_word_fallback_never_breaks_words(self):
        words = [f"token{i}" for i in range(400)]
        text = " ".join(words)
        chunks = segment(text, ceiling=100, min_size=10)

        assert all(c.length <= 100 for c in chunks)
        produced = [w for c in chunks for w in c.text.split(" ")]
        assert produced == words

    def test_no_chunk_is_empty_or_over_ceiling(self):
        text = "\n\n".join(
            ("Sentence %d has some words in it! " % i) * (i % 7 + 1) for i in range(60)
        )
        chunks = segment(text, ceiling=250, min_size=100)
        assert chunks
        for chunk in chunks:
            assert chunk.text.strip()
            assert chunk.length <= 250
        assert _joined(chunks) == _normalized(text)

    def test_segmentation_is_deterministic(self):
        text = ("Alpha beta gamma, delta epsilon; zeta and eta. " * 300) + "\n\nTail."
        first = segment(text, ceiling=700)
        second = segment(text, ceiling=700)
        assert first == second

    def test_non_positive_ceiling_raises(self):
        with pytest.raises(SegmentationError) as exc:
            segment("text", ceiling=0)
        assert exc.value.kind is ErrorKind.INVALID_CEILING

    def test_small_ceiling_with_default_minimum(self):
        text = (SENTENCE * 6) + "\n\n" + "A short closing paragraph."

        chunks = segment(text, ceiling=50)

        assert len(chunks) > 1
        assert all(c.length <= 50 for c in chunks)
        assert _joined(chunks) == _normalized(text)
